"""Analytics configuration loaded from the bundled YAML registry."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..exceptions import ConfigLoadError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "analytics.yaml"


class CategoryValue(BaseModel):
    """One fallback `{name, value}` entry."""

    name: str
    value: float


class SeriesSettings(BaseModel):
    date_label_format: str = "%b %-d"
    rate_decimals: int = Field(2, ge=0)


class TimeRangeSettings(BaseModel):
    default: str = "7d"
    days: dict[str, int] = Field(
        default_factory=lambda: {"7d": 7, "30d": 30, "90d": 90}
    )


class ComparisonSettings(BaseModel):
    placeholder_factor_min: float = 0.8
    placeholder_factor_max: float = 1.2
    placeholder_seed: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "ComparisonSettings":
        if self.placeholder_factor_min > self.placeholder_factor_max:
            raise ValueError("placeholder_factor_min must not exceed placeholder_factor_max")
        return self


class BreakdownSettings(BaseModel):
    """Fixed illustrative distributions used when a dimension has no data."""

    age: list[CategoryValue]
    sentiment: list[CategoryValue]
    device: list[CategoryValue]

    @model_validator(mode="after")
    def _check_non_empty(self) -> "BreakdownSettings":
        for dimension in ("age", "sentiment", "device"):
            if not getattr(self, dimension):
                raise ValueError(f"Fallback distribution for '{dimension}' is empty")
        return self


class ApiSettings(BaseModel):
    base_url: str = "http://localhost:3000"
    timeout: float = 30


class AnalyticsSettings(BaseModel):
    """Validated analytics configuration."""

    series: SeriesSettings = Field(default_factory=SeriesSettings)
    time_ranges: TimeRangeSettings = Field(default_factory=TimeRangeSettings)
    comparison: ComparisonSettings = Field(default_factory=ComparisonSettings)
    breakdowns: BreakdownSettings
    api: ApiSettings = Field(default_factory=ApiSettings)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        raise ConfigLoadError(f"Failed to load analytics config from {path}: {e}") from e


def load_settings(path: Path | None = None) -> AnalyticsSettings:
    """Load and validate analytics settings.

    Resolution order: explicit `path`, the ANALYTICS_CONFIG environment
    variable, then the bundled analytics.yaml. ANALYTICS_API_URL overrides
    the API base URL.

    Raises:
        ConfigLoadError: If the file cannot be read or fails validation.
    """
    env_path = os.environ.get("ANALYTICS_CONFIG")
    config_path = path or (Path(env_path) if env_path else DEFAULT_CONFIG_PATH)

    raw = _read_yaml(config_path)

    api_url = os.environ.get("ANALYTICS_API_URL")
    if api_url:
        raw.setdefault("api", {})["base_url"] = api_url

    try:
        return AnalyticsSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid analytics config in {config_path}: {e}") from e


__all__ = [
    "AnalyticsSettings",
    "ApiSettings",
    "BreakdownSettings",
    "CategoryValue",
    "ComparisonSettings",
    "DEFAULT_CONFIG_PATH",
    "SeriesSettings",
    "TimeRangeSettings",
    "load_settings",
]
