"""Output models for analytics calculations."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Literal

TrendDirection = Literal["increasing", "decreasing", "stable"]
MetricName = Literal["impressions", "engagements", "conversions", "spend"]


class TimeRange(str, Enum):
    """Selectable analytics windows."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    ALL = "all"


class ComparisonMode(str, Enum):
    """What the summary cards are compared against."""

    PREVIOUS = "previous"  # Equal-length prior window
    TARGET = "target"  # No target source exists; yields no comparison
    NONE = "none"


@dataclass(frozen=True)
class SeriesPoint:
    """One chart point per day.

    `ctr` and `conversion_rate` are percentages derived from the record's own
    stored fractions, not recomputed from counts.
    """

    date: str | None  # Short label, e.g. "Jan 5"; None for an undated record
    report_day: date | None
    impressions: int
    engagements: int
    conversions: int
    ctr: float
    conversion_rate: float
    spend: float
    average_dwell_time: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "report_day": self.report_day.isoformat() if self.report_day else None,
            "impressions": self.impressions,
            "engagements": self.engagements,
            "conversions": self.conversions,
            "ctr": self.ctr,
            "conversion_rate": self.conversion_rate,
            "spend": self.spend,
            "average_dwell_time": self.average_dwell_time,
        }


@dataclass(frozen=True)
class SummaryMetrics:
    """Campaign-level totals and derived rates (recomputed from the series).

    Rates are percentages in [0, 100], unlike the per-record fractions.
    """

    total_impressions: int = 0
    total_engagements: int = 0
    total_conversions: int = 0
    total_spend: float = 0.0
    average_ctr: float = 0.0  # engagements / impressions * 100
    average_conversion_rate: float = 0.0  # conversions / engagements * 100
    average_dwell_time: float = 0.0

    def totals(self) -> dict[str, float]:
        """Tracked totals keyed by metric name."""
        return {
            "impressions": self.total_impressions,
            "engagements": self.total_engagements,
            "conversions": self.total_conversions,
            "spend": self.total_spend,
        }


@dataclass(frozen=True)
class ComparisonWindow:
    """Prior period of equal length ending the day before the current one."""

    start: date
    end: date
    length_days: int


@dataclass(frozen=True)
class ComparisonMetrics:
    """Signed percentage change per tracked metric vs the prior window."""

    impressions_change: float = 0.0
    engagements_change: float = 0.0
    conversions_change: float = 0.0
    spend_change: float = 0.0
    window: ComparisonWindow | None = None
    previous_totals: dict[str, float] = field(default_factory=dict)
    is_placeholder: bool = False

    def change_for(self, metric: str) -> float:
        return getattr(self, f"{metric}_change")


@dataclass(frozen=True)
class BreakdownItem:
    """Single `{name, value}` pair for a breakdown chart."""

    name: str
    value: float


@dataclass(frozen=True)
class BreakdownSeries:
    """Distribution over one categorical dimension (age, sentiment, device)."""

    dimension: str
    items: list[BreakdownItem]
    is_fallback: bool  # True when the fixed illustrative distribution was used

    def as_mapping(self) -> dict[str, float]:
        return {item.name: item.value for item in self.items}

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension,
            "is_fallback": self.is_fallback,
            "items": [{"name": i.name, "value": i.value} for i in self.items],
        }
