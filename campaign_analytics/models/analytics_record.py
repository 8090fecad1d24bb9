"""Pydantic model for one day of campaign analytics."""

import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Nested payloads stay as received (mapping or JSON string) until a breakdown
# dimension asks for them.
RawPayload = Union[str, dict[str, Any], None]


class AnalyticsRecord(BaseModel):
    """Single per-day record after normalization.

    `ctr` and `conversion_rate` are fractions (0.05 = 5%) exactly as the
    backend stored them. `spend` is extracted from `cost_data` by the
    normalizer; a corrupt cost payload leaves it at 0.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    date: Optional[datetime.date] = None  # Undated records still count toward totals
    impressions: int = Field(0, ge=0)
    engagements: int = Field(0, ge=0)
    conversions: int = Field(0, ge=0)
    ctr: float = Field(0.0, ge=0, le=1)
    conversion_rate: float = Field(0.0, ge=0, le=1, alias="conversionRate")
    average_dwell_time: Optional[float] = Field(None, alias="averageDwellTime")

    cost_data: dict[str, Any] = Field(default_factory=dict, alias="costData")
    spend: float = 0.0

    audience_metrics: RawPayload = Field(None, alias="audienceMetrics")
    emotion_metrics: RawPayload = Field(None, alias="emotionMetrics")

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value: Any) -> Any:
        """Accept ISO datetimes ("2024-03-01T00:00:00.000Z") as their calendar day."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
            return value[:10]
        return value

    @field_validator(
        "impressions", "engagements", "conversions", "ctr", "conversion_rate",
        mode="before",
    )
    @classmethod
    def _null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value
