"""Analytics module for campaign performance aggregation."""

from .models import (
    BreakdownItem,
    BreakdownSeries,
    ComparisonMetrics,
    ComparisonMode,
    ComparisonWindow,
    SeriesPoint,
    SummaryMetrics,
    TimeRange,
)
from .comparison import (
    TRACKED_METRICS,
    compare_periods,
    is_favorable,
    percentage_change,
    placeholder_previous_totals,
    prior_window,
)
from .breakdown import (
    aggregate_age_groups,
    aggregate_sentiments,
    build_breakdowns,
    device_distribution,
)
from .series import build_series
from .summary import budget_utilization, summarize
from .calculator import AnalyticsEngine

__all__ = [
    "AnalyticsEngine",
    "BreakdownItem",
    "BreakdownSeries",
    "ComparisonMetrics",
    "ComparisonMode",
    "ComparisonWindow",
    "SeriesPoint",
    "SummaryMetrics",
    "TRACKED_METRICS",
    "TimeRange",
    "aggregate_age_groups",
    "aggregate_sentiments",
    "budget_utilization",
    "build_breakdowns",
    "build_series",
    "compare_periods",
    "device_distribution",
    "is_favorable",
    "percentage_change",
    "placeholder_previous_totals",
    "prior_window",
    "summarize",
]
