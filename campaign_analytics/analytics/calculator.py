"""Analytics Engine - composes the per-campaign aggregation pipeline."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import polars as pl

from ..config import AnalyticsSettings, load_settings
from ..ingestion import normalize_records, records_to_frame
from ..models.analytics_record import AnalyticsRecord
from ..models.analytics_view import AnalyticsView
from .breakdown import build_breakdowns
from .comparison import (
    TRACKED_METRICS,
    compare_periods,
    compare_to_placeholder,
    prior_window,
)
from .expressions import metric_values_expr
from .models import (
    BreakdownSeries,
    ComparisonMetrics,
    ComparisonMode,
    SeriesPoint,
    SummaryMetrics,
    TrendDirection,
)
from .series import build_series
from .stats import detect_trend
from .summary import budget_utilization, summarize

logger = logging.getLogger(__name__)

RawRecords = Sequence[Mapping[str, Any] | AnalyticsRecord]


@dataclass
class AnalyticsEngine:
    """Analytics calculator for one campaign's daily records.

    Records are normalized once at construction; every get_* method is a pure
    function of them and rebuilds its output from scratch.

    Attributes:
        records: Raw records (wire mappings or AnalyticsRecord), chronological
        settings: Analytics configuration (defaults to the bundled YAML)
        comparison_mode: previous | target | none
        active_metric: Metric highlighted on the trend chart
        previous_records: Records of the prior window when the caller fetched
            them; without them the comparison uses placeholder totals
    """

    records: RawRecords
    settings: AnalyticsSettings = field(default_factory=load_settings)
    comparison_mode: ComparisonMode = ComparisonMode.PREVIOUS
    active_metric: str = "impressions"
    previous_records: RawRecords | None = None

    normalized: list[AnalyticsRecord] = field(init=False, repr=False)
    df: pl.DataFrame = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize inputs and validate the active metric."""
        if self.active_metric not in TRACKED_METRICS:
            raise ValueError(
                f"Unknown active metric: {self.active_metric}. "
                f"Expected one of {list(TRACKED_METRICS)}"
            )
        self.comparison_mode = ComparisonMode(self.comparison_mode)
        self.normalized = normalize_records(self.records)
        self.df = records_to_frame(self.normalized)

    # =========================================================================
    # SERIES
    # =========================================================================

    def get_series(self) -> list[SeriesPoint]:
        """Chart-ready points, one per day."""
        return build_series(self.df, self.settings.series)

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def get_summary(self) -> SummaryMetrics:
        """Campaign totals and derived percentage rates."""
        return summarize(self.df)

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def get_comparison(self) -> ComparisonMetrics | None:
        """Deltas against the prior window, or None unless mode is `previous`.

        Uses previous_records when supplied, placeholder totals otherwise.
        """
        if self.comparison_mode is not ComparisonMode.PREVIOUS:
            return None

        current = self.get_summary()
        report_days = self.df["report_day"].to_list()

        if self.previous_records is None:
            return compare_to_placeholder(current, report_days, self.settings.comparison)

        window = prior_window(report_days)
        if window is None:
            return ComparisonMetrics()

        previous_df = records_to_frame(normalize_records(self.previous_records))
        previous = summarize(previous_df)
        return compare_periods(current, previous.totals(), window, is_placeholder=False)

    # =========================================================================
    # BREAKDOWNS
    # =========================================================================

    def get_breakdowns(self) -> dict[str, BreakdownSeries]:
        """Age, sentiment and device distributions."""
        return build_breakdowns(self.normalized, self.settings.breakdowns)

    # =========================================================================
    # ACTIVE METRIC
    # =========================================================================

    def get_active_metric_values(self) -> list[float]:
        """Per-day values of the active metric."""
        if self.df.is_empty():
            return []
        return self.df.select(metric_values_expr(self.active_metric))[
            self.active_metric
        ].to_list()

    def get_active_metric_trend(self) -> TrendDirection:
        """Direction of the active metric over the window."""
        return detect_trend(self.get_active_metric_values())

    # =========================================================================
    # VIEW (CONSOLIDATED OUTPUT)
    # =========================================================================

    def get_view(
        self,
        campaign_id: str | None = None,
        time_range: str = "7d",
        budget: float | None = None,
    ) -> AnalyticsView:
        """Run every stage and package the results for the analytics page."""
        series = self.get_series()
        summary = self.get_summary()

        date_range = None
        if self.df["report_day"].null_count() < len(self.df):
            date_range = (self.df["report_day"].min(), self.df["report_day"].max())

        view = AnalyticsView(
            generated_at=datetime.now(),
            campaign_id=campaign_id,
            time_range=time_range,
            comparison_mode=self.comparison_mode,
            active_metric=self.active_metric,
            date_range=date_range,
            total_records=len(self.df),
            series=series,
            summary=summary,
            comparison=self.get_comparison(),
            breakdowns=self.get_breakdowns(),
            active_metric_values=self.get_active_metric_values(),
            active_metric_trend=self.get_active_metric_trend(),
            budget=budget,
            budget_utilization_pct=budget_utilization(summary.total_spend, budget),
        )

        logger.info(
            "Built analytics view for campaign %s (%s): %d records",
            campaign_id, time_range, view.total_records,
        )
        return view
