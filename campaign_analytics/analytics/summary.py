"""Summary aggregator: campaign totals and platform-standard rates."""

import polars as pl

from .expressions import summary_totals_expr
from .models import SummaryMetrics


def summarize(df: pl.DataFrame) -> SummaryMetrics:
    """Reduce the normalized frame into campaign-level SummaryMetrics.

    CTR and conversion rate are recomputed from totals as percentages; every
    division is guarded so an empty or all-zero series yields 0.
    """
    if df.is_empty():
        return SummaryMetrics()

    totals = df.select(summary_totals_expr()).to_dicts()[0]

    total_impressions = int(totals["total_impressions"] or 0)
    total_engagements = int(totals["total_engagements"] or 0)
    total_conversions = int(totals["total_conversions"] or 0)
    record_count = totals["record_count"]

    # Capped on purpose: average CTR must stay in [0, 100] for every input
    average_ctr = (
        min(total_engagements / total_impressions * 100, 100.0)
        if total_impressions > 0
        else 0.0
    )
    average_conversion_rate = (
        total_conversions / total_engagements * 100 if total_engagements > 0 else 0.0
    )
    average_dwell_time = (
        (totals["total_dwell_time"] or 0.0) / record_count if record_count > 0 else 0.0
    )

    return SummaryMetrics(
        total_impressions=total_impressions,
        total_engagements=total_engagements,
        total_conversions=total_conversions,
        total_spend=float(totals["total_spend"] or 0.0),
        average_ctr=average_ctr,
        average_conversion_rate=average_conversion_rate,
        average_dwell_time=average_dwell_time,
    )


def budget_utilization(total_spend: float, budget: float | None) -> float | None:
    """Spend as a percentage of budget (uncapped); None without a usable budget."""
    if budget is None or budget <= 0:
        return None
    return total_spend / budget * 100
