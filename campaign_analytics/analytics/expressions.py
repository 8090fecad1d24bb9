"""Reusable Polars expressions for analytics calculations."""

import polars as pl


# =============================================================================
# SERIES
# =============================================================================


def date_label_expr(date_format: str) -> pl.Expr:
    """Short human-readable day label, e.g. "Jan 5"."""
    return pl.col("report_day").dt.strftime(date_format).alias("date")


def stored_rate_pct_expr(col_name: str, decimals: int = 2) -> pl.Expr:
    """Stored fractional rate as a percentage: round(rate * 100, decimals)."""
    return (pl.col(col_name) * 100).round(decimals).alias(col_name)


def series_point_expr(date_format: str, decimals: int = 2) -> list[pl.Expr]:
    """Expressions for one chart point per record."""
    return [
        date_label_expr(date_format),
        pl.col("report_day"),
        pl.col("impressions"),
        pl.col("engagements"),
        pl.col("conversions"),
        stored_rate_pct_expr("ctr", decimals),
        stored_rate_pct_expr("conversion_rate", decimals),
        pl.col("spend"),
        pl.col("average_dwell_time").fill_null(0.0),
    ]


# =============================================================================
# SUMMARY
# =============================================================================


def summary_totals_expr() -> list[pl.Expr]:
    """Expressions for campaign totals.

    Missing dwell times contribute 0 to the dwell sum; the record count is
    the divisor for the average regardless.
    """
    return [
        pl.col("impressions").sum().alias("total_impressions"),
        pl.col("engagements").sum().alias("total_engagements"),
        pl.col("conversions").sum().alias("total_conversions"),
        pl.col("spend").sum().alias("total_spend"),
        pl.col("average_dwell_time").fill_null(0.0).sum().alias("total_dwell_time"),
        pl.len().alias("record_count"),
    ]


# =============================================================================
# ACTIVE METRIC
# =============================================================================


def metric_values_expr(metric: str) -> pl.Expr:
    """Per-day values of one tracked metric, as floats for trend fitting."""
    return pl.col(metric).cast(pl.Float64).alias(metric)
