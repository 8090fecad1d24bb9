"""Series builder: normalized frame -> presentation-ready daily points."""

import polars as pl

from ..config import SeriesSettings
from .expressions import series_point_expr
from .models import SeriesPoint


def build_series(df: pl.DataFrame, settings: SeriesSettings | None = None) -> list[SeriesPoint]:
    """Build one SeriesPoint per record, in input order.

    Returns an empty list for an empty frame.
    """
    settings = settings or SeriesSettings()
    if df.is_empty():
        return []

    points = df.select(
        series_point_expr(settings.date_label_format, settings.rate_decimals)
    )

    return [
        SeriesPoint(
            date=row["date"],
            report_day=row["report_day"],
            impressions=row["impressions"],
            engagements=row["engagements"],
            conversions=row["conversions"],
            ctr=row["ctr"],
            conversion_rate=row["conversion_rate"],
            spend=row["spend"],
            average_dwell_time=row["average_dwell_time"],
        )
        for row in points.to_dicts()
    ]
