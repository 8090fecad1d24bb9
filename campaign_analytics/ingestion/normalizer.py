"""Record normalizer: raw wire records -> AnalyticsRecord list -> Polars frame."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import polars as pl
from pydantic import ValidationError

from ..exceptions import DataValidationError
from ..models.analytics_record import AnalyticsRecord
from .cleaner import extract_spend

logger = logging.getLogger(__name__)

# Fixed schema so an empty record list still yields a typed frame
RECORD_SCHEMA: dict[str, pl.DataType] = {
    "report_day": pl.Date,
    "impressions": pl.Int64,
    "engagements": pl.Int64,
    "conversions": pl.Int64,
    "ctr": pl.Float64,
    "conversion_rate": pl.Float64,
    "average_dwell_time": pl.Float64,
    "spend": pl.Float64,
}


def normalize_record(raw: Mapping[str, Any] | AnalyticsRecord) -> AnalyticsRecord:
    """Normalize one raw record.

    The cost payload is decoded here; a corrupt payload leaves spend at 0 and
    the record is still returned. Audience and emotion payloads are left as
    received.

    Raises:
        pydantic.ValidationError: If a core field (date, counts, rates) is invalid.
    """
    if isinstance(raw, AnalyticsRecord):
        return raw

    data = dict(raw)
    cost_key = "costData" if "costData" in data else "cost_data"
    cost_data, spend = extract_spend(data.pop(cost_key, None))
    data["costData"] = cost_data
    data["spend"] = spend

    return AnalyticsRecord.model_validate(data)


def normalize_records(
    raw_records: Iterable[Mapping[str, Any] | AnalyticsRecord] | None,
) -> list[AnalyticsRecord]:
    """Normalize every record, preserving order and cardinality.

    Collects validation errors for all records before raising, for better
    debugging.

    Raises:
        DataValidationError: If any record has an invalid core field.
    """
    records: list[AnalyticsRecord] = []
    errors: list[dict[str, Any]] = []
    rows = list(raw_records or [])

    for i, raw in enumerate(rows):
        try:
            records.append(normalize_record(raw))
        except ValidationError as e:
            errors.append({"row": i, "errors": e.errors()})

    if errors:
        raise DataValidationError(errors, len(rows))

    logger.debug("Normalized %d analytics records", len(records))
    return records


def records_to_frame(records: Iterable[AnalyticsRecord]) -> pl.DataFrame:
    """Flatten normalized records into a Polars DataFrame (input order kept)."""
    rows = [
        {
            "report_day": r.date,
            "impressions": r.impressions,
            "engagements": r.engagements,
            "conversions": r.conversions,
            "ctr": float(r.ctr),
            "conversion_rate": float(r.conversion_rate),
            "average_dwell_time": (
                float(r.average_dwell_time) if r.average_dwell_time is not None else None
            ),
            "spend": r.spend,
        }
        for r in records
    ]
    return pl.DataFrame(rows, schema=RECORD_SCHEMA)
