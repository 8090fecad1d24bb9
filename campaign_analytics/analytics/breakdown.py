"""Breakdown aggregator: nested categorical payloads -> chart distributions."""

import logging
from collections.abc import Sequence

from ..config import BreakdownSettings, CategoryValue
from ..ingestion.cleaner import coerce_number, parse_payload
from ..models.analytics_record import AnalyticsRecord
from .models import BreakdownItem, BreakdownSeries

logger = logging.getLogger(__name__)

SENTIMENT_KEYS = ("positive", "neutral", "negative")


def _fallback_series(dimension: str, fallback: Sequence[CategoryValue]) -> BreakdownSeries:
    return BreakdownSeries(
        dimension=dimension,
        items=[BreakdownItem(name=c.name, value=c.value) for c in fallback],
        is_fallback=True,
    )


def _to_series(dimension: str, totals: dict[str, float]) -> BreakdownSeries:
    return BreakdownSeries(
        dimension=dimension,
        items=[BreakdownItem(name=name, value=value) for name, value in totals.items()],
        is_fallback=False,
    )


def aggregate_age_groups(
    records: Sequence[AnalyticsRecord],
    fallback: Sequence[CategoryValue],
) -> BreakdownSeries:
    """Sum `audienceMetrics.ageGroups` counts per age band across records.

    Bands keep the order in which they first appear. Falls back when no
    record contributes a single band.
    """
    totals: dict[str, float] = {}

    for record in records:
        audience = parse_payload(record.audience_metrics, "audienceMetrics")
        if not audience:
            continue
        age_groups = audience.get("ageGroups")
        if not isinstance(age_groups, dict):
            continue
        for band, count in age_groups.items():
            totals[band] = totals.get(band, 0) + coerce_number(count)

    if not totals:
        return _fallback_series("age", fallback)
    return _to_series("age", totals)


def aggregate_sentiments(
    records: Sequence[AnalyticsRecord],
    fallback: Sequence[CategoryValue],
) -> BreakdownSeries:
    """Sum `emotionMetrics.sentiments` positive/neutral/negative counts.

    Falls back when all three totals are zero.
    """
    totals: dict[str, float] = {key: 0 for key in SENTIMENT_KEYS}

    for record in records:
        emotions = parse_payload(record.emotion_metrics, "emotionMetrics")
        if not emotions:
            continue
        sentiments = emotions.get("sentiments")
        if not isinstance(sentiments, dict):
            continue
        for key in SENTIMENT_KEYS:
            totals[key] += coerce_number(sentiments.get(key))

    if all(value == 0 for value in totals.values()):
        return _fallback_series("sentiment", fallback)
    return _to_series("sentiment", {k.capitalize(): v for k, v in totals.items()})


def device_distribution(
    records: Sequence[AnalyticsRecord],
    fallback: Sequence[CategoryValue],
) -> BreakdownSeries:
    """Device split.

    No wire field carries device data yet, so this is always the fallback.
    """
    return _fallback_series("device", fallback)


def build_breakdowns(
    records: Sequence[AnalyticsRecord],
    settings: BreakdownSettings,
) -> dict[str, BreakdownSeries]:
    """All breakdown dimensions keyed by name (age, sentiment, device)."""
    breakdowns = {
        "age": aggregate_age_groups(records, settings.age),
        "sentiment": aggregate_sentiments(records, settings.sentiment),
        "device": device_distribution(records, settings.device),
    }

    fallbacks = [name for name, series in breakdowns.items() if series.is_fallback]
    if fallbacks:
        logger.debug("Breakdowns using fallback distribution: %s", ", ".join(fallbacks))

    return breakdowns
