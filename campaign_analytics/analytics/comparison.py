"""Period comparator: deltas of summary metrics against the prior window."""

import logging
from collections.abc import Mapping, Sequence
from datetime import date, timedelta

import numpy as np

from ..config import ComparisonSettings
from .models import ComparisonMetrics, ComparisonWindow, SummaryMetrics

logger = logging.getLogger(__name__)

TRACKED_METRICS = ("impressions", "engagements", "conversions", "spend")

# An increase in these metrics is unfavorable (presentation only)
INVERTED_SENTIMENT_METRICS = frozenset({"spend"})


def prior_window(report_days: Sequence[date | None]) -> ComparisonWindow | None:
    """Equal-length window ending the day before the earliest current day.

    Length is the number of records in the current series. Returns None when
    the series is empty or has no dated record.
    """
    dated = [d for d in report_days if d is not None]
    if not dated:
        return None

    length = len(report_days)
    end = min(dated) - timedelta(days=1)
    start = end - timedelta(days=length - 1)
    return ComparisonWindow(start=start, end=end, length_days=length)


def percentage_change(current: float, previous: float) -> float:
    """Signed percentage change: (current - previous) / previous * 100.

    Defined as 0 when previous is 0.
    """
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def is_favorable(metric: str, change: float) -> bool:
    """Whether a change should be shown as good news (spend is inverted)."""
    if metric in INVERTED_SENTIMENT_METRICS:
        return change <= 0
    return change >= 0


def placeholder_previous_totals(
    current: SummaryMetrics,
    window: ComparisonWindow,
    settings: ComparisonSettings | None = None,
) -> dict[str, float]:
    """Synthesize prior-window totals by scaling the current totals.

    Each total is multiplied by a factor drawn uniformly from
    [placeholder_factor_min, placeholder_factor_max]. The generator is seeded
    from the configured seed and the window start, so the same window always
    yields the same numbers. Only used when the record source cannot fetch
    the prior window itself.
    """
    settings = settings or ComparisonSettings()
    rng = np.random.default_rng([settings.placeholder_seed, window.start.toordinal()])
    factors = rng.uniform(
        settings.placeholder_factor_min,
        settings.placeholder_factor_max,
        size=len(TRACKED_METRICS),
    )

    totals = current.totals()
    return {
        metric: float(totals[metric] * factor)
        for metric, factor in zip(TRACKED_METRICS, factors)
    }


def compare_periods(
    current: SummaryMetrics,
    previous_totals: Mapping[str, float],
    window: ComparisonWindow | None,
    is_placeholder: bool = False,
) -> ComparisonMetrics:
    """Percentage change of each tracked total against previous_totals."""
    totals = current.totals()
    changes = {
        f"{metric}_change": percentage_change(
            totals[metric], float(previous_totals.get(metric, 0) or 0)
        )
        for metric in TRACKED_METRICS
    }

    return ComparisonMetrics(
        **changes,
        window=window,
        previous_totals={m: float(previous_totals.get(m, 0) or 0) for m in TRACKED_METRICS},
        is_placeholder=is_placeholder,
    )


def compare_to_placeholder(
    current: SummaryMetrics,
    report_days: Sequence[date | None],
    settings: ComparisonSettings | None = None,
) -> ComparisonMetrics:
    """Compare against synthesized prior totals; all zeros without a window."""
    window = prior_window(report_days)
    if window is None:
        return ComparisonMetrics()

    logger.debug(
        "Using placeholder prior-period totals for %s..%s", window.start, window.end
    )
    previous = placeholder_previous_totals(current, window, settings)
    return compare_periods(current, previous, window, is_placeholder=True)
