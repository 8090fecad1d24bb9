"""Statistical helpers using scipy."""

import numpy as np
from scipy import stats

from .models import TrendDirection


def detect_trend(
    values: list[float] | np.ndarray,
    p_threshold: float = 0.05,
    r_threshold: float = 0.3,
) -> TrendDirection:
    """Classify a daily series as increasing, decreasing or stable.

    Fits a linear regression over the day index; the slope only counts when
    it is significant (p < p_threshold) and |r| > r_threshold.

    Args:
        values: Ordered metric values, one per day
        p_threshold: P-value threshold for significance
        r_threshold: Minimum |r| for a meaningful trend

    Returns:
        Trend direction.
    """
    arr = np.asarray(values, dtype=float)
    if len(arr) < 3 or np.ptp(arr) == 0:
        return "stable"

    x = np.arange(len(arr))
    result = stats.linregress(x, arr)

    if result.pvalue < p_threshold and abs(result.rvalue) > r_threshold:
        return "increasing" if result.slope > 0 else "decreasing"
    return "stable"
