"""Campaign analytics aggregation and comparison engine."""

# analytics must load before models.analytics_view, which depends on it
from .analytics import AnalyticsEngine, ComparisonMode, TimeRange
from .config import AnalyticsSettings, load_settings
from .models.analytics_view import AnalyticsView

__all__ = [
    "AnalyticsEngine",
    "AnalyticsSettings",
    "AnalyticsView",
    "ComparisonMode",
    "TimeRange",
    "load_settings",
]
