from .analytics_service import (
    AnalyticsService,
    HistoricalRecordSource,
    RecordSource,
    filter_to_window,
    parse_time_range,
    resolve_time_window,
)
from .api_client import AnalyticsApiClient
from .export_service import SUPPORTED_FORMATS, export_csv, export_docx, export_view

__all__ = [
    "AnalyticsApiClient",
    "AnalyticsService",
    "HistoricalRecordSource",
    "RecordSource",
    "SUPPORTED_FORMATS",
    "export_csv",
    "export_docx",
    "export_view",
    "filter_to_window",
    "parse_time_range",
    "resolve_time_window",
]
