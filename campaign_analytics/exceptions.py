"""Custom exceptions for the campaign analytics engine."""

from typing import Any


class AnalyticsError(Exception):
    """Base exception for analytics errors."""

    pass


class ConfigLoadError(AnalyticsError):
    """Failed to load analytics configuration."""

    pass


class DataValidationError(AnalyticsError):
    """Raw records failed validation against the AnalyticsRecord model."""

    def __init__(self, errors: list[dict[str, Any]], row_count: int):
        self.errors = errors
        self.row_count = row_count
        super().__init__(
            f"Validation failed for {len(errors)} of {row_count} records. "
            f"First error: {errors[0] if errors else 'N/A'}"
        )


class AnalyticsFetchError(AnalyticsError):
    """Fetching analytics records from the backend failed.

    `retryable` tells the caller whether trying again may succeed; the engine
    itself never retries.
    """

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        status_code: int | None = None,
        url: str | None = None,
    ):
        self.retryable = retryable
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class UnsupportedExportFormatError(AnalyticsError):
    """Requested export format is not available."""

    def __init__(self, fmt: str, supported: list[str]):
        self.format = fmt
        self.supported = supported
        super().__init__(f"Unsupported export format: {fmt}. Supported: {supported}")
