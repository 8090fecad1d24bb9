"""Analytics service - resolves time ranges, fetches records, runs the engine."""

import logging
from collections.abc import Mapping, Sequence
from datetime import date, timedelta
from typing import Any, Protocol, runtime_checkable

from ..analytics import AnalyticsEngine, ComparisonMode, TimeRange
from ..analytics.comparison import prior_window
from ..config import AnalyticsSettings, TimeRangeSettings, load_settings
from ..ingestion import normalize_records
from ..models.analytics_record import AnalyticsRecord
from ..models.analytics_view import AnalyticsView

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordSource(Protocol):
    """Anything that can return a campaign's raw records for a time range."""

    def fetch_records(self, campaign_id: str, time_range: str) -> list[dict[str, Any]]: ...


@runtime_checkable
class HistoricalRecordSource(RecordSource, Protocol):
    """A RecordSource that can also fetch an explicit date window."""

    def fetch_window(self, campaign_id: str, start: date, end: date) -> list[dict[str, Any]]: ...


def parse_time_range(token: str | TimeRange, settings: TimeRangeSettings | None = None) -> TimeRange:
    """Map a token to TimeRange; unknown tokens fall back to the configured default."""
    settings = settings or TimeRangeSettings()
    try:
        return TimeRange(token)
    except ValueError:
        logger.warning("Unknown time range %r, using %s", token, settings.default)
        return TimeRange(settings.default)


def resolve_time_window(
    token: str | TimeRange,
    today: date | None = None,
    campaign_start: date | None = None,
    settings: TimeRangeSettings | None = None,
) -> tuple[date | None, date]:
    """Date window a time-range token selects.

    `start = today - N days` and both ends are inclusive, matching the
    backend query. `all` starts at the campaign start, or is unbounded
    (None) when that is unknown.
    """
    settings = settings or TimeRangeSettings()
    today = today or date.today()
    time_range = parse_time_range(token, settings)

    if time_range is TimeRange.ALL:
        return campaign_start, today

    return today - timedelta(days=settings.days[time_range.value]), today


def filter_to_window(
    records: Sequence[Mapping[str, Any] | AnalyticsRecord],
    token: str | TimeRange,
    today: date | None = None,
    campaign_start: date | None = None,
    settings: TimeRangeSettings | None = None,
) -> list[AnalyticsRecord]:
    """Keep the records whose day falls inside the token's window.

    Does locally what the backend does for `timeRange`. Undated records are
    kept only when the window is unbounded.

    Raises:
        DataValidationError: If any record has an invalid core field.
    """
    start, end = resolve_time_window(token, today, campaign_start, settings)
    records = normalize_records(records)

    if start is None:
        return [r for r in records if r.date is None or r.date <= end]

    kept = [r for r in records if r.date is not None and start <= r.date <= end]
    logger.debug("Kept %d of %d records in %s..%s", len(kept), len(records), start, end)
    return kept


class AnalyticsService:
    """Builds AnalyticsViews for the analytics page.

    Orchestrates:
    1. Fetching raw records for a campaign and time range (via a RecordSource)
    2. Fetching the prior window when the source supports it
    3. Running the AnalyticsEngine
    4. Returning the consolidated AnalyticsView

    Usage:
        service = AnalyticsService(source=AnalyticsApiClient(settings.api))
        view = service.load_view("cmp_123", time_range="30d")
    """

    def __init__(
        self,
        source: RecordSource | None = None,
        settings: AnalyticsSettings | None = None,
    ):
        self.settings = settings or load_settings()
        self.source = source

    def build_view(
        self,
        records: Sequence[Mapping[str, Any] | AnalyticsRecord],
        time_range: str | TimeRange = TimeRange.LAST_7_DAYS,
        comparison_mode: str | ComparisonMode = ComparisonMode.PREVIOUS,
        active_metric: str = "impressions",
        previous_records: Sequence[Mapping[str, Any]] | None = None,
        campaign_id: str | None = None,
        budget: float | None = None,
    ) -> AnalyticsView:
        """Run the engine over records the caller already holds."""
        time_range = parse_time_range(time_range, self.settings.time_ranges)
        engine = AnalyticsEngine(
            records=records,
            settings=self.settings,
            comparison_mode=ComparisonMode(comparison_mode),
            active_metric=active_metric,
            previous_records=previous_records,
        )
        return engine.get_view(
            campaign_id=campaign_id, time_range=time_range.value, budget=budget
        )

    def load_view(
        self,
        campaign_id: str,
        time_range: str | TimeRange = TimeRange.LAST_7_DAYS,
        comparison_mode: str | ComparisonMode = ComparisonMode.PREVIOUS,
        active_metric: str = "impressions",
        budget: float | None = None,
    ) -> AnalyticsView:
        """Fetch a campaign's records and build its view.

        Raises:
            ValueError: If the service has no record source
            AnalyticsFetchError: If the source fails (propagated untouched)
        """
        if self.source is None:
            raise ValueError("AnalyticsService.load_view requires a record source")

        time_range = parse_time_range(time_range, self.settings.time_ranges)
        comparison_mode = ComparisonMode(comparison_mode)
        records = self.source.fetch_records(campaign_id, time_range.value)

        previous_records = None
        if comparison_mode is ComparisonMode.PREVIOUS and isinstance(
            self.source, HistoricalRecordSource
        ):
            previous_records = self._fetch_prior_window(campaign_id, records)

        return self.build_view(
            records,
            time_range=time_range,
            comparison_mode=comparison_mode,
            active_metric=active_metric,
            previous_records=previous_records,
            campaign_id=campaign_id,
            budget=budget,
        )

    def _fetch_prior_window(
        self, campaign_id: str, records: Sequence[Mapping[str, Any]]
    ) -> list[dict[str, Any]] | None:
        window = prior_window([r.date for r in normalize_records(records)])
        if window is None:
            return None

        logger.info(
            "Fetching prior window %s..%s for campaign %s", window.start, window.end, campaign_id
        )
        return self.source.fetch_window(campaign_id, window.start, window.end)
