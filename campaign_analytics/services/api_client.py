"""REST client for the console's campaign analytics endpoint."""

import logging
from datetime import date
from typing import Any

import requests

from ..config import ApiSettings
from ..exceptions import AnalyticsFetchError

logger = logging.getLogger(__name__)

ADMIN_ANALYTICS_PATH = "/api/admin/campaigns/{campaign_id}/analytics"
ADVERTISER_ANALYTICS_PATH = "/api/advertiser/campaigns/{campaign_id}/analytics"


class AnalyticsApiClient:
    """Fetches raw analytics records over HTTP.

    Implements the RecordSource protocol. Failures surface as
    AnalyticsFetchError with `retryable` set; retrying is left to the caller.

    Usage:
        client = AnalyticsApiClient(settings.api)
        records = client.fetch_records("cmp_123", "30d")
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        session: requests.Session | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.settings = settings or ApiSettings()
        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}{path}"

    def _get(self, url: str, params: dict[str, str]) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.settings.timeout)
        except requests.Timeout as e:
            logger.error("Analytics request timed out after %ss: %s", self.settings.timeout, url)
            raise AnalyticsFetchError(
                f"Request timed out after {self.settings.timeout}s", retryable=True, url=url
            ) from e
        except requests.RequestException as e:
            logger.error("Analytics request failed: %s (%s)", url, e)
            raise AnalyticsFetchError(f"Request failed: {e}", retryable=True, url=url) from e

        if response.status_code >= 400:
            retryable = response.status_code >= 500 or response.status_code == 429
            logger.error("Analytics endpoint returned %d: %s", response.status_code, url)
            raise AnalyticsFetchError(
                f"Analytics endpoint returned HTTP {response.status_code}",
                retryable=retryable,
                status_code=response.status_code,
                url=url,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AnalyticsFetchError(
                "Analytics endpoint returned invalid JSON",
                retryable=False,
                status_code=response.status_code,
                url=url,
            ) from e

        return payload

    @staticmethod
    def _as_records(payload: Any, url: str) -> list[dict[str, Any]]:
        if not isinstance(payload, list):
            raise AnalyticsFetchError(
                f"Expected a JSON array of records, got {type(payload).__name__}",
                retryable=False,
                url=url,
            )
        logger.debug("Fetched %d analytics records from %s", len(payload), url)
        return payload

    def fetch_records(self, campaign_id: str, time_range: str) -> list[dict[str, Any]]:
        """GET the campaign's records for a time-range token (7d|30d|90d|all)."""
        url = self._url(ADMIN_ANALYTICS_PATH.format(campaign_id=campaign_id))
        return self._as_records(self._get(url, {"timeRange": time_range}), url)

    def fetch_window(self, campaign_id: str, start: date, end: date) -> list[dict[str, Any]]:
        """GET the campaign's records for an explicit inclusive date window.

        Uses the advertiser endpoint, which accepts startDate/endDate and wraps
        the records in `analytics.dailyMetrics`.
        """
        url = self._url(ADVERTISER_ANALYTICS_PATH.format(campaign_id=campaign_id))
        payload = self._get(
            url, {"startDate": start.isoformat(), "endDate": end.isoformat()}
        )
        if isinstance(payload, dict):
            payload = (payload.get("analytics") or {}).get("dailyMetrics")
        return self._as_records(payload, url)
