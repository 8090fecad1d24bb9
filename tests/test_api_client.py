"""Tests for the HTTP record source."""

from datetime import date
from unittest.mock import Mock

import pytest
import requests

from campaign_analytics.config import ApiSettings
from campaign_analytics.exceptions import AnalyticsFetchError
from campaign_analytics.services import AnalyticsApiClient, HistoricalRecordSource


def _response(status_code: int = 200, payload=None, invalid_json: bool = False) -> Mock:
    response = Mock()
    response.status_code = status_code
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session() -> Mock:
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session: Mock) -> AnalyticsApiClient:
    return AnalyticsApiClient(
        ApiSettings(base_url="https://console.example.com/", timeout=5), session=session
    )


class TestFetchRecords:
    """Tests for the time-range endpoint."""

    def test_returns_records(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(payload=[{"date": "2024-01-05"}])

        records = client.fetch_records("cmp_1", "30d")

        assert records == [{"date": "2024-01-05"}]
        session.get.assert_called_once_with(
            "https://console.example.com/api/admin/campaigns/cmp_1/analytics",
            params={"timeRange": "30d"},
            timeout=5,
        )

    @pytest.mark.parametrize("status_code", [500, 502, 503, 429])
    def test_server_errors_are_retryable(
        self, client: AnalyticsApiClient, session: Mock, status_code: int
    ) -> None:
        session.get.return_value = _response(status_code)

        with pytest.raises(AnalyticsFetchError) as exc_info:
            client.fetch_records("cmp_1", "7d")

        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == status_code

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404])
    def test_client_errors_are_not_retryable(
        self, client: AnalyticsApiClient, session: Mock, status_code: int
    ) -> None:
        session.get.return_value = _response(status_code)

        with pytest.raises(AnalyticsFetchError) as exc_info:
            client.fetch_records("cmp_1", "7d")

        assert exc_info.value.retryable is False

    def test_timeout_is_retryable(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(AnalyticsFetchError, match="timed out") as exc_info:
            client.fetch_records("cmp_1", "7d")

        assert exc_info.value.retryable is True

    def test_connection_error_is_retryable(
        self, client: AnalyticsApiClient, session: Mock
    ) -> None:
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(AnalyticsFetchError) as exc_info:
            client.fetch_records("cmp_1", "7d")

        assert exc_info.value.retryable is True

    def test_invalid_json(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(invalid_json=True)

        with pytest.raises(AnalyticsFetchError, match="invalid JSON") as exc_info:
            client.fetch_records("cmp_1", "7d")

        assert exc_info.value.retryable is False

    def test_non_list_payload(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(payload={"error": "nope"})

        with pytest.raises(AnalyticsFetchError, match="JSON array"):
            client.fetch_records("cmp_1", "7d")


class TestFetchWindow:
    """Tests for the explicit date-window endpoint."""

    def test_unwraps_daily_metrics(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(
            payload={"analytics": {"dailyMetrics": [{"date": "2024-01-02"}]}}
        )

        records = client.fetch_window("cmp_1", date(2024, 1, 2), date(2024, 1, 4))

        assert records == [{"date": "2024-01-02"}]
        session.get.assert_called_once_with(
            "https://console.example.com/api/advertiser/campaigns/cmp_1/analytics",
            params={"startDate": "2024-01-02", "endDate": "2024-01-04"},
            timeout=5,
        )

    def test_plain_list(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(payload=[])

        assert client.fetch_window("cmp_1", date(2024, 1, 2), date(2024, 1, 4)) == []

    def test_missing_daily_metrics(self, client: AnalyticsApiClient, session: Mock) -> None:
        session.get.return_value = _response(payload={"analytics": None})

        with pytest.raises(AnalyticsFetchError):
            client.fetch_window("cmp_1", date(2024, 1, 2), date(2024, 1, 4))


class TestClientSetup:
    def test_is_historical_source(self, client: AnalyticsApiClient) -> None:
        assert isinstance(client, HistoricalRecordSource)

    def test_headers_applied(self, session: Mock) -> None:
        AnalyticsApiClient(session=session, headers={"Authorization": "Bearer token"})

        assert session.headers["Authorization"] == "Bearer token"
