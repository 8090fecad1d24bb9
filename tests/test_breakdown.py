"""Tests for categorical breakdowns."""

import json

import pytest

from campaign_analytics.analytics import (
    aggregate_age_groups,
    aggregate_sentiments,
    build_breakdowns,
    device_distribution,
)
from campaign_analytics.config import AnalyticsSettings
from campaign_analytics.ingestion import normalize_records


@pytest.fixture
def fallbacks(settings: AnalyticsSettings):
    return settings.breakdowns


class TestAgeGroups:
    """Tests for age band aggregation."""

    def test_sums_across_records(self, week_records: list[dict], fallbacks) -> None:
        result = aggregate_age_groups(normalize_records(week_records), fallbacks.age)

        assert result.is_fallback is False
        assert result.as_mapping() == {"18-24": 10, "25-34": 25, "35-44": 15}

    def test_first_seen_order(self, week_records: list[dict], fallbacks) -> None:
        result = aggregate_age_groups(normalize_records(week_records), fallbacks.age)

        assert [item.name for item in result.items] == ["18-24", "25-34", "35-44"]

    def test_n_fold_duplicate_sums(self, fallbacks) -> None:
        record = {"date": "2024-01-05", "audienceMetrics": {"ageGroups": {"18-24": 3, "65+": 2}}}

        result = aggregate_age_groups(normalize_records([record] * 4), fallbacks.age)

        assert result.as_mapping() == {"18-24": 12, "65+": 8}

    def test_fallback_without_data(self, bare_records: list[dict], fallbacks) -> None:
        result = aggregate_age_groups(normalize_records(bare_records), fallbacks.age)

        assert result.is_fallback is True
        assert result.as_mapping() == {
            "18-24": 25, "25-34": 35, "35-44": 20, "45-54": 12, "55-64": 5, "65+": 3,
        }

    def test_corrupt_payload_is_skipped(self, fallbacks) -> None:
        records = normalize_records(
            [
                {"date": "2024-01-05", "audienceMetrics": "{broken"},
                {"date": "2024-01-06", "audienceMetrics": json.dumps({"ageGroups": {"25-34": 7}})},
            ]
        )

        result = aggregate_age_groups(records, fallbacks.age)

        assert result.as_mapping() == {"25-34": 7}

    def test_non_numeric_count_is_zero(self, fallbacks) -> None:
        records = normalize_records(
            [{"date": "2024-01-05", "audienceMetrics": {"ageGroups": {"18-24": "n/a", "25-34": "4"}}}]
        )

        result = aggregate_age_groups(records, fallbacks.age)

        assert result.as_mapping() == {"18-24": 0, "25-34": 4.0}


class TestSentiments:
    """Tests for sentiment aggregation."""

    def test_sums_and_capitalizes(self, week_records: list[dict], fallbacks) -> None:
        result = aggregate_sentiments(normalize_records(week_records), fallbacks.sentiment)

        assert result.is_fallback is False
        assert result.as_mapping() == {"Positive": 10, "Neutral": 5, "Negative": 1}

    def test_all_zero_uses_fallback(self, fallbacks) -> None:
        records = normalize_records(
            [{"date": "2024-01-05", "emotionMetrics": {"sentiments": {"positive": 0}}}]
        )

        result = aggregate_sentiments(records, fallbacks.sentiment)

        assert result.is_fallback is True
        assert result.as_mapping() == {"Positive": 65, "Neutral": 25, "Negative": 10}

    def test_other_keys_ignored(self, fallbacks) -> None:
        records = normalize_records(
            [{"date": "2024-01-05", "emotionMetrics": {"sentiments": {"positive": 2, "joy": 9}}}]
        )

        result = aggregate_sentiments(records, fallbacks.sentiment)

        assert result.as_mapping() == {"Positive": 2, "Neutral": 0, "Negative": 0}


class TestDevices:
    """Tests for the device split."""

    def test_always_fallback(self, week_records: list[dict], fallbacks) -> None:
        result = device_distribution(normalize_records(week_records), fallbacks.device)

        assert result.is_fallback is True
        assert result.as_mapping() == {"Mobile": 55, "Desktop": 30, "Tablet": 12, "Other": 3}


class TestBuildBreakdowns:
    """Tests for the combined breakdown stage."""

    def test_keys(self, week_records: list[dict], fallbacks) -> None:
        result = build_breakdowns(normalize_records(week_records), fallbacks)

        assert list(result) == ["age", "sentiment", "device"]

    def test_empty_input_uses_every_fallback(self, fallbacks) -> None:
        result = build_breakdowns([], fallbacks)

        assert all(series.is_fallback for series in result.values())

    def test_to_dict(self, week_records: list[dict], fallbacks) -> None:
        result = build_breakdowns(normalize_records(week_records), fallbacks)

        data = result["sentiment"].to_dict()

        assert data["dimension"] == "sentiment"
        assert data["items"][0] == {"name": "Positive", "value": 10}
