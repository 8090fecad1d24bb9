"""Shared fixtures for the campaign analytics tests."""

import json

import pytest

from campaign_analytics.config import AnalyticsSettings, load_settings


@pytest.fixture
def settings() -> AnalyticsSettings:
    """Bundled analytics settings."""
    return load_settings()


@pytest.fixture
def week_records() -> list[dict]:
    """Three consecutive days of wire records with mixed payload encodings."""
    return [
        {
            "date": "2024-01-05T00:00:00.000Z",
            "impressions": 1000,
            "engagements": 50,
            "conversions": 5,
            "ctr": 0.05,
            "conversionRate": 0.1,
            "averageDwellTime": 12.5,
            "costData": {"spend": 100},
            "audienceMetrics": {"ageGroups": {"18-24": 10, "25-34": 20}},
            "emotionMetrics": {"sentiments": {"positive": 6, "neutral": 3, "negative": 1}},
        },
        {
            "date": "2024-01-06",
            "impressions": 2000,
            "engagements": 120,
            "conversions": 12,
            "ctr": 0.06,
            "conversionRate": 0.1,
            "averageDwellTime": 8.0,
            "costData": json.dumps({"spend": "150.5"}),
            "audienceMetrics": json.dumps({"ageGroups": {"25-34": 5, "35-44": 15}}),
            "emotionMetrics": json.dumps({"sentiments": {"positive": 4, "neutral": 2}}),
        },
        {
            "date": "2024-01-07",
            "impressions": 1500,
            "engagements": 30,
            "conversions": 3,
            "ctr": 0.02,
            "conversionRate": 0.1,
            "averageDwellTime": None,
            "costData": "{not json",
            "audienceMetrics": None,
            "emotionMetrics": None,
        },
    ]


@pytest.fixture
def bare_records() -> list[dict]:
    """Records without any audience or emotion payloads."""
    return [
        {"date": "2024-02-01", "impressions": 100, "engagements": 10, "conversions": 1},
        {"date": "2024-02-02", "impressions": 300, "engagements": 20, "conversions": 4},
    ]
