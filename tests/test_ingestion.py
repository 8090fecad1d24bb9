"""Tests for payload cleaning and record normalization."""

from datetime import date

import polars as pl
import pytest

from campaign_analytics.exceptions import DataValidationError
from campaign_analytics.ingestion import (
    RECORD_SCHEMA,
    coerce_number,
    extract_spend,
    normalize_record,
    normalize_records,
    parse_payload,
    records_to_frame,
)
from campaign_analytics.models.analytics_record import AnalyticsRecord


# =============================================================================
# CLEANER
# =============================================================================


class TestParsePayload:
    """Tests for decoding nested payloads."""

    def test_mapping_passes_through(self) -> None:
        assert parse_payload({"spend": 10}) == {"spend": 10}

    def test_json_string_is_decoded(self) -> None:
        assert parse_payload('{"spend": "42.5"}') == {"spend": "42.5"}

    def test_invalid_json_returns_none(self) -> None:
        assert parse_payload("{oops") is None

    def test_non_object_json_returns_none(self) -> None:
        assert parse_payload("[1, 2, 3]") is None

    def test_none_returns_none(self) -> None:
        assert parse_payload(None) is None


class TestCoerceNumber:
    """Tests for wire value to number conversion."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (5, 5),
            (2.5, 2.5),
            ("42.5", 42.5),
            ("", 0),
            ("abc", 0),
            (None, 0),
            (True, 0),
            (float("nan"), 0.0),
            ("inf", 0.0),
        ],
    )
    def test_coercion(self, value, expected) -> None:
        assert coerce_number(value) == expected

    def test_int_stays_int(self) -> None:
        assert isinstance(coerce_number(7), int)


class TestExtractSpend:
    """Tests for spend extraction from cost payloads."""

    def test_string_payload_with_string_spend(self) -> None:
        parsed, spend = extract_spend('{"spend":"42.5"}')

        assert parsed == {"spend": "42.5"}
        assert spend == 42.5

    def test_corrupt_payload_yields_zero(self) -> None:
        parsed, spend = extract_spend("{not json")

        assert parsed == {}
        assert spend == 0.0

    def test_missing_spend_key(self) -> None:
        _, spend = extract_spend({"currency": "USD"})

        assert spend == 0.0


# =============================================================================
# NORMALIZER
# =============================================================================


class TestNormalizeRecord:
    """Tests for single-record normalization."""

    def test_string_cost_data(self) -> None:
        record = normalize_record({"date": "2024-01-05", "costData": '{"spend":"42.5"}'})

        assert record.spend == 42.5
        assert record.cost_data == {"spend": "42.5"}

    def test_corrupt_cost_data_keeps_record(self) -> None:
        record = normalize_record(
            {"date": "2024-01-05", "impressions": 10, "costData": "{not json"}
        )

        assert record.spend == 0.0
        assert record.impressions == 10

    def test_iso_datetime_becomes_calendar_day(self) -> None:
        record = normalize_record({"date": "2024-03-01T00:00:00.000Z"})

        assert record.date == date(2024, 3, 1)

    def test_camel_case_aliases(self) -> None:
        record = normalize_record(
            {"date": "2024-01-05", "conversionRate": 0.25, "averageDwellTime": 3.5}
        )

        assert record.conversion_rate == 0.25
        assert record.average_dwell_time == 3.5

    def test_null_counts_become_zero(self) -> None:
        record = normalize_record({"date": "2024-01-05", "impressions": None, "ctr": None})

        assert record.impressions == 0
        assert record.ctr == 0.0

    def test_dwell_time_absent_is_none(self) -> None:
        record = normalize_record({"date": "2024-01-05"})

        assert record.average_dwell_time is None

    def test_undated_record_is_accepted(self) -> None:
        record = normalize_record({"impressions": 100, "costData": {"spend": "50"}})

        assert record.date is None
        assert record.spend == 50.0

    def test_nested_payloads_left_as_received(self) -> None:
        record = normalize_record(
            {"date": "2024-01-05", "audienceMetrics": '{"ageGroups": {}}'}
        )

        assert record.audience_metrics == '{"ageGroups": {}}'

    def test_already_normalized_record_is_returned(self) -> None:
        record = AnalyticsRecord(date=date(2024, 1, 5), impressions=3)

        assert normalize_record(record) is record


class TestNormalizeRecords:
    """Tests for batch normalization."""

    def test_preserves_order_and_cardinality(self, week_records: list[dict]) -> None:
        records = normalize_records(week_records)

        assert len(records) == 3
        assert [r.date for r in records] == [
            date(2024, 1, 5),
            date(2024, 1, 6),
            date(2024, 1, 7),
        ]

    def test_spend_from_each_encoding(self, week_records: list[dict]) -> None:
        records = normalize_records(week_records)

        assert [r.spend for r in records] == [100.0, 150.5, 0.0]

    def test_empty_input(self) -> None:
        assert normalize_records([]) == []
        assert normalize_records(None) == []

    def test_invalid_core_field_raises(self) -> None:
        raw = [
            {"date": "2024-01-05", "impressions": 10},
            {"date": "not-a-date", "impressions": 10},
            {"date": "2024-01-07", "impressions": "many"},
        ]

        with pytest.raises(DataValidationError) as exc_info:
            normalize_records(raw)

        assert exc_info.value.row_count == 3
        assert [e["row"] for e in exc_info.value.errors] == [1, 2]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("impressions", -1),
            ("engagements", -10),
            ("conversions", -3),
            ("ctr", -0.01),
            ("ctr", 1.5),
            ("conversionRate", -0.2),
            ("conversionRate", 2.0),
        ],
    )
    def test_out_of_range_counts_and_rates_raise(self, field: str, value) -> None:
        raw = [
            {"date": "2024-01-05", "impressions": 100, "engagements": 10},
            {"date": "2024-01-06", "impressions": 100, "engagements": 10, field: value},
        ]

        with pytest.raises(DataValidationError) as exc_info:
            normalize_records(raw)

        assert [e["row"] for e in exc_info.value.errors] == [1]

    def test_rate_bounds_are_inclusive(self) -> None:
        records = normalize_records(
            [{"date": "2024-01-05", "ctr": 0.0, "conversionRate": 1.0}]
        )

        assert records[0].conversion_rate == 1.0


class TestRecordsToFrame:
    """Tests for flattening records into Polars."""

    def test_schema(self, week_records: list[dict]) -> None:
        df = records_to_frame(normalize_records(week_records))

        for name, dtype in RECORD_SCHEMA.items():
            assert df.schema[name] == dtype
        assert len(df) == 3

    def test_empty_frame_is_typed(self) -> None:
        df = records_to_frame([])

        assert df.is_empty()
        assert df.schema["report_day"] == pl.Date

    def test_missing_dwell_is_null(self, week_records: list[dict]) -> None:
        df = records_to_frame(normalize_records(week_records))

        assert df["average_dwell_time"].null_count() == 1
