"""Tests for timestamp parsing and normalization."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from clocked.data.timestamps import (
    duration_ms,
    format_timestamp,
    normalize_timestamp,
    parse_timestamp,
)


class TestParseTimestamp:
    def test_zulu(self) -> None:
        assert parse_timestamp("2026-01-05T10:00:00Z") == datetime(2026, 1, 5, 10, tzinfo=UTC)

    def test_offset_is_converted_to_utc(self) -> None:
        parsed = parse_timestamp("2026-01-05T12:00:00+02:00")
        assert parsed == datetime(2026, 1, 5, 10, tzinfo=UTC)

    def test_naive_is_utc(self) -> None:
        assert parse_timestamp("2026-01-05T10:00:00") == datetime(2026, 1, 5, 10, tzinfo=UTC)

    def test_invalid(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(1736071200) is None


class TestNormalize:
    def test_formats_with_milliseconds(self) -> None:
        assert normalize_timestamp("2026-01-05T10:00:00Z") == "2026-01-05T10:00:00.000Z"
        assert normalize_timestamp("2026-01-05T10:00:00.500+00:00") == "2026-01-05T10:00:00.500Z"

    def test_invalid_is_empty(self) -> None:
        assert normalize_timestamp("not a date") == ""

    def test_normalized_strings_sort_chronologically(self) -> None:
        values = ["2026-01-05T11:00:00+02:00", "2026-01-05T09:30:00Z", "2026-01-05T09:45:00"]
        normalized = sorted(normalize_timestamp(v) for v in values)
        assert normalized == [
            "2026-01-05T09:00:00.000Z",
            "2026-01-05T09:30:00.000Z",
            "2026-01-05T09:45:00.000Z",
        ]

    def test_format_naive(self) -> None:
        assert format_timestamp(datetime(2026, 1, 5, 10)) == "2026-01-05T10:00:00.000Z"


def test_duration_ms() -> None:
    start = datetime(2026, 1, 5, 10, tzinfo=UTC)
    end = datetime(2026, 1, 5, 10, 1, 15, tzinfo=UTC)
    assert duration_ms(start, end) == 75_000
    assert duration_ms(end, start) == -75_000


def test_duration_ms_is_exact() -> None:
    start = datetime(2026, 1, 5, 10, tzinfo=UTC)
    for ms in (1, 1001, 1482, 86_399_999):
        assert duration_ms(start, start + timedelta(milliseconds=ms)) == ms
