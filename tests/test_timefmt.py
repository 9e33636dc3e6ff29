"""Tests for timestamp rendering."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from orchcli.ui.timefmt import NOT_AVAILABLE, format_timestamp, to_datetime

MOMENT = datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", 0])
def test_missing_values_render_not_available(value: object) -> None:
    assert format_timestamp(value) == NOT_AVAILABLE


@pytest.mark.parametrize(
    ("time_format", "expected"),
    [
        ("human", "2024-05-01 12:30:00 UTC"),
        ("iso8601", "2024-05-01T12:30:00Z"),
        ("epoch", "1714566600"),
    ],
)
def test_formats(time_format: str, expected: str) -> None:
    assert format_timestamp(MOMENT, time_format) == expected


def test_epoch_seconds_and_millis_agree() -> None:
    assert to_datetime(1714566600) == MOMENT
    assert to_datetime(1714566600000) == MOMENT
    assert to_datetime("1714566600") == MOMENT


def test_iso_strings_are_normalized_to_utc() -> None:
    assert to_datetime("2024-05-01T12:30:00Z") == MOMENT
    offset = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(offset, "iso8601") == "2024-05-01T12:30:00Z"


def test_unparseable_string_is_shown_verbatim() -> None:
    assert format_timestamp("yesterday") == "yesterday"
