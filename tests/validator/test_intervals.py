# tests/validator/test_intervals.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from vrpcheck.validator.intervals import (
    MalformedInterval,
    TimeWindow,
    contains,
    overlaps,
    parse_time,
    parse_window,
)


def tw(h1: int, h2: int) -> TimeWindow:
    """Build a TimeWindow on 2020-07-04 between two whole hours (UTC)."""
    return TimeWindow(
        start=datetime(2020, 7, 4, h1, tzinfo=timezone.utc),
        end=datetime(2020, 7, 4, h2, tzinfo=timezone.utc),
    )


def test_parse_window_valid_pair() -> None:
    parsed = parse_window(["2020-07-04T09:00:00Z", "2020-07-04T18:00:00Z"])

    assert isinstance(parsed, TimeWindow)
    assert parsed.start == datetime(2020, 7, 4, 9, tzinfo=timezone.utc)
    assert parsed.end == datetime(2020, 7, 4, 18, tzinfo=timezone.utc)


def test_parse_window_naive_timestamps_are_utc() -> None:
    parsed = parse_window(["2020-07-04T09:00:00", "2020-07-04T10:00:00"])

    assert isinstance(parsed, TimeWindow)
    assert parsed.start.tzinfo is timezone.utc


@pytest.mark.parametrize(
    "raw",
    [
        ["2020-07-04T18:00:00Z", "2020-07-04T09:00:00Z"],
        ["2020-07-04T09:00:00Z", "2020-07-04T09:00:00Z"],
        ["not-a-date", "2020-07-04T09:00:00Z"],
        ["2020-07-04T09:00:00Z"],
        ["2020-07-04T09:00:00Z", "2020-07-04T10:00:00Z", "2020-07-04T11:00:00Z"],
        "2020-07-04T09:00:00Z",
        None,
        ["2020-07-04", "2020-07-05"],
        ["20200704T090000Z", "20200704T100000Z"],
        ["2020-W27-6", "2020-W27-7"],
        ["2020-07-04T09:00Z", "2020-07-04T10:00Z"],
        ["2020-07-04T09:00:00+0200", "2020-07-04T10:00:00+0200"],
        ["2020-13-04T09:00:00Z", "2020-13-04T10:00:00Z"],
    ],
    ids=[
        "reversed",
        "empty",
        "unparsable",
        "single",
        "triple",
        "string",
        "none",
        "date_only",
        "basic_format",
        "week_date",
        "no_seconds",
        "offset_without_colon",
        "month_out_of_range",
    ],
)
def test_parse_window_malformed_returns_typed_failure(raw) -> None:
    """
    @brief
    Malformed input never raises.

    @details
    Every malformed shape must come back as MalformedInterval carrying the raw value.
    """
    parsed = parse_window(raw)

    assert isinstance(parsed, MalformedInterval)
    assert parsed.raw == raw
    assert parsed.reason


def test_parse_time_rejects_non_strings() -> None:
    assert parse_time(42) is None
    assert parse_time("garbage") is None
    assert parse_time("2020-07-04T09:00:00+02:00") == datetime(
        2020, 7, 4, 7, tzinfo=timezone.utc
    )


def test_overlaps_false_for_disjoint_and_touching_windows() -> None:
    assert overlaps([]) is False
    assert overlaps([tw(8, 9)]) is False
    assert overlaps([tw(12, 13), tw(8, 9), tw(10, 11)]) is False
    # Half-open windows: [8, 9) and [9, 10) only touch
    assert overlaps([tw(8, 9), tw(9, 10)]) is False


def test_overlaps_true_when_next_starts_before_previous_ends() -> None:
    a = tw(8, 10)
    epsilon = timedelta(seconds=1)
    b = TimeWindow(start=a.end - epsilon, end=a.end + timedelta(hours=1))

    assert overlaps([a, b]) is True
    assert overlaps([b, a]) is True


def test_overlaps_detects_nested_window() -> None:
    assert overlaps([tw(8, 18), tw(12, 13), tw(20, 21)]) is True


def test_contains() -> None:
    shift = tw(8, 18)

    assert contains(shift, tw(8, 18)) is True
    assert contains(shift, tw(12, 13)) is True
    assert contains(shift, tw(7, 9)) is False
    assert contains(shift, tw(17, 19)) is False


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2020-07-04T09:00:00Z", datetime(2020, 7, 4, 9, tzinfo=timezone.utc)),
        ("2020-07-04t09:00:00z", datetime(2020, 7, 4, 9, tzinfo=timezone.utc)),
        ("2020-07-04 09:00:00+00:00", datetime(2020, 7, 4, 9, tzinfo=timezone.utc)),
        (
            "2020-07-04T09:00:00.123456789Z",
            datetime(2020, 7, 4, 9, 0, 0, 123456, tzinfo=timezone.utc),
        ),
        ("2020-07-04T09:00:00.5-01:30", datetime(2020, 7, 4, 10, 30, 0, 500000, tzinfo=timezone.utc)),
    ],
    ids=["zulu", "lowercase", "space_separator", "nanoseconds", "short_fraction_offset"],
)
def test_parse_time_accepts_rfc3339_forms(raw: str, expected: datetime) -> None:
    assert parse_time(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["2020-07-04", "20200704T090000Z", "2020-W27-6", "2020-186T09:00:00Z", "2020-07-04T09Z"],
    ids=["date_only", "basic_format", "week_date", "ordinal_date", "hour_only"],
)
def test_parse_time_rejects_iso8601_forms_outside_rfc3339(raw: str) -> None:
    assert parse_time(raw) is None
