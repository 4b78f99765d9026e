# src/vrpcheck/validator/intervals.py
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class TimeWindow:
    """
    @brief
    Half-open interval of permitted start times.

    @details
    Callers build instances through `parse_window`, which guarantees start < end.
    """

    start: datetime
    end: datetime


@dataclass(frozen=True)
class MalformedInterval:
    """
    @brief
    Typed failure of `parse_window`.

    @details
    Returned instead of raised so that the calling validator can turn it
    into a violation for the offending structure and keep going.
    """

    raw: Any
    reason: str


# RFC 3339 date-time; the offset may be omitted (read as UTC).
_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})?",
    re.ASCII,
)


def _ensure_timezone(dt: datetime) -> datetime:
    """Assign UTC to naive datetimes so that all comparisons are well defined."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_time(raw: Any) -> datetime | None:
    """
    @brief
    Parse a single RFC 3339 timestamp.

    @details
    The text must match the RFC 3339 date-time grammar before it is handed to
    `datetime.fromisoformat`, which on its own also takes ISO 8601 forms such
    as date-only values, basic format or week dates. Fractions longer than
    microseconds are truncated; a missing offset means UTC.

    @returns
        Timezone-aware datetime, or None when the value is not a valid timestamp.
    """
    if not isinstance(raw, str):
        return None
    match = _RFC3339.fullmatch(raw.strip())
    if match is None:
        return None

    date, clock, fraction, offset = match.groups()
    text = f"{date}T{clock}"
    if fraction:
        text += "." + fraction[:6].ljust(6, "0")
    if offset:
        text += "+00:00" if offset in ("Z", "z") else offset
    try:
        return _ensure_timezone(datetime.fromisoformat(text))
    except ValueError:
        # Out-of-range fields, e.g. month 13 or hour 25
        return None


def parse_window(raw: Any) -> TimeWindow | MalformedInterval:
    """
    @brief
    Parse a raw `[start, end]` pair into a TimeWindow.

    @details
    The pair must have exactly two parsable timestamps with start < end.
    Any other shape yields a MalformedInterval describing the problem.

    @params
        raw : Any
            Raw value as found in the problem document.

    @returns
        TimeWindow on success, MalformedInterval otherwise.
    """
    # (1) Shape: exactly two entries
    if isinstance(raw, str) or not isinstance(raw, Sequence) or len(raw) != 2:
        return MalformedInterval(raw=raw, reason="expected a [start, end] pair")

    # (2) Both timestamps must parse
    start = parse_time(raw[0])
    end = parse_time(raw[1])
    if start is None or end is None:
        return MalformedInterval(raw=raw, reason="cannot parse timestamp")

    # (3) Non-empty interval
    if start >= end:
        return MalformedInterval(raw=raw, reason="start must be earlier than end")

    return TimeWindow(start=start, end=end)


def overlaps(windows: Sequence[TimeWindow]) -> bool:
    """True iff any two windows intersect; touching windows do not overlap."""
    ordered = sorted(windows, key=lambda w: (w.start, w.end))
    return any(cur.start < prev.end for prev, cur in zip(ordered, ordered[1:]))


def contains(outer: TimeWindow, inner: TimeWindow) -> bool:
    return inner.start >= outer.start and inner.end <= outer.end


__all__ = [
    "MalformedInterval",
    "TimeWindow",
    "contains",
    "overlaps",
    "parse_time",
    "parse_window",
]
