"""Minute-of-day arithmetic for HH:MM wall-clock values.

Intervals are half-open ``[start, end)``. When ``end <= start`` the interval
crosses midnight and its end is pushed one day forward before comparing.
"""

from __future__ import annotations

import re

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class ParseError(ValueError):
    """Raised for a malformed HH:MM string (a caller bug, not user data)."""


def to_minutes(value: str) -> int:
    """Parse HH:MM into minutes after midnight, in ``[0, 1440)``."""
    match = _HHMM_RE.match(str(value).strip()) if isinstance(value, str) else None
    if match is None:
        raise ParseError(f"invalid time value: {value!r} (expected HH:MM)")
    h = int(match.group(1))
    m = int(match.group(2))
    if h > 23 or m > 59:
        raise ParseError(f"time out of range: {value!r}")
    return h * 60 + m


def normalize_range(start_min: int, end_min: int) -> tuple[int, int]:
    """Extend ``end_min`` by one day when the range crosses midnight."""
    if end_min <= start_min:
        return start_min, end_min + MINUTES_PER_DAY
    return start_min, end_min


def crosses_midnight(start: str, end: str) -> bool:
    return to_minutes(end) < to_minutes(start)


def range_duration(start: str, end: str) -> int:
    """Duration in minutes. A zero-length range reports 0, not a full day."""
    s = to_minutes(start)
    e = to_minutes(end)
    if s == e:
        return 0
    s, e = normalize_range(s, e)
    return e - s


def is_valid_range(start: str, end: str) -> bool:
    """Only zero-duration ranges are invalid; wrapping ranges are fine."""
    return to_minutes(start) != to_minutes(end)


def calc_range_hours(start: str, end: str) -> float:
    """Calculate the duration of a range in decimal hours."""
    return range_duration(start, end) / 60.0


def intervals_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Return True if two HH:MM intervals overlap (supports overnight ranges).

    Touching intervals (``a_end == b_start``) do not overlap. When both
    intervals cross midnight the answer is always True: the comparison is a
    conservative approximation, not an exact computation.
    """
    a0, a1 = normalize_range(to_minutes(a_start), to_minutes(a_end))
    b0, b1 = normalize_range(to_minutes(b_start), to_minutes(b_end))
    a_wraps = a1 > MINUTES_PER_DAY
    b_wraps = b1 > MINUTES_PER_DAY

    if a_wraps and b_wraps:
        return True

    candidates = [(b0, b1)]
    if a_wraps:
        # b may sit in the early-morning tail of a
        candidates.append((b0 + MINUTES_PER_DAY, b1 + MINUTES_PER_DAY))
    elif b_wraps:
        candidates.append((b0 - MINUTES_PER_DAY, b1 - MINUTES_PER_DAY))

    for y0, y1 in candidates:
        if a0 < y1 and y0 < a1:
            return True
    return False
