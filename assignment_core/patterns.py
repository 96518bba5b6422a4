"""Recurring-assignment mining over completed weeks, and suggestions.

A pattern is keyed by ``(day_of_week, signature)`` where the signature is an
order-independent form of a cell, so ``[A, B]`` and ``[B, A]`` match.
Days of week count from Sunday: 0 is Sunday, 1 is Monday, 6 is Saturday.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from .models import Assignment, Schedule, UnknownAssignment
from .normalize import TemplateLookup, normalize

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_WEEKS = 12
DEFAULT_MIN_CONSECUTIVE_WEEKS = 3
FULL_CONFIDENCE_WEEKS = 10

Signature = tuple[tuple[str, ...], ...]


@dataclass
class Pattern:
    employee_id: str
    day_of_week: int
    signature: Signature
    assignments: list[Assignment]
    frequency: int
    consecutive_weeks: int
    last_seen_week: str


@dataclass(frozen=True)
class Suggestion:
    employee_id: str
    day_of_week: int
    assignments: list[Assignment]
    confidence: float
    weeks_matched: int


def _assignment_key(assignment: Assignment) -> tuple[str, ...]:
    if isinstance(assignment, UnknownAssignment):
        return (assignment.type, repr(assignment.fields))
    data = assignment.to_dict()
    return (
        data.get("shiftId") or "",
        data.get("type") or "",
        data.get("startTime") or "",
        data.get("endTime") or "",
        data.get("startTime2") or "",
        data.get("endTime2") or "",
        data.get("licenciaType") or "",
        data.get("texto") or "",
    )


def assignment_signature(assignments: Iterable[Assignment]) -> Signature:
    """Canonical form of a cell: sorted by shift id, type, then times."""
    return tuple(sorted(_assignment_key(a) for a in assignments))


def _canonical_order(assignments: list[Assignment]) -> list[Assignment]:
    return sorted(assignments, key=_assignment_key)


def _as_schedule(value: Schedule | dict[str, Any]) -> Schedule:
    return value if isinstance(value, Schedule) else Schedule.from_dict(value)


def weekday_index(day: date) -> int:
    """Day of week counted from Sunday (0) to Saturday (6)."""
    return (day.weekday() + 1) % 7


def _weeks_between(earlier: str, later: str) -> int:
    days = (date.fromisoformat(later) - date.fromisoformat(earlier)).days
    return round(days / 7)


def analyze_patterns(
    employee_id: str,
    schedules: Iterable[Schedule | dict[str, Any]],
    window_weeks: int = DEFAULT_WINDOW_WEEKS,
    shift_templates: TemplateLookup = None,
) -> list[Pattern]:
    """Detect recurring (weekday, cell) combinations for one employee.

    Only completed schedules are considered, oldest first, limited to the
    last ``window_weeks`` of them (empty weeks included). ``consecutive_weeks`` restarts at 1 when a
    pattern reappears after a gap of more than one week.
    """
    completed = [s for s in (_as_schedule(v) for v in schedules) if s.completed]
    completed.sort(key=lambda s: s.week_start)
    if window_weeks > 0:
        completed = completed[-window_weeks:]
    else:
        completed = []

    patterns: dict[tuple[int, Signature], Pattern] = {}

    # weeks without a start date or cells still take a slot in the window
    for schedule in completed:
        if not schedule.week_start:
            continue
        week_start = date.fromisoformat(schedule.week_start)
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            raw = schedule.raw_cell(day.isoformat(), employee_id)
            if not raw:
                continue
            try:
                cell = normalize(raw, shift_templates)
            except TypeError as exc:
                logger.debug("Skipping unreadable cell %s / %s: %s", day.isoformat(), employee_id, exc)
                continue
            if not cell:
                continue

            signature = assignment_signature(cell)
            weekday = weekday_index(day)
            key = (weekday, signature)
            pattern = patterns.get(key)
            if pattern is None:
                patterns[key] = Pattern(
                    employee_id=employee_id,
                    day_of_week=weekday,
                    signature=signature,
                    assignments=_canonical_order(cell),
                    frequency=1,
                    consecutive_weeks=1,
                    last_seen_week=schedule.week_start,
                )
                continue

            pattern.frequency += 1
            gap = _weeks_between(pattern.last_seen_week, schedule.week_start)
            if gap == 1:
                pattern.consecutive_weeks += 1
            elif gap > 1:
                logger.debug(
                    "Pattern streak reset for %s on weekday %d after %d weeks",
                    employee_id, pattern.day_of_week, gap,
                )
                pattern.consecutive_weeks = 1
            pattern.last_seen_week = schedule.week_start

    return list(patterns.values())


def confidence_for(consecutive_weeks: int) -> float:
    return min(consecutive_weeks / FULL_CONFIDENCE_WEEKS, 1.0)


def suggest(
    employee_id: str,
    day_of_week: int,
    patterns: Iterable[Pattern],
    min_consecutive_weeks: int = DEFAULT_MIN_CONSECUTIVE_WEEKS,
) -> Suggestion | None:
    """Best pattern for the weekday, if its streak is long enough.

    Ties on streak length go to the more frequent, then the more recent one.
    """
    candidates = [
        p for p in patterns
        if p.employee_id == employee_id
        and p.day_of_week == day_of_week
        and p.consecutive_weeks >= min_consecutive_weeks
    ]
    if not candidates:
        return None
    best = max(candidates, key=lambda p: (p.consecutive_weeks, p.frequency, p.last_seen_week))
    return Suggestion(
        employee_id=employee_id,
        day_of_week=day_of_week,
        assignments=list(best.assignments),
        confidence=confidence_for(best.consecutive_weeks),
        weeks_matched=best.consecutive_weeks,
    )


def suggest_week(
    employee_id: str,
    schedules: Iterable[Schedule | dict[str, Any]],
    window_weeks: int = DEFAULT_WINDOW_WEEKS,
    min_consecutive_weeks: int = DEFAULT_MIN_CONSECUTIVE_WEEKS,
    shift_templates: TemplateLookup = None,
) -> dict[int, Suggestion]:
    """Suggestions for every weekday that has one, keyed by weekday."""
    patterns = analyze_patterns(employee_id, schedules, window_weeks, shift_templates)
    out: dict[int, Suggestion] = {}
    for day_of_week in range(7):
        suggestion = suggest(employee_id, day_of_week, patterns, min_consecutive_weeks)
        if suggestion is not None:
            out[day_of_week] = suggestion
    return out
