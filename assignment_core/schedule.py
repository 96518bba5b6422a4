"""Whole-cell operations on a week schedule.

A cell's assignment list is one atomic value: it is replaced wholesale after
validation, or not at all. All helpers return new ``Schedule`` objects.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any

from .models import Schedule
from .normalize import TemplateLookup, normalize, to_raw
from .validators import validate_cell

MUTATING_ACTIONS = ("edit", "copy", "clear")


class CellValidationError(ValueError):
    """A cell write was rejected; ``errors`` holds every violated rule."""

    def __init__(self, date: str, employee_id: str, errors: list[str]):
        self.date = date
        self.employee_id = employee_id
        self.errors = list(errors)
        super().__init__(
            f"Cell {date} / {employee_id} rejected: " + "; ".join(self.errors)
        )


def replace_cell(
    schedule: Schedule,
    date: str,
    employee_id: str,
    raw: Any,
    shift_templates: TemplateLookup = None,
) -> Schedule:
    """Return a copy of ``schedule`` with the cell replaced.

    The new value is normalized and validated first; on any violation
    ``CellValidationError`` is raised and nothing is applied. An empty value
    clears the cell.
    """
    cell = normalize(raw, shift_templates)
    if not cell:
        return remove_cell(schedule, date, employee_id)

    result = validate_cell(cell)
    if not result.valid:
        raise CellValidationError(date, employee_id, result.errors)

    assignments = copy.deepcopy(schedule.assignments)
    day = dict(assignments.get(date) or {})
    day[employee_id] = to_raw(cell)
    assignments[date] = day
    return replace(schedule, assignments=assignments)


def remove_cell(schedule: Schedule, date: str, employee_id: str) -> Schedule:
    """Drop a cell; the date entry goes too once it has no cells left."""
    assignments = copy.deepcopy(schedule.assignments)
    day = assignments.get(date)
    if day and employee_id in day:
        del day[employee_id]
        if not day:
            del assignments[date]
    return replace(schedule, assignments=assignments)


def is_schedule_completed(schedule: Schedule | None) -> bool:
    return schedule is not None and schedule.completed is True


def requires_confirmation(schedule: Schedule | None, action: str) -> bool:
    """Every mutating action on a completed week needs explicit confirmation."""
    if action not in MUTATING_ACTIONS:
        raise ValueError(f"Unknown action: {action!r}. Choose from {MUTATING_ACTIONS}")
    return is_schedule_completed(schedule)
