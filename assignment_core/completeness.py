"""Completeness checks: does a record carry the minimum data of its variant?

"Incomplete" is not "invalid". Incomplete means required data is missing
(no ``endTime``, no ``licenciaType``); invalid means the data is present but
wrong (zero duration, overlapping segments), which is the business of
:mod:`assignment_core.validators`.

The predicate gates UI edit actions, so a placeholder (a shift holding only
its template reference) must never be reported as incomplete.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import (
    Assignment,
    Franco,
    Licencia,
    MedioFranco,
    Nota,
    Schedule,
    ShiftPlaceholder,
    ShiftTimed,
    UnknownAssignment,
)
from .normalize import normalize


@dataclass(frozen=True)
class IncompleteAssignment:
    date: str
    employee_id: str
    assignment: Assignment
    reason: str


def incompleteness_reason(assignment: Assignment) -> str:
    """Human-readable reason a record is incomplete, or ``""`` if complete."""
    if isinstance(assignment, ShiftPlaceholder):
        if not assignment.shift_id:
            return "Falta shiftId"
        return ""

    if isinstance(assignment, ShiftTimed):
        if not assignment.shift_id:
            return "Falta shiftId"
        if assignment.partial_first_segment:
            return "Faltan startTime o endTime"
        if assignment.partial_second_segment:
            return "Turno cortado incompleto: falta startTime2 o endTime2"
        if not assignment.segments():
            return "Faltan startTime o endTime"
        return ""

    if isinstance(assignment, MedioFranco):
        if assignment.start_time is None or assignment.end_time is None:
            return "Faltan startTime o endTime"
        if assignment.shift_id:
            return "Medio franco no debe tener shiftId"
        return ""

    if isinstance(assignment, Licencia):
        if assignment.start_time is None or assignment.end_time is None:
            return "Faltan startTime o endTime"
        if not assignment.licencia_type:
            return "Falta licenciaType"
        if assignment.shift_id:
            return "Licencia no debe tener shiftId"
        return ""

    if isinstance(assignment, Franco):
        return ""

    if isinstance(assignment, Nota):
        return "" if assignment.texto else "Falta texto"

    if isinstance(assignment, UnknownAssignment):
        return f"Tipo desconocido: {assignment.type}"

    return "Falta el tipo de assignment"


def is_incomplete(assignment: Assignment) -> bool:
    return incompleteness_reason(assignment) != ""


def cell_is_editable(cell: Iterable[Assignment]) -> bool:
    """False when any record of the cell is incomplete."""
    return not any(is_incomplete(a) for a in cell)


def detect_incomplete_assignments(schedule: Schedule) -> list[IncompleteAssignment]:
    """List every incomplete record of a schedule, in date order.

    Cells are normalized without templates, so legacy ids surface as
    placeholders and are never reported.
    """
    found: list[IncompleteAssignment] = []
    for date, employee_id, raw in schedule.iter_cells():
        for assignment in normalize(raw):
            reason = incompleteness_reason(assignment)
            if reason:
                found.append(IncompleteAssignment(date, employee_id, assignment, reason))
    return found
