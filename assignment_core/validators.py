"""Correctness and overlap validation for assignments and whole cells.

Every validator returns the full list of violated rules instead of stopping
at the first one, so callers can show all problems at once. Nothing here
raises for bad data; only malformed time strings raise ``ParseError``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .completeness import incompleteness_reason
from .models import (
    Assignment,
    Franco,
    Licencia,
    LicenciaType,
    MedioFranco,
    Nota,
    ShiftPlaceholder,
    ShiftTimed,
    UnknownAssignment,
    is_assignment,
)
from .normalize import TemplateLookup, normalize
from .time_utils import intervals_overlap, is_valid_range, normalize_range, to_minutes


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors), warnings=list(warnings or []))


def describe_assignment(assignment: Assignment) -> str:
    """Short label used to prefix error messages."""
    if isinstance(assignment, (ShiftPlaceholder, ShiftTimed)) and assignment.shift_id:
        return f"turno {assignment.shift_id}"
    if isinstance(assignment, MedioFranco):
        return "medio franco"
    if isinstance(assignment, Licencia):
        return f"licencia {assignment.licencia_type or ''}".rstrip()
    if is_assignment(assignment) and assignment.type:
        return assignment.type
    return "assignment desconocido"


def segments_ordered(start1: str, end1: str, start2: str, end2: str) -> bool:
    """True when the first segment ends no later than the second starts.

    Both points are measured from ``start1`` so a split shift running past
    midnight compares correctly. Back-to-back segments are allowed.
    """
    s1 = to_minutes(start1)
    _, e1 = normalize_range(s1, to_minutes(end1))
    s2 = to_minutes(start2)
    if s2 < s1:
        s2 += 24 * 60
    return e1 <= s2


# ---- Per-assignment correctness --------------------------------------------

def _validate_shift(assignment: ShiftTimed) -> list[str]:
    errors: list[str] = []
    if not assignment.shift_id:
        errors.append("Un turno debe tener shiftId")

    if not assignment.has_first_segment:
        errors.append("Un turno simple debe tener startTime y endTime")
    elif not is_valid_range(assignment.start_time, assignment.end_time):
        errors.append("startTime debe ser anterior a endTime en la primera franja")

    if assignment.start_time2 is None and assignment.end_time2 is None:
        return errors

    if not assignment.has_second_segment:
        errors.append("Un turno cortado debe tener startTime2 y endTime2 completos")
        return errors

    if not is_valid_range(assignment.start_time2, assignment.end_time2):
        errors.append("startTime2 debe ser anterior a endTime2 en la segunda franja")
        return errors

    if not assignment.has_first_segment or not is_valid_range(assignment.start_time, assignment.end_time):
        return errors
    if not segments_ordered(
        assignment.start_time, assignment.end_time, assignment.start_time2, assignment.end_time2
    ):
        errors.append("Las franjas de un turno cortado no pueden solaparse")
    return errors


def _validate_timed_range(label: str, start: str | None, end: str | None) -> list[str]:
    if start is None or end is None:
        return [f"{label} debe tener startTime y endTime"]
    if not is_valid_range(start, end):
        return ["startTime debe ser anterior a endTime"]
    return []


def validate_assignment(assignment: Assignment) -> ValidationResult:
    """Check the internal well-formedness of one assignment.

    Placeholders are valid: they carry no times to check yet.
    """
    errors: list[str] = []

    if isinstance(assignment, ShiftPlaceholder):
        if not assignment.shift_id:
            errors.append("Un turno debe tener shiftId")
    elif isinstance(assignment, ShiftTimed):
        errors.extend(_validate_shift(assignment))
    elif isinstance(assignment, MedioFranco):
        errors.extend(_validate_timed_range("Un medio franco", assignment.start_time, assignment.end_time))
        if assignment.shift_id:
            errors.append("Un medio franco no debe tener shiftId")
    elif isinstance(assignment, Licencia):
        errors.extend(_validate_timed_range("Una licencia", assignment.start_time, assignment.end_time))
        if not assignment.licencia_type:
            errors.append("Una licencia debe tener licenciaType definido")
        elif not LicenciaType.is_known(assignment.licencia_type):
            errors.append(f"licenciaType desconocido: {assignment.licencia_type}")
        if assignment.shift_id:
            errors.append("Una licencia no debe tener shiftId")
    elif isinstance(assignment, Franco):
        pass
    elif isinstance(assignment, Nota):
        if not assignment.texto:
            errors.append("Una nota debe tener texto")
    elif isinstance(assignment, UnknownAssignment):
        errors.append(f"Tipo de assignment desconocido: {assignment.type}")
    else:
        errors.append("El assignment debe tener un tipo definido")

    return ValidationResult.from_errors(errors)


def validate_split_shift(assignment: Assignment) -> ValidationResult:
    """Confirm a shift is a genuine split shift: two ordered segments."""
    if not isinstance(assignment, (ShiftTimed, ShiftPlaceholder)):
        return ValidationResult.from_errors(["Solo los turnos pueden ser cortados"])
    if isinstance(assignment, ShiftPlaceholder):
        return ValidationResult.from_errors([
            "Un turno cortado debe tener primera franja completa",
            "Un turno cortado debe tener segunda franja completa",
        ])

    errors: list[str] = []
    if not assignment.has_first_segment:
        errors.append("Un turno cortado debe tener primera franja completa")
    if not assignment.has_second_segment:
        errors.append("Un turno cortado debe tener segunda franja completa")

    if assignment.has_first_segment and assignment.has_second_segment:
        if not segments_ordered(
            assignment.start_time, assignment.end_time, assignment.start_time2, assignment.end_time2
        ):
            errors.append("Las franjas de un turno cortado no pueden solaparse")
    return ValidationResult.from_errors(errors)


# ---- Cell-level overlap detection ------------------------------------------

def _coexist(a: Assignment, b: Assignment) -> bool:
    """Pairs allowed to share time: leave over a worked or half-off day."""
    kinds = {type(a), type(b)}
    if Licencia not in kinds or len(kinds) == 1:
        return False
    other = (kinds - {Licencia}).pop()
    return other in (ShiftTimed, MedioFranco)


def _intervals(assignment: Assignment) -> list[tuple[str, str]]:
    if isinstance(assignment, Franco):
        return []
    if isinstance(assignment, (ShiftTimed, MedioFranco, Licencia)):
        return [(s, e) for s, e in assignment.segments() if is_valid_range(s, e)]
    return []


def _segment_label(assignment: Assignment, index: int) -> str:
    label = describe_assignment(assignment)
    if index == 1:
        return f"segunda franja de {label}"
    return label


def validate_no_overlaps(assignments: Iterable[Assignment]) -> ValidationResult:
    """Check that the records of one cell do not overlap in time.

    ``franco`` coexists with anything and ``licencia`` coexists with
    ``shift``/``medio_franco``. Sibling segments of one split shift are not
    compared here; their ordering is a per-assignment rule.
    Zero-duration segments are left to :func:`validate_assignment`.
    """
    cell = list(assignments)
    errors: list[str] = []

    for i in range(len(cell)):
        for j in range(i + 1, len(cell)):
            a1, a2 = cell[i], cell[j]
            if _coexist(a1, a2):
                continue
            for x, (s1, e1) in enumerate(_intervals(a1)):
                for y, (s2, e2) in enumerate(_intervals(a2)):
                    if intervals_overlap(s1, e1, s2, e2):
                        errors.append(
                            f"Solapamiento detectado entre {_segment_label(a1, x)} "
                            f"y {_segment_label(a2, y)}"
                        )

    return ValidationResult.from_errors(errors)


def validate_cell(assignments: Iterable[Assignment]) -> ValidationResult:
    """Validate a whole cell: completeness, correctness, then overlaps.

    A cell is written only when the returned result is valid.
    """
    cell = list(assignments)
    errors: list[str] = []
    warnings: list[str] = []

    for assignment in cell:
        label = describe_assignment(assignment)
        reason = incompleteness_reason(assignment)
        if reason:
            errors.append(f"{label}: {reason}")
        result = validate_assignment(assignment)
        for err in result.errors:
            entry = f"{label}: {err}"
            if entry not in errors:
                errors.append(entry)
        warnings.extend(f"{label}: {w}" for w in result.warnings)

    overlap = validate_no_overlaps(cell)
    errors.extend(overlap.errors)
    warnings.extend(overlap.warnings)

    return ValidationResult.from_errors(errors, warnings)


def validate_before_persist(raw: Any, shift_templates: TemplateLookup = None) -> ValidationResult:
    """Normalize raw cell data and validate it, as done before every write."""
    return validate_cell(normalize(raw, shift_templates))
