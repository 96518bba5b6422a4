"""Per-assignment impact on weekly statistics (days off and hours)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import Assignment, Franco, Licencia, MedioFranco, ShiftTimed
from .time_utils import calc_range_hours, range_duration


@dataclass(frozen=True)
class HoursConfig:
    rest_break_minutes: int = 30
    rest_break_min_hours: float = 6


@dataclass(frozen=True)
class AssignmentImpact:
    francos: float = 0.0
    work_hours: float = 0.0
    medio_franco_hours: float = 0.0
    licencia_hours: float = 0.0
    counts_as_work: bool = False
    counts_as_leave: bool = False

    def __add__(self, other: "AssignmentImpact") -> "AssignmentImpact":
        return AssignmentImpact(
            francos=self.francos + other.francos,
            work_hours=self.work_hours + other.work_hours,
            medio_franco_hours=self.medio_franco_hours + other.medio_franco_hours,
            licencia_hours=self.licencia_hours + other.licencia_hours,
            counts_as_work=self.counts_as_work or other.counts_as_work,
            counts_as_leave=self.counts_as_leave or other.counts_as_leave,
        )


def shift_work_hours(assignment: ShiftTimed, config: HoursConfig) -> float:
    """Worked hours of a shift.

    The rest break is only deducted from continuous shifts that reach the
    configured length; split shifts already include their pause.
    """
    segments = assignment.segments()
    total = sum(range_duration(s, e) for s, e in segments)
    if len(segments) == 1 and total / 60 >= config.rest_break_min_hours:
        total = max(0, total - config.rest_break_minutes)
    return total / 60


def assignment_impact(assignment: Assignment, config: HoursConfig | None = None) -> AssignmentImpact:
    """Impact of one assignment. Placeholders, notes and unknown types add nothing."""
    config = config or HoursConfig()

    if isinstance(assignment, Franco):
        return AssignmentImpact(francos=1.0)

    if isinstance(assignment, MedioFranco):
        hours = sum(calc_range_hours(s, e) for s, e in assignment.segments())
        return AssignmentImpact(francos=0.5, medio_franco_hours=hours, counts_as_work=hours > 0)

    if isinstance(assignment, ShiftTimed):
        hours = shift_work_hours(assignment, config)
        return AssignmentImpact(work_hours=hours, counts_as_work=hours > 0)

    if isinstance(assignment, Licencia):
        hours = sum(calc_range_hours(s, e) for s, e in assignment.segments())
        return AssignmentImpact(licencia_hours=hours, counts_as_leave=hours > 0)

    return AssignmentImpact()


def cell_impact(cell: Iterable[Assignment], config: HoursConfig | None = None) -> AssignmentImpact:
    total = AssignmentImpact()
    for assignment in cell:
        total = total + assignment_impact(assignment, config)
    return total
