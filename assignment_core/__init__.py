"""Shift-assignment model, validation and suggestion engine for weekly schedules."""

from .completeness import (
    IncompleteAssignment,
    cell_is_editable,
    detect_incomplete_assignments,
    incompleteness_reason,
    is_incomplete,
)
from .hours import AssignmentImpact, HoursConfig, assignment_impact, cell_impact
from .models import (
    Assignment,
    Franco,
    Licencia,
    LicenciaType,
    MedioFranco,
    Nota,
    Schedule,
    ShiftPlaceholder,
    ShiftTemplate,
    ShiftTimed,
    UnknownAssignment,
    assignment_from_dict,
)
from .normalize import (
    CurrentAssignments,
    LegacyIds,
    decode_raw,
    display_times,
    hydrate_from_template,
    normalize,
    to_raw,
)
from .patterns import (
    Pattern,
    Suggestion,
    analyze_patterns,
    assignment_signature,
    suggest,
    suggest_week,
    weekday_index,
)
from .schedule import CellValidationError, remove_cell, replace_cell, requires_confirmation
from .time_utils import ParseError, intervals_overlap, range_duration, to_minutes
from .validators import (
    ValidationResult,
    validate_assignment,
    validate_before_persist,
    validate_cell,
    validate_no_overlaps,
    validate_split_shift,
)

__all__ = [
    "Assignment",
    "AssignmentImpact",
    "CellValidationError",
    "CurrentAssignments",
    "Franco",
    "HoursConfig",
    "IncompleteAssignment",
    "LegacyIds",
    "Licencia",
    "LicenciaType",
    "MedioFranco",
    "Nota",
    "ParseError",
    "Pattern",
    "Schedule",
    "ShiftPlaceholder",
    "ShiftTemplate",
    "ShiftTimed",
    "Suggestion",
    "UnknownAssignment",
    "ValidationResult",
    "analyze_patterns",
    "assignment_from_dict",
    "assignment_impact",
    "assignment_signature",
    "cell_impact",
    "cell_is_editable",
    "decode_raw",
    "detect_incomplete_assignments",
    "display_times",
    "hydrate_from_template",
    "incompleteness_reason",
    "intervals_overlap",
    "is_incomplete",
    "normalize",
    "range_duration",
    "remove_cell",
    "replace_cell",
    "requires_confirmation",
    "suggest",
    "suggest_week",
    "to_minutes",
    "to_raw",
    "validate_assignment",
    "validate_before_persist",
    "validate_cell",
    "validate_no_overlaps",
    "validate_split_shift",
    "weekday_index",
]
