"""Boundary decoding and normalization of raw cell data.

A persisted cell is either a legacy list of bare shift ids or a list of
assignment records. :func:`decode_raw` turns it into :class:`LegacyIds` or
:class:`CurrentAssignments` once, so nothing downstream branches on element
type again.

Shift templates are only consulted here, when creating assignments. The
validators never receive them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any, Union

from .models import (
    Assignment,
    ShiftPlaceholder,
    ShiftTemplate,
    ShiftTimed,
    assignment_from_dict,
    is_assignment,
)

logger = logging.getLogger(__name__)

TemplateLookup = Union[Mapping[str, ShiftTemplate], Iterable[ShiftTemplate], None]


@dataclass(frozen=True)
class LegacyIds:
    ids: tuple[str, ...]


@dataclass(frozen=True)
class CurrentAssignments:
    records: tuple[Any, ...]


RawAssignments = Union[LegacyIds, CurrentAssignments]


def decode_raw(value: Any) -> RawAssignments:
    """Classify a raw cell value. ``None`` and ``[]`` decode to no records."""
    if isinstance(value, (LegacyIds, CurrentAssignments)):
        return value
    if not value:
        return CurrentAssignments(records=())
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"cell value must be a list, got {type(value).__name__}")

    if all(isinstance(v, str) for v in value):
        return LegacyIds(ids=tuple(value))
    if any(isinstance(v, str) for v in value):
        raise TypeError("cell mixes legacy shift ids with assignment records")
    for v in value:
        if not isinstance(v, dict) and not is_assignment(v):
            raise TypeError(f"unsupported assignment record: {v!r}")
    return CurrentAssignments(records=tuple(value))


def template_index(shift_templates: TemplateLookup) -> dict[str, ShiftTemplate]:
    """Accept a mapping, an iterable of templates/dicts, or None."""
    if not shift_templates:
        return {}
    if isinstance(shift_templates, Mapping):
        return {
            str(k): v if isinstance(v, ShiftTemplate) else ShiftTemplate.from_dict({"id": k, **v})
            for k, v in shift_templates.items()
        }
    out: dict[str, ShiftTemplate] = {}
    for tpl in shift_templates:
        if not isinstance(tpl, ShiftTemplate):
            tpl = ShiftTemplate.from_dict(tpl)
        out[tpl.id] = tpl
    return out


def assignment_from_template(template: ShiftTemplate) -> Assignment:
    """Create a new shift assignment copying the template's segments."""
    if template.start_time is None or template.end_time is None:
        return ShiftPlaceholder(shift_id=template.id)
    second = template.is_split
    return ShiftTimed(
        shift_id=template.id,
        start_time=template.start_time,
        end_time=template.end_time,
        start_time2=template.start_time2 if second else None,
        end_time2=template.end_time2 if second else None,
    )


def normalize(raw: Any, shift_templates: TemplateLookup = None) -> list[Assignment]:
    """Return the typed assignments of one cell.

    Legacy ids copy their times from the matching template; ids without a
    template stay placeholders. Current records keep their explicit values,
    only a missing ``type`` is defaulted to ``shift``.
    """
    decoded = decode_raw(raw)

    if isinstance(decoded, LegacyIds):
        templates = template_index(shift_templates)
        out: list[Assignment] = []
        for shift_id in decoded.ids:
            template = templates.get(shift_id)
            if template is None:
                logger.debug("No template for legacy shift id %s, keeping placeholder", shift_id)
                out.append(ShiftPlaceholder(shift_id=shift_id))
            else:
                out.append(replace_shift_id(assignment_from_template(template), shift_id))
        return out

    return [r if is_assignment(r) else assignment_from_dict(r) for r in decoded.records]


def replace_shift_id(assignment: Assignment, shift_id: str) -> Assignment:
    if isinstance(assignment, (ShiftPlaceholder, ShiftTimed)):
        return replace(assignment, shift_id=shift_id)
    return assignment


def to_raw(assignments: Iterable[Assignment]) -> list[dict[str, Any]]:
    """Encode typed assignments back to persisted record dicts."""
    return [a.to_dict() for a in assignments]


def hydrate_from_template(assignment: Assignment, template: ShiftTemplate | None) -> Assignment:
    """Fill a placeholder's times from its template.

    Only placeholders (and shift records with no time at all) are filled;
    any explicit time on the record wins, so a hydrated record never loses
    data it already had.
    """
    if template is None:
        return assignment
    if isinstance(assignment, ShiftPlaceholder):
        return replace_shift_id(assignment_from_template(template), assignment.shift_id)
    if isinstance(assignment, ShiftTimed) and not assignment.segments() and not (
        assignment.partial_first_segment or assignment.partial_second_segment
    ):
        filled = assignment_from_template(template)
        if isinstance(filled, ShiftTimed):
            return replace(filled, shift_id=assignment.shift_id or template.id)
    return assignment


def display_times(
    assignment: Assignment, shift_templates: TemplateLookup = None
) -> list[tuple[str, str]]:
    """Segments to render for an assignment.

    Placeholders fall back to their template for display only; the stored
    record is not modified.
    """
    if isinstance(assignment, ShiftPlaceholder):
        template = template_index(shift_templates).get(assignment.shift_id)
        if template is None:
            return []
        hydrated = assignment_from_template(template)
        return hydrated.segments() if isinstance(hydrated, ShiftTimed) else []
    segments = getattr(assignment, "segments", None)
    return segments() if callable(segments) else []
