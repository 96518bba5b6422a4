"""Offline audit, migration and suggestion passes over a schedule export.

All functions are pure: export in, plain dicts (and a new export) out.
Cells that cannot be decoded are reported, never rewritten.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Any

from assignment_core.completeness import incompleteness_reason
from assignment_core.hours import HoursConfig, cell_impact
from assignment_core.models import Schedule
from assignment_core.normalize import LegacyIds, decode_raw, hydrate_from_template, normalize, to_raw
from assignment_core.patterns import suggest_week
from assignment_core.time_utils import ParseError
from assignment_core.validators import describe_assignment, validate_cell

from .config import PatternConfig
from .storage import ScheduleExport

logger = logging.getLogger(__name__)

FINDING_COLS = [
    "schedule_id",
    "schedule_name",
    "week_start",
    "date",
    "employee_id",
    "kind",
    "detail",
]

WEEKDAY_LABELS = ["domingo", "lunes", "martes", "miercoles", "jueves", "viernes", "sabado"]


def _finding(schedule: Schedule, date: str, employee_id: str, kind: str, detail: str) -> dict[str, Any]:
    return {
        "schedule_id": schedule.id or "",
        "schedule_name": schedule.name or "",
        "week_start": schedule.week_start,
        "date": date,
        "employee_id": employee_id,
        "kind": kind,
        "detail": detail,
    }


def audit_schedule(schedule: Schedule, hours: HoursConfig | None = None) -> dict[str, Any]:
    """Incomplete records and invalid cells of one schedule."""
    findings: list[dict[str, Any]] = []
    work_hours: Counter[str] = Counter()
    cells = 0

    for date, employee_id, raw in schedule.iter_cells():
        try:
            cell = normalize(raw)
            result = validate_cell(cell)
        except (TypeError, ParseError) as exc:
            logger.warning("Unreadable cell %s / %s in %s: %s", date, employee_id, schedule.week_start, exc)
            findings.append(_finding(schedule, date, employee_id, "unreadable", str(exc)))
            continue

        cells += 1
        for assignment in cell:
            reason = incompleteness_reason(assignment)
            if reason:
                findings.append(_finding(
                    schedule, date, employee_id, "incomplete",
                    f"{describe_assignment(assignment)}: {reason}",
                ))
        if not result.valid:
            findings.append(_finding(
                schedule, date, employee_id, "invalid", " | ".join(result.errors),
            ))
        else:
            work_hours[employee_id] += cell_impact(cell, hours).work_hours

    return {
        "schedule_id": schedule.id,
        "week_start": schedule.week_start,
        "completed": schedule.completed,
        "cells": cells,
        "findings": findings,
        "work_hours": {k: round(v, 2) for k, v in sorted(work_hours.items())},
    }


def audit_export(export: ScheduleExport, hours: HoursConfig | None = None) -> dict[str, Any]:
    schedules = [audit_schedule(s, hours) for s in export.schedules]
    findings = [f for s in schedules for f in s["findings"]]
    kinds = Counter(f["kind"] for f in findings)
    logger.info("Audited %d schedules: %d findings", len(schedules), len(findings))
    return {
        "schedules": schedules,
        "findings": findings,
        "counts": {
            "schedules": len(schedules),
            "cells": sum(s["cells"] for s in schedules),
            **{k: kinds.get(k, 0) for k in ("incomplete", "invalid", "unreadable")},
        },
    }


def _migrate_cell(raw: Any, export: ScheduleExport) -> tuple[list[dict[str, Any]] | None, str]:
    """Return ``(new_raw, status)``; ``new_raw`` is None when the cell stays as is."""
    decoded = decode_raw(raw)
    if isinstance(decoded, LegacyIds):
        cell = normalize(decoded, export.templates)
        new_raw = to_raw(cell)
    else:
        current = normalize(decoded)
        cell = [
            hydrate_from_template(a, export.templates.get(getattr(a, "shift_id", None) or ""))
            for a in current
        ]
        if cell == current:
            return None, "unchanged"
        # keep unknown keys of records that were not hydrated
        new_raw = [
            {**record, **after.to_dict()} if after != before else record
            for record, before, after in zip(decoded.records, current, cell)
        ]

    result = validate_cell(cell)
    if not result.valid:
        return None, " | ".join(result.errors)
    return new_raw, "normalized"


def migrate_export(export: ScheduleExport) -> tuple[ScheduleExport, dict[str, Any]]:
    """Convert legacy cells and hydrate placeholders from their templates.

    A cell is rewritten only when its new value passes ``validate_cell``;
    otherwise it is left untouched and listed under ``errors``.
    """
    summary: dict[str, Any] = {"normalized": 0, "unchanged": 0, "skipped": 0, "errors": []}
    migrated: list[Schedule] = []

    for schedule in export.schedules:
        assignments = {date: dict(day or {}) for date, day in schedule.assignments.items()}
        for date, employee_id, raw in schedule.iter_cells():
            try:
                new_raw, status = _migrate_cell(raw, export)
            except (TypeError, ParseError) as exc:
                status = str(exc)
                new_raw = None

            if new_raw is not None:
                assignments[date][employee_id] = new_raw
                summary["normalized"] += 1
            elif status == "unchanged":
                summary["unchanged"] += 1
            else:
                summary["skipped"] += 1
                summary["errors"].append(f"{schedule.week_start} {date} | {employee_id}: {status}")
                logger.warning("Skipping cell %s / %s: %s", date, employee_id, status)
        migrated.append(replace(schedule, assignments=assignments))

    logger.info(
        "Migration: %d normalized, %d unchanged, %d skipped",
        summary["normalized"], summary["unchanged"], summary["skipped"],
    )
    return ScheduleExport(templates=export.templates, schedules=migrated), summary


def weekly_suggestions(
    export: ScheduleExport, employee_id: str, patterns: PatternConfig
) -> list[dict[str, Any]]:
    suggestions = suggest_week(
        employee_id,
        export.schedules,
        window_weeks=patterns.window_weeks,
        min_consecutive_weeks=patterns.min_consecutive_weeks,
        shift_templates=export.templates,
    )
    return [
        {
            "employee_id": s.employee_id,
            "day_of_week": s.day_of_week,
            "weekday": WEEKDAY_LABELS[s.day_of_week],
            "assignments": to_raw(s.assignments),
            "confidence": round(s.confidence, 2),
            "weeks_matched": s.weeks_matched,
        }
        for _, s in sorted(suggestions.items())
    ]
