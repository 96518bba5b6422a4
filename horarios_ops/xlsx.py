"""Render an audit report to an XLSX workbook."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .audit import FINDING_COLS

_SUMMARY_COLS = ["schedule_id", "week_start", "completed", "cells", "findings"]


def _get_openpyxl():
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
        return Workbook, Font, PatternFill
    except ImportError as exc:
        raise ImportError("openpyxl is required for XLSX export: pip install openpyxl") from exc


def _style_headers(worksheets):
    """Apply bold + blue fill to header row of each worksheet."""
    _, Font, PatternFill = _get_openpyxl()
    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    for ws in worksheets:
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
        ws.freeze_panes = "A2"


def render_audit_xlsx(report: dict[str, Any], path: Path) -> Path:
    """Write Findings, Schedules and Hours sheets. Returns the written path."""
    Workbook, _, _ = _get_openpyxl()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()

    ws_findings = wb.active
    ws_findings.title = "Findings"
    ws_findings.append(FINDING_COLS)
    for f in report.get("findings", []):
        ws_findings.append([f.get(c, "") for c in FINDING_COLS])

    ws_schedules = wb.create_sheet("Schedules")
    ws_schedules.append(_SUMMARY_COLS)
    for s in report.get("schedules", []):
        ws_schedules.append([
            s.get("schedule_id") or "",
            s.get("week_start", ""),
            "TRUE" if s.get("completed") else "FALSE",
            s.get("cells", 0),
            len(s.get("findings", [])),
        ])

    ws_hours = wb.create_sheet("Hours")
    ws_hours.append(["week_start", "employee_id", "work_hours"])
    for s in report.get("schedules", []):
        for employee_id, hours in s.get("work_hours", {}).items():
            ws_hours.append([s.get("week_start", ""), employee_id, hours])

    _style_headers([ws_findings, ws_schedules, ws_hours])
    wb.save(str(path))
    return path
