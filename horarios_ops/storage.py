"""JSON export files and report artifacts on disk.

An export holds the shift templates and the week schedules of one company::

    {"shifts": [{"id": ..., "startTime": ..., ...}], "schedules": [{...}]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from assignment_core.models import Schedule, ShiftTemplate

UTC = timezone.utc


@dataclass(frozen=True)
class ScheduleExport:
    templates: dict[str, ShiftTemplate]
    schedules: list[Schedule]


def _json_dump(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def _json_load(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def load_export(path: str | Path) -> ScheduleExport:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"export file not found: {path}")
    payload = _json_load(path)
    if not isinstance(payload, dict):
        raise ValueError(f"export must be a JSON object: {path}")

    templates: dict[str, ShiftTemplate] = {}
    for row in payload.get("shifts", []) or []:
        tpl = ShiftTemplate.from_dict(row)
        templates[tpl.id] = tpl

    schedules = [Schedule.from_dict(row) for row in payload.get("schedules", []) or []]
    return ScheduleExport(templates=templates, schedules=schedules)


def _template_dict(tpl: ShiftTemplate) -> dict[str, Any]:
    row = {
        "id": tpl.id,
        "name": tpl.name,
        "startTime": tpl.start_time,
        "endTime": tpl.end_time,
        "startTime2": tpl.start_time2,
        "endTime2": tpl.end_time2,
        "color": tpl.color,
    }
    return {k: v for k, v in row.items() if v is not None}


def save_export(path: str | Path, export: ScheduleExport) -> Path:
    path = Path(path)
    _json_dump(path, {
        "shifts": [_template_dict(t) for t in export.templates.values()],
        "schedules": [s.to_dict() for s in export.schedules],
    })
    return path


def report_root(artifact_root: Path) -> Path:
    path = artifact_root / "reports"
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_report(artifact_root: Path, report_type: str, payload: dict[str, Any]) -> Path:
    """Write a JSON report under ``reports/<type>/`` and point ``latest.json`` at it."""
    root = report_root(artifact_root) / report_type
    generated_at = now_utc_iso()
    name = generated_at.replace(":", "").replace("-", "")
    target = root / f"{name}.json"
    _json_dump(target, {**payload, "generated_at": generated_at})
    _json_dump(root / "latest.json", {
        "report_type": report_type,
        "generated_at": generated_at,
        "path": str(target.resolve()),
    })
    return target
