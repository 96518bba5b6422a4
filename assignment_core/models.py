"""Assignment variants, shift templates and the persisted record shape.

An assignment is one of the frozen dataclasses below; ``Assignment`` is their
union. Persisted records are camelCase dicts (``shiftId``, ``startTime``,
``startTime2``, ``licenciaType``, ``texto``) and are decoded at the boundary by
:func:`assignment_from_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Union

if TYPE_CHECKING:
    from .normalize import TemplateLookup

SHIFT = "shift"
FRANCO = "franco"
MEDIO_FRANCO = "medio_franco"
LICENCIA = "licencia"
NOTA = "nota"

ASSIGNMENT_TYPES = (SHIFT, FRANCO, MEDIO_FRANCO, LICENCIA, NOTA)

TIME_FIELDS = ("startTime", "endTime", "startTime2", "endTime2")


class LicenciaType(str, Enum):
    EMBARAZO = "embarazo"
    ENFERMEDAD = "enfermedad"
    VACACIONES = "vacaciones"
    ESTUDIO = "estudio"
    MATERNIDAD = "maternidad"
    PATERNIDAD = "paternidad"
    OTRA = "otra"

    @classmethod
    def is_known(cls, value: str | None) -> bool:
        return value in cls._value2member_map_


def _clean(value: Any) -> str | None:
    """Empty strings count as absent, matching how the UI clears inputs."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True)
class ShiftPlaceholder:
    """A shift reference with no times yet; rendered from its template."""

    type: ClassVar[str] = SHIFT
    shift_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "shiftId": self.shift_id}


@dataclass(frozen=True)
class ShiftTimed:
    """A worked shift carrying its own times (one or two segments).

    Fields stay optional so half-filled records coming from storage can be
    represented and reported instead of rejected at decode time.
    """

    type: ClassVar[str] = SHIFT
    shift_id: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    start_time2: str | None = None
    end_time2: str | None = None

    @property
    def has_first_segment(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def has_second_segment(self) -> bool:
        return self.start_time2 is not None and self.end_time2 is not None

    @property
    def partial_first_segment(self) -> bool:
        return (self.start_time is None) != (self.end_time is None)

    @property
    def partial_second_segment(self) -> bool:
        return (self.start_time2 is None) != (self.end_time2 is None)

    def segments(self) -> list[tuple[str, str]]:
        out: list[tuple[str, str]] = []
        if self.has_first_segment:
            out.append((self.start_time, self.end_time))
        if self.has_second_segment:
            out.append((self.start_time2, self.end_time2))
        return out

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "type": self.type,
            "shiftId": self.shift_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "startTime2": self.start_time2,
            "endTime2": self.end_time2,
        })


@dataclass(frozen=True)
class Franco:
    type: ClassVar[str] = FRANCO

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class MedioFranco:
    type: ClassVar[str] = MEDIO_FRANCO
    start_time: str | None = None
    end_time: str | None = None
    # forbidden; kept only so validators can report it
    shift_id: str | None = None

    def segments(self) -> list[tuple[str, str]]:
        if self.start_time is None or self.end_time is None:
            return []
        return [(self.start_time, self.end_time)]

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "type": self.type,
            "shiftId": self.shift_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
        })


@dataclass(frozen=True)
class Licencia:
    type: ClassVar[str] = LICENCIA
    start_time: str | None = None
    end_time: str | None = None
    licencia_type: str | None = None
    # forbidden; kept only so validators can report it
    shift_id: str | None = None

    def segments(self) -> list[tuple[str, str]]:
        if self.start_time is None or self.end_time is None:
            return []
        return [(self.start_time, self.end_time)]

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "type": self.type,
            "shiftId": self.shift_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "licenciaType": self.licencia_type,
        })


@dataclass(frozen=True)
class Nota:
    type: ClassVar[str] = NOTA
    texto: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"type": self.type, "texto": self.texto})


@dataclass(frozen=True)
class UnknownAssignment:
    """A record whose ``type`` this engine does not know. Never dropped."""

    type: str
    fields: tuple[tuple[str, Any], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {**dict(self.fields), "type": self.type}


Assignment = Union[
    ShiftPlaceholder,
    ShiftTimed,
    Franco,
    MedioFranco,
    Licencia,
    Nota,
    UnknownAssignment,
]

ASSIGNMENT_CLASSES = (
    ShiftPlaceholder,
    ShiftTimed,
    Franco,
    MedioFranco,
    Licencia,
    Nota,
    UnknownAssignment,
)


def is_assignment(value: Any) -> bool:
    return isinstance(value, ASSIGNMENT_CLASSES)


def is_placeholder(assignment: Assignment) -> bool:
    return isinstance(assignment, ShiftPlaceholder)


def assignment_from_dict(data: dict[str, Any]) -> Assignment:
    """Decode one persisted record. A missing ``type`` defaults to ``shift``."""
    typ = _clean(data.get("type")) or SHIFT

    if typ == SHIFT:
        shift_id = _clean(data.get("shiftId"))
        times = {k: _clean(data.get(k)) for k in TIME_FIELDS}
        if shift_id is not None and all(v is None for v in times.values()):
            return ShiftPlaceholder(shift_id=shift_id)
        return ShiftTimed(
            shift_id=shift_id,
            start_time=times["startTime"],
            end_time=times["endTime"],
            start_time2=times["startTime2"],
            end_time2=times["endTime2"],
        )
    if typ == FRANCO:
        return Franco()
    if typ == MEDIO_FRANCO:
        return MedioFranco(
            start_time=_clean(data.get("startTime")),
            end_time=_clean(data.get("endTime")),
            shift_id=_clean(data.get("shiftId")),
        )
    if typ == LICENCIA:
        return Licencia(
            start_time=_clean(data.get("startTime")),
            end_time=_clean(data.get("endTime")),
            licencia_type=_clean(data.get("licenciaType")),
            shift_id=_clean(data.get("shiftId")),
        )
    if typ == NOTA:
        return Nota(texto=_clean(data.get("texto")))

    extra = tuple(sorted((k, v) for k, v in data.items() if k != "type"))
    return UnknownAssignment(type=typ, fields=extra)


@dataclass(frozen=True)
class ShiftTemplate:
    """A named shift definition (``Turno``) used to fill new assignments."""

    id: str
    name: str = ""
    start_time: str | None = None
    end_time: str | None = None
    start_time2: str | None = None
    end_time2: str | None = None
    color: str | None = None

    @property
    def is_split(self) -> bool:
        return self.start_time2 is not None and self.end_time2 is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShiftTemplate":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data.get("nombre") or ""),
            start_time=_clean(data.get("startTime")),
            end_time=_clean(data.get("endTime")),
            start_time2=_clean(data.get("startTime2")),
            end_time2=_clean(data.get("endTime2")),
            color=_clean(data.get("color")),
        )


@dataclass(frozen=True)
class Schedule:
    """A week of assignments (``Horario``): ``date -> employee_id -> raw cell``.

    Cells keep the persisted shape (legacy id lists or record dicts); use
    :meth:`cell` to read a normalized cell.
    """

    week_start: str
    assignments: dict[str, dict[str, Any]] = field(default_factory=dict)
    completed: bool = False
    id: str | None = None
    name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schedule":
        week_start = data.get("weekStart") or data.get("semanaInicio") or ""
        completed = data.get("completada")
        if completed is None:
            completed = data.get("completed", False)
        return cls(
            week_start=str(week_start),
            assignments=dict(data.get("assignments") or {}),
            completed=completed is True,
            id=data.get("id"),
            name=data.get("nombre") or data.get("name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            "id": self.id,
            "nombre": self.name,
            "weekStart": self.week_start,
            "completada": self.completed,
            "assignments": self.assignments,
        })

    def raw_cell(self, date: str, employee_id: str) -> Any:
        return (self.assignments.get(date) or {}).get(employee_id)

    def cell(
        self, date: str, employee_id: str, shift_templates: TemplateLookup = None
    ) -> list[Assignment]:
        from .normalize import normalize

        return normalize(self.raw_cell(date, employee_id), shift_templates)

    def has_assignments_on(self, date: str, employee_id: str) -> bool:
        value = self.raw_cell(date, employee_id)
        return isinstance(value, list) and len(value) > 0

    def iter_cells(self):
        """Yield ``(date, employee_id, raw_cell)`` in date order."""
        for date in sorted(self.assignments):
            for employee_id, value in (self.assignments[date] or {}).items():
                yield date, employee_id, value
