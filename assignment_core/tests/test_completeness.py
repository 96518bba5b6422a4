"""Tests for the completeness predicate used to gate edit actions."""

import pytest

from assignment_core.completeness import (
    cell_is_editable,
    detect_incomplete_assignments,
    incompleteness_reason,
    is_incomplete,
)
from assignment_core.models import Schedule, ShiftPlaceholder, assignment_from_dict


def _a(**data):
    return assignment_from_dict(data)


class TestShift:
    def test_placeholder_is_complete(self):
        assert is_incomplete(ShiftPlaceholder("s1")) is False
        assert incompleteness_reason(ShiftPlaceholder("s1")) == ""

    def test_missing_end_time(self):
        a = _a(type="shift", shiftId="s1", startTime="08:00")
        assert is_incomplete(a) is True
        assert incompleteness_reason(a) == "Faltan startTime o endTime"

    def test_missing_start_time(self):
        assert is_incomplete(_a(type="shift", shiftId="s1", endTime="12:00")) is True

    def test_missing_shift_id(self):
        a = _a(type="shift", startTime="08:00", endTime="12:00")
        assert is_incomplete(a) is True
        assert incompleteness_reason(a) == "Falta shiftId"

    def test_half_defined_second_segment(self):
        a = _a(type="shift", shiftId="s1", startTime="08:00", endTime="12:00", startTime2="14:00")
        assert is_incomplete(a) is True
        assert "startTime2" in incompleteness_reason(a)

    def test_single_segment_complete(self):
        assert is_incomplete(_a(type="shift", shiftId="s1", startTime="08:00", endTime="12:00")) is False

    def test_split_shift_complete(self):
        a = _a(
            type="shift", shiftId="s1",
            startTime="08:00", endTime="12:00", startTime2="14:00", endTime2="18:00",
        )
        assert is_incomplete(a) is False

    def test_only_second_segment_complete(self):
        a = _a(type="shift", shiftId="s1", startTime2="14:00", endTime2="18:00")
        assert is_incomplete(a) is False

    def test_orphan_shift_id_with_own_times(self):
        # the template may have been deleted; the record is self-sufficient
        a = _a(type="shift", shiftId="turno-eliminado", startTime="08:00", endTime="12:00")
        assert is_incomplete(a) is False


class TestOtherVariants:
    def test_franco_always_complete(self):
        assert is_incomplete(_a(type="franco")) is False

    def test_medio_franco(self):
        assert is_incomplete(_a(type="medio_franco", startTime="08:00", endTime="12:00")) is False
        assert is_incomplete(_a(type="medio_franco", startTime="08:00")) is True

    def test_medio_franco_with_shift_id(self):
        a = _a(type="medio_franco", shiftId="s1", startTime="08:00", endTime="12:00")
        assert is_incomplete(a) is True
        assert incompleteness_reason(a) == "Medio franco no debe tener shiftId"

    def test_licencia_missing_type(self):
        a = _a(type="licencia", startTime="10:00", endTime="11:00")
        assert is_incomplete(a) is True
        assert incompleteness_reason(a) == "Falta licenciaType"

    def test_licencia_complete(self):
        a = _a(type="licencia", licenciaType="embarazo", startTime="10:00", endTime="11:00")
        assert is_incomplete(a) is False

    def test_licencia_with_shift_id(self):
        a = _a(type="licencia", licenciaType="embarazo", shiftId="s1", startTime="10:00", endTime="11:00")
        assert is_incomplete(a) is True

    def test_nota(self):
        assert is_incomplete(_a(type="nota", texto="viaje")) is False
        assert is_incomplete(_a(type="nota")) is True

    def test_unknown_type(self):
        a = _a(type="guardia")
        assert is_incomplete(a) is True
        assert incompleteness_reason(a) == "Tipo desconocido: guardia"


class TestCellGate:
    def test_editable_cell_with_placeholder(self):
        assert cell_is_editable([ShiftPlaceholder("s1"), _a(type="franco")]) is True

    def test_blocked_by_one_incomplete_record(self):
        cell = [_a(type="franco"), _a(type="licencia", startTime="10:00", endTime="11:00")]
        assert cell_is_editable(cell) is False

    def test_empty_cell_is_editable(self):
        assert cell_is_editable([]) is True


class TestDetectIncomplete:
    @pytest.fixture
    def schedule(self):
        return Schedule(
            week_start="2026-03-02",
            assignments={
                "2026-03-03": {
                    "e1": ["morning"],
                    "e2": [{"type": "shift", "shiftId": "s1", "startTime": "08:00"}],
                },
                "2026-03-02": {
                    "e1": [{"type": "licencia", "startTime": "10:00", "endTime": "11:00"}, {"type": "franco"}],
                },
            },
        )

    def test_lists_only_incomplete_records(self, schedule):
        found = detect_incomplete_assignments(schedule)
        assert [(f.date, f.employee_id, f.reason) for f in found] == [
            ("2026-03-02", "e1", "Falta licenciaType"),
            ("2026-03-03", "e2", "Faltan startTime o endTime"),
        ]

    def test_empty_schedule(self):
        assert detect_incomplete_assignments(Schedule(week_start="2026-03-02")) == []
