"""Tests for pattern mining over completed weeks and weekday suggestions."""

from datetime import date, timedelta

import pytest

from assignment_core.models import ShiftPlaceholder, ShiftTimed
from assignment_core.patterns import (
    analyze_patterns,
    assignment_signature,
    confidence_for,
    suggest,
    suggest_week,
    weekday_index,
)

FIRST_MONDAY = date(2026, 1, 5)

MORNING = {"type": "shift", "shiftId": "m", "startTime": "08:00", "endTime": "14:00"}
EVENING = {"type": "shift", "shiftId": "e", "startTime": "16:00", "endTime": "22:00"}


def week(n: int, cells: dict, *, completed: bool = True, employee: str = "e1") -> dict:
    """Schedule dict for week ``n`` (1-based); ``cells`` maps day offset -> cell."""
    start = FIRST_MONDAY + timedelta(weeks=n - 1)
    return {
        "weekStart": start.isoformat(),
        "completada": completed,
        "assignments": {
            (start + timedelta(days=offset)).isoformat(): {employee: cell}
            for offset, cell in cells.items()
        },
    }


def _by_signature(patterns, cell):
    sig = assignment_signature(ShiftTimed(
        shift_id=a["shiftId"], start_time=a["startTime"], end_time=a["endTime"],
    ) for a in cell)
    return next(p for p in patterns if p.signature == sig)


class TestSignature:
    def test_order_independent(self):
        a = ShiftTimed(shift_id="a", start_time="08:00", end_time="12:00")
        b = ShiftTimed(shift_id="b", start_time="14:00", end_time="18:00")
        assert assignment_signature([a, b]) == assignment_signature([b, a])

    def test_times_matter(self):
        a = ShiftTimed(shift_id="a", start_time="08:00", end_time="12:00")
        later = ShiftTimed(shift_id="a", start_time="09:00", end_time="12:00")
        assert assignment_signature([a]) != assignment_signature([later])

    def test_placeholder_differs_from_timed(self):
        timed = ShiftTimed(shift_id="a", start_time="08:00", end_time="12:00")
        assert assignment_signature([ShiftPlaceholder("a")]) != assignment_signature([timed])


class TestAnalyzePatterns:
    def test_counts_consecutive_weeks(self):
        schedules = [week(n, {0: [MORNING]}) for n in (1, 2, 3)]
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.day_of_week == 1
        assert pattern.frequency == 3
        assert pattern.consecutive_weeks == 3
        assert pattern.last_seen_week == "2026-01-19"

    def test_streak_stops_and_restarts(self):
        schedules = [week(n, {0: [MORNING]}) for n in (1, 2, 3)]
        schedules.append(week(4, {0: [EVENING]}))
        patterns = analyze_patterns("e1", schedules)
        assert _by_signature(patterns, [MORNING]).consecutive_weeks == 3
        assert _by_signature(patterns, [EVENING]).consecutive_weeks == 1

        schedules.append(week(6, {0: [MORNING]}))
        patterns = analyze_patterns("e1", schedules)
        morning = _by_signature(patterns, [MORNING])
        assert morning.consecutive_weeks == 1
        assert morning.frequency == 4
        assert morning.last_seen_week == "2026-02-09"

    def test_insertion_order_does_not_matter(self):
        schedules = [
            week(1, {2: [MORNING, EVENING]}),
            week(2, {2: [EVENING, MORNING]}),
        ]
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.day_of_week == 3
        assert pattern.consecutive_weeks == 2

    def test_schedule_order_does_not_matter(self):
        schedules = [week(n, {0: [MORNING]}) for n in (3, 1, 2)]
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.consecutive_weeks == 3

    def test_ignores_incomplete_weeks(self):
        schedules = [week(1, {0: [MORNING]}), week(2, {0: [MORNING]}, completed=False), week(3, {0: [MORNING]})]
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.frequency == 2
        assert pattern.consecutive_weeks == 1

    def test_window_limits_history(self):
        schedules = [week(n, {0: [MORNING]}) for n in range(1, 9)]
        [pattern] = analyze_patterns("e1", schedules, window_weeks=4)
        assert pattern.frequency == 4
        assert pattern.consecutive_weeks == 4

    def test_empty_weeks_count_toward_window(self):
        schedules = [week(n, {0: [MORNING]}) for n in (1, 2, 3, 4)]
        schedules += [week(n, {}) for n in (5, 6)]
        [pattern] = analyze_patterns("e1", schedules, window_weeks=4)
        assert pattern.frequency == 2
        assert pattern.last_seen_week == "2026-01-26"

    def test_week_without_start_is_skipped(self):
        schedules = [week(n, {0: [MORNING]}) for n in (1, 2)]
        schedules.append({"completada": True, "assignments": {"2026-01-05": {"e1": [EVENING]}}})
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.frequency == 2

    def test_other_employees_and_empty_cells_ignored(self):
        schedules = [
            week(1, {0: [MORNING]}, employee="e2"),
            week(2, {0: []}),
        ]
        assert analyze_patterns("e1", schedules) == []

    def test_unreadable_cell_is_skipped(self):
        schedules = [week(1, {0: [MORNING], 1: "broken"}), week(2, {0: [MORNING]})]
        [pattern] = analyze_patterns("e1", schedules)
        assert pattern.consecutive_weeks == 2

    def test_legacy_cells_use_templates(self):
        templates = {"m": {"startTime": "08:00", "endTime": "14:00"}}
        schedules = [week(1, {0: ["m"]}), week(2, {0: [MORNING]})]
        [pattern] = analyze_patterns("e1", schedules, shift_templates=templates)
        assert pattern.frequency == 2


class TestSuggest:
    @pytest.fixture
    def patterns(self):
        schedules = [week(n, {0: [MORNING], 1: [EVENING]}) for n in (1, 2, 3, 4)]
        schedules += [week(n, {1: [MORNING]}) for n in (5,)]
        return analyze_patterns("e1", schedules)

    def test_suggests_long_streak(self, patterns):
        suggestion = suggest("e1", 1, patterns)
        assert suggestion is not None
        assert suggestion.weeks_matched == 4
        assert suggestion.confidence == pytest.approx(0.4)
        assert suggestion.assignments[0].shift_id == "m"

    def test_short_streak_gives_nothing(self, patterns):
        assert suggest("e1", 1, patterns, min_consecutive_weeks=5) is None

    def test_picks_strongest_pattern(self, patterns):
        suggestion = suggest("e1", 2, patterns)
        assert suggestion.assignments[0].shift_id == "e"

    def test_no_pattern_for_day(self, patterns):
        assert suggest("e1", 0, patterns) is None
        assert suggest("e1", 6, patterns) is None

    def test_other_employee(self, patterns):
        assert suggest("e2", 1, patterns) is None

    def test_confidence_is_capped(self):
        assert confidence_for(3) == pytest.approx(0.3)
        assert confidence_for(10) == 1.0
        assert confidence_for(14) == 1.0

    def test_suggest_week(self):
        schedules = [week(n, {0: [MORNING], 4: [EVENING]}) for n in (1, 2, 3)]
        result = suggest_week("e1", schedules)
        assert sorted(result) == [1, 5]
        assert result[5].assignments[0].shift_id == "e"

    def test_sunday_is_day_zero(self):
        schedules = [week(n, {6: [EVENING]}) for n in (1, 2, 3)]
        result = suggest_week("e1", schedules)
        assert sorted(result) == [0]
        assert result[0].weeks_matched == 3


class TestWeekdayIndex:
    def test_counts_from_sunday(self):
        assert weekday_index(date(2026, 1, 4)) == 0
        assert weekday_index(FIRST_MONDAY) == 1
        assert weekday_index(date(2026, 1, 10)) == 6

    def test_monday_pattern_is_found_with_index_one(self):
        schedules = [week(n, {0: [MORNING]}) for n in (1, 2, 3)]
        [pattern] = analyze_patterns("e1", schedules)
        suggestion = suggest("e1", 1, [pattern])
        assert suggestion is not None
        assert suggestion.assignments[0].start_time == "08:00"
