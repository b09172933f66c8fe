"""
Unit tests for the availability evaluator.

Covers the pure evaluation core (working window, break, blocked dates,
cumulative conflicts, suggestions) and the store-backed service wrapper.
"""

from datetime import date
from unittest.mock import Mock

import pytest

from services.availability_service import (
    NOT_WORKING_MESSAGE, AvailabilityService, evaluate_availability, suggest_times,
)
from shared_types.availability import (
    BlockedDateSnapshot, ExistingAppointment, WeeklyAvailabilitySnapshot,
)
from shared_types.settings import SuggestionGridSettings
from shared_types.time_interval import TimeInterval, parse_time

MONDAY = date(2025, 12, 22)
TUESDAY = date(2025, 12, 23)
CHRISTMAS = date(2025, 12, 25)


def iv(start: str, end: str) -> TimeInterval:
    return TimeInterval.parse(start, end)


def weekly(day: int, start: str, end: str, break_start: str = None, break_end: str = None) -> WeeklyAvailabilitySnapshot:
    lunch = iv(break_start, break_end) if break_start else None
    return WeeklyAvailabilitySnapshot(partner_id=1, day_of_week=day, work_window=iv(start, end), break_window=lunch)


def block(on: date, start: str = None, end: str = None, reason: str = None) -> BlockedDateSnapshot:
    window = iv(start, end) if start else None
    return BlockedDateSnapshot(partner_id=1, blocked_date=on, window=window, reason=reason)


@pytest.fixture
def settings():
    return SuggestionGridSettings()


@pytest.fixture
def monday_with_lunch():
    return weekly(1, "08:00", "17:00", "12:00", "13:00")


class TestWorkingWindow:
    """Working window and non-working days."""

    def test_not_working_day_short_circuits(self, settings):
        result = evaluate_availability(None, [block(MONDAY)], iv("09:00", "10:00"), settings)
        assert result.available is False
        assert result.conflicts == [NOT_WORKING_MESSAGE]
        assert result.suggested_times is None

    def test_outside_working_hours(self, monday_with_lunch, settings):
        result = evaluate_availability(monday_with_lunch, [], iv("16:30", "17:30"), settings)
        assert result.available is False
        assert result.conflicts == ["Horário fora do expediente (08:00 às 17:00)"]

    def test_interval_matching_window_edges_is_available(self, settings):
        day = weekly(2, "08:00", "17:00")
        assert evaluate_availability(day, [], iv("08:00", "09:00"), settings).available
        assert evaluate_availability(day, [], iv("16:00", "17:00"), settings).available


class TestBreak:
    """Break window handling (scenarios A and B)."""

    def test_overlapping_break_is_unavailable(self, monday_with_lunch, settings):
        result = evaluate_availability(monday_with_lunch, [], iv("12:00", "12:30"), settings)
        assert result.available is False
        assert result.conflicts == ["Conflito com horário de almoço (12:00 às 13:00)"]
        assert [str(t) for t in result.suggested_times] == ["08:00", "08:30", "09:00"]

    def test_touching_break_start_is_available(self, monday_with_lunch, settings):
        result = evaluate_availability(monday_with_lunch, [], iv("11:30", "12:00"), settings)
        assert result.available is True
        assert result.conflicts == []
        assert result.suggested_times is None

    def test_touching_break_end_is_available(self, monday_with_lunch, settings):
        assert evaluate_availability(monday_with_lunch, [], iv("13:00", "13:30"), settings).available


class TestBlockedDates:
    """Blocked dates take precedence over the weekly schedule."""

    def test_full_day_block(self, settings):
        thursday = weekly(4, "08:00", "17:00")
        result = evaluate_availability(thursday, [block(CHRISTMAS, reason="Feriado")], iv("09:00", "09:30"), settings)
        assert result.available is False
        assert result.conflicts == ["Dia completamente bloqueado: Feriado"]
        assert result.suggested_times == []

    def test_partial_block_and_suggestions(self, settings):
        tuesday = weekly(2, "08:00", "17:00")
        meeting = block(TUESDAY, "14:00", "15:30", "Reunião")
        result = evaluate_availability(tuesday, [meeting], iv("14:00", "15:30"), settings)
        assert result.available is False
        assert result.conflicts == ["Horário bloqueado (14:00 às 15:30): Reunião"]
        assert parse_time("08:00") in result.suggested_times
        for start in result.suggested_times:
            candidate = TimeInterval(start, start.add_minutes(90))
            assert not candidate.overlaps(meeting.window)

    def test_all_suggestions_avoid_block(self):
        tuesday = weekly(2, "08:00", "17:00")
        meeting = block(TUESDAY, "14:00", "15:30", "Reunião")
        wide = SuggestionGridSettings(max_suggestions=20)
        result = evaluate_availability(tuesday, [meeting], iv("14:00", "15:30"), wide)
        assert [str(t) for t in result.suggested_times] == [
            "08:00", "08:30", "09:00", "09:30", "10:00", "10:30",
            "11:00", "11:30", "12:00", "12:30", "15:30",
        ]

    def test_block_touching_interval_does_not_conflict(self, settings):
        tuesday = weekly(2, "08:00", "17:00")
        result = evaluate_availability(tuesday, [block(TUESDAY, "10:00", "11:00", "Exame")], iv("11:00", "11:30"), settings)
        assert result.available is True

    @pytest.mark.parametrize("reason", [None, ""])
    def test_missing_reason_uses_default_text(self, reason, settings):
        tuesday = weekly(2, "08:00", "17:00")
        full = evaluate_availability(tuesday, [block(TUESDAY, reason=reason)], iv("09:00", "10:00"), settings)
        assert full.conflicts == ["Dia completamente bloqueado: Sem motivo especificado"]
        partial = evaluate_availability(tuesday, [block(TUESDAY, "09:00", "09:30", reason)], iv("09:00", "10:00"), settings)
        assert partial.conflicts == ["Horário bloqueado (09:00 às 09:30): Sem motivo especificado"]

    def test_overlapping_blocks_are_each_reported(self, settings):
        tuesday = weekly(2, "08:00", "17:00")
        blocks = [block(TUESDAY, "09:00", "10:00", "A"), block(TUESDAY, "09:30", "11:00", "B")]
        result = evaluate_availability(tuesday, blocks, iv("09:30", "10:00"), settings)
        assert result.conflicts == [
            "Horário bloqueado (09:00 às 10:00): A",
            "Horário bloqueado (09:30 às 11:00): B",
        ]


class TestCumulativeConflicts:
    """Every violated rule is reported, in a fixed order."""

    def test_window_break_and_block_all_reported(self, monday_with_lunch, settings):
        blocks = [block(MONDAY, "16:00", "16:30", "Curso")]
        result = evaluate_availability(monday_with_lunch, blocks, iv("11:30", "17:30"), settings)
        assert result.conflicts == [
            "Horário fora do expediente (08:00 às 17:00)",
            "Conflito com horário de almoço (12:00 às 13:00)",
            "Horário bloqueado (16:00 às 16:30): Curso",
        ]

    def test_evaluation_is_deterministic(self, monday_with_lunch, settings):
        blocks = [block(MONDAY, "09:00", "10:00", "X")]
        first = evaluate_availability(monday_with_lunch, blocks, iv("09:30", "12:30"), settings)
        second = evaluate_availability(monday_with_lunch, blocks, iv("09:30", "12:30"), settings)
        assert first == second

    def test_to_dict_omits_suggestions_when_available(self, monday_with_lunch, settings):
        result = evaluate_availability(monday_with_lunch, [], iv("09:00", "10:00"), settings)
        assert result.to_dict() == {"available": True, "conflicts": []}


class TestSuggestTimes:
    """Suggestion grid behavior."""

    def test_suggestions_avoid_busy_intervals(self, monday_with_lunch, settings):
        busy = [iv("08:00", "09:00")]
        starts = suggest_times(monday_with_lunch, [], 60, settings, busy=busy)
        assert [str(t) for t in starts] == ["09:00", "09:30", "10:00"]

    def test_suggestions_respect_custom_grid(self, monday_with_lunch):
        grid = SuggestionGridSettings(day_start="13:00", day_end="15:00", slot_granularity_minutes=60, max_suggestions=5)
        starts = suggest_times(monday_with_lunch, [], 60, grid)
        assert [str(t) for t in starts] == ["13:00", "14:00"]

    def test_duration_longer_than_any_gap_yields_nothing(self, monday_with_lunch, settings):
        assert suggest_times(monday_with_lunch, [], 6 * 60, settings) == []

    def test_suggestions_are_ascending(self, settings):
        tuesday = weekly(2, "08:00", "17:00")
        starts = suggest_times(tuesday, [], 30, SuggestionGridSettings(max_suggestions=20))
        assert starts == sorted(starts)
        assert len(starts) == 18


class TestAvailabilityServiceWithStore:
    """Store-backed entry points."""

    def test_check_availability_uses_sunday_first_day_of_week(self, monday_with_lunch, settings):
        store = Mock()
        store.get_weekly_availability.return_value = monday_with_lunch
        store.get_blocked_dates.return_value = []

        result = AvailabilityService.check_availability(store, 1, MONDAY, iv("09:00", "10:00"), settings)

        assert result.available is True
        store.get_weekly_availability.assert_called_once_with(1, 1)
        store.get_blocked_dates.assert_called_once_with(1, MONDAY)
        store.get_existing_appointments.assert_not_called()

    def test_check_availability_skips_blocks_on_non_working_day(self, settings):
        store = Mock()
        store.get_weekly_availability.return_value = None

        result = AvailabilityService.check_availability(store, 1, date(2025, 12, 28), iv("09:00", "10:00"), settings)

        assert result.conflicts == [NOT_WORKING_MESSAGE]
        store.get_weekly_availability.assert_called_once_with(1, 0)
        store.get_blocked_dates.assert_not_called()

    def test_day_schedule(self, monday_with_lunch, settings):
        store = Mock()
        store.get_weekly_availability.return_value = monday_with_lunch
        store.get_blocked_dates.return_value = [block(MONDAY, "15:00", "16:00", "Curso")]
        store.get_existing_appointments.return_value = [
            ExistingAppointment(appointment_id=7, partner_id=1, date=MONDAY, interval=iv("09:00", "10:00"), status="SCHEDULED"),
        ]

        schedule = AvailabilityService.get_day_schedule(store, 1, MONDAY, settings)

        assert schedule["works"] is True
        assert schedule["day_of_week"] == 1
        assert schedule["day_name"] == "segunda-feira"
        assert schedule["work_window"] == {"start_time": "08:00", "end_time": "17:00"}
        assert schedule["break_window"] == {"start_time": "12:00", "end_time": "13:00"}
        assert schedule["blocked"][0]["reason"] == "Curso"
        assert schedule["appointments"] == [
            {"id": 7, "status": "SCHEDULED", "start_time": "09:00", "end_time": "10:00"}
        ]
        assert schedule["free_starts"] == [
            "08:00", "08:30", "10:00", "10:30", "11:00", "11:30",
            "13:00", "13:30", "14:00", "14:30", "16:00", "16:30",
        ]

    def test_day_schedule_for_non_working_day(self, settings):
        store = Mock()
        store.get_weekly_availability.return_value = None

        schedule = AvailabilityService.get_day_schedule(store, 1, date(2025, 12, 28), settings)

        assert schedule["works"] is False
        assert schedule["free_starts"] == []
        store.get_existing_appointments.assert_not_called()
