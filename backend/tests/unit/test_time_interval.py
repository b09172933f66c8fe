"""
Unit tests for the time-of-day and half-open interval primitives.
"""

from datetime import time

import pytest

from core.exceptions import FormatError, ValidationError
from shared_types.time_interval import (
    TimeInterval, TimeOfDay, contains, overlaps, parse_time, strictly_contains,
)


def interval(start: str, end: str) -> TimeInterval:
    return TimeInterval.parse(start, end)


class TestParseTime:
    """Test HH:MM parsing."""

    @pytest.mark.parametrize("value,minutes", [
        ("00:00", 0),
        ("08:30", 510),
        ("23:59", 1439),
        ("9:05", 545),
        (" 12:00 ", 720),
    ])
    def test_valid_times(self, value, minutes):
        assert parse_time(value).minutes == minutes

    @pytest.mark.parametrize("value", ["24:00", "12:60", "1200", "12:5", "ab:cd", "", "12:00:00", "-1:00"])
    def test_invalid_times_raise_format_error(self, value):
        with pytest.raises(FormatError) as exc_info:
            parse_time(value)
        assert exc_info.value.message == "Horário deve estar no formato HH:MM"

    def test_field_name_is_used_in_message(self):
        with pytest.raises(FormatError) as exc_info:
            parse_time("25:00", "Horário de início")
        assert exc_info.value.message == "Horário de início deve estar no formato HH:MM"
        assert exc_info.value.field == "Horário de início"

    def test_non_string_rejected(self):
        with pytest.raises(FormatError):
            parse_time(830)  # type: ignore[arg-type]

    def test_single_digit_hour_is_normalized(self):
        assert str(parse_time("7:15")) == "07:15"


class TestTimeOfDay:
    """Test TimeOfDay conversions and ordering."""

    def test_ordering_matches_zero_padded_strings(self):
        values = ["17:00", "08:00", "12:30", "00:15", "23:59"]
        parsed = sorted(parse_time(v) for v in values)
        assert [str(t) for t in parsed] == sorted(values)

    def test_round_trip_with_datetime_time(self):
        t = TimeOfDay.from_time(time(14, 45))
        assert t.to_time() == time(14, 45)
        assert (t.hour, t.minute) == (14, 45)

    def test_seconds_are_dropped(self):
        assert TimeOfDay.from_time(time(9, 30, 59)) == parse_time("09:30")

    def test_out_of_range_minutes_rejected(self):
        with pytest.raises(ValidationError):
            TimeOfDay(24 * 60)
        with pytest.raises(ValidationError):
            TimeOfDay(-1)

    def test_add_minutes(self):
        assert parse_time("08:00").add_minutes(90) == parse_time("09:30")
        assert parse_time("23:30").add_minutes(30) is None


class TestTimeInterval:
    """Test interval construction and predicates."""

    def test_zero_length_interval_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            interval("10:00", "10:00")
        assert exc_info.value.message == "Horário de início deve ser anterior ao horário de fim"

    def test_inverted_interval_rejected(self):
        with pytest.raises(ValidationError):
            interval("11:00", "10:00")

    def test_duration(self):
        assert interval("08:15", "09:45").duration_minutes == 90

    def test_str_and_dict(self):
        iv = interval("8:00", "9:30")
        assert str(iv) == "08:00-09:30"
        assert iv.to_dict() == {"start_time": "08:00", "end_time": "09:30"}


class TestOverlap:
    """Half-open overlap semantics."""

    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(interval("09:00", "10:00"), interval("10:00", "11:00"))
        assert not overlaps(interval("10:00", "11:00"), interval("09:00", "10:00"))

    def test_partial_overlap(self):
        assert overlaps(interval("09:00", "10:30"), interval("10:00", "11:00"))

    def test_containment_overlaps(self):
        assert overlaps(interval("08:00", "17:00"), interval("12:00", "12:30"))

    def test_overlap_is_symmetric(self):
        pairs = [
            ("08:00", "09:00", "08:30", "10:00"),
            ("08:00", "09:00", "09:00", "10:00"),
            ("08:00", "12:00", "09:00", "10:00"),
            ("13:00", "14:00", "08:00", "09:00"),
        ]
        for a_start, a_end, b_start, b_end in pairs:
            a, b = interval(a_start, a_end), interval(b_start, b_end)
            assert overlaps(a, b) == overlaps(b, a)

    def test_method_form(self):
        assert interval("09:00", "10:00").overlaps(interval("09:59", "10:30"))


class TestContains:
    """Containment allows shared endpoints; strict containment does not."""

    def test_contains_with_shared_endpoints(self):
        work = interval("08:00", "17:00")
        assert contains(work, interval("08:00", "17:00"))
        assert contains(work, interval("16:30", "17:00"))
        assert work.contains(interval("08:00", "08:30"))

    def test_not_contained_when_spilling_over(self):
        assert not contains(interval("08:00", "17:00"), interval("16:30", "17:30"))
        assert not contains(interval("08:00", "17:00"), interval("07:30", "08:30"))

    def test_strict_containment(self):
        work = interval("08:00", "17:00")
        assert strictly_contains(work, interval("12:00", "13:00"))
        assert not strictly_contains(work, interval("08:00", "09:00"))
        assert not strictly_contains(work, interval("16:00", "17:00"))
