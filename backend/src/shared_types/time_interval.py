"""
Time-of-day and half-open interval primitives for scheduling.

Times are kept as minute-of-day integers internally; the ``HH:MM`` string is
only the serialization form. Ordering on minutes is identical to ordering on
zero-padded ``HH:MM`` strings, so comparisons agree with values stored as text.
"""

import re
from dataclasses import dataclass
from datetime import time
from typing import Any, Dict, Optional

from core.exceptions import FormatError, ValidationError

MINUTES_PER_DAY = 24 * 60

# H:MM or HH:MM, 00-23 hours, 00-59 minutes
_TIME_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):([0-5][0-9])$')


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """A wall-clock time with minute resolution (00:00 <= t < 24:00)."""

    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValidationError(f"Horário fora do intervalo 00:00-23:59: {self.minutes} minutos")

    @classmethod
    def parse(cls, value: str, field_name: str = "Horário") -> "TimeOfDay":
        """
        Parse an ``HH:MM`` (24h) string.

        Raises:
            FormatError: If the value is not a valid time of day
        """
        if not isinstance(value, str):
            raise FormatError(f"{field_name} deve estar no formato HH:MM", field=field_name)
        match = _TIME_PATTERN.match(value.strip())
        if not match:
            raise FormatError(f"{field_name} deve estar no formato HH:MM", field=field_name)
        hour, minute = int(match.group(1)), int(match.group(2))
        return cls(hour * 60 + minute)

    @classmethod
    def from_time(cls, value: time) -> "TimeOfDay":
        """Convert a ``datetime.time`` (seconds are dropped)."""
        return cls(value.hour * 60 + value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def add_minutes(self, minutes: int) -> Optional["TimeOfDay"]:
        """Shift by ``minutes``; None if the result leaves the day."""
        shifted = self.minutes + minutes
        if not 0 <= shifted < MINUTES_PER_DAY:
            return None
        return TimeOfDay(shifted)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class TimeInterval:
    """
    Half-open time-of-day interval ``[start, end)``.

    Zero-length and inverted intervals are rejected at construction, so every
    instance has a positive duration. Intervals that merely touch (one ends
    exactly where the other starts) do not overlap.
    """

    start: TimeOfDay
    end: TimeOfDay

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValidationError("Horário de início deve ser anterior ao horário de fim")

    @classmethod
    def parse(
        cls,
        start: str,
        end: str,
        start_field: str = "Horário de início",
        end_field: str = "Horário de fim",
    ) -> "TimeInterval":
        return cls(TimeOfDay.parse(start, start_field), TimeOfDay.parse(end, end_field))

    @classmethod
    def from_times(cls, start: time, end: time) -> "TimeInterval":
        return cls(TimeOfDay.from_time(start), TimeOfDay.from_time(end))

    @property
    def duration_minutes(self) -> int:
        return self.end.minutes - self.start.minutes

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)

    def contains(self, other: "TimeInterval") -> bool:
        return contains(self, other)

    def to_dict(self) -> Dict[str, Any]:
        return {"start_time": str(self.start), "end_time": str(self.end)}

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def parse_time(value: str, field_name: str = "Horário") -> TimeOfDay:
    """Parse an ``HH:MM`` string into a TimeOfDay."""
    return TimeOfDay.parse(value, field_name)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Half-open overlap test: touching endpoints do not overlap."""
    return a.start < b.end and b.start < a.end


def contains(outer: TimeInterval, inner: TimeInterval) -> bool:
    """True when ``inner`` lies entirely within ``outer`` (shared endpoints allowed)."""
    return inner.start >= outer.start and inner.end <= outer.end


def strictly_contains(outer: TimeInterval, inner: TimeInterval) -> bool:
    """Containment that does not allow shared endpoints."""
    return inner.start > outer.start and inner.end < outer.end
