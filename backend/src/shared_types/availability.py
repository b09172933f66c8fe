"""
Shared types for availability-related functionality.

This module contains the read projections the scheduling core consumes from
storage and the result it hands back, so services and API layers agree on a
single structure.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from shared_types.time_interval import TimeInterval, TimeOfDay


@dataclass(frozen=True)
class WeeklyAvailabilitySnapshot:
    """A partner's working window (and optional break) for one day of week."""
    partner_id: int
    day_of_week: int  # 0=Sunday .. 6=Saturday
    work_window: TimeInterval
    break_window: Optional[TimeInterval] = None
    availability_id: Optional[int] = None


@dataclass(frozen=True)
class BlockedDateSnapshot:
    """An ad-hoc block; ``window`` None means the whole day is blocked."""
    partner_id: int
    blocked_date: date
    window: Optional[TimeInterval]
    reason: Optional[str] = None
    blocked_date_id: Optional[int] = None

    @property
    def is_full_day(self) -> bool:
        return self.window is None


@dataclass(frozen=True)
class ExistingAppointment:
    """Snapshot of an already-booked, non-terminal appointment."""
    appointment_id: int
    partner_id: int
    date: date
    interval: TimeInterval
    status: str
    room_id: Optional[int] = None


@dataclass
class AvailabilityResult:
    """
    Outcome of an availability check.

    ``suggested_times`` is None when the slot is available or when the
    practitioner does not work that day at all.
    """
    available: bool
    conflicts: List[str] = field(default_factory=list)
    suggested_times: Optional[List[TimeOfDay]] = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary format."""
        result: dict[str, object] = {
            "available": self.available,
            "conflicts": list(self.conflicts),
        }
        if self.suggested_times is not None:
            result["suggested_times"] = [str(t) for t in self.suggested_times]
        return result
