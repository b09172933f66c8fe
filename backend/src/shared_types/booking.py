"""
Booking proposal state machine.

A proposal tracks only the scheduling sub-state of a booking request:
PROPOSED -> CONFIRMED or PROPOSED -> REJECTED. The broader appointment
lifecycle (check-in, checkout, cancellation) lives on the Appointment model.
"""

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from core.exceptions import InvalidTransitionError
from shared_types.time_interval import TimeInterval


class SchedulingStatus(str, enum.Enum):
    PROPOSED = "PROPOSED"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"


@dataclass
class BookingProposal:
    """A request to occupy ``interval`` on ``date`` for ``partner_id``."""
    partner_id: int
    date: date
    interval: TimeInterval
    exclude_appointment_id: Optional[int] = None
    room_id: Optional[int] = None
    status: SchedulingStatus = SchedulingStatus.PROPOSED
    conflicts: List[str] = field(default_factory=list)

    def confirm(self) -> None:
        self._transition(SchedulingStatus.CONFIRMED)

    def reject(self, conflicts: List[str]) -> None:
        self._transition(SchedulingStatus.REJECTED)
        self.conflicts = list(conflicts)

    def _transition(self, target: SchedulingStatus) -> None:
        if self.status is not SchedulingStatus.PROPOSED:
            raise InvalidTransitionError(
                f"Cannot move booking proposal from {self.status.value} to {target.value}"
            )
        self.status = target
