"""
Shared type definitions for the clinic scheduling backend.

This module contains dataclasses and types that are used across multiple services.
"""

from shared_types.time_interval import TimeOfDay, TimeInterval, parse_time, overlaps, contains
from shared_types.availability import (
    AvailabilityResult, BlockedDateSnapshot, ExistingAppointment, WeeklyAvailabilitySnapshot,
)
from shared_types.booking import BookingProposal, SchedulingStatus

__all__ = [
    "TimeOfDay",
    "TimeInterval",
    "parse_time",
    "overlaps",
    "contains",
    "AvailabilityResult",
    "BlockedDateSnapshot",
    "ExistingAppointment",
    "WeeklyAvailabilitySnapshot",
    "BookingProposal",
    "SchedulingStatus",
]
