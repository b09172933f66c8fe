"""
Shared response models for API endpoints.

This module contains Pydantic response models that are shared across
multiple API endpoints to ensure consistency and reduce duplication.
"""

from typing import List, Optional

from pydantic import BaseModel

from models import Appointment, Partner, PartnerAvailability, PartnerBlockedDate
from shared_types.availability import AvailabilityResult
from shared_types.time_interval import TimeOfDay


def _hhmm(value) -> Optional[str]:
    return str(TimeOfDay.from_time(value)) if value is not None else None


class ErrorResponse(BaseModel):
    """Body returned by the domain exception handlers."""
    detail: str
    type: str


class SchedulingConflictResponse(ErrorResponse):
    """Body returned when a booking is rejected (HTTP 409)."""
    conflicts: List[str]
    suggested_times: Optional[List[str]] = None


class PartnerResponse(BaseModel):
    """Response model for partner information."""
    id: int
    full_name: str
    email: Optional[str] = None
    active: bool

    @classmethod
    def from_model(cls, partner: Partner) -> "PartnerResponse":
        return cls(id=partner.id, full_name=partner.full_name, email=partner.email, active=partner.active)


class WeeklyAvailabilityResponse(BaseModel):
    """Response model for one weekly availability entry."""
    id: int
    partner_id: int
    day_of_week: int
    day_name: str
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM"
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    active: bool

    @classmethod
    def from_model(cls, entry: PartnerAvailability) -> "WeeklyAvailabilityResponse":
        return cls(
            id=entry.id,
            partner_id=entry.partner_id,
            day_of_week=entry.day_of_week,
            day_name=entry.day_name,
            start_time=_hhmm(entry.start_time),
            end_time=_hhmm(entry.end_time),
            break_start=_hhmm(entry.break_start),
            break_end=_hhmm(entry.break_end),
            active=entry.active,
        )


class WeeklyAvailabilityListResponse(BaseModel):
    """Response model for a partner's weekly schedule."""
    availability: List[WeeklyAvailabilityResponse]


class BlockedDateResponse(BaseModel):
    """Response model for a blocked date. Null times mean the whole day is blocked."""
    id: int
    partner_id: int
    blocked_date: str  # Format: "YYYY-MM-DD"
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_full_day: bool
    reason: Optional[str] = None
    active: bool

    @classmethod
    def from_model(cls, block: PartnerBlockedDate) -> "BlockedDateResponse":
        return cls(
            id=block.id,
            partner_id=block.partner_id,
            blocked_date=block.blocked_date.isoformat(),
            start_time=_hhmm(block.start_time),
            end_time=_hhmm(block.end_time),
            is_full_day=block.is_full_day,
            reason=block.reason,
            active=block.active,
        )


class BlockedDateListResponse(BaseModel):
    """Response model for listing blocked dates."""
    blocked_dates: List[BlockedDateResponse]


class AvailabilityCheckResponse(BaseModel):
    """Response model for an availability check."""
    available: bool
    conflicts: List[str]
    suggested_times: Optional[List[str]] = None

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityCheckResponse":
        return cls.model_validate(result.to_dict())


class TimeWindowResponse(BaseModel):
    start_time: str
    end_time: str


class ScheduleBlockResponse(BaseModel):
    id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: str


class ScheduleAppointmentResponse(BaseModel):
    id: int
    status: str
    start_time: str
    end_time: str


class DayScheduleResponse(BaseModel):
    """Response model for a partner's schedule on one date."""
    date: str
    day_of_week: int
    day_name: str
    works: bool
    work_window: Optional[TimeWindowResponse] = None
    break_window: Optional[TimeWindowResponse] = None
    blocked: List[ScheduleBlockResponse] = []
    appointments: List[ScheduleAppointmentResponse] = []
    free_starts: List[str] = []


class AppointmentResponse(BaseModel):
    """Response model for appointment information."""
    id: int
    partner_id: int
    patient_id: Optional[int] = None
    room_id: Optional[int] = None
    date: str  # Format: "YYYY-MM-DD"
    start_time: str
    end_time: str
    status: str
    scheduling_status: str
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None

    @classmethod
    def from_model(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            partner_id=appointment.partner_id,
            patient_id=appointment.patient_id,
            room_id=appointment.room_id,
            date=appointment.date.isoformat(),
            start_time=_hhmm(appointment.start_time),
            end_time=_hhmm(appointment.end_time),
            status=appointment.status,
            scheduling_status=appointment.scheduling_status,
            notes=appointment.notes,
            cancellation_reason=appointment.cancellation_reason,
        )
