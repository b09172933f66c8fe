"""
Appointment API endpoints.

Booking and rescheduling go through the conflict validator; a rejected
booking surfaces as HTTP 409 with every conflict and alternative start times.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.responses import AppointmentResponse, SchedulingConflictResponse
from core.constants import MAX_NOTES_LENGTH, MAX_REASON_LENGTH
from core.database import get_db
from services import AppointmentService
from shared_types.time_interval import TimeInterval
from utils.datetime_utils import parse_request_date

logger = logging.getLogger(__name__)

router = APIRouter()

_CONFLICT_RESPONSES = {409: {"model": SchedulingConflictResponse, "description": "Scheduling conflict"}}


class AppointmentCreateRequest(BaseModel):
    """Request model for booking an appointment."""
    partner_id: int
    date: str        # Format: "YYYY-MM-DD"
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM"
    patient_id: Optional[int] = None
    room_id: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class AppointmentRescheduleRequest(BaseModel):
    """Request model for moving an appointment. Omit ``room_id`` to keep the current room."""
    date: str
    start_time: str
    end_time: str
    room_id: Optional[int] = None
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class AppointmentCancelRequest(BaseModel):
    """Request model for cancelling an appointment."""
    reason: str = Field(..., max_length=MAX_REASON_LENGTH)


@router.post(
    "/appointments",
    summary="Book an appointment",
    status_code=status.HTTP_201_CREATED,
    responses=_CONFLICT_RESPONSES,
)
async def create_appointment(
    request: AppointmentCreateRequest,
    db: Session = Depends(get_db),
) -> AppointmentResponse:
    appointment = AppointmentService.create_appointment(
        db,
        request.partner_id,
        parse_request_date(request.date),
        TimeInterval.parse(request.start_time, request.end_time),
        patient_id=request.patient_id,
        room_id=request.room_id,
        notes=request.notes,
    )
    return AppointmentResponse.from_model(appointment)


@router.get("/appointments/{appointment_id}", summary="Get an appointment")
async def get_appointment(appointment_id: int, db: Session = Depends(get_db)) -> AppointmentResponse:
    return AppointmentResponse.from_model(AppointmentService.get_appointment(db, appointment_id))


@router.put(
    "/appointments/{appointment_id}/reschedule",
    summary="Reschedule an appointment",
    responses=_CONFLICT_RESPONSES,
)
async def reschedule_appointment(
    appointment_id: int,
    request: AppointmentRescheduleRequest,
    db: Session = Depends(get_db),
) -> AppointmentResponse:
    extra = {}
    if "room_id" in request.model_fields_set:
        extra["new_room_id"] = request.room_id
    appointment = AppointmentService.reschedule_appointment(
        db,
        appointment_id,
        parse_request_date(request.date),
        TimeInterval.parse(request.start_time, request.end_time),
        reason=request.reason,
        **extra,
    )
    return AppointmentResponse.from_model(appointment)


@router.post("/appointments/{appointment_id}/cancel", summary="Cancel an appointment")
async def cancel_appointment(
    appointment_id: int,
    request: AppointmentCancelRequest,
    db: Session = Depends(get_db),
) -> AppointmentResponse:
    appointment = AppointmentService.cancel_appointment(db, appointment_id, request.reason)
    return AppointmentResponse.from_model(appointment)
