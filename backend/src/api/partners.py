"""
Partner schedule API endpoints.

Weekly availability, blocked dates, availability checks and the day schedule
of a partner. Domain errors raised by the services are translated to HTTP
responses by the exception handlers registered in ``main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.responses import (
    AvailabilityCheckResponse, BlockedDateListResponse, BlockedDateResponse,
    DayScheduleResponse, PartnerResponse, WeeklyAvailabilityListResponse,
    WeeklyAvailabilityResponse,
)
from core.constants import MAX_REASON_LENGTH, MAX_STRING_LENGTH
from core.database import get_db
from services import (
    AvailabilityService, BlockedDateService, PartnerAvailabilityService,
    PartnerService, SqlAlchemyScheduleStore,
)
from shared_types.time_interval import TimeInterval
from utils.datetime_utils import parse_request_date

logger = logging.getLogger(__name__)

router = APIRouter()


# ===== Request Models =====

class PartnerCreateRequest(BaseModel):
    """Request model for registering a partner."""
    full_name: str = Field(..., max_length=MAX_STRING_LENGTH)
    email: Optional[str] = Field(None, max_length=MAX_STRING_LENGTH)


class WeeklyAvailabilityRequest(BaseModel):
    """Request model for creating a weekly availability entry."""
    day_of_week: int  # 0=Sunday .. 6=Saturday
    start_time: str   # Format: "HH:MM"
    end_time: str     # Format: "HH:MM"
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class WeeklyAvailabilityUpdateRequest(BaseModel):
    """Request model for partially updating a weekly availability entry."""
    day_of_week: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class BlockedDateRequest(BaseModel):
    """Request model for creating a blocked date. Omit both times to block the whole day."""
    blocked_date: str  # Format: "YYYY-MM-DD"
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class BlockedDateUpdateRequest(BaseModel):
    """Request model for partially updating a blocked date."""
    blocked_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class AvailabilityCheckRequest(BaseModel):
    """Request model for checking a proposed slot."""
    date: str        # Format: "YYYY-MM-DD"
    start_time: str  # Format: "HH:MM"
    end_time: str    # Format: "HH:MM"


# ===== Partners =====

@router.post("/partners", summary="Register a partner", status_code=status.HTTP_201_CREATED)
async def create_partner(
    request: PartnerCreateRequest,
    db: Session = Depends(get_db),
) -> PartnerResponse:
    partner = PartnerService.create_partner(db, request.full_name, request.email)
    return PartnerResponse.from_model(partner)


@router.get("/partners/{partner_id}", summary="Get a partner")
async def get_partner(partner_id: int, db: Session = Depends(get_db)) -> PartnerResponse:
    return PartnerResponse.from_model(PartnerService.get_partner(db, partner_id))


# ===== Weekly availability =====

@router.get("/partners/{partner_id}/availability", summary="Get partner's weekly schedule")
async def list_availability(partner_id: int, db: Session = Depends(get_db)) -> WeeklyAvailabilityListResponse:
    """Active weekly entries ordered by day of week (0=Sunday)."""
    PartnerService.get_partner(db, partner_id)
    entries = PartnerAvailabilityService.list_availability(db, partner_id)
    return WeeklyAvailabilityListResponse(
        availability=[WeeklyAvailabilityResponse.from_model(entry) for entry in entries]
    )


@router.post(
    "/partners/{partner_id}/availability",
    summary="Create a weekly availability entry",
    status_code=status.HTTP_201_CREATED,
)
async def create_availability(
    partner_id: int,
    request: WeeklyAvailabilityRequest,
    db: Session = Depends(get_db),
) -> WeeklyAvailabilityResponse:
    entry = PartnerAvailabilityService.create_availability(
        db,
        partner_id,
        request.day_of_week,
        request.start_time,
        request.end_time,
        request.break_start,
        request.break_end,
    )
    return WeeklyAvailabilityResponse.from_model(entry)


@router.put("/partners/{partner_id}/availability/{availability_id}", summary="Update a weekly availability entry")
async def update_availability(
    partner_id: int,
    availability_id: int,
    request: WeeklyAvailabilityUpdateRequest,
    db: Session = Depends(get_db),
) -> WeeklyAvailabilityResponse:
    """
    Partially update a weekly entry.

    Only fields present in the body are changed; send ``break_start`` and
    ``break_end`` as null to remove the break.
    """
    changes = request.model_dump(exclude_unset=True)
    entry = PartnerAvailabilityService.update_availability(db, partner_id, availability_id, **changes)
    return WeeklyAvailabilityResponse.from_model(entry)


@router.delete("/partners/{partner_id}/availability/{availability_id}", summary="Deactivate a weekly availability entry")
async def deactivate_availability(
    partner_id: int,
    availability_id: int,
    db: Session = Depends(get_db),
) -> WeeklyAvailabilityResponse:
    entry = PartnerAvailabilityService.deactivate_availability(db, partner_id, availability_id)
    return WeeklyAvailabilityResponse.from_model(entry)


# ===== Blocked dates =====

@router.get("/partners/{partner_id}/blocked-dates", summary="List partner's blocked dates")
async def list_blocked_dates(
    partner_id: int,
    start_date: str = Query(..., description="First date in YYYY-MM-DD format"),
    end_date: Optional[str] = Query(None, description="Last date in YYYY-MM-DD format (defaults to start_date)"),
    db: Session = Depends(get_db),
) -> BlockedDateListResponse:
    PartnerService.get_partner(db, partner_id)
    first = parse_request_date(start_date, "Data inicial")
    last = parse_request_date(end_date, "Data final") if end_date else None
    blocks = BlockedDateService.find_blocks(db, partner_id, first, last)
    return BlockedDateListResponse(blocked_dates=[BlockedDateResponse.from_model(block) for block in blocks])


@router.post(
    "/partners/{partner_id}/blocked-dates",
    summary="Block a date or part of a date",
    status_code=status.HTTP_201_CREATED,
)
async def create_blocked_date(
    partner_id: int,
    request: BlockedDateRequest,
    db: Session = Depends(get_db),
) -> BlockedDateResponse:
    block = BlockedDateService.create_blocked_date(
        db,
        partner_id,
        parse_request_date(request.blocked_date),
        request.start_time,
        request.end_time,
        request.reason,
    )
    return BlockedDateResponse.from_model(block)


@router.put("/partners/{partner_id}/blocked-dates/{blocked_id}", summary="Update a blocked date")
async def update_blocked_date(
    partner_id: int,
    blocked_id: int,
    request: BlockedDateUpdateRequest,
    db: Session = Depends(get_db),
) -> BlockedDateResponse:
    changes = request.model_dump(exclude_unset=True)
    if changes.get("blocked_date") is not None:
        changes["blocked_date"] = parse_request_date(changes["blocked_date"])
    else:
        changes.pop("blocked_date", None)
    block = BlockedDateService.update_blocked_date(db, partner_id, blocked_id, **changes)
    return BlockedDateResponse.from_model(block)


@router.delete("/partners/{partner_id}/blocked-dates/{blocked_id}", summary="Deactivate a blocked date")
async def deactivate_blocked_date(
    partner_id: int,
    blocked_id: int,
    db: Session = Depends(get_db),
) -> BlockedDateResponse:
    block = BlockedDateService.deactivate_blocked_date(db, partner_id, blocked_id)
    return BlockedDateResponse.from_model(block)


# ===== Availability evaluation =====

@router.post("/partners/{partner_id}/check-availability", summary="Check whether a slot is bookable")
async def check_availability(
    partner_id: int,
    request: AvailabilityCheckRequest,
    db: Session = Depends(get_db),
) -> AvailabilityCheckResponse:
    """
    Evaluate a proposed slot against the partner's weekly schedule and blocks.

    Existing appointments are not considered here; they are checked when the
    appointment is booked.
    """
    PartnerService.get_partner(db, partner_id)
    on_date = parse_request_date(request.date)
    interval = TimeInterval.parse(request.start_time, request.end_time)
    result = AvailabilityService.check_availability(SqlAlchemyScheduleStore(db), partner_id, on_date, interval)
    return AvailabilityCheckResponse.from_result(result)


@router.get("/partners/{partner_id}/schedule", summary="Get partner's schedule for a date")
async def get_day_schedule(
    partner_id: int,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    db: Session = Depends(get_db),
) -> DayScheduleResponse:
    PartnerService.get_partner(db, partner_id)
    schedule = AvailabilityService.get_day_schedule(
        SqlAlchemyScheduleStore(db), partner_id, parse_request_date(date)
    )
    return DayScheduleResponse.model_validate(schedule)
