"""
Storage collaborator for the scheduling core.

The availability evaluator and the conflict validator only talk to storage
through the ScheduleStore protocol: four read projections plus one atomic
check-and-commit. SqlAlchemyScheduleStore implements it on top of a session.
"""

import logging
from datetime import date as date_type
from typing import List, Optional, Protocol

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.constants import APPOINTMENT_STATUS_SCHEDULED, TERMINAL_APPOINTMENT_STATUSES
from core.exceptions import NotFoundError, SchedulingConflict, ValidationError
from models import Appointment, Partner, PartnerAvailability, PartnerBlockedDate
from shared_types.availability import (
    BlockedDateSnapshot, ExistingAppointment, WeeklyAvailabilitySnapshot,
)
from shared_types.booking import BookingProposal, SchedulingStatus
from shared_types.time_interval import TimeInterval

logger = logging.getLogger(__name__)


def partner_conflict_message(interval: TimeInterval) -> str:
    return f"Parceiro já possui agendamento das {interval.start} às {interval.end}"


def room_conflict_message(interval: TimeInterval) -> str:
    return f"Sala já ocupada das {interval.start} às {interval.end}"


def find_booking_conflicts(
    interval: TimeInterval,
    partner_appointments: List[ExistingAppointment],
    room_appointments: Optional[List[ExistingAppointment]] = None,
) -> List[str]:
    """
    Conflict messages for ``interval`` against already-booked appointments.

    Args:
        interval: Proposed appointment interval
        partner_appointments: Non-terminal appointments of the partner that day
        room_appointments: Non-terminal appointments of the requested room that day

    Returns:
        One message per overlapping appointment, partner conflicts first
    """
    conflicts = [
        partner_conflict_message(existing.interval)
        for existing in partner_appointments
        if existing.interval.overlaps(interval)
    ]
    for existing in room_appointments or []:
        if existing.interval.overlaps(interval):
            conflicts.append(room_conflict_message(existing.interval))
    return conflicts


class ScheduleStore(Protocol):
    """Read and commit interface consumed by the scheduling services."""

    def get_weekly_availability(
        self, partner_id: int, day_of_week: int
    ) -> Optional[WeeklyAvailabilitySnapshot]:
        ...

    def get_blocked_dates(self, partner_id: int, on_date: date_type) -> List[BlockedDateSnapshot]:
        ...

    def get_existing_appointments(
        self, partner_id: int, on_date: date_type, exclude_appointment_id: Optional[int] = None
    ) -> List[ExistingAppointment]:
        ...

    def get_room_appointments(
        self, room_id: int, on_date: date_type, exclude_appointment_id: Optional[int] = None
    ) -> List[ExistingAppointment]:
        ...

    def commit_appointment(
        self,
        proposal: BookingProposal,
        patient_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        ...


class SqlAlchemyScheduleStore:
    """ScheduleStore backed by the relational schema in ``models``."""

    def __init__(self, db: Session):
        self.db = db

    def get_weekly_availability(
        self, partner_id: int, day_of_week: int
    ) -> Optional[WeeklyAvailabilitySnapshot]:
        row = self.db.query(PartnerAvailability).filter(
            PartnerAvailability.partner_id == partner_id,
            PartnerAvailability.day_of_week == day_of_week,
            PartnerAvailability.active == True,  # noqa: E712
        ).order_by(PartnerAvailability.id).first()
        return row.to_snapshot() if row else None

    def get_blocked_dates(self, partner_id: int, on_date: date_type) -> List[BlockedDateSnapshot]:
        rows = self.db.query(PartnerBlockedDate).filter(
            PartnerBlockedDate.partner_id == partner_id,
            PartnerBlockedDate.blocked_date == on_date,
            PartnerBlockedDate.active == True,  # noqa: E712
        ).order_by(PartnerBlockedDate.start_time, PartnerBlockedDate.id).all()
        return [row.to_snapshot() for row in rows]

    def get_existing_appointments(
        self, partner_id: int, on_date: date_type, exclude_appointment_id: Optional[int] = None
    ) -> List[ExistingAppointment]:
        query = self.db.query(Appointment).filter(
            Appointment.partner_id == partner_id,
            Appointment.date == on_date,
            Appointment.status.notin_(TERMINAL_APPOINTMENT_STATUSES),
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return [row.to_snapshot() for row in query.order_by(Appointment.start_time).all()]

    def get_room_appointments(
        self, room_id: int, on_date: date_type, exclude_appointment_id: Optional[int] = None
    ) -> List[ExistingAppointment]:
        query = self.db.query(Appointment).filter(
            Appointment.room_id == room_id,
            Appointment.date == on_date,
            Appointment.status.notin_(TERMINAL_APPOINTMENT_STATUSES),
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return [row.to_snapshot() for row in query.order_by(Appointment.start_time).all()]

    def commit_appointment(
        self,
        proposal: BookingProposal,
        patient_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        """
        Atomically re-check and persist a proposal.

        Bumps ``partners.schedule_version`` first so concurrent commits for the
        same partner serialize on that row, then re-reads the day's
        appointments inside the same transaction. When
        ``proposal.exclude_appointment_id`` is set the referenced appointment
        is moved instead of a new one being inserted.

        Args:
            proposal: Proposal that already passed the pre-commit checks
            patient_id: Opaque patient reference for new appointments
            notes: Notes for new appointments, or the replacement notes on a move

        Returns:
            The persisted appointment

        Raises:
            SchedulingConflict: If a conflicting appointment was committed meanwhile
            NotFoundError: If the partner does not exist, or the moved appointment
                does not exist or belongs to another partner
            ValidationError: If the moved appointment is already cancelled or a no-show
        """
        db = self.db
        try:
            bumped = db.execute(
                update(Partner)
                .where(Partner.id == proposal.partner_id)
                .values(schedule_version=Partner.schedule_version + 1)
            )
            if bumped.rowcount == 0:
                db.rollback()
                raise NotFoundError("Parceiro não encontrado")

            partner_appointments = self.get_existing_appointments(
                proposal.partner_id, proposal.date, proposal.exclude_appointment_id
            )
            room_appointments = None
            if proposal.room_id is not None:
                room_appointments = self.get_room_appointments(
                    proposal.room_id, proposal.date, proposal.exclude_appointment_id
                )
            conflicts = find_booking_conflicts(proposal.interval, partner_appointments, room_appointments)
            if conflicts:
                db.rollback()
                logger.warning(
                    f"Commit-time conflict for partner {proposal.partner_id} on {proposal.date} "
                    f"{proposal.interval}: {conflicts}"
                )
                raise SchedulingConflict(conflicts)

            if proposal.exclude_appointment_id is not None:
                appointment = db.get(Appointment, proposal.exclude_appointment_id)
                if appointment is None or appointment.partner_id != proposal.partner_id:
                    db.rollback()
                    raise NotFoundError("Agendamento não encontrado")
                if appointment.is_terminal:
                    db.rollback()
                    raise ValidationError(
                        f"Agendamento com status {appointment.status} não pode ser reagendado"
                    )
                appointment.date = proposal.date
                appointment.start_time = proposal.interval.start.to_time()
                appointment.end_time = proposal.interval.end.to_time()
                appointment.room_id = proposal.room_id
                if notes is not None:
                    appointment.notes = notes
            else:
                appointment = Appointment(
                    partner_id=proposal.partner_id,
                    patient_id=patient_id,
                    room_id=proposal.room_id,
                    date=proposal.date,
                    start_time=proposal.interval.start.to_time(),
                    end_time=proposal.interval.end.to_time(),
                    status=APPOINTMENT_STATUS_SCHEDULED,
                    notes=notes,
                )
                db.add(appointment)
            appointment.scheduling_status = SchedulingStatus.CONFIRMED.value
            db.commit()
        except IntegrityError as e:
            logger.warning(f"Appointment slot taken concurrently: {e}")
            db.rollback()
            raise SchedulingConflict(
                [partner_conflict_message(proposal.interval)]
            ) from e

        db.refresh(appointment)
        return appointment
