"""
Appointment service for booking, rescheduling and cancelling appointments.

Every write that places an appointment on a calendar goes through
``validate_and_reserve``: the availability evaluator runs first, then the
existing appointments of the partner (and room) are checked, and finally the
store commits under the partner's write lock, re-checking inside the
transaction.
"""

import logging
from datetime import date as date_type
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.constants import (
    APPOINTMENT_STATUS_CANCELLED, CANCELLABLE_APPOINTMENT_STATUSES,
    RESCHEDULABLE_APPOINTMENT_STATUSES,
)
from core.exceptions import NotFoundError, SchedulingConflict, ValidationError
from core.sentinels import MISSING
from models import Appointment, Room
from services.availability_service import evaluate_availability, suggest_times
from services.partner_service import PartnerService
from services.schedule_store import ScheduleStore, SqlAlchemyScheduleStore, find_booking_conflicts
from shared_types.booking import BookingProposal
from shared_types.settings import SuggestionGridSettings, get_suggestion_settings
from shared_types.time_interval import TimeInterval
from utils.datetime_utils import clinic_now, day_of_week_sunday_first

logger = logging.getLogger(__name__)


class AppointmentService:
    """
    Service class for appointment operations.

    Contains the conflict validator and the appointment lifecycle operations
    that depend on it.
    """

    @staticmethod
    def validate_and_reserve(
        store: ScheduleStore,
        partner_id: int,
        on_date: date_type,
        interval: TimeInterval,
        exclude_appointment_id: Optional[int] = None,
        patient_id: Optional[int] = None,
        room_id: Optional[int] = None,
        notes: Optional[str] = None,
        settings: Optional[SuggestionGridSettings] = None,
    ) -> Appointment:
        """
        Validate a proposed appointment and persist it if it is conflict-free.

        Args:
            store: Storage collaborator
            partner_id: Partner whose calendar is booked
            on_date: Appointment date
            interval: Appointment interval
            exclude_appointment_id: Appointment being moved (ignored in the checks and updated in place)
            patient_id: Opaque patient reference
            room_id: Room to reserve, if any
            notes: Notes to store with the appointment
            settings: Suggestion grid (defaults to environment configuration)

        Returns:
            The persisted appointment with ``scheduling_status`` CONFIRMED

        Raises:
            SchedulingConflict: With every conflict found and alternative start times
        """
        settings = settings or get_suggestion_settings()
        proposal = BookingProposal(
            partner_id=partner_id,
            date=on_date,
            interval=interval,
            exclude_appointment_id=exclude_appointment_id,
            room_id=room_id,
        )

        availability = store.get_weekly_availability(partner_id, day_of_week_sunday_first(on_date))
        blocks = store.get_blocked_dates(partner_id, on_date) if availability is not None else []
        result = evaluate_availability(availability, blocks, interval, settings)
        if not result.available:
            proposal.reject(result.conflicts)
            logger.info(f"Rejected booking for partner {partner_id} on {on_date} {interval}: {result.conflicts}")
            suggested = None
            if result.suggested_times is not None:
                suggested = [str(start) for start in result.suggested_times]
            raise SchedulingConflict(result.conflicts, suggested)

        assert availability is not None
        partner_appointments = store.get_existing_appointments(partner_id, on_date, exclude_appointment_id)
        room_appointments = None
        if room_id is not None:
            room_appointments = store.get_room_appointments(room_id, on_date, exclude_appointment_id)

        conflicts = find_booking_conflicts(interval, partner_appointments, room_appointments)
        if conflicts:
            proposal.reject(conflicts)
            logger.info(f"Rejected booking for partner {partner_id} on {on_date} {interval}: {conflicts}")
            busy = [appt.interval for appt in partner_appointments]
            busy.extend(appt.interval for appt in room_appointments or [])
            suggestions = suggest_times(availability, blocks, interval.duration_minutes, settings, busy=busy)
            raise SchedulingConflict(conflicts, [str(start) for start in suggestions])

        try:
            appointment = store.commit_appointment(proposal, patient_id=patient_id, notes=notes)
        except SchedulingConflict as e:
            proposal.reject(e.conflicts)
            raise

        proposal.confirm()
        return appointment

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Appointment:
        """
        Get an appointment by ID.

        Raises:
            NotFoundError: If the appointment does not exist
        """
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if appointment is None:
            raise NotFoundError("Agendamento não encontrado")
        return appointment

    @staticmethod
    def _validate_room(db: Session, room_id: Optional[int]) -> None:
        if room_id is None:
            return
        room = db.get(Room, room_id)
        if room is None:
            raise NotFoundError("Sala não encontrada")
        if not room.active:
            raise ValidationError(f"Sala {room.name} está inativa")

    @staticmethod
    def create_appointment(
        db: Session,
        partner_id: int,
        on_date: date_type,
        interval: TimeInterval,
        patient_id: Optional[int] = None,
        room_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        """
        Book a new appointment.

        Raises:
            NotFoundError: If the partner or room does not exist
            ValidationError: If the partner or room is inactive
            SchedulingConflict: If the slot is not bookable
        """
        partner = PartnerService.get_partner(db, partner_id)
        if not partner.active:
            raise ValidationError(f"Parceiro {partner.full_name} está inativo")
        AppointmentService._validate_room(db, room_id)

        appointment = AppointmentService.validate_and_reserve(
            SqlAlchemyScheduleStore(db),
            partner_id,
            on_date,
            interval,
            patient_id=patient_id,
            room_id=room_id,
            notes=notes,
        )
        logger.info(f"Created appointment {appointment.id} for partner {partner_id} on {on_date} {interval}")
        return appointment

    @staticmethod
    def reschedule_appointment(
        db: Session,
        appointment_id: int,
        new_date: date_type,
        new_interval: TimeInterval,
        new_room_id: Any = MISSING,
        reason: Optional[str] = None,
    ) -> Appointment:
        """
        Move an appointment to a new date/time (and optionally a new room).

        The appointment's own slot is excluded from the conflict check, so it
        can be moved to an overlapping time. The reason, if given, is appended
        to the notes.

        Raises:
            NotFoundError: If the appointment or room does not exist
            ValidationError: If the appointment can no longer be rescheduled
            SchedulingConflict: If the new slot is not bookable
        """
        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status not in RESCHEDULABLE_APPOINTMENT_STATUSES:
            raise ValidationError('Apenas agendamentos "AGENDADOS" ou "CONFIRMADOS" podem ser reagendados')

        room_id = appointment.room_id if new_room_id is MISSING else new_room_id
        AppointmentService._validate_room(db, room_id)

        notes: Optional[str] = None
        if reason:
            notes = f"{appointment.notes or ''}\nReagendado: {reason}".strip()

        previous = f"{appointment.date} {appointment.interval}"
        rescheduled = AppointmentService.validate_and_reserve(
            SqlAlchemyScheduleStore(db),
            appointment.partner_id,
            new_date,
            new_interval,
            exclude_appointment_id=appointment.id,
            room_id=room_id,
            notes=notes,
        )
        logger.info(f"Rescheduled appointment {appointment.id} from {previous} to {new_date} {new_interval}")
        return rescheduled

    @staticmethod
    def cancel_appointment(db: Session, appointment_id: int, reason: str) -> Appointment:
        """
        Cancel an appointment, releasing its slot.

        Raises:
            NotFoundError: If the appointment does not exist
            ValidationError: If no reason is given or the status does not allow cancellation
        """
        if not reason or not reason.strip():
            raise ValidationError("Motivo do cancelamento é obrigatório")

        appointment = AppointmentService.get_appointment(db, appointment_id)
        if appointment.status not in CANCELLABLE_APPOINTMENT_STATUSES:
            raise ValidationError(
                'Apenas agendamentos "AGENDADOS", "CONFIRMADOS" ou "EM ANDAMENTO" podem ser cancelados'
            )

        appointment.status = APPOINTMENT_STATUS_CANCELLED
        appointment.cancellation_reason = reason.strip()
        appointment.canceled_at = clinic_now()
        db.commit()
        db.refresh(appointment)
        logger.info(f"Cancelled appointment {appointment.id}: {appointment.cancellation_reason}")
        return appointment

