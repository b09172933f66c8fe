"""
Partner availability service for the default weekly schedule.

Handles validation and persistence of weekly working windows (with optional
break) per day of week. Validation messages are user-facing and surfaced
verbatim by the API layer.
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from core.sentinels import MISSING
from models import PartnerAvailability
from services.partner_service import PartnerService
from shared_types.time_interval import TimeInterval, TimeOfDay, parse_time, strictly_contains

logger = logging.getLogger(__name__)


def _format_stored(value: Any) -> Optional[str]:
    return str(TimeOfDay.from_time(value)) if value is not None else None


def validate_weekly_window(
    day_of_week: int,
    start_time: str,
    end_time: str,
    break_start: Optional[str] = None,
    break_end: Optional[str] = None,
) -> Tuple[TimeInterval, Optional[TimeInterval]]:
    """
    Validate a weekly availability definition.

    Args:
        day_of_week: 0=Sunday .. 6=Saturday
        start_time: Start of the working window (HH:MM)
        end_time: End of the working window (HH:MM)
        break_start: Start of the break (HH:MM), optional
        break_end: End of the break (HH:MM), optional

    Returns:
        Tuple of (work window, break window or None)

    Raises:
        ValidationError: If the definition is structurally invalid
        FormatError: If a time is not in HH:MM format
    """
    if not isinstance(day_of_week, int) or isinstance(day_of_week, bool) or not 0 <= day_of_week <= 6:
        raise ValidationError("Dia da semana deve estar entre 0 (domingo) e 6 (sábado)")

    start = parse_time(start_time, "Horário de início")
    end = parse_time(end_time, "Horário de fim")
    if start >= end:
        raise ValidationError("Horário de início deve ser anterior ao horário de fim")
    work_window = TimeInterval(start, end)

    if break_start is None and break_end is None:
        return work_window, None
    if break_start is None or break_end is None:
        raise ValidationError("Início e fim do intervalo devem ser informados juntos")

    lunch_start = parse_time(break_start, "Início do intervalo")
    lunch_end = parse_time(break_end, "Fim do intervalo")
    if lunch_start >= lunch_end:
        raise ValidationError("Início do intervalo deve ser anterior ao fim do intervalo")
    break_window = TimeInterval(lunch_start, lunch_end)

    if not strictly_contains(work_window, break_window):
        raise ValidationError("Intervalo deve estar dentro do horário de trabalho")

    return work_window, break_window


class PartnerAvailabilityService:
    """
    Service class for weekly availability operations.

    At most one active entry exists per (partner, day_of_week). Entries are
    soft-deactivated, never deleted.
    """

    @staticmethod
    def get_availability(db: Session, partner_id: int, day_of_week: int) -> Optional[PartnerAvailability]:
        """Active entry for a day of week, or None if the partner does not work that day."""
        return db.query(PartnerAvailability).filter(
            PartnerAvailability.partner_id == partner_id,
            PartnerAvailability.day_of_week == day_of_week,
            PartnerAvailability.active == True,  # noqa: E712
        ).first()

    @staticmethod
    def list_availability(db: Session, partner_id: int) -> List[PartnerAvailability]:
        """All active entries of a partner ordered by day of week."""
        return db.query(PartnerAvailability).filter(
            PartnerAvailability.partner_id == partner_id,
            PartnerAvailability.active == True,  # noqa: E712
        ).order_by(PartnerAvailability.day_of_week).all()

    @staticmethod
    def _get_owned(db: Session, partner_id: int, availability_id: int) -> PartnerAvailability:
        entry = db.query(PartnerAvailability).filter(
            PartnerAvailability.id == availability_id,
            PartnerAvailability.partner_id == partner_id,
        ).first()
        if entry is None:
            raise NotFoundError("Disponibilidade não encontrada")
        return entry

    @staticmethod
    def _ensure_day_free(
        db: Session, partner_id: int, day_of_week: int, exclude_id: Optional[int] = None
    ) -> None:
        query = db.query(PartnerAvailability).filter(
            PartnerAvailability.partner_id == partner_id,
            PartnerAvailability.day_of_week == day_of_week,
            PartnerAvailability.active == True,  # noqa: E712
        )
        if exclude_id is not None:
            query = query.filter(PartnerAvailability.id != exclude_id)
        if query.first() is not None:
            raise ValidationError("Parceiro já possui disponibilidade ativa para este dia da semana")

    @staticmethod
    def create_availability(
        db: Session,
        partner_id: int,
        day_of_week: int,
        start_time: str,
        end_time: str,
        break_start: Optional[str] = None,
        break_end: Optional[str] = None,
    ) -> PartnerAvailability:
        """
        Create the weekly entry for one day of week.

        Raises:
            NotFoundError: If the partner does not exist or is inactive
            ValidationError: If the definition is invalid or the day already has an active entry
            FormatError: If a time is malformed
        """
        PartnerService.get_partner(db, partner_id, active_only=True)
        work_window, break_window = validate_weekly_window(
            day_of_week, start_time, end_time, break_start, break_end
        )
        PartnerAvailabilityService._ensure_day_free(db, partner_id, day_of_week)

        entry = PartnerAvailability(
            partner_id=partner_id,
            day_of_week=day_of_week,
            start_time=work_window.start.to_time(),
            end_time=work_window.end.to_time(),
            break_start=break_window.start.to_time() if break_window else None,
            break_end=break_window.end.to_time() if break_window else None,
            active=True,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        logger.info(f"Created availability {entry.id} for partner {partner_id} on day {day_of_week}")
        return entry

    @staticmethod
    def update_availability(
        db: Session,
        partner_id: int,
        availability_id: int,
        day_of_week: Any = MISSING,
        start_time: Any = MISSING,
        end_time: Any = MISSING,
        break_start: Any = MISSING,
        break_end: Any = MISSING,
    ) -> PartnerAvailability:
        """
        Partially update a weekly entry.

        Omitted fields keep their stored value; the merged entry is validated
        as a whole. Passing None for both break fields removes the break.

        Raises:
            NotFoundError: If the entry does not belong to the partner
            ValidationError: If the merged definition is invalid
        """
        entry = PartnerAvailabilityService._get_owned(db, partner_id, availability_id)

        merged_day = entry.day_of_week if day_of_week is MISSING else day_of_week
        merged_start = _format_stored(entry.start_time) if start_time is MISSING else start_time
        merged_end = _format_stored(entry.end_time) if end_time is MISSING else end_time
        merged_break_start = _format_stored(entry.break_start) if break_start is MISSING else break_start
        merged_break_end = _format_stored(entry.break_end) if break_end is MISSING else break_end

        work_window, break_window = validate_weekly_window(
            merged_day, merged_start, merged_end, merged_break_start, merged_break_end
        )
        if entry.active:
            PartnerAvailabilityService._ensure_day_free(db, partner_id, merged_day, exclude_id=entry.id)

        entry.day_of_week = merged_day
        entry.start_time = work_window.start.to_time()
        entry.end_time = work_window.end.to_time()
        entry.break_start = break_window.start.to_time() if break_window else None
        entry.break_end = break_window.end.to_time() if break_window else None
        db.commit()
        db.refresh(entry)
        logger.info(f"Updated availability {entry.id} for partner {partner_id}")
        return entry

    @staticmethod
    def deactivate_availability(db: Session, partner_id: int, availability_id: int) -> PartnerAvailability:
        """Soft-deactivate a weekly entry; the day becomes a non-working day."""
        entry = PartnerAvailabilityService._get_owned(db, partner_id, availability_id)
        entry.active = False
        db.commit()
        db.refresh(entry)
        logger.info(f"Deactivated availability {entry.id} for partner {partner_id}")
        return entry
