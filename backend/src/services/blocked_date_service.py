"""
Blocked date service for partner unavailability exceptions.

Blocks are full-day (no times) or partial (both times). Overlapping blocks
are allowed; the evaluator reports each one separately.
"""

import logging
from datetime import date as date_type
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from core.constants import MAX_REASON_LENGTH
from core.exceptions import NotFoundError, ValidationError
from core.sentinels import MISSING
from models import PartnerBlockedDate
from services.partner_service import PartnerService
from shared_types.time_interval import TimeInterval, TimeOfDay, parse_time

logger = logging.getLogger(__name__)


def validate_block_window(
    start_time: Optional[str], end_time: Optional[str]
) -> Optional[TimeInterval]:
    """
    Validate the optional window of a blocked date.

    Returns:
        The blocked window, or None for a full-day block

    Raises:
        ValidationError: If only one time is given or start is not before end
        FormatError: If a time is malformed
    """
    if start_time is None and end_time is None:
        return None
    if start_time is None or end_time is None:
        raise ValidationError("Horário de início e fim devem ser informados juntos")

    start = parse_time(start_time, "Horário de início")
    end = parse_time(end_time, "Horário de fim")
    if start >= end:
        raise ValidationError("Horário de início deve ser menor que o horário de fim")
    return TimeInterval(start, end)


def _normalize_reason(reason: Optional[str]) -> Optional[str]:
    if reason is None:
        return None
    reason = reason.strip()
    if len(reason) > MAX_REASON_LENGTH:
        raise ValidationError(f"Motivo deve ter no máximo {MAX_REASON_LENGTH} caracteres")
    return reason or None


class BlockedDateService:
    """Service class for blocked date registry operations."""

    @staticmethod
    def find_blocks(
        db: Session,
        partner_id: int,
        start_date: date_type,
        end_date: Optional[date_type] = None,
    ) -> List[PartnerBlockedDate]:
        """
        Active blocks of a partner in a date range.

        Args:
            db: Database session
            partner_id: Partner ID
            start_date: First date (inclusive)
            end_date: Last date (inclusive); defaults to ``start_date``

        Returns:
            Blocks ordered by date, full-day blocks first within a date
        """
        end_date = end_date or start_date
        if end_date < start_date:
            raise ValidationError("Data final deve ser igual ou posterior à data inicial")
        return db.query(PartnerBlockedDate).filter(
            PartnerBlockedDate.partner_id == partner_id,
            PartnerBlockedDate.blocked_date >= start_date,
            PartnerBlockedDate.blocked_date <= end_date,
            PartnerBlockedDate.active == True,  # noqa: E712
        ).order_by(
            PartnerBlockedDate.blocked_date,
            PartnerBlockedDate.start_time.nulls_first(),
            PartnerBlockedDate.id,
        ).all()

    @staticmethod
    def _get_owned(db: Session, partner_id: int, blocked_id: int) -> PartnerBlockedDate:
        block = db.query(PartnerBlockedDate).filter(
            PartnerBlockedDate.id == blocked_id,
            PartnerBlockedDate.partner_id == partner_id,
        ).first()
        if block is None:
            raise NotFoundError("Bloqueio não encontrado")
        return block

    @staticmethod
    def create_blocked_date(
        db: Session,
        partner_id: int,
        blocked_date: date_type,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> PartnerBlockedDate:
        """
        Block a date (whole day when no times are given).

        Raises:
            NotFoundError: If the partner does not exist or is inactive
            ValidationError: If the window is invalid
        """
        PartnerService.get_partner(db, partner_id, active_only=True)
        window = validate_block_window(start_time, end_time)

        block = PartnerBlockedDate(
            partner_id=partner_id,
            blocked_date=blocked_date,
            start_time=window.start.to_time() if window else None,
            end_time=window.end.to_time() if window else None,
            reason=_normalize_reason(reason),
            active=True,
        )
        db.add(block)
        db.commit()
        db.refresh(block)
        logger.info(
            f"Blocked {blocked_date} for partner {partner_id}"
            f" ({'full day' if window is None else window})"
        )
        return block

    @staticmethod
    def update_blocked_date(
        db: Session,
        partner_id: int,
        blocked_id: int,
        blocked_date: Any = MISSING,
        start_time: Any = MISSING,
        end_time: Any = MISSING,
        reason: Any = MISSING,
    ) -> PartnerBlockedDate:
        """Partially update a block; the merged window is validated again."""
        block = BlockedDateService._get_owned(db, partner_id, blocked_id)

        def _stored(value: Any) -> Optional[str]:
            return str(TimeOfDay.from_time(value)) if value is not None else None

        merged_start = _stored(block.start_time) if start_time is MISSING else start_time
        merged_end = _stored(block.end_time) if end_time is MISSING else end_time
        window: Optional[TimeInterval] = validate_block_window(merged_start, merged_end)

        if blocked_date is not MISSING:
            block.blocked_date = blocked_date
        block.start_time = window.start.to_time() if window else None
        block.end_time = window.end.to_time() if window else None
        if reason is not MISSING:
            block.reason = _normalize_reason(reason)
        db.commit()
        db.refresh(block)
        logger.info(f"Updated blocked date {block.id} for partner {partner_id}")
        return block

    @staticmethod
    def deactivate_blocked_date(db: Session, partner_id: int, blocked_id: int) -> PartnerBlockedDate:
        """Soft-deactivate a block; the date's weekly schedule applies again."""
        block = BlockedDateService._get_owned(db, partner_id, blocked_id)
        block.active = False
        db.commit()
        db.refresh(block)
        logger.info(f"Deactivated blocked date {block.id} for partner {partner_id}")
        return block
