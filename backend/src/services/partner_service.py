"""
Partner service for the minimal partner records the scheduling core needs.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from models import Partner

logger = logging.getLogger(__name__)


class PartnerService:
    """Service class for partner lookups and registration."""

    @staticmethod
    def create_partner(db: Session, full_name: str, email: Optional[str] = None) -> Partner:
        """
        Register a new active partner.

        Raises:
            ValidationError: If the name is blank or the email is already registered
        """
        if not full_name or not full_name.strip():
            raise ValidationError("Nome do parceiro é obrigatório")

        partner = Partner(full_name=full_name.strip(), email=email, active=True, schedule_version=0)
        db.add(partner)
        try:
            db.commit()
        except IntegrityError as e:
            logger.warning(f"Duplicate partner email {email}: {e}")
            db.rollback()
            raise ValidationError("Já existe um parceiro com este e-mail") from e
        db.refresh(partner)
        logger.info(f"Created partner {partner.id}")
        return partner

    @staticmethod
    def get_partner(db: Session, partner_id: int, active_only: bool = False) -> Partner:
        """
        Get a partner by ID.

        Args:
            db: Database session
            partner_id: Partner ID
            active_only: Treat inactive partners as missing

        Raises:
            NotFoundError: If the partner does not exist (or is inactive with ``active_only``)
        """
        partner = db.query(Partner).filter(Partner.id == partner_id).first()
        if partner is None or (active_only and not partner.active):
            raise NotFoundError("Parceiro não encontrado")
        return partner
