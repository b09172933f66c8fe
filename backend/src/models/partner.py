"""
Partner model representing a clinic practitioner with a bookable calendar.

Only the fields the scheduling core needs live here; the broader partner
profile (documents, banking, partnership terms) is owned elsewhere.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, TIMESTAMP, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import MAX_STRING_LENGTH


class Partner(Base):
    """
    Partner (practitioner) entity.

    ``schedule_version`` is bumped inside every appointment commit for this
    partner. The UPDATE takes a write lock on the row, which serializes
    concurrent check-and-insert transactions for the same partner.
    """

    __tablename__ = "partners"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the partner."""

    full_name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    """Display name used in scheduling messages."""

    email: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True, unique=True)
    """Contact email (optional, unique when present)."""

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    """Inactive partners cannot receive new availability or bookings."""

    schedule_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    """Monotonic counter bumped by each appointment commit (write-lock anchor)."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    availability = relationship("PartnerAvailability", back_populates="partner")
    blocked_dates = relationship("PartnerBlockedDate", back_populates="partner")
    appointments = relationship("Appointment", back_populates="partner")

    def __repr__(self) -> str:
        return f"<Partner(id={self.id}, full_name='{self.full_name}', active={self.active})>"
