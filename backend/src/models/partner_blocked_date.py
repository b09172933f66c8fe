"""
Blocked date model representing partner unavailability exceptions.

A block removes availability for a specific calendar date, either for the
whole day (no times) or for a partial window. Blocks take precedence over
the default weekly schedule. Overlapping blocks are permitted.
"""

from datetime import date as date_type, datetime, time
from typing import Optional

from sqlalchemy import String, TIMESTAMP, ForeignKey, Date, Time, Index, Boolean, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import MAX_REASON_LENGTH
from shared_types.availability import BlockedDateSnapshot
from shared_types.time_interval import TimeInterval


class PartnerBlockedDate(Base):
    """
    Partner blocked date (time off, meetings, holidays).

    ``start_time``/``end_time`` are both null for a full-day block.
    """

    __tablename__ = "partner_blocked_dates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the blocked date."""

    partner_id: Mapped[int] = mapped_column(ForeignKey("partners.id"))
    """Reference to the partner."""

    blocked_date: Mapped[date_type] = mapped_column(Date)
    """Calendar date being blocked."""

    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """Start of the blocked window. Null indicates a full-day block."""

    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """End of the blocked window. Null indicates a full-day block."""

    reason: Mapped[Optional[str]] = mapped_column(String(MAX_REASON_LENGTH), nullable=True)
    """Free-text reason shown in conflict messages."""

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    """Soft-delete flag."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    partner = relationship("Partner", back_populates="blocked_dates")

    __table_args__ = (
        CheckConstraint(
            "start_time IS NULL OR end_time IS NULL OR start_time != end_time",
            name='check_blocked_date_valid_time_range'
        ),
        Index('idx_partner_blocked_dates_partner_date', 'partner_id', 'blocked_date'),
    )

    @property
    def is_full_day(self) -> bool:
        """Check if this block covers the whole day."""
        return self.start_time is None or self.end_time is None

    @property
    def window(self) -> Optional[TimeInterval]:
        if self.is_full_day:
            return None
        assert self.start_time is not None and self.end_time is not None
        return TimeInterval.from_times(self.start_time, self.end_time)

    def to_snapshot(self) -> BlockedDateSnapshot:
        return BlockedDateSnapshot(
            partner_id=self.partner_id,
            blocked_date=self.blocked_date,
            window=self.window,
            reason=self.reason,
            blocked_date_id=self.id,
        )

    def __repr__(self) -> str:
        return f"<PartnerBlockedDate(id={self.id}, partner_id={self.partner_id}, date={self.blocked_date}, time={self.start_time}-{self.end_time})>"
