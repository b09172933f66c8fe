"""
Partner availability model for default weekly schedule management.

This model stores the default working hours for each partner by day of week,
with an optional break (lunch) window inside the working hours.
"""

from datetime import time, datetime
from typing import Optional
from sqlalchemy import Time, TIMESTAMP, ForeignKey, Index, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import DAY_NAMES_PT
from shared_types.availability import WeeklyAvailabilitySnapshot
from shared_types.time_interval import TimeInterval


class PartnerAvailability(Base):
    """
    Model for storing partner default availability hours by day of week.

    At most one active record exists per (partner, day_of_week); this is
    enforced by PartnerAvailabilityService on write. Records are
    soft-deactivated (``active=False``) instead of deleted so historical
    scheduling context is preserved.
    """

    __tablename__ = "partner_availability"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the availability record."""

    partner_id: Mapped[int] = mapped_column(ForeignKey("partners.id"))
    """Reference to the partner."""

    day_of_week: Mapped[int] = mapped_column()
    """Day of the week (0=Sunday, 1=Monday, ..., 6=Saturday)."""

    start_time: Mapped[time] = mapped_column(Time)
    """Start of the working window."""

    end_time: Mapped[time] = mapped_column(Time)
    """End of the working window (exclusive)."""

    break_start: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """Start of the break window, if any."""

    break_end: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    """End of the break window, if any."""

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    """Soft-delete flag."""

    # Metadata
    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the availability record was created."""

    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the availability record was last updated."""

    # Relationships
    partner = relationship("Partner", back_populates="availability")

    # Table indexes for performance
    __table_args__ = (
        Index('idx_partner_availability_partner_day', 'partner_id', 'day_of_week'),
    )

    @property
    def day_name(self) -> str:
        """Get the day name in Portuguese for display."""
        return DAY_NAMES_PT[self.day_of_week]

    @property
    def work_window(self) -> TimeInterval:
        return TimeInterval.from_times(self.start_time, self.end_time)

    @property
    def break_window(self) -> Optional[TimeInterval]:
        if self.break_start is None or self.break_end is None:
            return None
        return TimeInterval.from_times(self.break_start, self.break_end)

    def to_snapshot(self) -> WeeklyAvailabilitySnapshot:
        return WeeklyAvailabilitySnapshot(
            partner_id=self.partner_id,
            day_of_week=self.day_of_week,
            work_window=self.work_window,
            break_window=self.break_window,
            availability_id=self.id,
        )

    def __repr__(self) -> str:
        return f"<PartnerAvailability(partner_id={self.partner_id}, day={self.day_name}, {self.start_time}-{self.end_time})>"
