"""
Appointment model representing booked sessions on a partner's calendar.

Appointments are the read side of conflict resolution: every non-terminal
appointment occupies its half-open ``[start_time, end_time)`` interval on the
partner's calendar (and on its room, when one is reserved).
"""

from datetime import date as date_type, datetime, time
from typing import Optional

from sqlalchemy import String, ForeignKey, Index, TIMESTAMP, Date, Time, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.constants import (
    MAX_NOTES_LENGTH, MAX_REASON_LENGTH, APPOINTMENT_STATUS_SCHEDULED,
    TERMINAL_APPOINTMENT_STATUSES,
)
from core.database import Base
from shared_types.availability import ExistingAppointment
from shared_types.booking import SchedulingStatus
from shared_types.time_interval import TimeInterval

_NON_TERMINAL_PREDICATE = "status NOT IN ({})".format(
    ", ".join(f"'{status}'" for status in TERMINAL_APPOINTMENT_STATUSES)
)


class Appointment(Base):
    """
    Appointment entity representing a scheduled session with a partner.

    Two kinds of state live here:
    - ``status`` is the appointment lifecycle (SCHEDULED, CONFIRMED, IN_PROGRESS,
      COMPLETED, CANCELLED, NO_SHOW). CANCELLED and NO_SHOW are terminal and
      never count toward conflicts.
    - ``scheduling_status`` is the booking sub-state reached by the conflict
      validator (CONFIRMED for every persisted appointment).
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the appointment."""

    partner_id: Mapped[int] = mapped_column(ForeignKey("partners.id"))
    """Reference to the partner whose calendar this appointment occupies."""

    patient_id: Mapped[Optional[int]] = mapped_column(nullable=True)
    """Opaque patient reference; patient records are owned by another service."""

    room_id: Mapped[Optional[int]] = mapped_column(ForeignKey("rooms.id"), nullable=True)
    """Optional room reserved by the appointment."""

    date: Mapped[date_type] = mapped_column(Date)
    """Calendar date of the appointment."""

    start_time: Mapped[time] = mapped_column(Time)
    """Start time (inclusive)."""

    end_time: Mapped[time] = mapped_column(Time)
    """End time (exclusive)."""

    status: Mapped[str] = mapped_column(String(50), default=APPOINTMENT_STATUS_SCHEDULED)
    """Lifecycle status. See core.constants for valid values."""

    scheduling_status: Mapped[str] = mapped_column(String(20), default=SchedulingStatus.CONFIRMED.value)
    """Booking sub-state from the conflict validator."""

    notes: Mapped[Optional[str]] = mapped_column(String(MAX_NOTES_LENGTH), nullable=True)
    """Optional free-text notes."""

    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(MAX_REASON_LENGTH), nullable=True)
    """Reason given when the appointment was cancelled."""

    canceled_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Timestamp when the appointment was cancelled (if applicable)."""

    created_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    # Relationships
    partner = relationship("Partner", back_populates="appointments")
    room = relationship("Room", back_populates="appointments")

    # Table indexes for performance
    __table_args__ = (
        Index('idx_appointments_partner_date', 'partner_id', 'date'),
        Index('idx_appointments_room_date', 'room_id', 'date'),
        Index('idx_appointments_status', 'status'),
        # Storage-level guard: two live appointments cannot start at the same slot
        Index(
            'uq_appointments_partner_slot_active',
            'partner_id', 'date', 'start_time',
            unique=True,
            sqlite_where=text(_NON_TERMINAL_PREDICATE),
            postgresql_where=text(_NON_TERMINAL_PREDICATE),
        ),
    )

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_times(self.start_time, self.end_time)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_APPOINTMENT_STATUSES

    def to_snapshot(self) -> ExistingAppointment:
        return ExistingAppointment(
            appointment_id=self.id,
            partner_id=self.partner_id,
            date=self.date,
            interval=self.interval,
            status=self.status,
            room_id=self.room_id,
        )

    def __repr__(self) -> str:
        return f"<Appointment(id={self.id}, partner_id={self.partner_id}, date={self.date}, {self.start_time}-{self.end_time}, status='{self.status}')>"
