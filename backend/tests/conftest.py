"""
Test configuration and shared fixtures for the clinic scheduling test suite.

Every test gets its own in-memory SQLite database created from the ORM
metadata, so tests are fully isolated and need no external services.
"""

from datetime import date, time
from typing import Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.constants import APPOINTMENT_STATUS_SCHEDULED
from core.database import Base, get_db
from models import Appointment, Partner, PartnerAvailability, PartnerBlockedDate, Room


# Reference dates used across the suite (0=Sunday convention in parentheses)
MONDAY = date(2025, 12, 22)     # (1)
TUESDAY = date(2025, 12, 23)    # (2)
CHRISTMAS = date(2025, 12, 25)  # Thursday (4)
SUNDAY = date(2025, 12, 28)     # (0)


@pytest.fixture(scope="function")
def db_engine() -> Generator[Engine, None, None]:
    """
    Create a fresh in-memory database for a single test.

    StaticPool keeps one connection alive so every session (including the
    ones FastAPI uses inside TestClient) sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the per-test engine."""
    TestingSession = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()

    yield session

    session.close()


@pytest.fixture
def client(db_session) -> Generator[TestClient, None, None]:
    """FastAPI test client whose requests use the test session."""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


# Helper functions for building scheduling data
def create_partner(
    db_session: Session,
    full_name: str = "Dra. Ana Souza",
    email: Optional[str] = None,
    active: bool = True,
) -> Partner:
    """Create a partner with a fresh schedule version."""
    partner = Partner(full_name=full_name, email=email, active=active, schedule_version=0)
    db_session.add(partner)
    db_session.commit()
    return partner


def add_weekly_availability(
    db_session: Session,
    partner: Partner,
    day_of_week: int,
    start: time,
    end: time,
    break_start: Optional[time] = None,
    break_end: Optional[time] = None,
    active: bool = True,
) -> PartnerAvailability:
    """Insert a weekly availability row directly (bypasses service validation)."""
    entry = PartnerAvailability(
        partner_id=partner.id,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        break_start=break_start,
        break_end=break_end,
        active=active,
    )
    db_session.add(entry)
    db_session.commit()
    return entry


def add_blocked_date(
    db_session: Session,
    partner: Partner,
    blocked_date: date,
    start: Optional[time] = None,
    end: Optional[time] = None,
    reason: Optional[str] = None,
    active: bool = True,
) -> PartnerBlockedDate:
    """Insert a blocked date; omit times for a full-day block."""
    block = PartnerBlockedDate(
        partner_id=partner.id,
        blocked_date=blocked_date,
        start_time=start,
        end_time=end,
        reason=reason,
        active=active,
    )
    db_session.add(block)
    db_session.commit()
    return block


def add_appointment(
    db_session: Session,
    partner: Partner,
    on_date: date,
    start: time,
    end: time,
    status: str = APPOINTMENT_STATUS_SCHEDULED,
    room: Optional[Room] = None,
) -> Appointment:
    """Insert an appointment directly, skipping the conflict validator."""
    appointment = Appointment(
        partner_id=partner.id,
        date=on_date,
        start_time=start,
        end_time=end,
        status=status,
        scheduling_status="CONFIRMED",
        room_id=room.id if room else None,
    )
    db_session.add(appointment)
    db_session.commit()
    return appointment


def create_room(db_session: Session, name: str = "Sala 1", active: bool = True) -> Room:
    room = Room(name=name, active=active)
    db_session.add(room)
    db_session.commit()
    return room


def create_partner_with_week(db_session: Session, **partner_kwargs) -> Partner:
    """
    Partner working Monday to Friday 08:00-17:00 with lunch 12:00-13:00.

    Tuesday has no break; Thursday is a plain 08:00-17:00 day so date-specific
    blocks can be tested without the break interfering.
    """
    partner = create_partner(db_session, **partner_kwargs)
    add_weekly_availability(db_session, partner, 1, time(8, 0), time(17, 0), time(12, 0), time(13, 0))
    add_weekly_availability(db_session, partner, 2, time(8, 0), time(17, 0))
    add_weekly_availability(db_session, partner, 3, time(8, 0), time(17, 0), time(12, 0), time(13, 0))
    add_weekly_availability(db_session, partner, 4, time(8, 0), time(17, 0))
    add_weekly_availability(db_session, partner, 5, time(8, 0), time(17, 0), time(12, 0), time(13, 0))
    return partner
