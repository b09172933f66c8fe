"""
Services package for shared business logic.

This package contains service classes that encapsulate business logic
shared across multiple API endpoints.
"""

from .partner_service import PartnerService
from .partner_availability_service import PartnerAvailabilityService
from .blocked_date_service import BlockedDateService
from .availability_service import AvailabilityService
from .appointment_service import AppointmentService
from .schedule_store import ScheduleStore, SqlAlchemyScheduleStore

__all__ = [
    "PartnerService",
    "PartnerAvailabilityService",
    "BlockedDateService",
    "AvailabilityService",
    "AppointmentService",
    "ScheduleStore",
    "SqlAlchemyScheduleStore",
]
