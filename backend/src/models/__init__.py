# Package initialization
# Import all models to ensure relationships are properly established
from .partner import Partner
from .partner_availability import PartnerAvailability
from .partner_blocked_date import PartnerBlockedDate
from .room import Room
from .appointment import Appointment

__all__ = [
    "Partner",
    "PartnerAvailability",
    "PartnerBlockedDate",
    "Room",
    "Appointment",
]
