# backend/courtside/models/__init__.py
"""
Database models for the Courtside platform.

Importing this package registers every mapper on ``Base.metadata``.
"""

from .booking import OCCUPYING_STATUSES, Booking, BookingEquipment, BookingStatus
from .coach import Coach, CoachAvailabilityWindow
from .court import Court
from .equipment import Equipment
from .pricing_rule import PricingRule

__all__ = [
    "Booking",
    "BookingEquipment",
    "BookingStatus",
    "Coach",
    "CoachAvailabilityWindow",
    "Court",
    "Equipment",
    "OCCUPYING_STATUSES",
    "PricingRule",
]
