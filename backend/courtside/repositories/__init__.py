# backend/courtside/repositories/__init__.py
"""
Repository layer for the Courtside platform.

Usage:
    from courtside.repositories import RepositoryFactory

    bookings = RepositoryFactory.create_booking_repository(db)
    conflicts = bookings.find_conflicting(OverlapQuery(ResourceKind.COURT, court_id, start, end))
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .coach_repository import CoachRepository
from .court_repository import CourtRepository
from .equipment_repository import EquipmentRepository
from .factory import RepositoryFactory
from .overlap import OverlapQuery, intervals_overlap, overlap_clause
from .pricing_rule_repository import PricingRuleRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "CoachRepository",
    "CourtRepository",
    "EquipmentRepository",
    "OverlapQuery",
    "PricingRuleRepository",
    "RepositoryFactory",
    "intervals_overlap",
    "overlap_clause",
]
