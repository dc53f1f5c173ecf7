# backend/courtside/repositories/factory.py
"""
Repository Factory for the Courtside platform.

Centralizes repository creation so services get consistently initialized
repositories bound to the session they were given.
"""

from sqlalchemy.orm import Session

from .booking_repository import BookingRepository
from .coach_repository import CoachRepository
from .court_repository import CourtRepository
from .equipment_repository import EquipmentRepository
from .pricing_rule_repository import PricingRuleRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        return BookingRepository(db)

    @staticmethod
    def create_court_repository(db: Session) -> CourtRepository:
        return CourtRepository(db)

    @staticmethod
    def create_equipment_repository(db: Session) -> EquipmentRepository:
        return EquipmentRepository(db)

    @staticmethod
    def create_coach_repository(db: Session) -> CoachRepository:
        return CoachRepository(db)

    @staticmethod
    def create_pricing_rule_repository(db: Session) -> PricingRuleRepository:
        return PricingRuleRepository(db)
