# backend/courtside/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each request gets fresh service instances bound to its own session; the
resource lock manager is process-wide.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.resource_lock import get_lock_manager
from ...services.admin_service import AdminService
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.catalog_service import CatalogService
from ...services.pricing_service import PricingService
from .database import get_db


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    return PricingService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db, lock_manager=get_lock_manager())


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db, lock_manager=get_lock_manager())
