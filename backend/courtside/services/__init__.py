"""Service layer for the Courtside platform."""

from .admin_service import AdminService
from .availability_service import AvailabilityService
from .base import BaseService
from .booking_service import BookingService
from .catalog_service import CatalogService
from .pricing_service import PricingService

__all__ = [
    "AdminService",
    "AvailabilityService",
    "BaseService",
    "BookingService",
    "CatalogService",
    "PricingService",
]
