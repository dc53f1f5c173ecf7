"""FastAPI dependency providers."""

from .auth import get_current_principal, require_admin
from .database import get_db
from .services import (
    get_admin_service,
    get_availability_service,
    get_booking_service,
    get_catalog_service,
    get_pricing_service,
)

__all__ = [
    "get_admin_service",
    "get_availability_service",
    "get_booking_service",
    "get_catalog_service",
    "get_current_principal",
    "get_db",
    "get_pricing_service",
    "require_admin",
]
