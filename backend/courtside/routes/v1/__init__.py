"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import admin, bookings, catalog, health, pricing

__all__ = ["admin", "bookings", "catalog", "health", "pricing"]
