# backend/courtside/core/enums.py
"""
Core enums for the Courtside platform.

String-valued so they serialize directly into JSON responses and
database columns.
"""

from enum import Enum


class RoleName(str, Enum):
    """Roles carried by the authenticated principal."""

    ADMIN = "admin"
    USER = "user"


class CourtType(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class EquipmentCategory(str, Enum):
    RACKET = "racket"
    SHOES = "shoes"
    BALL = "ball"
    PROTECTIVE_GEAR = "protective_gear"
    OTHER = "other"


class PricingRuleType(str, Enum):
    PEAK_HOUR = "peak_hour"
    WEEKEND = "weekend"
    INDOOR_PREMIUM = "indoor_premium"
    SEASONAL = "seasonal"
    CUSTOM = "custom"


class ResourceKind(str, Enum):
    """Bookable or rentable resource families."""

    COURT = "court"
    EQUIPMENT = "equipment"
    COACH = "coach"
