"""Request and response schemas for the Courtside API."""

from .availability import (
    AvailabilityCheckRequest,
    AvailabilityResult,
    CoachAvailability,
    CourtAvailability,
    EquipmentAvailability,
    EquipmentItemAvailability,
    EquipmentRequest,
    ResourceRequest,
)
from .booking import BookingCreate, BookingResponse, CourtSchedule
from .pricing import PriceBreakdown, PriceEstimateRequest

__all__ = [
    "AvailabilityCheckRequest",
    "AvailabilityResult",
    "BookingCreate",
    "BookingResponse",
    "CoachAvailability",
    "CourtAvailability",
    "CourtSchedule",
    "EquipmentAvailability",
    "EquipmentItemAvailability",
    "EquipmentRequest",
    "PriceBreakdown",
    "PriceEstimateRequest",
    "ResourceRequest",
]
