# backend/courtside/schemas/booking.py
"""
Booking schemas for the Courtside platform.

Responses are built from the booking's own snapshot columns; the joined
court, coach and equipment records only contribute display names.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import Field, field_validator

from .availability import ResourceRequest
from .base import Money, StandardizedModel
from .pricing import AppliedRule

if TYPE_CHECKING:
    from ..models.booking import Booking


class BookingCreate(ResourceRequest):
    """Inbound booking request; the user id comes from the principal."""

    customer_name: str = Field("", max_length=120)
    customer_email: str = Field("", max_length=254)
    customer_phone: str = Field("", max_length=40)

    @field_validator("customer_name", "customer_email", "customer_phone")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class CourtSummary(StandardizedModel):
    id: str
    name: str
    type: str
    sport: str


class BookedEquipment(StandardizedModel):
    equipment_id: str
    name: Optional[str] = None
    quantity: int
    price_per_hour: Money


class BookedCoach(StandardizedModel):
    coach_id: str
    name: Optional[str] = None
    price_per_hour: Money


class BookingPricing(StandardizedModel):
    court_base_price: Money
    court_multiplier: Money
    court_price: Money
    equipment_price: Money
    coach_price: Money
    subtotal: Money
    tax: Money
    total_price: Money
    applied_rules: List[AppliedRule] = Field(default_factory=list)


class BookingResponse(StandardizedModel):
    id: str
    user_id: str
    court_id: str
    court: Optional[CourtSummary] = None
    start_time: datetime
    end_time: datetime
    status: str
    equipment: List[BookedEquipment] = Field(default_factory=list)
    coach: Optional[BookedCoach] = None
    pricing: BookingPricing
    customer_name: str
    customer_email: str
    customer_phone: str
    created_at: datetime

    @classmethod
    def from_booking(cls, booking: "Booking") -> "BookingResponse":
        equipment = [
            BookedEquipment(
                equipment_id=line.equipment_id,
                name=line.equipment.name if line.equipment is not None else None,
                quantity=line.quantity,
                price_per_hour=line.price_per_hour,
            )
            for line in booking.equipment_lines
        ]
        coach = None
        if booking.coach_id:
            coach = BookedCoach(
                coach_id=booking.coach_id,
                name=booking.coach.name if booking.coach is not None else None,
                price_per_hour=booking.coach_price_per_hour or 0,
            )
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            court_id=booking.court_id,
            court=CourtSummary.model_validate(booking.court) if booking.court is not None else None,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status,
            equipment=equipment,
            coach=coach,
            pricing=BookingPricing(
                court_base_price=booking.court_base_price,
                court_multiplier=booking.court_multiplier,
                court_price=booking.court_price,
                equipment_price=booking.equipment_price,
                coach_price=booking.coach_price,
                subtotal=booking.subtotal,
                tax=booking.tax,
                total_price=booking.total_price,
                applied_rules=[AppliedRule(**rule) for rule in booking.applied_rules or []],
            ),
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            created_at=booking.created_at,
        )


class CourtScheduleEntry(StandardizedModel):
    booking_id: str
    start_time: datetime
    end_time: datetime
    status: str


class CourtSchedule(StandardizedModel):
    court_id: str
    date: str
    timezone: str
    bookings: List[CourtScheduleEntry]
