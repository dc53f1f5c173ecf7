"""Price estimate request and the itemized breakdown."""

from typing import List, Optional

from .availability import ResourceRequest
from .base import Money, StandardizedModel


class PriceEstimateRequest(ResourceRequest):
    pass


class AppliedRule(StandardizedModel):
    name: str
    multiplier: Money
    description: str = ""


class EquipmentPriceLine(StandardizedModel):
    equipment_id: str
    name: str
    quantity: int
    price_per_hour: Money
    total_price: Money


class CoachPriceLine(StandardizedModel):
    coach_id: str
    name: str
    price_per_hour: Money
    total_price: Money


class PriceBreakdown(StandardizedModel):
    """
    Authoritative price of a booking request.

    Returned verbatim by the estimate endpoint and persisted on the booking.
    """

    court_id: str
    duration_hours: Money
    court_base_price: Money
    court_multiplier: Money
    court_price: Money
    equipment_price: Money
    coach_price: Money
    subtotal: Money
    tax_rate: Money
    tax: Money
    total_price: Money
    currency: str
    applied_rules: List[AppliedRule]
    equipment_details: List[EquipmentPriceLine]
    coach_details: Optional[CoachPriceLine] = None
