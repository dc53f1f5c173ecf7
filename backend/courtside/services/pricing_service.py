# backend/courtside/services/pricing_service.py
"""
Pricing Service for the Courtside platform.

Computes the itemized price of a booking request by stacking every active
pricing rule that matches the request. Pure with respect to the store (no
writes), so identical inputs against identical data always produce an
identical ``PriceBreakdown``; the estimate endpoint and the booking
coordinator both use it.

Arithmetic is ``Decimal`` throughout. Each price line is rounded half-up to
two places; the multiplier itself is kept exact.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import PRICE_QUANTUM
from ..core.exceptions import NotFoundException
from ..core.timezone_utils import (
    day_of_week,
    minutes_since_midnight,
    parse_hhmm,
    to_facility_local,
)
from ..models.court import Court
from ..models.pricing_rule import PricingRule
from ..repositories import RepositoryFactory
from ..schemas.availability import EquipmentRequest
from ..schemas.pricing import AppliedRule, CoachPriceLine, EquipmentPriceLine, PriceBreakdown
from .availability_service import merge_equipment_requests, validate_interval
from .base import BaseService

logger = logging.getLogger(__name__)

_CENTS = Decimal(PRICE_QUANTUM)
_HOURS_DISPLAY = Decimal("0.0001")
_SECONDS_PER_HOUR = Decimal(3600)


def money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def duration_hours(start: datetime, end: datetime) -> Decimal:
    validate_interval(start, end)
    return Decimal(str((end - start).total_seconds())) / _SECONDS_PER_HOUR


def rule_applies(conditions: Mapping[str, Any], court_type: str, local_start: datetime) -> bool:
    """
    Whether every non-empty facet of ``conditions`` matches the request.

    ``local_start`` is the booking start in facility-local time; time ranges
    include both ends and compare the start time only, date ranges compare
    the local calendar date of the start.
    """
    court_types = conditions.get("court_types") or []
    if court_types and court_type not in court_types:
        return False

    days = conditions.get("days_of_week") or []
    if days and day_of_week(local_start) not in days:
        return False

    time_ranges = conditions.get("time_ranges") or []
    if time_ranges:
        minute = minutes_since_midnight(local_start.time())
        if not any(
            parse_hhmm(r["start"]) <= minute <= parse_hhmm(r["end"]) for r in time_ranges
        ):
            return False

    date_ranges = conditions.get("date_ranges") or []
    if date_ranges:
        day = local_start.date()
        if not any(
            date.fromisoformat(r["start"]) <= day <= date.fromisoformat(r["end"])
            for r in date_ranges
        ):
            return False

    return True


class PricingService(BaseService):
    """Rule-stacking price computation."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.court_repository = RepositoryFactory.create_court_repository(db)
        self.equipment_repository = RepositoryFactory.create_equipment_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.rule_repository = RepositoryFactory.create_pricing_rule_repository(db)

    def matching_rules(self, court: Court, start: datetime) -> List[PricingRule]:
        local_start = to_facility_local(start)
        return [
            rule
            for rule in self.rule_repository.list_active()
            if rule_applies(rule.applicable_conditions or {}, court.type, local_start)
        ]

    @BaseService.measure_operation("calculate_price")
    def calculate_price(
        self,
        court_id: str,
        start: datetime,
        end: datetime,
        equipment: Sequence[EquipmentRequest] = (),
        coach_id: Optional[str] = None,
    ) -> PriceBreakdown:
        """
        Price a booking request.

        Raises:
            InvalidDurationException: ``end`` is not after ``start``
            NotFoundException: the court does not exist
        """
        hours = duration_hours(start, end)

        court = self.court_repository.get_by_id(court_id, load_relationships=False)
        if court is None:
            raise NotFoundException("Court not found", code="COURT_NOT_FOUND", details={"court_id": court_id})

        court_base_price = money(Decimal(court.base_price_per_hour) * hours)
        multiplier = Decimal(1)
        applied: List[AppliedRule] = []
        for rule in self.matching_rules(court, start):
            multiplier *= Decimal(rule.multiplier)
            applied.append(
                AppliedRule(
                    name=rule.name, multiplier=Decimal(rule.multiplier), description=rule.description or ""
                )
            )
        court_price = money(court_base_price * multiplier)

        equipment_lines: List[EquipmentPriceLine] = []
        for request in merge_equipment_requests(equipment):
            item = self.equipment_repository.get_by_id(request.equipment_id, load_relationships=False)
            if item is None:
                continue
            price_per_hour = Decimal(item.price_per_hour)
            equipment_lines.append(
                EquipmentPriceLine(
                    equipment_id=item.id,
                    name=item.name,
                    quantity=request.quantity,
                    price_per_hour=price_per_hour,
                    total_price=money(price_per_hour * request.quantity * hours),
                )
            )
        equipment_price = sum((line.total_price for line in equipment_lines), Decimal("0.00"))

        coach_line: Optional[CoachPriceLine] = None
        coach_price = Decimal("0.00")
        if coach_id:
            coach = self.coach_repository.get_by_id(coach_id, load_relationships=False)
            if coach is not None:
                coach_price = money(Decimal(coach.price_per_hour) * hours)
                coach_line = CoachPriceLine(
                    coach_id=coach.id,
                    name=coach.name,
                    price_per_hour=Decimal(coach.price_per_hour),
                    total_price=coach_price,
                )

        subtotal = court_price + equipment_price + coach_price
        tax = money(subtotal * settings.tax_rate)
        return PriceBreakdown(
            court_id=court.id,
            duration_hours=hours.quantize(_HOURS_DISPLAY, rounding=ROUND_HALF_UP),
            court_base_price=court_base_price,
            court_multiplier=multiplier,
            court_price=court_price,
            equipment_price=equipment_price,
            coach_price=coach_price,
            subtotal=subtotal,
            tax_rate=settings.tax_rate,
            tax=tax,
            total_price=subtotal + tax,
            currency=settings.currency,
            applied_rules=applied,
            equipment_details=equipment_lines,
            coach_details=coach_line,
        )
