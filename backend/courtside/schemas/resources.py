"""Catalog and admin schemas: courts, equipment, coaches and pricing rules."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from ..core.enums import CourtType, EquipmentCategory, PricingRuleType
from ..core.timezone_utils import parse_hhmm
from .base import Money, StandardizedModel, StrictRequestModel


class CourtResponse(StandardizedModel):
    id: str
    name: str
    type: str
    sport: str
    base_price_per_hour: Money
    is_active: bool
    capacity: int
    description: str = ""
    amenities: List[str] = Field(default_factory=list)


class EquipmentResponse(StandardizedModel):
    id: str
    name: str
    category: str
    price_per_hour: Money
    total_quantity: int
    available_quantity: int
    is_active: bool
    description: str = ""


class AvailabilityWindowSchema(StandardizedModel):
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str
    end_time: str


class CoachResponse(StandardizedModel):
    id: str
    name: str
    specialization: str
    price_per_hour: Money
    is_active: bool
    bio: str = ""
    experience: int = 0
    rating: Money
    availability: List[AvailabilityWindowSchema] = Field(default_factory=list)


class TimeRange(StrictRequestModel):
    start: str = Field(..., validation_alias=AliasChoices("start", "startTime", "start_time"))
    end: str = Field(..., validation_alias=AliasChoices("end", "endTime", "end_time"))

    @model_validator(mode="after")
    def _valid_range(self) -> "TimeRange":
        start, end = parse_hhmm(self.start), parse_hhmm(self.end)
        if start > end:
            raise ValueError("Time range start must not be after its end")
        return self


class DateRange(StrictRequestModel):
    start: date = Field(..., validation_alias=AliasChoices("start", "startDate", "start_date"))
    end: date = Field(..., validation_alias=AliasChoices("end", "endDate", "end_date"))

    @model_validator(mode="after")
    def _valid_range(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("Date range start must not be after its end")
        return self


class RuleConditions(StrictRequestModel):
    """Optional facets; an empty list places no restriction."""

    court_types: List[CourtType] = Field(default_factory=list)
    days_of_week: List[int] = Field(default_factory=list)
    time_ranges: List[TimeRange] = Field(default_factory=list)
    date_ranges: List[DateRange] = Field(default_factory=list)

    @field_validator("days_of_week")
    @classmethod
    def _valid_days(cls, v: List[int]) -> List[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("daysOfWeek values must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

    def to_storage(self) -> dict:
        return {
            "court_types": [ct.value for ct in self.court_types],
            "days_of_week": list(self.days_of_week),
            "time_ranges": [{"start": r.start, "end": r.end} for r in self.time_ranges],
            "date_ranges": [
                {"start": r.start.isoformat(), "end": r.end.isoformat()} for r in self.date_ranges
            ],
        }


class PricingRuleCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = ""
    rule_type: PricingRuleType
    multiplier: Decimal = Field(..., ge=0)
    applicable_conditions: RuleConditions = Field(default_factory=RuleConditions)
    priority: int = 0
    is_active: bool = True


class PricingRuleUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    rule_type: Optional[PricingRuleType] = None
    multiplier: Optional[Decimal] = Field(None, ge=0)
    applicable_conditions: Optional[RuleConditions] = None
    priority: Optional[int] = None
    is_active: Optional[bool] = None


class RuleConditionsResponse(StandardizedModel):
    court_types: List[str] = Field(default_factory=list)
    days_of_week: List[int] = Field(default_factory=list)
    time_ranges: List[dict] = Field(default_factory=list)
    date_ranges: List[dict] = Field(default_factory=list)


class PricingRuleResponse(StandardizedModel):
    id: str
    name: str
    description: str
    rule_type: str
    multiplier: Money
    applicable_conditions: RuleConditionsResponse
    priority: int
    is_active: bool
    created_at: Optional[datetime] = None


class EquipmentStockUpdate(StrictRequestModel):
    total_quantity: Optional[int] = Field(None, ge=0)
    available_quantity: Optional[int] = Field(None, ge=0)
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    category: Optional[EquipmentCategory] = None
