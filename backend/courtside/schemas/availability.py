"""Availability check requests and per-resource results."""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.config import settings
from .base import StandardizedModel, StrictRequestModel, to_utc_instant


class EquipmentRequest(StrictRequestModel):
    equipment_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class ResourceRequest(StrictRequestModel):
    """Court, equipment and optional coach for one interval."""

    court_id: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    equipment: List[EquipmentRequest] = Field(default_factory=list)
    coach_id: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalize_instant(cls, v: object) -> object:
        return to_utc_instant(v)

    @field_validator("coach_id", mode="before")
    @classmethod
    def _blank_coach_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _within_max_duration(self) -> "ResourceRequest":
        # Ordering is checked by the engines (InvalidDuration), only the upper bound here
        if self.end_time > self.start_time:
            limit = timedelta(hours=settings.max_booking_hours)
            if self.end_time - self.start_time > limit:
                raise ValueError(
                    f"A booking cannot be longer than {settings.max_booking_hours} hours"
                )
        return self


class AvailabilityCheckRequest(ResourceRequest):
    exclude_booking_id: Optional[str] = None


class ConflictingBooking(StandardizedModel):
    id: str
    start_time: datetime
    end_time: datetime


class CourtAvailability(StandardizedModel):
    available: bool
    reason: Optional[str] = None
    court_id: str
    conflicting_bookings: List[ConflictingBooking] = Field(default_factory=list)


class EquipmentItemAvailability(StandardizedModel):
    equipment_id: str
    name: Optional[str] = None
    requested: int
    available: bool
    available_quantity: Optional[int] = None
    booked_quantity: Optional[int] = None
    remaining: Optional[int] = None
    shortfall: int = 0
    reason: Optional[str] = None


class EquipmentAvailability(StandardizedModel):
    available: bool
    reason: Optional[str] = None
    items: List[EquipmentItemAvailability] = Field(default_factory=list)

    @property
    def unavailable_items(self) -> List[EquipmentItemAvailability]:
        return [item for item in self.items if not item.available]


class CoachAvailability(StandardizedModel):
    available: bool
    reason: Optional[str] = None
    coach_id: Optional[str] = None
    conflicting_bookings: List[ConflictingBooking] = Field(default_factory=list)


class AvailabilityResult(StandardizedModel):
    """Combined check: every sub-result is always present."""

    available: bool
    errors: List[str] = Field(default_factory=list)
    court: CourtAvailability
    equipment: EquipmentAvailability
    coach: CoachAvailability
