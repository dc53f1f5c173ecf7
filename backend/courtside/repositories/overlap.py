# backend/courtside/repositories/overlap.py
"""
Interval-overlap query shared by every availability check.

Two half-open intervals ``[s1, e1)`` and ``[s2, e2)`` overlap iff
``s1 < e2 and e1 > s2``. Touching endpoints do not overlap. Court,
equipment and coach checks all build an ``OverlapQuery`` and hand it to
``BookingRepository`` so the three facets share one predicate.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import and_

from ..core.enums import ResourceKind
from ..core.exceptions import InvalidDurationException, ValidationException


def intervals_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    return s1 < e2 and e1 > s2


def overlap_clause(start_column: Any, end_column: Any, start: datetime, end: datetime) -> Any:
    """SQL form of ``intervals_overlap`` against a stored ``[start_column, end_column)``."""
    return and_(start_column < end, end_column > start)


@dataclass(frozen=True)
class OverlapQuery:
    """Occupying bookings of one resource that overlap ``[start, end)``."""

    resource_kind: ResourceKind
    resource_id: str
    start: datetime
    end: datetime
    exclude_booking_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.resource_kind, ResourceKind):
            raise ValidationException(
                f"Unknown resource kind {self.resource_kind!r}", code="INVALID_RESOURCE_KIND"
            )
        if not self.resource_id:
            raise ValidationException("Resource id is required", code="MISSING_RESOURCE_ID")
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValidationException(
                "Overlap bounds must be timezone-aware", code="NAIVE_DATETIME"
            )
        if self.end <= self.start:
            raise InvalidDurationException(self.start, self.end)
