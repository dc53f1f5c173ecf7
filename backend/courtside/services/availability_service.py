# backend/courtside/services/availability_service.py
"""
Availability Service for the Courtside platform.

Read-only checks deciding whether a court, a set of equipment requests and
an optional coach are jointly free for ``[start, end)``. Every facet looks
for conflicts through the same ``OverlapQuery``, so the three checks share
one half-open overlap rule.

A resource that is busy yields ``available=False`` with a reason. A store
that cannot be read raises, so callers can tell "busy" from "check failed".
"""

from datetime import datetime
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.constants import DAY_NAMES
from ..core.enums import ResourceKind
from ..core.exceptions import InvalidDurationException
from ..core.timezone_utils import (
    day_of_week,
    format_minutes,
    local_minute_span,
    parse_hhmm,
    to_facility_local,
)
from ..models.booking import Booking
from ..repositories import OverlapQuery, RepositoryFactory
from ..schemas.availability import (
    AvailabilityResult,
    CoachAvailability,
    ConflictingBooking,
    CourtAvailability,
    EquipmentAvailability,
    EquipmentItemAvailability,
    EquipmentRequest,
)
from .base import BaseService

logger = logging.getLogger(__name__)

Window = Tuple[int, int]


def validate_interval(start: datetime, end: datetime) -> None:
    if end <= start:
        raise InvalidDurationException(start, end)


def merge_equipment_requests(requests: Iterable[EquipmentRequest]) -> List[EquipmentRequest]:
    """Collapse repeated equipment ids into one request, keeping first-seen order."""
    merged: dict[str, int] = {}
    for request in requests:
        merged[request.equipment_id] = merged.get(request.equipment_id, 0) + request.quantity
    return [EquipmentRequest(equipment_id=eid, quantity=qty) for eid, qty in merged.items()]


def merge_windows(windows: Iterable[Window]) -> List[Window]:
    """Merge touching or overlapping minute windows of one day."""
    merged: List[Window] = []
    for start, end in sorted(windows):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _conflict_summaries(bookings: Sequence[Booking]) -> List[ConflictingBooking]:
    return [
        ConflictingBooking(id=b.id, start_time=b.start_time, end_time=b.end_time)
        for b in bookings
    ]


class AvailabilityService(BaseService):
    """Court, equipment and coach availability for one interval."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.court_repository = RepositoryFactory.create_court_repository(db)
        self.equipment_repository = RepositoryFactory.create_equipment_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)

    @BaseService.measure_operation("check_court")
    def check_court(
        self,
        court_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> CourtAvailability:
        validate_interval(start, end)
        court = self.court_repository.get_by_id(court_id, load_relationships=False)
        if court is None:
            return CourtAvailability(available=False, reason="Court not found", court_id=court_id)
        if not court.is_active:
            return CourtAvailability(
                available=False, reason="Court is currently inactive", court_id=court_id
            )

        conflicts = self.booking_repository.find_conflicting(
            OverlapQuery(ResourceKind.COURT, court_id, start, end, exclude_booking_id)
        )
        if conflicts:
            return CourtAvailability(
                available=False,
                reason="Court already booked for this time slot",
                court_id=court_id,
                conflicting_bookings=_conflict_summaries(conflicts),
            )
        return CourtAvailability(available=True, court_id=court_id)

    @BaseService.measure_operation("check_equipment")
    def check_equipment(
        self,
        requests: Sequence[EquipmentRequest],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> EquipmentAvailability:
        """
        Check each requested item against stock minus overlapping bookings.

        An item passes when ``available_quantity - booked >= requested``;
        failing items report the shortfall.
        """
        validate_interval(start, end)
        items: List[EquipmentItemAvailability] = []
        for request in merge_equipment_requests(requests):
            items.append(self._check_equipment_item(request, start, end, exclude_booking_id))

        if any(not item.available for item in items):
            return EquipmentAvailability(
                available=False, reason="Some equipment items are not available", items=items
            )
        return EquipmentAvailability(available=True, items=items)

    def _check_equipment_item(
        self,
        request: EquipmentRequest,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str],
    ) -> EquipmentItemAvailability:
        item = self.equipment_repository.get_by_id(request.equipment_id, load_relationships=False)
        if item is None:
            return EquipmentItemAvailability(
                equipment_id=request.equipment_id,
                requested=request.quantity,
                available=False,
                reason="Equipment not found",
            )
        if not item.is_active:
            return EquipmentItemAvailability(
                equipment_id=item.id,
                name=item.name,
                requested=request.quantity,
                available=False,
                reason="Equipment is currently inactive",
            )

        booked = self.booking_repository.sum_booked_quantity(
            OverlapQuery(ResourceKind.EQUIPMENT, item.id, start, end, exclude_booking_id)
        )
        remaining = item.available_quantity - booked
        shortfall = max(request.quantity - remaining, 0)
        return EquipmentItemAvailability(
            equipment_id=item.id,
            name=item.name,
            requested=request.quantity,
            available=shortfall == 0,
            available_quantity=item.available_quantity,
            booked_quantity=booked,
            remaining=remaining,
            shortfall=shortfall,
            reason=None if shortfall == 0 else f"Only {max(remaining, 0)} available",
        )

    @BaseService.measure_operation("check_coach")
    def check_coach(
        self,
        coach_id: Optional[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> CoachAvailability:
        """
        Check a coach's weekly schedule and existing bookings.

        Day of week and minutes of day are both taken in the facility
        timezone. The request must sit inside one merged window of that day,
        bounds inclusive; a request crossing local midnight never fits.
        """
        validate_interval(start, end)
        if not coach_id:
            return CoachAvailability(available=True)

        coach = self.coach_repository.get_by_id(coach_id)
        if coach is None:
            return CoachAvailability(available=False, reason="Coach not found", coach_id=coach_id)
        if not coach.is_active:
            return CoachAvailability(
                available=False, reason="Coach is currently inactive", coach_id=coach_id
            )

        day = day_of_week(to_facility_local(start))
        windows = merge_windows(
            (parse_hhmm(w.start_time), parse_hhmm(w.end_time)) for w in coach.windows_for_day(day)
        )
        if not windows:
            return CoachAvailability(
                available=False,
                reason=f"Coach is not available on {DAY_NAMES[day]}",
                coach_id=coach_id,
            )

        start_minutes, end_minutes = local_minute_span(start, end)
        if not any(ws <= start_minutes and end_minutes <= we for ws, we in windows):
            hours = ", ".join(f"{format_minutes(ws)}-{format_minutes(we)}" for ws, we in windows)
            return CoachAvailability(
                available=False,
                reason=f"Coach is only available {hours} on {DAY_NAMES[day]}",
                coach_id=coach_id,
            )

        conflicts = self.booking_repository.find_conflicting(
            OverlapQuery(ResourceKind.COACH, coach_id, start, end, exclude_booking_id)
        )
        if conflicts:
            return CoachAvailability(
                available=False,
                reason="Coach is already booked for this time slot",
                coach_id=coach_id,
                conflicting_bookings=_conflict_summaries(conflicts),
            )
        return CoachAvailability(available=True, coach_id=coach_id)

    @BaseService.measure_operation("check_availability")
    def check_availability(
        self,
        court_id: str,
        start: datetime,
        end: datetime,
        equipment: Sequence[EquipmentRequest] = (),
        coach_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Run the court, equipment and coach checks (in that order).

        Returns every sub-result even when the overall answer is no, with
        the failure reasons collected in ``errors``.
        """
        validate_interval(start, end)
        court = self.check_court(court_id, start, end, exclude_booking_id)
        equipment_result = self.check_equipment(equipment, start, end, exclude_booking_id)
        coach = self.check_coach(coach_id, start, end, exclude_booking_id)

        errors: List[str] = []
        if not court.available and court.reason:
            errors.append(court.reason)
        for item in equipment_result.unavailable_items:
            errors.append(f"{item.name or item.equipment_id}: {item.reason}")
        if not coach.available and coach.reason:
            errors.append(coach.reason)

        result = AvailabilityResult(
            available=court.available and equipment_result.available and coach.available,
            errors=errors,
            court=court,
            equipment=equipment_result,
            coach=coach,
        )
        if not result.available:
            self.logger.info(
                "Resources unavailable",
                extra={"court_id": court_id, "coach_id": coach_id, "errors": errors},
            )
        return result
