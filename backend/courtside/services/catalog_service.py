# backend/courtside/services/catalog_service.py
"""
Catalog Service: read access to courts, equipment and coaches.

Also builds a court's day schedule (the occupied intervals on one
facility-local date) for slot grids.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import NotFoundException
from ..core.timezone_utils import facility_day_bounds_utc
from ..models.coach import Coach
from ..models.court import Court
from ..models.equipment import Equipment
from ..repositories import RepositoryFactory
from ..schemas.booking import CourtSchedule, CourtScheduleEntry
from .base import BaseService

logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.court_repository = RepositoryFactory.create_court_repository(db)
        self.equipment_repository = RepositoryFactory.create_equipment_repository(db)
        self.coach_repository = RepositoryFactory.create_coach_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("list_courts")
    def list_courts(
        self, active: Optional[bool] = None, court_type: Optional[str] = None, sport: Optional[str] = None
    ) -> List[Court]:
        return self.court_repository.list_courts(active=active, court_type=court_type, sport=sport)

    def get_court(self, court_id: str) -> Court:
        court = self.court_repository.get_by_id(court_id)
        if court is None:
            raise NotFoundException("Court not found", code="COURT_NOT_FOUND", details={"court_id": court_id})
        return court

    @BaseService.measure_operation("court_schedule")
    def court_schedule(self, court_id: str, day: date) -> CourtSchedule:
        """Occupied intervals of a court on one facility-local date, ordered by start."""
        self.get_court(court_id)
        day_start, day_end = facility_day_bounds_utc(day)
        bookings = self.booking_repository.schedule_for_court(court_id, day_start, day_end)
        return CourtSchedule(
            court_id=court_id,
            date=day.isoformat(),
            timezone=settings.facility_timezone,
            bookings=[
                CourtScheduleEntry(
                    booking_id=b.id, start_time=b.start_time, end_time=b.end_time, status=b.status
                )
                for b in bookings
            ],
        )

    @BaseService.measure_operation("list_equipment")
    def list_equipment(
        self, active: Optional[bool] = None, category: Optional[str] = None
    ) -> List[Equipment]:
        return self.equipment_repository.list_equipment(active=active, category=category)

    def get_equipment(self, equipment_id: str) -> Equipment:
        item = self.equipment_repository.get_by_id(equipment_id)
        if item is None:
            raise NotFoundException(
                "Equipment not found", code="EQUIPMENT_NOT_FOUND", details={"equipment_id": equipment_id}
            )
        return item

    @BaseService.measure_operation("list_coaches")
    def list_coaches(
        self, active: Optional[bool] = None, specialization: Optional[str] = None
    ) -> List[Coach]:
        return self.coach_repository.list_coaches(active=active, specialization=specialization)

    def get_coach(self, coach_id: str) -> Coach:
        coach = self.coach_repository.get_by_id(coach_id)
        if coach is None:
            raise NotFoundException("Coach not found", code="COACH_NOT_FOUND", details={"coach_id": coach_id})
        return coach
