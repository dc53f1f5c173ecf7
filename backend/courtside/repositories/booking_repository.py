# backend/courtside/repositories/booking_repository.py
"""
Booking Repository for the Courtside platform.

Holds the one overlap query used by all three availability facets plus the
booking read paths (expanded point get, per-user and admin listings, court
day schedules).
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..core.enums import ResourceKind
from ..core.exceptions import RepositoryException
from ..models.booking import OCCUPYING_STATUSES, Booking, BookingEquipment, BookingStatus
from .base_repository import BaseRepository
from .overlap import OverlapQuery, overlap_clause


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.court),
            joinedload(Booking.coach),
            selectinload(Booking.equipment_lines).joinedload(BookingEquipment.equipment),
        )

    # Overlap queries

    def _occupying(self, query: OverlapQuery) -> Query:
        """Occupying bookings whose resource reference matches and whose interval overlaps."""
        q = self.db.query(Booking).filter(
            Booking.status.in_(OCCUPYING_STATUSES),
            overlap_clause(Booking.start_time, Booking.end_time, query.start, query.end),
        )
        if query.resource_kind is ResourceKind.COURT:
            q = q.filter(Booking.court_id == query.resource_id)
        elif query.resource_kind is ResourceKind.COACH:
            q = q.filter(Booking.coach_id == query.resource_id)
        else:
            q = q.join(BookingEquipment, BookingEquipment.booking_id == Booking.id).filter(
                BookingEquipment.equipment_id == query.resource_id
            )
        if query.exclude_booking_id:
            q = q.filter(Booking.id != query.exclude_booking_id)
        return q

    def find_conflicting(self, query: OverlapQuery) -> List[Booking]:
        """
        Return occupying bookings that overlap the query interval.

        Args:
            query: validated resource/interval parameters

        Returns:
            Conflicting bookings ordered by start time
        """
        try:
            return self._occupying(query).order_by(Booking.start_time, Booking.id).all()
        except SQLAlchemyError as exc:
            self.logger.error("Error finding conflicts for %s %s: %s", query.resource_kind.value, query.resource_id, exc)
            raise RepositoryException(f"Failed to check conflicts: {exc}") from exc

    def sum_booked_quantity(self, query: OverlapQuery) -> int:
        """Units of one equipment item held by overlapping occupying bookings."""
        if query.resource_kind is not ResourceKind.EQUIPMENT:
            raise ValueError("sum_booked_quantity requires an equipment query")
        try:
            total = (
                self._occupying(query)
                .with_entities(func.coalesce(func.sum(BookingEquipment.quantity), 0))
                .scalar()
            )
            return int(total or 0)
        except SQLAlchemyError as exc:
            self.logger.error("Error summing booked quantity for %s: %s", query.resource_id, exc)
            raise RepositoryException(f"Failed to sum booked quantity: {exc}") from exc

    def units_held(self, equipment_id: str) -> int:
        """Units of an equipment item taken out of stock by bookings not yet cancelled."""
        try:
            total = (
                self.db.query(func.coalesce(func.sum(BookingEquipment.quantity), 0))
                .join(Booking, Booking.id == BookingEquipment.booking_id)
                .filter(
                    BookingEquipment.equipment_id == equipment_id,
                    Booking.status != BookingStatus.CANCELLED.value,
                )
                .scalar()
            )
            return int(total or 0)
        except SQLAlchemyError as exc:
            self.logger.error("Error summing held units for %s: %s", equipment_id, exc)
            raise RepositoryException(f"Failed to sum held units: {exc}") from exc

    # Reads

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        """Booking with court, coach and equipment lines eagerly loaded."""
        return self.get_by_id(booking_id, load_relationships=True)

    def get_for_update(self, booking_id: str) -> Optional[Booking]:
        """
        Reload a booking inside the caller's transaction, bypassing stale identity-map state.

        The booking row is locked on dialects with row locks.
        """
        try:
            query = (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.id == booking_id)
                .populate_existing()
            )
            if self.row_locks_enabled:
                query = query.with_for_update(of=Booking)
            return query.first()
        except SQLAlchemyError as exc:
            self.logger.error("Error locking booking %s: %s", booking_id, exc)
            raise RepositoryException(f"Failed to load booking: {exc}") from exc

    def equipment_ids_for_booking(self, booking_id: str) -> List[str]:
        try:
            rows = (
                self.db.query(BookingEquipment.equipment_id)
                .filter(BookingEquipment.booking_id == booking_id)
                .all()
            )
            return [row[0] for row in rows]
        except SQLAlchemyError as exc:
            self.logger.error("Error loading equipment lines of %s: %s", booking_id, exc)
            raise RepositoryException(f"Failed to load booking equipment: {exc}") from exc

    def list_for_user(self, user_id: str, skip: int = 0, limit: int = 100) -> List[Booking]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.user_id == user_id)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.logger.error("Error listing bookings for user %s: %s", user_id, exc)
            raise RepositoryException(f"Failed to list bookings: {exc}") from exc

    def list_all(
        self, status: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Booking]:
        try:
            query = self._apply_eager_loading(self.db.query(Booking))
            if status:
                query = query.filter(Booking.status == status)
            return (
                query.order_by(Booking.created_at.desc(), Booking.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.logger.error("Error listing bookings: %s", exc)
            raise RepositoryException(f"Failed to list bookings: {exc}") from exc

    def schedule_for_court(self, court_id: str, day_start: datetime, day_end: datetime) -> List[Booking]:
        """Occupying bookings of a court that overlap one facility day."""
        return self.find_conflicting(
            OverlapQuery(ResourceKind.COURT, court_id, day_start, day_end)
        )
