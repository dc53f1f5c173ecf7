# backend/courtside/services/booking_service.py
"""
Booking Service for the Courtside platform.

The booking coordinator is the only component that writes bookings or
equipment stock. Create and cancel each run as one all-or-nothing unit:

create: lock resources -> check availability -> price -> snapshot prices
        -> persist booking (confirmed) -> decrement stock -> commit -> re-read
cancel: lock resources -> load + verify -> mark cancelled -> restore stock
        -> commit -> re-read

Resource locks (court, every equipment item, coach) are held from the
availability check until the commit, so two concurrent requests for the
same resource are serialized. Stock changes are additionally conditional
``UPDATE`` statements that can never push ``available_quantity`` outside
``[0, total_quantity]``.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.enums import ResourceKind
from ..core.exceptions import (
    AlreadyCancelledException,
    NotFoundException,
    ResourceUnavailableException,
    TransactionAbortedException,
    UnauthorizedException,
)
from ..core.resource_lock import LockKey, ResourceLockManager, get_lock_manager, resource_key
from ..models.booking import Booking, BookingEquipment, BookingStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Principal
from ..repositories import RepositoryFactory
from ..schemas.availability import EquipmentRequest
from ..schemas.booking import BookingCreate
from ..schemas.pricing import PriceBreakdown
from .availability_service import AvailabilityService, merge_equipment_requests, validate_interval
from .base import BaseService
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

BOOKING_NOT_AVAILABLE = "Booking not available"


def booking_lock_keys(
    court_id: str, equipment_ids: Sequence[str], coach_id: Optional[str]
) -> List[LockKey]:
    keys = [resource_key(ResourceKind.COURT, court_id)]
    keys.extend(resource_key(ResourceKind.EQUIPMENT, eid) for eid in equipment_ids)
    if coach_id:
        keys.append(resource_key(ResourceKind.COACH, coach_id))
    return keys


class BookingService(BaseService):
    """Booking transaction coordinator plus booking reads."""

    def __init__(
        self,
        db: Session,
        lock_manager: Optional[ResourceLockManager] = None,
        availability_service: Optional[AvailabilityService] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.lock_manager = lock_manager or get_lock_manager()
        self.availability_service = availability_service or AvailabilityService(db)
        self.pricing_service = pricing_service or PricingService(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.equipment_repository = RepositoryFactory.create_equipment_repository(db)

    # Create

    @BaseService.measure_operation("create_booking")
    def create_booking(self, principal: Principal, data: BookingCreate) -> Booking:
        """
        Create a confirmed booking and take its equipment out of stock.

        Raises:
            InvalidDurationException: end is not after start
            ResourceUnavailableException: any resource is unavailable; details
                carry ``error``, ``message`` (joined reasons) and ``availability``
            NotFoundException: the court disappeared between check and pricing
            TransactionAbortedException: lock timeout or write conflict (retryable)
            StoreFaultException: the store failed
        """
        validate_interval(data.start_time, data.end_time)
        equipment = merge_equipment_requests(data.equipment)
        keys = booking_lock_keys(
            data.court_id, [item.equipment_id for item in equipment], data.coach_id
        )

        try:
            with self.lock_manager.hold(keys):
                with self.transaction():
                    booking_id = self._create_in_scope(principal, data, equipment)
        except ResourceUnavailableException:
            prometheus_metrics.record_booking_outcome("create", "unavailable")
            raise
        except TransactionAbortedException:
            prometheus_metrics.record_booking_outcome("create", "aborted")
            raise

        prometheus_metrics.record_booking_outcome("create", "created")
        self.log_operation(
            "create_booking", booking_id=booking_id, user_id=principal.id, court_id=data.court_id
        )
        return self._reload(booking_id)

    def _create_in_scope(
        self, principal: Principal, data: BookingCreate, equipment: List[EquipmentRequest]
    ) -> str:
        # Locks the equipment rows on dialects with row locks
        self.equipment_repository.get_many(
            [item.equipment_id for item in equipment], for_update=True
        )

        availability = self.availability_service.check_availability(
            data.court_id, data.start_time, data.end_time, equipment, data.coach_id
        )
        if not availability.available:
            raise ResourceUnavailableException(
                BOOKING_NOT_AVAILABLE,
                details={
                    "error": BOOKING_NOT_AVAILABLE,
                    "message": ", ".join(availability.errors),
                    "availability": availability.model_dump(mode="json", by_alias=True),
                },
            )

        pricing = self.pricing_service.calculate_price(
            data.court_id, data.start_time, data.end_time, equipment, data.coach_id
        )
        booking = self._build_booking(principal, data, equipment, pricing)
        self.repository.add(booking)

        for item in equipment:
            if not self.equipment_repository.decrement_available(item.equipment_id, item.quantity):
                raise TransactionAbortedException(
                    "Equipment stock changed during booking; please retry",
                    details={"equipment_id": item.equipment_id, "quantity": item.quantity},
                )
        return booking.id

    def _build_booking(
        self,
        principal: Principal,
        data: BookingCreate,
        equipment: List[EquipmentRequest],
        pricing: PriceBreakdown,
    ) -> Booking:
        unit_prices = {line.equipment_id: line.price_per_hour for line in pricing.equipment_details}
        coach_line = pricing.coach_details
        booking = Booking(
            user_id=principal.id,
            court_id=data.court_id,
            start_time=data.start_time,
            end_time=data.end_time,
            status=BookingStatus.CONFIRMED.value,
            coach_id=data.coach_id,
            coach_price_per_hour=coach_line.price_per_hour if coach_line else None,
            court_base_price=pricing.court_base_price,
            court_multiplier=pricing.court_multiplier,
            court_price=pricing.court_price,
            equipment_price=pricing.equipment_price,
            coach_price=pricing.coach_price,
            subtotal=pricing.subtotal,
            tax=pricing.tax,
            total_price=pricing.total_price,
            applied_rules=[rule.model_dump(mode="json") for rule in pricing.applied_rules],
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
        )
        booking.equipment_lines = [
            BookingEquipment(
                equipment_id=item.equipment_id,
                position=position,
                quantity=item.quantity,
                price_per_hour=unit_prices[item.equipment_id],
            )
            for position, item in enumerate(equipment)
        ]
        return booking

    # Cancel

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str, principal: Principal) -> Booking:
        """
        Cancel a booking owned by ``principal`` and return its equipment to stock.

        Raises:
            NotFoundException: no such booking
            UnauthorizedException: the principal does not own the booking
            AlreadyCancelledException: the booking is already cancelled
            TransactionAbortedException: lock timeout or write conflict (retryable)
        """
        # Equipment lines never change after creation, so they can be read before locking
        equipment_ids = self.repository.equipment_ids_for_booking(booking_id)
        keys: List[LockKey] = [("booking", booking_id)]
        keys.extend(resource_key(ResourceKind.EQUIPMENT, eid) for eid in equipment_ids)

        try:
            with self.lock_manager.hold(keys):
                with self.transaction():
                    self._cancel_in_scope(booking_id, principal)
        except TransactionAbortedException:
            prometheus_metrics.record_booking_outcome("cancel", "aborted")
            raise

        prometheus_metrics.record_booking_outcome("cancel", "cancelled")
        self.log_operation("cancel_booking", booking_id=booking_id, user_id=principal.id)
        return self._reload(booking_id)

    def _cancel_in_scope(self, booking_id: str, principal: Principal) -> None:
        booking = self.repository.get_for_update(booking_id)
        if booking is None:
            raise NotFoundException(
                "Booking not found", code="BOOKING_NOT_FOUND", details={"booking_id": booking_id}
            )
        if booking.user_id != principal.id:
            raise UnauthorizedException(
                "Not authorized to cancel this booking",
                code="NOT_BOOKING_OWNER",
                details={"booking_id": booking_id},
            )
        if booking.is_cancelled:
            raise AlreadyCancelledException(booking_id)

        booking.cancel()
        self.repository.flush()
        for line in booking.equipment_lines:
            if not self.equipment_repository.increment_available(line.equipment_id, line.quantity):
                raise TransactionAbortedException(
                    "Equipment stock would exceed its total; please retry",
                    details={"equipment_id": line.equipment_id, "quantity": line.quantity},
                )

    # Reads

    def _reload(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException(
                "Booking not found", code="BOOKING_NOT_FOUND", details={"booking_id": booking_id}
            )
        return booking

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str, principal: Principal) -> Booking:
        """Fully expanded booking, visible to its owner and to admins."""
        booking = self._reload(booking_id)
        if booking.user_id != principal.id and not principal.is_admin:
            raise UnauthorizedException(
                "Not authorized to view this booking",
                code="NOT_BOOKING_OWNER",
                details={"booking_id": booking_id},
            )
        return booking

    @BaseService.measure_operation("list_user_bookings")
    def list_user_bookings(self, principal: Principal, skip: int = 0, limit: int = 100) -> List[Booking]:
        return self.repository.list_for_user(principal.id, skip=skip, limit=limit)

    @BaseService.measure_operation("list_all_bookings")
    def list_all_bookings(
        self, status: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Booking]:
        return self.repository.list_all(status=status, skip=skip, limit=limit)
