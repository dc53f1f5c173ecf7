# backend/tests/services/test_booking_service.py
"""
Test suite for the booking coordinator: create and cancel as atomic units.

Run with: pytest backend/tests/services/test_booking_service.py -v
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from courtside.core.exceptions import (
    AlreadyCancelledException,
    InvalidDurationException,
    NotFoundException,
    RepositoryException,
    ResourceUnavailableException,
    StoreFaultException,
    TransactionAbortedException,
    UnauthorizedException,
)
from courtside.core.resource_lock import LocalLockBackend, ResourceLockManager
from courtside.models import Booking, BookingStatus, Equipment
from courtside.services.booking_service import BookingService, booking_lock_keys

SATURDAY = date(2030, 6, 15)
MONDAY = date(2030, 6, 17)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def _stock(db, equipment_id):
    db.expire_all()
    return db.get(Equipment, equipment_id).available_quantity


def test_booking_lock_keys_cover_every_resource():
    keys = booking_lock_keys("c1", ["e2", "e1"], "k1")
    assert keys == [("court", "c1"), ("equipment", "e2"), ("equipment", "e1"), ("coach", "k1")]
    assert booking_lock_keys("c1", [], None) == [("court", "c1")]


class TestCreateBooking:
    def test_creates_confirmed_booking_with_snapshots(
        self, booking_service, principal, make_request, court, rules, racket, coach
    ):
        booking = booking_service.create_booking(
            principal,
            make_request(
                court.id,
                at(MONDAY, 10),
                at(MONDAY, 12),
                equipment=[(racket.id, 2)],
                coach_id=coach.id,
            ),
        )

        assert booking.status == BookingStatus.CONFIRMED.value
        assert booking.user_id == principal.id
        assert booking.start_time == at(MONDAY, 10)
        assert booking.court.name == "Indoor Court 1"
        assert booking.coach_price_per_hour == Decimal("40")
        assert [(line.equipment_id, line.quantity, line.price_per_hour) for line in booking.equipment_lines] == [
            (racket.id, 2, Decimal("5"))
        ]
        # Indoor Premium only: 50 x 2h x 1.2 = 120, racket 20, coach 80
        assert booking.court_multiplier == Decimal("1.2")
        assert booking.court_price == Decimal("120.00")
        assert booking.equipment_price == Decimal("20.00")
        assert booking.coach_price == Decimal("80.00")
        assert booking.subtotal == Decimal("220.00")
        assert booking.tax == Decimal("39.60")
        assert booking.total_price == Decimal("259.60")
        assert booking.applied_rules[0]["name"] == "Indoor Premium"
        assert booking.customer_name == "Test Player"

    def test_stored_price_matches_estimate(
        self, db, booking_service, principal, make_request, court, rules
    ):
        estimate = booking_service.pricing_service.calculate_price(
            court.id, at(SATURDAY, 18), at(SATURDAY, 20)
        )
        booking = booking_service.create_booking(
            principal, make_request(court.id, at(SATURDAY, 18), at(SATURDAY, 20))
        )

        assert booking.total_price == estimate.total_price == Decimal("276.12")
        assert booking.court_multiplier == Decimal("2.34")

    def test_snapshot_survives_later_price_change(
        self, db, booking_service, principal, make_request, court, racket
    ):
        booking = booking_service.create_booking(
            principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 1)])
        )
        court.base_price_per_hour = Decimal("99")
        racket.price_per_hour = Decimal("50")
        db.commit()

        reloaded = booking_service.get_booking(booking.id, principal)
        assert reloaded.court_price == Decimal("50.00")
        assert reloaded.equipment_lines[0].price_per_hour == Decimal("5")

    def test_decrements_inventory(self, db, booking_service, principal, make_request, court, racket):
        booking_service.create_booking(
            principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 3)])
        )
        assert _stock(db, racket.id) == 7

    def test_duplicate_equipment_lines_are_merged(
        self, db, booking_service, principal, make_request, court, racket
    ):
        booking = booking_service.create_booking(
            principal,
            make_request(
                court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 1), (racket.id, 2)]
            ),
        )
        assert [(line.equipment_id, line.quantity) for line in booking.equipment_lines] == [(racket.id, 3)]
        assert _stock(db, racket.id) == 7

    def test_unavailable_court_raises_with_details(
        self, db, booking_service, principal, other_principal, make_request, court
    ):
        booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))

        with pytest.raises(ResourceUnavailableException) as exc_info:
            booking_service.create_booking(
                other_principal, make_request(court.id, at(MONDAY, 10, 30), at(MONDAY, 11, 30))
            )

        details = exc_info.value.details
        assert details["error"] == "Booking not available"
        assert details["message"] == "Court already booked for this time slot"
        assert details["availability"]["court"]["available"] is False
        assert db.query(Booking).count() == 1

    def test_insufficient_equipment_leaves_no_trace(
        self, db, booking_service, principal, make_request, court, racket
    ):
        with pytest.raises(ResourceUnavailableException) as exc_info:
            booking_service.create_booking(
                principal,
                make_request(court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 11)]),
            )

        assert exc_info.value.details["message"] == "Badminton Racket: Only 10 available"
        assert db.query(Booking).count() == 0
        assert _stock(db, racket.id) == 10

    def test_coach_outside_hours(self, booking_service, principal, make_request, court, coach):
        with pytest.raises(ResourceUnavailableException) as exc_info:
            booking_service.create_booking(
                principal, make_request(court.id, at(MONDAY, 18), at(MONDAY, 19), coach_id=coach.id)
            )
        assert exc_info.value.details["message"] == "Coach is only available 09:00-17:00 on Monday"

    def test_invalid_duration(self, booking_service, principal, make_request, court):
        with pytest.raises(InvalidDurationException):
            booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 11), at(MONDAY, 10)))

    def test_stock_race_rolls_back_booking(
        self, db, booking_service, principal, make_request, court, racket, monkeypatch
    ):
        monkeypatch.setattr(
            booking_service.equipment_repository, "decrement_available", lambda equipment_id, quantity: False
        )

        with pytest.raises(TransactionAbortedException):
            booking_service.create_booking(
                principal,
                make_request(court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 2)]),
            )

        assert db.query(Booking).count() == 0
        assert _stock(db, racket.id) == 10

    def test_store_failure_mid_protocol_rolls_back(
        self, db, booking_service, principal, make_request, court, racket, monkeypatch
    ):
        real_decrement = booking_service.equipment_repository.decrement_available
        calls = []

        def flaky_decrement(equipment_id, quantity):
            calls.append(equipment_id)
            if len(calls) == 2:
                raise RepositoryException("disk I/O error")
            return real_decrement(equipment_id, quantity)

        shoes = Equipment(
            name="Sports Shoes", category="shoes", price_per_hour=Decimal("10"), total_quantity=5, available_quantity=5
        )
        db.add(shoes)
        db.commit()
        monkeypatch.setattr(booking_service.equipment_repository, "decrement_available", flaky_decrement)

        with pytest.raises(StoreFaultException):
            booking_service.create_booking(
                principal,
                make_request(
                    court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 2), (shoes.id, 1)]
                ),
            )

        assert db.query(Booking).count() == 0
        assert _stock(db, racket.id) == 10
        assert _stock(db, shoes.id) == 5

    def test_busy_lock_aborts(self, db, principal, make_request, court):
        lock_manager = ResourceLockManager(LocalLockBackend(), wait_timeout_s=0.05)
        service = BookingService(db, lock_manager=lock_manager)

        with lock_manager.hold([("court", court.id)]):
            with pytest.raises(TransactionAbortedException):
                service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))

        assert db.query(Booking).count() == 0


class TestCancelBooking:
    @pytest.fixture
    def booking(self, booking_service, principal, make_request, court, racket):
        return booking_service.create_booking(
            principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 4)])
        )

    def test_cancel_restores_inventory(self, db, booking_service, principal, booking, racket):
        assert _stock(db, racket.id) == 6

        cancelled = booking_service.cancel_booking(booking.id, principal)

        assert cancelled.status == BookingStatus.CANCELLED.value
        assert _stock(db, racket.id) == 10

    def test_cancel_frees_the_slot(self, booking_service, principal, other_principal, make_request, booking, court):
        booking_service.cancel_booking(booking.id, principal)

        rebooked = booking_service.create_booking(
            other_principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11))
        )
        assert rebooked.user_id == other_principal.id

    def test_cancel_twice(self, db, booking_service, principal, booking, racket):
        booking_service.cancel_booking(booking.id, principal)

        with pytest.raises(AlreadyCancelledException):
            booking_service.cancel_booking(booking.id, principal)
        assert _stock(db, racket.id) == 10

    def test_not_owner(self, db, booking_service, other_principal, booking, racket):
        with pytest.raises(UnauthorizedException):
            booking_service.cancel_booking(booking.id, other_principal)

        db.expire_all()
        assert db.get(Booking, booking.id).status == BookingStatus.CONFIRMED.value
        assert _stock(db, racket.id) == 6

    def test_not_owner_checked_before_already_cancelled(
        self, booking_service, principal, other_principal, booking
    ):
        booking_service.cancel_booking(booking.id, principal)

        with pytest.raises(UnauthorizedException):
            booking_service.cancel_booking(booking.id, other_principal)

    def test_missing_booking(self, booking_service, principal):
        with pytest.raises(NotFoundException):
            booking_service.cancel_booking("missing", principal)

    def test_failed_restore_keeps_booking_confirmed(
        self, db, booking_service, principal, booking, racket, monkeypatch
    ):
        monkeypatch.setattr(
            booking_service.equipment_repository, "increment_available", lambda equipment_id, quantity: False
        )

        with pytest.raises(TransactionAbortedException):
            booking_service.cancel_booking(booking.id, principal)

        db.expire_all()
        assert db.get(Booking, booking.id).status == BookingStatus.CONFIRMED.value
        assert _stock(db, racket.id) == 6


class TestBookingReads:
    def test_get_booking_owner_and_admin(
        self, booking_service, principal, other_principal, admin_principal, make_request, court
    ):
        booking = booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))

        assert booking_service.get_booking(booking.id, principal).id == booking.id
        assert booking_service.get_booking(booking.id, admin_principal).id == booking.id
        with pytest.raises(UnauthorizedException):
            booking_service.get_booking(booking.id, other_principal)

    def test_list_user_bookings_newest_first(
        self, booking_service, principal, other_principal, make_request, court
    ):
        first = booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))
        second = booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 12), at(MONDAY, 13)))
        booking_service.create_booking(other_principal, make_request(court.id, at(MONDAY, 14), at(MONDAY, 15)))

        assert [b.id for b in booking_service.list_user_bookings(principal)] == [second.id, first.id]

    def test_list_all_with_status_filter(self, booking_service, principal, make_request, court):
        first = booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))
        booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 12), at(MONDAY, 13)))
        booking_service.cancel_booking(first.id, principal)

        assert len(booking_service.list_all_bookings()) == 2
        assert [b.id for b in booking_service.list_all_bookings(status="cancelled")] == [first.id]
