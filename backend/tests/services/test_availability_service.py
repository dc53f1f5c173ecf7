# backend/tests/services/test_availability_service.py
"""
Test suite for AvailabilityService: court, equipment and coach facets and
the combined check.

Run with: pytest backend/tests/services/test_availability_service.py -v
"""

from datetime import date, datetime, time, timezone

import pytest

from courtside.core.config import settings
from courtside.core.exceptions import InvalidDurationException
from courtside.models import CoachAvailabilityWindow
from courtside.schemas.availability import EquipmentRequest
from courtside.services.availability_service import (
    AvailabilityService,
    merge_equipment_requests,
    merge_windows,
)

SUNDAY = date(2030, 6, 16)
MONDAY = date(2030, 6, 17)
TUESDAY = date(2030, 6, 18)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return AvailabilityService(db)


class TestHelpers:
    def test_merge_windows_joins_touching_and_overlapping(self):
        assert merge_windows([(720, 900), (540, 720), (1000, 1100), (1050, 1200)]) == [
            (540, 900),
            (1000, 1200),
        ]

    def test_merge_windows_keeps_gaps(self):
        assert merge_windows([(540, 600), (660, 720)]) == [(540, 600), (660, 720)]

    def test_merge_equipment_requests_sums_duplicates_in_first_seen_order(self):
        merged = merge_equipment_requests(
            [
                EquipmentRequest(equipment_id="b", quantity=1),
                EquipmentRequest(equipment_id="a", quantity=2),
                EquipmentRequest(equipment_id="b", quantity=3),
            ]
        )
        assert [(m.equipment_id, m.quantity) for m in merged] == [("b", 4), ("a", 2)]


class TestCheckCourt:
    def test_free_court(self, service, court):
        result = service.check_court(court.id, at(MONDAY, 10), at(MONDAY, 11))
        assert result.available is True
        assert result.reason is None

    def test_missing_court(self, service):
        result = service.check_court("nope", at(MONDAY, 10), at(MONDAY, 11))
        assert result.available is False
        assert result.reason == "Court not found"

    def test_inactive_court(self, db, service, court):
        court.is_active = False
        db.commit()

        result = service.check_court(court.id, at(MONDAY, 10), at(MONDAY, 11))
        assert result.reason == "Court is currently inactive"

    @pytest.mark.parametrize(
        "start,end,available",
        [
            ((11, 0), (12, 0), True),
            ((9, 0), (10, 0), True),
            ((10, 30), (11, 30), False),
            ((9, 0), (12, 0), False),
            ((10, 15), (10, 45), False),
        ],
    )
    def test_overlap_boundaries(
        self, service, booking_service, principal, make_request, court, start, end, available
    ):
        booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))

        result = service.check_court(court.id, at(MONDAY, *start), at(MONDAY, *end))

        assert result.available is available
        if not available:
            assert result.reason == "Court already booked for this time slot"
            assert len(result.conflicting_bookings) == 1

    def test_cancelled_booking_frees_court(self, service, booking_service, principal, make_request, court):
        booking = booking_service.create_booking(
            principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11))
        )
        booking_service.cancel_booking(booking.id, principal)

        assert service.check_court(court.id, at(MONDAY, 10), at(MONDAY, 11)).available is True

    def test_exclude_booking_id(self, service, booking_service, principal, make_request, court):
        booking = booking_service.create_booking(
            principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11))
        )

        result = service.check_court(
            court.id, at(MONDAY, 10), at(MONDAY, 11), exclude_booking_id=booking.id
        )
        assert result.available is True

    def test_end_before_start(self, service, court):
        with pytest.raises(InvalidDurationException):
            service.check_court(court.id, at(MONDAY, 11), at(MONDAY, 10))


class TestCheckEquipment:
    def test_no_equipment_is_available(self, service):
        result = service.check_equipment([], at(MONDAY, 10), at(MONDAY, 11))
        assert result.available is True
        assert result.items == []

    def test_enough_stock(self, service, racket):
        result = service.check_equipment(
            [EquipmentRequest(equipment_id=racket.id, quantity=4)], at(MONDAY, 10), at(MONDAY, 11)
        )
        assert result.available is True
        item = result.items[0]
        assert (item.available_quantity, item.booked_quantity, item.remaining) == (10, 0, 10)

    def test_missing_and_inactive_items(self, db, service, racket):
        racket.is_active = False
        db.commit()

        result = service.check_equipment(
            [
                EquipmentRequest(equipment_id=racket.id, quantity=1),
                EquipmentRequest(equipment_id="missing", quantity=1),
            ],
            at(MONDAY, 10),
            at(MONDAY, 11),
        )

        assert result.available is False
        assert result.reason == "Some equipment items are not available"
        assert [item.reason for item in result.items] == [
            "Equipment is currently inactive",
            "Equipment not found",
        ]

    def test_overlapping_bookings_reduce_remaining(
        self, service, booking_service, principal, make_request, outdoor_court, racket
    ):
        # Stock drops to 7 on commit and the overlapping booking still counts 3 against it
        booking_service.create_booking(
            principal,
            make_request(outdoor_court.id, at(MONDAY, 10), at(MONDAY, 11), equipment=[(racket.id, 3)]),
        )

        result = service.check_equipment(
            [EquipmentRequest(equipment_id=racket.id, quantity=5)], at(MONDAY, 10), at(MONDAY, 11)
        )

        item = result.items[0]
        assert result.available is False
        assert (item.available_quantity, item.booked_quantity, item.remaining) == (7, 3, 4)
        assert item.shortfall == 1
        assert item.reason == "Only 4 available"

    def test_duplicate_requests_are_merged(self, service, racket):
        result = service.check_equipment(
            [
                EquipmentRequest(equipment_id=racket.id, quantity=6),
                EquipmentRequest(equipment_id=racket.id, quantity=6),
            ],
            at(MONDAY, 10),
            at(MONDAY, 11),
        )
        assert len(result.items) == 1
        assert result.items[0].requested == 12
        assert result.items[0].reason == "Only 10 available"


class TestCheckCoach:
    def test_no_coach_requested(self, service):
        result = service.check_coach(None, at(MONDAY, 10), at(MONDAY, 11))
        assert result.available is True
        assert result.coach_id is None

    def test_missing_coach(self, service):
        assert service.check_coach("ghost", at(MONDAY, 10), at(MONDAY, 11)).reason == "Coach not found"

    def test_inactive_coach(self, db, service, coach):
        coach.is_active = False
        db.commit()
        result = service.check_coach(coach.id, at(MONDAY, 10), at(MONDAY, 11))
        assert result.reason == "Coach is currently inactive"

    def test_day_without_windows(self, service, coach):
        result = service.check_coach(coach.id, at(SUNDAY, 10), at(SUNDAY, 11))
        assert result.available is False
        assert result.reason == "Coach is not available on Sunday"

    def test_outside_window(self, service, coach):
        result = service.check_coach(coach.id, at(MONDAY, 8), at(MONDAY, 10))
        assert result.available is False
        assert result.reason == "Coach is only available 09:00-17:00 on Monday"

    def test_window_bounds_are_inclusive(self, service, coach):
        assert service.check_coach(coach.id, at(MONDAY, 9), at(MONDAY, 17)).available is True

    def test_seconds_past_window_end_fall_outside(self, service, coach):
        end = at(MONDAY, 17).replace(second=30)
        result = service.check_coach(coach.id, at(MONDAY, 16), end)
        assert result.available is False
        assert result.reason == "Coach is only available 09:00-17:00 on Monday"

    def test_inside_window(self, service, coach):
        result = service.check_coach(coach.id, at(MONDAY, 10), at(MONDAY, 12))
        assert result.available is True
        assert result.coach_id == coach.id

    def test_adjacent_windows_are_merged(self, db, service, coach):
        coach.availability.append(
            CoachAvailabilityWindow(position=10, day_of_week=2, start_time="17:00", end_time="20:00")
        )
        db.commit()

        assert service.check_coach(coach.id, at(TUESDAY, 16), at(TUESDAY, 18)).available is True

    def test_split_windows_do_not_bridge_gap(self, db, service, coach):
        coach.availability.append(
            CoachAvailabilityWindow(position=10, day_of_week=2, start_time="18:00", end_time="20:00")
        )
        db.commit()

        result = service.check_coach(coach.id, at(TUESDAY, 16), at(TUESDAY, 19))
        assert result.available is False
        assert result.reason == "Coach is only available 09:00-17:00, 18:00-20:00 on Tuesday"

    def test_crossing_midnight_never_fits(self, db, service, coach):
        coach.availability.append(
            CoachAvailabilityWindow(position=10, day_of_week=1, start_time="17:00", end_time="24:00")
        )
        db.commit()

        result = service.check_coach(coach.id, at(MONDAY, 23), at(TUESDAY, 1))
        assert result.available is False

    def test_windows_use_facility_timezone(self, monkeypatch, service, coach):
        monkeypatch.setattr(settings, "facility_timezone", "Asia/Kolkata")

        # 04:00-05:00 UTC is 09:30-10:30 in Kolkata
        assert service.check_coach(coach.id, at(MONDAY, 4), at(MONDAY, 5)).available is True
        # 10:00-12:00 UTC is 15:30-17:30 in Kolkata
        late = service.check_coach(coach.id, at(MONDAY, 10), at(MONDAY, 12))
        assert late.reason == "Coach is only available 09:00-17:00 on Monday"

    def test_coach_already_booked(
        self, service, booking_service, principal, make_request, outdoor_court, coach
    ):
        booking_service.create_booking(
            principal, make_request(outdoor_court.id, at(MONDAY, 10), at(MONDAY, 11), coach_id=coach.id)
        )

        result = service.check_coach(coach.id, at(MONDAY, 10, 30), at(MONDAY, 11, 30))
        assert result.available is False
        assert result.reason == "Coach is already booked for this time slot"
        assert len(result.conflicting_bookings) == 1


class TestCheckAvailability:
    def test_everything_free(self, service, court, racket, coach):
        result = service.check_availability(
            court.id,
            at(MONDAY, 10),
            at(MONDAY, 11),
            [EquipmentRequest(equipment_id=racket.id, quantity=2)],
            coach.id,
        )
        assert result.available is True
        assert result.errors == []
        assert result.court.available and result.equipment.available and result.coach.available

    def test_partial_failure_reports_every_facet(
        self, service, booking_service, principal, make_request, court, racket, coach
    ):
        booking_service.create_booking(principal, make_request(court.id, at(MONDAY, 10), at(MONDAY, 11)))

        result = service.check_availability(
            court.id,
            at(MONDAY, 10),
            at(MONDAY, 11),
            [EquipmentRequest(equipment_id=racket.id, quantity=20)],
            coach.id,
        )

        assert result.available is False
        assert result.court.available is False
        assert result.equipment.available is False
        assert result.coach.available is True
        assert result.errors == [
            "Court already booked for this time slot",
            "Badminton Racket: Only 10 available",
        ]

    def test_coach_failure_alone_blocks(self, service, court, coach):
        result = service.check_availability(court.id, at(SUNDAY, 10), at(SUNDAY, 11), coach_id=coach.id)

        assert result.available is False
        assert result.court.available is True
        assert result.errors == ["Coach is not available on Sunday"]

    def test_result_serializes_camel_case(self, service, court):
        payload = service.check_availability(court.id, at(MONDAY, 10), at(MONDAY, 11)).model_dump(
            mode="json", by_alias=True
        )
        assert payload["court"]["courtId"] == court.id
        assert payload["court"]["conflictingBookings"] == []
