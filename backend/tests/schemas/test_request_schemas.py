# backend/tests/schemas/test_request_schemas.py
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from courtside.core.config import settings
from courtside.schemas.availability import AvailabilityCheckRequest
from courtside.schemas.booking import BookingCreate


def test_accepts_camel_and_snake_case():
    camel = BookingCreate.model_validate(
        {"courtId": "c1", "startTime": "2030-06-17T10:00:00Z", "endTime": "2030-06-17T11:00:00Z"}
    )
    snake = BookingCreate(court_id="c1", start_time=camel.start_time, end_time=camel.end_time)
    assert camel == snake


def test_offsets_are_normalized_to_utc():
    request = BookingCreate.model_validate(
        {"courtId": "c1", "startTime": "2030-06-17T15:30:00+05:30", "endTime": "2030-06-17T16:30:00+05:30"}
    )
    assert request.start_time == datetime(2030, 6, 17, 10, 0, tzinfo=timezone.utc)


def test_naive_times_are_facility_local(monkeypatch):
    monkeypatch.setattr(settings, "facility_timezone", "Asia/Kolkata")

    request = AvailabilityCheckRequest.model_validate(
        {"courtId": "c1", "startTime": "2030-06-17T10:00:00", "endTime": "2030-06-17T11:00:00"}
    )

    assert request.start_time == datetime(2030, 6, 17, 4, 30, tzinfo=timezone.utc)


def test_equipment_quantity_must_be_positive():
    with pytest.raises(ValidationError):
        BookingCreate.model_validate(
            {
                "courtId": "c1",
                "startTime": "2030-06-17T10:00:00Z",
                "endTime": "2030-06-17T11:00:00Z",
                "equipment": [{"equipmentId": "e1", "quantity": 0}],
            }
        )


def test_reversed_interval_is_left_to_the_engines():
    request = BookingCreate.model_validate(
        {"courtId": "c1", "startTime": "2030-06-17T11:00:00Z", "endTime": "2030-06-17T10:00:00Z"}
    )
    assert request.end_time < request.start_time
