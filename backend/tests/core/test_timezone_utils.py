# backend/tests/core/test_timezone_utils.py
from datetime import date, datetime, timezone

import pytest
import pytz

from courtside.core.timezone_utils import (
    day_of_week,
    ensure_utc,
    facility_day_bounds_utc,
    format_minutes,
    local_minute_span,
    parse_hhmm,
    to_facility_local,
)


class TestDayOfWeek:
    def test_sunday_is_zero(self):
        assert day_of_week(datetime(2030, 6, 16, 12, 0)) == 0

    def test_saturday_is_six(self):
        assert day_of_week(datetime(2030, 6, 15, 12, 0)) == 6

    def test_monday_is_one(self):
        assert day_of_week(datetime(2030, 6, 17, 0, 0)) == 1


class TestParseHHMM:
    @pytest.mark.parametrize(
        "value,expected",
        [("00:00", 0), ("09:00", 540), ("17:30", 1050), ("24:00", 1440)],
    )
    def test_valid(self, value, expected):
        assert parse_hhmm(value) == expected

    @pytest.mark.parametrize("value", ["25:00", "24:01", "9", "ab:cd", "12:60", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_hhmm(value)

    def test_format_minutes(self):
        assert format_minutes(540) == "09:00"
        assert format_minutes(1020) == "17:00"


class TestConversions:
    def test_naive_input_is_facility_local(self):
        result = ensure_utc(datetime(2030, 6, 17, 9, 0), tz_name="Asia/Kolkata")
        assert result == datetime(2030, 6, 17, 3, 30, tzinfo=timezone.utc)

    def test_aware_input_is_converted(self):
        source = pytz.timezone("America/New_York").localize(datetime(2030, 1, 7, 10, 0))
        assert ensure_utc(source) == datetime(2030, 1, 7, 15, 0, tzinfo=timezone.utc)

    def test_to_facility_local_shifts_day(self):
        local = to_facility_local(
            datetime(2030, 6, 16, 20, 0, tzinfo=timezone.utc), tz_name="Asia/Kolkata"
        )
        assert local.date() == date(2030, 6, 17)
        assert day_of_week(local) == 1

    def test_naive_input_stays_on_facility_clock(self):
        local = to_facility_local(datetime(2030, 6, 17, 9, 0), tz_name="Asia/Kolkata")
        assert (local.hour, local.minute) == (9, 0)
        assert local.utcoffset().total_seconds() == 19800


class TestLocalMinuteSpan:
    def test_same_day(self):
        start = datetime(2030, 6, 17, 9, 0, tzinfo=timezone.utc)
        end = datetime(2030, 6, 17, 10, 30, tzinfo=timezone.utc)
        assert local_minute_span(start, end, tz_name="UTC") == (540, 630)

    def test_crossing_midnight_extends_past_day(self):
        start = datetime(2030, 6, 17, 23, 0, tzinfo=timezone.utc)
        end = datetime(2030, 6, 18, 1, 0, tzinfo=timezone.utc)
        assert local_minute_span(start, end, tz_name="UTC") == (1380, 1500)

    def test_uses_facility_offset(self):
        start = datetime(2030, 6, 17, 4, 0, tzinfo=timezone.utc)
        end = datetime(2030, 6, 17, 5, 0, tzinfo=timezone.utc)
        assert local_minute_span(start, end, tz_name="Asia/Kolkata") == (570, 630)

    def test_end_seconds_round_up(self):
        start = datetime(2030, 6, 17, 9, 0, 45, tzinfo=timezone.utc)
        end = datetime(2030, 6, 17, 17, 0, 30, tzinfo=timezone.utc)
        assert local_minute_span(start, end, tz_name="UTC") == (540, 1021)


def test_facility_day_bounds_utc():
    start, end = facility_day_bounds_utc(date(2030, 6, 17), tz_name="Asia/Kolkata")
    assert start == datetime(2030, 6, 16, 18, 30, tzinfo=timezone.utc)
    assert end == datetime(2030, 6, 17, 18, 30, tzinfo=timezone.utc)
