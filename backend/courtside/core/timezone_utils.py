"""
Facility timezone utilities.

Every day-of-week and time-of-day evaluation (coach availability windows,
pricing rule facets, court day schedules) goes through these helpers so
that one basis is used consistently: the configured facility timezone.
Datetimes are stored in UTC.
"""

from datetime import date, datetime, time, timedelta
import math
from typing import Optional

import pytz

from .config import settings
from .constants import MINUTES_PER_DAY


def get_facility_timezone(name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the facility timezone as a pytz timezone object."""
    return pytz.timezone(name or settings.facility_timezone)


def ensure_utc(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive values are interpreted as facility-local wall clock time.
    """
    if dt.tzinfo is None:
        dt = get_facility_timezone(tz_name).localize(dt)
    return dt.astimezone(pytz.UTC)


def to_facility_local(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """Convert a datetime into facility-local time (naive input is already facility-local)."""
    return ensure_utc(dt, tz_name).astimezone(get_facility_timezone(tz_name))


def day_of_week(local_dt: datetime) -> int:
    """Day of week with 0 = Sunday .. 6 = Saturday."""
    return (local_dt.weekday() + 1) % 7


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def parse_hhmm(value: str) -> int:
    """Parse an "HH:MM" string into minutes since midnight."""
    try:
        hours_str, minutes_str = value.split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid time {value!r}. Expected HH:MM") from exc
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or hours * 60 + minutes > MINUTES_PER_DAY:
        raise ValueError(f"Invalid time {value!r}. Expected HH:MM")
    return hours * 60 + minutes


def format_minutes(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"


def local_minute_span(start: datetime, end: datetime, tz_name: Optional[str] = None) -> tuple[int, int]:
    """
    Return (start, end) minutes relative to local midnight of the start day.

    The start is floored and the end ceiled to whole minutes, so seconds past
    a window bound still fall outside it.

    An interval crossing local midnight yields an end beyond 1440, which no
    single-day window can contain.
    """
    local_start = to_facility_local(start, tz_name)
    local_end = to_facility_local(end, tz_name)
    midnight = local_start.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    start_minutes = minutes_since_midnight(local_start.time())
    end_minutes = math.ceil((local_end.replace(tzinfo=None) - midnight) / timedelta(minutes=1))
    return start_minutes, end_minutes


def facility_day_bounds_utc(target_date: date, tz_name: Optional[str] = None) -> tuple[datetime, datetime]:
    """UTC instants for [local midnight, next local midnight) of a facility-local date."""
    tz = get_facility_timezone(tz_name)
    start_local = tz.localize(datetime.combine(target_date, time.min))
    end_local = tz.localize(datetime.combine(target_date + timedelta(days=1), time.min))
    return start_local.astimezone(pytz.UTC), end_local.astimezone(pytz.UTC)
