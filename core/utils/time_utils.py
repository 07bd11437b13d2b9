"""
Time utility functions.

Streaks are counted in calendar days of the user's own timezone, so
"today" and "yesterday" are always resolved against the user's tz.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from django.utils import timezone
import pytz


def get_user_timezone(tz_name: Optional[str]):
    """Resolve an IANA timezone name, falling back to UTC."""
    if not tz_name:
        return pytz.UTC
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def get_today_in_timezone(tz_name: Optional[str] = None) -> date:
    """Get today's date in the given timezone."""
    now_utc = timezone.now()
    return now_utc.astimezone(get_user_timezone(tz_name)).date()


def get_day_bounds(day: date, tz_name: Optional[str] = None) -> Tuple[datetime, datetime]:
    """
    Get the aware [start, end) datetimes of a local calendar day.

    Examples:
        >>> get_day_bounds(date(2025, 12, 3), 'UTC')
        (datetime(2025, 12, 3, 0, 0, tzinfo=UTC), datetime(2025, 12, 4, 0, 0, tzinfo=UTC))
    """
    tz = get_user_timezone(tz_name)
    start = tz.localize(datetime.combine(day, time.min))
    end = tz.localize(datetime.combine(day + timedelta(days=1), time.min))
    return start, end


def is_yesterday(candidate: Optional[date], today: date) -> bool:
    """Check if candidate is exactly the day before today."""
    if candidate is None:
        return False
    return candidate == today - timedelta(days=1)
