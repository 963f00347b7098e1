"""Calendar-day helpers.

Challenge dates are stored and compared as ``YYYY-MM-DD`` strings. All
day arithmetic goes through ``date`` objects built from those strings, never
through instants, so daylight-saving transitions cannot shift a day.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidInputError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_zone(tz: Optional[str] = None):
    """Resolve an IANA timezone name, falling back to UTC.

    Args:
        tz: Timezone identifier such as ``America/New_York``

    Returns:
        A tzinfo instance

    Raises:
        InvalidInputError: If the identifier is unknown
    """
    if not tz:
        return timezone.utc
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidInputError(f"Unknown timezone: {tz}") from e


def today_in_timezone(tz: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """Get today's date as ``YYYY-MM-DD`` in the given timezone.

    Args:
        tz: IANA timezone identifier (UTC when omitted)
        now: Reference instant, defaults to the current time

    Returns:
        Calendar date string
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(get_zone(tz)).date().isoformat()


def date_with_offset(
    tz: Optional[str] = None,
    days: int = 0,
    now: Optional[datetime] = None,
) -> str:
    """Get the date ``days`` away from today in the given timezone."""
    return shift_date(today_in_timezone(tz, now), days)


def tomorrow_in_timezone(tz: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """Get tomorrow's date in the given timezone."""
    return date_with_offset(tz, 1, now)


def is_valid_date(value: str) -> bool:
    """Check that a string is a real ``YYYY-MM-DD`` calendar date."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        InvalidInputError: If the string is not a calendar date
    """
    if not is_valid_date(value):
        raise InvalidInputError(f"Invalid date: {value!r}. Use YYYY-MM-DD")
    return date.fromisoformat(value)


def shift_date(value: str, days: int) -> str:
    """Move a date string by a whole number of days."""
    return (parse_date(value) + timedelta(days=days)).isoformat()


def days_between(start: str, end: str) -> int:
    """Number of calendar days from ``start`` to ``end``."""
    return (parse_date(end) - parse_date(start)).days


def week_dates(value: str) -> list[str]:
    """Monday-to-Sunday dates of the week containing ``value``."""
    day = parse_date(value)
    monday = day - timedelta(days=day.weekday())
    return [(monday + timedelta(days=i)).isoformat() for i in range(7)]
