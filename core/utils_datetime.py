"""
DateTime utilities for business hours expressed as "HH:MM" strings.
All wall-clock arithmetic is done in minutes of day to stay timezone-free;
only "now" is resolved in the business timezone.
"""
from datetime import date, datetime
from typing import Optional

import pytz

from core.settings import settings


# Timezone configuration
TIMEZONE = pytz.timezone(settings.business_timezone)

MINUTES_PER_DAY = 24 * 60


def get_current_datetime() -> datetime:
    """Get current datetime in the business timezone."""
    return datetime.now(TIMEZONE)


def parse_time_of_day(value: Optional[str]) -> Optional[int]:
    """
    Parse an "HH:MM" (or "HH:MM:SS") string into minutes of day.

    Args:
        value: Time string as stored in business settings

    Returns:
        Minutes since midnight, or None if missing or malformed
    """
    if not value or not isinstance(value, str):
        return None

    parts = value.strip().split(':')
    if len(parts) < 2:
        return None

    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        return None

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None

    return hour * 60 + minute


def format_time_of_day(minutes: int) -> str:
    """Format minutes of day as a zero-padded "HH:MM" string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_now(on_date: date, now: Optional[datetime] = None) -> Optional[int]:
    """
    Minutes of day elapsed on ``on_date`` in the business timezone.

    Returns:
        None if ``on_date`` is in the future, MINUTES_PER_DAY if it is in the
        past, otherwise the current minute of day.
    """
    now = now or get_current_datetime()
    if now.tzinfo is None:
        now = TIMEZONE.localize(now)
    else:
        now = now.astimezone(TIMEZONE)

    today = now.date()
    if on_date > today:
        return None
    if on_date < today:
        return MINUTES_PER_DAY
    return now.hour * 60 + now.minute
