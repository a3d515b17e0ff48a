"""
Date utility functions for day-granularity scheduling.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional


def local_now() -> datetime:
    """Current local wall-clock time (naive)."""
    return datetime.now()


def normalize_day(value: datetime) -> date:
    """
    Truncate a timestamp to its local calendar day.

    Timezone-aware values are converted to local time first, so a review
    stored as UTC still lands on the learner's calendar day.

    Args:
        value: Timestamp to normalize

    Returns:
        The local calendar date of the timestamp
    """
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.date()


def start_of_day(value: Optional[datetime] = None) -> datetime:
    """Local midnight of the day containing value (defaults to now)."""
    if value is None:
        value = local_now()
    return datetime.combine(normalize_day(value), time.min)


def days_from(today: datetime, days: int) -> datetime:
    """Midnight `days` calendar days after today's midnight."""
    return start_of_day(today) + timedelta(days=days)
