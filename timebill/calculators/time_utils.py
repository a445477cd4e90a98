"""Time helpers shared by validators, calculators and services.

All timestamps are stored as naive UTC. Incoming ISO strings with an offset
are converted to UTC and stripped of tzinfo before they reach the database.
"""

import datetime as dt
from typing import Optional


def utc_now() -> dt.datetime:
    """Current time as naive UTC."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def utc_today() -> dt.date:
    return utc_now().date()


def to_naive_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Normalize an aware datetime to naive UTC; naive values pass through.

    Example:
        >>> to_naive_utc(dt.datetime(2024, 3, 1, 10, 0, tzinfo=dt.timezone(dt.timedelta(hours=2))))
        datetime.datetime(2024, 3, 1, 8, 0)
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def start_of_day(day: dt.date) -> dt.datetime:
    return dt.datetime.combine(day, dt.time.min)


def day_after(day: dt.date) -> dt.datetime:
    """Exclusive upper bound for filtering timestamps up to and including ``day``."""
    return start_of_day(day) + dt.timedelta(days=1)


def minutes_between(start: dt.datetime, end: dt.datetime) -> int:
    """Whole minutes from start to end (truncated)."""
    return int((end - start).total_seconds() // 60)
