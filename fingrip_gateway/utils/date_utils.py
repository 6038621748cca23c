"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Tuple


def start_of_month(day: date) -> date:
    """First day of the month containing `day`"""
    return day.replace(day=1)


def month_bounds(month: str) -> Tuple[date, date]:
    """
    Parse a YYYY-MM string into [first_day, first_day_of_next_month).

    Raises:
        ValueError: If the string is not a valid year-month
    """
    year, _, mon = month.partition("-")
    first = date(int(year), int(mon), 1)
    if first.month == 12:
        return first, date(first.year + 1, 1, 1)
    return first, date(first.year, first.month + 1, 1)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
