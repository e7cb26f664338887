# File: utils/dt_utils.py
"""Date utilities for habitlog.

All arithmetic works on local calendar dates. Timestamps are naive local
datetimes; timezone-aware inputs keep their wall-clock time and drop the
zone. There is no daylight-saving or zone-shift correction.

Functions:
    - dt_today_local: Get today's local date
    - as_day: Normalize a date/datetime to its calendar date
    - dt_parse: Normalize ISO strings, dates and datetimes to naive datetimes
    - day_end: Latest instant of a calendar day
    - iter_days: Iterate an inclusive range of days
    - add_interval: Add N days/weeks/months/years with month-end clamping
    - week_start / month_start: Start of the containing calendar period
    - days_in_month / clamp_day_of_month: Short-month clamping
    - completions_up_to_day: Point-in-time prefix of a sorted timestamp list
    - count_on_day / count_between: Completion counting by calendar date
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from calendar import monthrange
from datetime import date, datetime, time, timedelta
import logging
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

_LOGGER = logging.getLogger(__name__)

# Interval unit constants (local copies to avoid circular imports)
UNIT_DAY = "d"
UNIT_WEEK = "w"
UNIT_MONTH = "m"
UNIT_YEAR = "y"


# ==============================================================================
# Current Date Functions
# ==============================================================================


def dt_today_local() -> date:
    """Return today's local calendar date."""
    return datetime.now().date()


# ==============================================================================
# Normalization
# ==============================================================================


def as_day(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime.

    `datetime` is a subclass of `date`, so the datetime check must come first.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def dt_parse(value: str | date | datetime | None) -> datetime | None:
    """Normalize a timestamp input into a naive local datetime.

    Accepts:
    - datetime (aware inputs keep wall-clock time, tzinfo dropped)
    - date (midnight of that day)
    - ISO 8601 string ("2025-03-10T09:00:00", "2025-03-10 09:00", "2025-03-10")

    Args:
        value: Input to normalize.

    Returns:
        Naive datetime, or None if the input cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw).replace(tzinfo=None)
        except ValueError:
            _LOGGER.debug("dt_parse: Unrecognized timestamp %r", value)
            return None

    _LOGGER.debug("dt_parse: Unsupported type %s", type(value).__name__)
    return None


def day_end(day: date) -> datetime:
    """Return the latest representable instant of a calendar day."""
    return datetime.combine(day, time.max)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end (both inclusive)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


# ==============================================================================
# Calendar Arithmetic
# ==============================================================================


def add_interval(day: date, delta: int, unit: str) -> date:
    """Add a number of days, weeks, months or years to a calendar date.

    Month and year arithmetic clamps to the last day of a shorter month
    (Jan 31 + 1m = Feb 28, Feb 29 + 1y = Feb 28).

    Args:
        day: Base calendar date.
        delta: Number of units to add.
        unit: One of the UNIT_* constants.

    Returns:
        The resulting calendar date.

    Raises:
        ValueError: If the unit is unknown.
    """
    if unit == UNIT_DAY:
        return day + timedelta(days=delta)
    if unit == UNIT_WEEK:
        return day + timedelta(weeks=delta)
    if unit == UNIT_MONTH:
        return day + relativedelta(months=delta)
    if unit == UNIT_YEAR:
        return day + relativedelta(years=delta)
    raise ValueError(f"Unknown interval unit: {unit!r}")


def week_start(day: date) -> date:
    """Return the Monday starting the calendar week that contains day."""
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    """Return the first day of the month that contains day."""
    return day.replace(day=1)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month."""
    return monthrange(year, month)[1]


def clamp_day_of_month(year: int, month: int, day_of_month: int) -> int:
    """Clamp a day-of-month to the last day of the given month.

    Examples:
        clamp_day_of_month(2025, 4, 31) → 30
        clamp_day_of_month(2025, 2, 30) → 28
        clamp_day_of_month(2024, 2, 30) → 29
    """
    return min(day_of_month, days_in_month(year, month))


# ==============================================================================
# Timestamp List Queries
# ==============================================================================
# All functions below expect `completions` sorted ascending.


def completions_up_to_day(
    completions: Sequence[datetime], day: date
) -> Sequence[datetime]:
    """Return the prefix of completions whose calendar date is on or before day."""
    return completions[: bisect_right(completions, day_end(day))]


def count_between(completions: Sequence[datetime], start: date, end: date) -> int:
    """Count completions whose calendar date lies in [start, end]."""
    if end < start:
        return 0
    low = bisect_left(completions, datetime.combine(start, time.min))
    high = bisect_right(completions, day_end(end))
    return max(0, high - low)


def count_on_day(completions: Sequence[datetime], day: date) -> int:
    """Count completions recorded on a calendar day."""
    return count_between(completions, day, day)


def count_after(occurrences: Sequence[datetime], after: datetime | None) -> int:
    """Count occurrences strictly after a timestamp (all when after is None)."""
    if after is None:
        return len(occurrences)
    return len(occurrences) - bisect_right(occurrences, after)
