"""
Working-Day Calendar

Counts and advances working days. A working day is Monday-Friday and not in
the exclusion set (weekends + sprint holidays + master holidays).

All functions take `datetime.date` values and an iterable of excluded dates;
membership is exact date equality.
"""

from datetime import date, timedelta
from typing import AbstractSet, Iterable, List, Optional

ONE_DAY = timedelta(days=1)


def _as_set(excluded: Optional[Iterable[date]]) -> AbstractSet[date]:
    if excluded is None:
        return frozenset()
    if isinstance(excluded, (set, frozenset)):
        return excluded
    return frozenset(excluded)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_working_day(day: date, excluded: Optional[Iterable[date]] = None) -> bool:
    """True for Monday-Friday dates that are not excluded."""
    return not is_weekend(day) and day not in _as_set(excluded)


def working_days_between(
    start: date,
    end: date,
    excluded: Optional[Iterable[date]] = None,
) -> List[date]:
    """List the working days in [start, end], inclusive. Empty if end < start."""
    holidays = _as_set(excluded)
    days = []
    current = start
    while current <= end:
        if is_working_day(current, holidays):
            days.append(current)
        current += ONE_DAY
    return days


def count_working_days(
    start: date,
    end: date,
    excluded: Optional[Iterable[date]] = None,
) -> int:
    """Number of working days in [start, end], inclusive. 0 if end < start."""
    return len(working_days_between(start, end, excluded))


def add_working_days(
    start: date,
    days: int,
    excluded: Optional[Iterable[date]] = None,
) -> date:
    """
    Advance `days` working days from `start`.

    If `start` is not a working day, the first working day after it becomes
    the anchor; the anchor itself is not counted. From the anchor the date
    moves one calendar day at a time until `days` working days have been
    counted. With `days <= 0` the anchor is returned.

    Args:
        start: Date to advance from
        days: Number of working days to advance
        excluded: Holiday dates to skip

    Returns:
        The date reached
    """
    holidays = _as_set(excluded)

    current = start
    while not is_working_day(current, holidays):
        current += ONE_DAY

    counted = 0
    while counted < days:
        current += ONE_DAY
        if is_working_day(current, holidays):
            counted += 1
    return current


def sprint_end_date(
    start: date,
    duration: int,
    excluded: Optional[Iterable[date]] = None,
) -> date:
    """Date of the `duration`-th working day of a sprint starting on `start`."""
    return add_working_days(start, duration - 1, excluded)


def next_working_day(day: date, excluded: Optional[Iterable[date]] = None) -> date:
    """First working day strictly after `day`."""
    holidays = _as_set(excluded)
    current = day + ONE_DAY
    while not is_working_day(current, holidays):
        current += ONE_DAY
    return current


def previous_working_day(day: date, excluded: Optional[Iterable[date]] = None) -> date:
    """Last working day strictly before `day`."""
    holidays = _as_set(excluded)
    current = day - ONE_DAY
    while not is_working_day(current, holidays):
        current -= ONE_DAY
    return current


def code_freeze_date(
    end: date,
    days_before: int,
    excluded: Optional[Iterable[date]] = None,
) -> date:
    """Walk back `days_before` working days from the sprint end date."""
    holidays = _as_set(excluded)
    current = end
    counted = 0
    while counted < days_before:
        current -= ONE_DAY
        if is_working_day(current, holidays):
            counted += 1
    return current
