"""
Expiry calendar arithmetic.

Weekdays use date.weekday() numbering (Monday=0 .. Sunday=6).
Months are 1-based here; callers convert from the ticker encoding.
"""

import calendar
from datetime import date


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def last_day_of_month(year: int, month: int) -> date:
    """Last calendar day of the month."""
    return date(year, month, days_in_month(year, month))


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    """Date of the last given weekday in the month."""
    last_day = last_day_of_month(year, month)
    offset = (last_day.weekday() - weekday) % 7
    return date(year, month, last_day.day - offset)


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> date:
    """
    Date of the nth (1-based) given weekday in the month.

    An nth past the month's last occurrence steps back one week instead of
    spilling into the next month.
    """
    first_day = date(year, month, 1)
    offset = (weekday - first_day.weekday()) % 7
    day = 1 + offset + (nth - 1) * 7
    if day > days_in_month(year, month):
        day -= 7
    return date(year, month, day)
