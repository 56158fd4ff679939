"""Gregorian calendar arithmetic shared by every ring."""

from __future__ import annotations

from datetime import date, timedelta

from almanacclock.errors import InvalidInputError

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Number of days in `month` of `year`, leap-aware for February."""
    if not 1 <= month <= 12:
        raise InvalidInputError(f"month must be in 1..12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def day_of_year(d: date) -> int:
    """1-based ordinal of `d` within its year (Jan 1 -> 1)."""
    return d.toordinal() - date(d.year, 1, 1).toordinal() + 1


def validate_month_day(month: int, day: int, year: int | None = None) -> None:
    """Reject a month/day pair that cannot occur.

    Without a year, February accepts 29 (the pair may recur in a leap year).

    Raises:
        InvalidInputError: If month is outside 1..12 or day is outside the month.
    """
    if not 1 <= month <= 12:
        raise InvalidInputError(f"month must be in 1..12, got {month}")
    limit = days_in_month(2024 if year is None else year, month)
    if not 1 <= day <= limit:
        raise InvalidInputError(f"day must be in 1..{limit} for month {month}, got {day}")


def resolve_date(year: int, month: int, day: int) -> date:
    """Place a recurring month/day in a concrete year.

    Feb 29 in a common year rolls over to Mar 1.
    """
    validate_month_day(month, day)
    if month == 2 and day == 29 and not is_leap_year(year):
        return date(year, 3, 1)
    return date(year, month, day)


def date_from_day_of_year(year: int, ordinal: int) -> date:
    """Inverse of `day_of_year`."""
    if not 1 <= ordinal <= days_in_year(year):
        raise InvalidInputError(
            f"day of year must be in 1..{days_in_year(year)}, got {ordinal}"
        )
    return date(year, 1, 1) + timedelta(days=ordinal - 1)


def month_dates(year: int, month: int) -> list[date]:
    """Every date in the given month, in order."""
    return [date(year, month, d) for d in range(1, days_in_month(year, month) + 1)]
