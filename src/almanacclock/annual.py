"""Annual ring: day-of-year rotation, zodiac lookup, and sign wedges."""

from __future__ import annotations

from datetime import date

from almanacclock.angles import RotationConvention, cyclic_to_angle, normalize_degrees
from almanacclock.datemath import (
    day_of_year,
    days_in_year,
    resolve_date,
    validate_month_day,
)
from almanacclock.errors import InvalidInputError
from almanacclock.models import SignWedge, ZodiacSign

ZODIAC_SIGNS: tuple[ZodiacSign, ...] = (
    ZodiacSign("Aries", 3, 21, 4, 19, "fire", "#ef4444"),
    ZodiacSign("Taurus", 4, 20, 5, 20, "earth", "#4ade80"),
    ZodiacSign("Gemini", 5, 21, 6, 20, "air", "#fbbf24"),
    ZodiacSign("Cancer", 6, 21, 7, 22, "water", "#e0e7ff"),
    ZodiacSign("Leo", 7, 23, 8, 22, "fire", "#fb923c"),
    ZodiacSign("Virgo", 8, 23, 9, 22, "earth", "#a78bfa"),
    ZodiacSign("Libra", 9, 23, 10, 22, "air", "#f472b6"),
    ZodiacSign("Scorpio", 10, 23, 11, 21, "water", "#dc2626"),
    ZodiacSign("Sagittarius", 11, 22, 12, 21, "fire", "#a855f7"),
    ZodiacSign("Capricorn", 12, 22, 1, 19, "earth", "#94a3b8"),
    ZodiacSign("Aquarius", 1, 20, 2, 18, "air", "#22d3ee"),
    ZodiacSign("Pisces", 2, 19, 3, 20, "water", "#2dd4bf"),
)


def ring_rotation_angle(d: date) -> float:
    """Clockwise rotation that brings today's position to the top."""
    return cyclic_to_angle(day_of_year(d) / days_in_year(d.year), RotationConvention.NOW)


def event_angle(month: int, day: int, year: int) -> float:
    """Counter-clockwise position of a month/day on the annual disc."""
    d = resolve_date(year, month, day)
    return cyclic_to_angle(day_of_year(d) / days_in_year(year), RotationConvention.FIXED_EVENT)


def _contains(sign: ZodiacSign, month: int, day: int) -> bool:
    if sign.start_month == sign.end_month:
        return month == sign.start_month and sign.start_day <= day <= sign.end_day
    # Same test covers the year-crossing sign: each endpoint month is checked alone
    return (month == sign.start_month and day >= sign.start_day) or (
        month == sign.end_month and day <= sign.end_day
    )


def zodiac_sign_for(month: int, day: int) -> ZodiacSign:
    """Sign whose date range contains month/day."""
    validate_month_day(month, day)
    for sign in ZODIAC_SIGNS:
        if _contains(sign, month, day):
            return sign
    raise InvalidInputError(f"no zodiac sign covers {month}/{day}")  # pragma: no cover


def sign_by_name(name: str) -> ZodiacSign:
    for sign in ZODIAC_SIGNS:
        if sign.name.lower() == name.lower():
            return sign
    raise KeyError(f"Unknown zodiac sign '{name}'")


def _sign_bounds(sign: ZodiacSign, year: int) -> tuple[int, int]:
    """Start day-of-year and inclusive length in days."""
    start = day_of_year(resolve_date(year, sign.start_month, sign.start_day))
    end = day_of_year(resolve_date(year, sign.end_month, sign.end_day))
    if sign.crosses_year_boundary:
        length = (days_in_year(year) - start + 1) + end
    else:
        length = end - start + 1
    return start, length


def sign_wedge(sign: ZodiacSign, year: int) -> SignWedge:
    """Hoverable wedge for a sign: start angle plus its arc in degrees.

    The arc follows the sign's real day count, so the twelve wedges tile
    the disc exactly in both common and leap years.
    """
    total = days_in_year(year)
    start, length = _sign_bounds(sign, year)
    start_angle = event_angle(sign.start_month, sign.start_day, year)
    arc = length / total * 360.0
    return SignWedge(
        sign=sign,
        start_angle=start_angle,
        end_angle=normalize_degrees(start_angle - arc),
        arc_degrees=arc,
        midpoint_angle=sign_midpoint_angle(sign, year),
    )


def sign_midpoint_angle(sign: ZodiacSign, year: int) -> float:
    """Angle at the temporal midpoint of the sign, used to place its glyph.

    For Capricorn the midpoint lies past Dec 31; wrapping the day count keeps
    it inside the wedge.
    """
    total = days_in_year(year)
    start = resolve_date(year, sign.start_month, sign.start_day)
    end_year = year + 1 if sign.crosses_year_boundary else year
    end = resolve_date(end_year, sign.end_month, sign.end_day)
    mid = day_of_year(start) + (end - start).days / 2
    return cyclic_to_angle((mid / total) % 1.0, RotationConvention.FIXED_EVENT)


def all_wedges(year: int) -> tuple[SignWedge, ...]:
    return tuple(sign_wedge(sign, year) for sign in ZODIAC_SIGNS)


def sign_boundary_angles(year: int) -> dict[str, float]:
    """Division line on the disc at the first day of each sign."""
    return {s.name: event_angle(s.start_month, s.start_day, year) for s in ZODIAC_SIGNS}


def date_range_label(sign: ZodiacSign) -> str:
    """`Mar 21 - Apr 19` style label."""
    start = date(2024, sign.start_month, sign.start_day).strftime("%b")
    end = date(2024, sign.end_month, sign.end_day).strftime("%b")
    return f"{start} {sign.start_day} - {end} {sign.end_day}"
