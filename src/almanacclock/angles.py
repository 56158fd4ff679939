"""Cyclic position <-> ring angle mapping and local apparent time.

Two rotation conventions share every disc:

  NOW          clockwise-increasing. Rotates a whole disc so the present
               instant sits under the fixed top marker.
  FIXED_EVENT  counter-clockwise-increasing. Places markers on the disc
               (sign boundaries, calendar events, quarter moons) so future
               events approach the top marker from the left as the disc turns.

Angles are degrees in [0, 360), 0 at the top of the disc.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum

from almanacclock.errors import InvalidInputError, InvalidLocationError


class RotationConvention(Enum):
    NOW = 1
    FIXED_EVENT = -1


def normalize_degrees(angle: float) -> float:
    """Wrap any finite angle into [0, 360)."""
    if not math.isfinite(angle):
        raise InvalidInputError(f"angle must be finite, got {angle}")
    a = angle % 360.0
    # -1e-17 % 360 rounds up to exactly 360.0
    return 0.0 if a >= 360.0 else a


def cyclic_to_angle(position: float, convention: RotationConvention) -> float:
    """Map a fraction of a cycle onto the ring.

    Args:
        position: Progress through the cycle, in [0, 1).
        convention: Direction in which the angle grows with time.

    Returns:
        Degrees in [0, 360).
    """
    if not math.isfinite(position):
        raise InvalidInputError(f"cyclic position must be finite, got {position}")
    return normalize_degrees(position * 360.0 * convention.value)


def angle_to_cyclic(angle: float, convention: RotationConvention) -> float:
    """Exact inverse of `cyclic_to_angle`: ring angle back to a cycle fraction."""
    if not math.isfinite(angle):
        raise InvalidInputError(f"angle must be finite, got {angle}")
    position = (angle * convention.value / 360.0) % 1.0
    return 0.0 if position >= 1.0 else position


def normalize_hours(hours: float) -> float:
    """Wrap an hour count into [0, 24)."""
    if not math.isfinite(hours):
        raise InvalidInputError(f"hours must be finite, got {hours}")
    while hours < 0:
        hours += 24
    while hours >= 24:
        hours -= 24
    return hours


def hour_of_day_to_fraction(hours: float, minutes: float = 0, seconds: float = 0) -> float:
    """Fraction of a 24 h day elapsed at hours:minutes:seconds."""
    return normalize_hours(hours + minutes / 60 + seconds / 3600) / 24


def longitude_offset_hours(longitude: float) -> float:
    """Offset of local apparent time from UTC: 15 degrees of longitude per hour."""
    if not math.isfinite(longitude) or not -180 <= longitude <= 180:
        raise InvalidLocationError(f"longitude must be in [-180, 180], got {longitude}")
    return longitude / 15


def as_utc(dt: datetime) -> datetime:
    """Return `dt` in UTC. Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_apparent_datetime(utc_dt: datetime, longitude: float) -> datetime:
    """Wall-clock reading at `longitude` for a UTC instant (naive result)."""
    shifted = as_utc(utc_dt) + timedelta(hours=longitude_offset_hours(longitude))
    return shifted.replace(tzinfo=None)


def utc_from_local_apparent(local_dt: datetime, longitude: float) -> datetime:
    """Inverse of `local_apparent_datetime`; `local_dt` must be naive."""
    utc_naive = local_dt - timedelta(hours=longitude_offset_hours(longitude))
    return utc_naive.replace(tzinfo=timezone.utc)


def local_apparent_hours(utc_dt: datetime, longitude: float) -> float:
    """Decimal hour of day in [0, 24) at `longitude` for a UTC instant."""
    u = as_utc(utc_dt)
    hours = (
        u.hour
        + u.minute / 60
        + (u.second + u.microsecond / 1_000_000) / 3600
        + longitude_offset_hours(longitude)
    )
    return normalize_hours(hours)


def instant_to_day_fraction(utc_dt: datetime, longitude: float) -> float:
    return local_apparent_hours(utc_dt, longitude) / 24


def format_clock_time(utc_dt: datetime, longitude: float) -> str:
    """Local apparent time as an `h:mm AM/PM` label."""
    local = local_apparent_datetime(utc_dt, longitude)
    hour12 = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour12}:{local.minute:02d} {suffix}"
