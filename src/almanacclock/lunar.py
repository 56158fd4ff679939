"""Moon-phase ring: rotation, quarter anchors, phase names, blue-moon months.

The disc turns clockwise by `phase * 360` while the quarter-phase markers sit
at counter-clockwise positions, so the marker of the current phase is always
under the top marker. With that convention First Quarter is at 270 degrees
and Last Quarter at 90 degrees.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import date, datetime, time

import structlog

from almanacclock.angles import (
    RotationConvention,
    angle_to_cyclic,
    cyclic_to_angle,
    normalize_degrees,
    utc_from_local_apparent,
)
from almanacclock.datemath import month_dates
from almanacclock.errors import InvalidInputError
from almanacclock.models import GeoLocation, GradientStop, PhaseAnchor

logger = structlog.get_logger(__name__)

SYNODIC_MONTH_DAYS = 29.53058867

FULL_MOON_BAND = (0.47, 0.53)

# Upper bound (exclusive) of each name; "New Moon" also covers phase > 0.97
_PHASE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (0.03, "New Moon"),
    (0.22, "Waxing Crescent"),
    (0.28, "First Quarter"),
    (0.47, "Waxing Gibbous"),
    (0.53, "Full Moon"),
    (0.72, "Waning Gibbous"),
    (0.78, "Last Quarter"),
)

PHASE_NAMES: tuple[str, ...] = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)

_QUARTERS: tuple[tuple[str, float], ...] = (
    ("New Moon", 0.0),
    ("First Quarter", 0.25),
    ("Full Moon", 0.5),
    ("Last Quarter", 0.75),
)

PhaseSampler = Callable[[datetime], float]


def _check_phase(phase: float) -> float:
    if not math.isfinite(phase) or not 0 <= phase < 1:
        raise InvalidInputError(f"moon phase must be in [0, 1), got {phase}")
    return phase


def ring_rotation_angle(phase: float) -> float:
    """Clockwise rotation that brings the current phase to the top."""
    return cyclic_to_angle(_check_phase(phase), RotationConvention.NOW)


def anchor_angle(phase: float) -> float:
    """Fixed marker position on the lunar disc for a phase fraction."""
    return cyclic_to_angle(_check_phase(phase), RotationConvention.FIXED_EVENT)


def quarter_anchors() -> tuple[PhaseAnchor, ...]:
    return tuple(PhaseAnchor(name, phase, anchor_angle(phase)) for name, phase in _QUARTERS)


def classify_phase(phase: float) -> str:
    """Name the phase; principal phases get a narrow band around their exact point."""
    _check_phase(phase)
    if phase > 0.97:
        return "New Moon"
    for upper, name in _PHASE_THRESHOLDS:
        if phase < upper:
            return name
    return "Waning Crescent"


def is_full_moon_phase(phase: float) -> bool:
    low, high = FULL_MOON_BAND
    return low <= phase <= high


def angle_to_phase_click(click_angle: float, disc_rotation: float) -> float:
    """Phase fraction under a tap on the lunar ring.

    Args:
        click_angle: Screen angle of the tap, 0 at the top, clockwise.
        disc_rotation: Current clockwise rotation of the disc.

    Returns:
        The phase whose fixed marker is drawn at that screen position.
    """
    disc_angle = normalize_degrees(click_angle - disc_rotation)
    return angle_to_cyclic(disc_angle, RotationConvention.FIXED_EVENT)


def full_moon_dates(
    year: int,
    month: int,
    location: GeoLocation,
    phase_at: PhaseSampler,
) -> list[date]:
    """Dates in the month whose local-noon phase falls in the full-moon band.

    Detections on consecutive days are merged into the first of them.
    """
    hits: list[date] = []
    for d in month_dates(year, month):
        noon = utc_from_local_apparent(datetime.combine(d, time(12)), location.lng)
        if is_full_moon_phase(phase_at(noon)):
            hits.append(d)

    merged: list[date] = []
    last_hit: date | None = None
    for d in hits:
        if last_hit is None or (d - last_hit).days > 1:
            merged.append(d)
        last_hit = d
    return merged


def is_blue_moon_month(
    year: int,
    month: int,
    location: GeoLocation,
    phase_at: PhaseSampler,
) -> bool:
    """True when the calendar month holds two distinct full moons.

    Phase is sampled once per day at local apparent noon, so a full moon
    close to a day boundary can be missed.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        location: Observer; fixes the local noon sampling instant.
        phase_at: Returns the lunar phase fraction for a UTC instant.

    Returns:
        Whether every day of this month carries blue-moon status.
    """
    found = full_moon_dates(year, month, location, phase_at)
    if len(found) >= 2:
        logger.debug("blue_moon_month", year=year, month=month, dates=[d.isoformat() for d in found])
    return len(found) >= 2


def illumination_percent(fraction: float) -> int:
    return round(fraction * 100)


def gradient_stops() -> tuple[GradientStop, ...]:
    """Dark-to-light ramp; lightest at the full-moon anchor, darkest at new."""
    return (
        GradientStop(0.0, "#0f172a"),
        GradientStop(45.0, "#1e293b"),
        GradientStop(90.0, "#334155"),
        GradientStop(135.0, "#475569"),
        GradientStop(180.0, "#64748b"),
        GradientStop(225.0, "#475569"),
        GradientStop(270.0, "#334155"),
        GradientStop(315.0, "#1e293b"),
        GradientStop(326.25, "#1a2534"),
        GradientStop(337.5, "#17212f"),
        GradientStop(348.75, "#131c2a"),
        GradientStop(360.0, "#0f172a"),
    )
