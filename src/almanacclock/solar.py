"""Day/night ring: rotation, sun-event angles, and the conic color ramp."""

from __future__ import annotations

from datetime import datetime, timedelta

from almanacclock.angles import (
    RotationConvention,
    as_utc,
    cyclic_to_angle,
    instant_to_day_fraction,
    normalize_degrees,
)
from almanacclock.models import GeoLocation, GradientStop, SunEventSet

_MIDNIGHT = "#0a0e27"

# Anchor colors in daily order. Each pair (a, b) of present consecutive
# anchors may also get a midpoint stop blending towards b.
_ANCHOR_COLORS: dict[str, str] = {
    "night_end": "#1a1f3a",
    "dawn": "#4a4a7d",
    "sunrise": "#ff9966",
    "solar_noon": "#fffacd",
    "sunset": "#ff7f50",
    "dusk": "#6b5b95",
    "night": "#1a1f3a",
}

_MIDPOINT_COLORS: dict[tuple[str, str], str] = {
    ("dawn", "sunrise"): "#e85d75",  # Pre-sunrise pink
    ("sunrise", "solar_noon"): "#ffd966",  # Morning
    ("solar_noon", "sunset"): "#ffd966",  # Afternoon
    ("dusk", "night"): "#2a2f4a",  # Early night
}

# Fades between astronomical dusk and midnight
_NIGHT_TAIL: tuple[tuple[float, str], ...] = (
    (0.2, "#141d2e"),
    (0.4, "#111825"),
    (0.6, "#0e141f"),
    (0.8, "#0b1019"),
)

_POLAR_DAY = (
    GradientStop(0.0, "#ffd966"),
    GradientStop(180.0, "#fffacd"),
    GradientStop(360.0, "#ffd966"),
)
_POLAR_NIGHT = (
    GradientStop(0.0, _MIDNIGHT),
    GradientStop(180.0, "#1a1f3a"),
    GradientStop(360.0, _MIDNIGHT),
)


def ring_rotation_angle(utc_dt: datetime, location: GeoLocation) -> float:
    """Clockwise rotation that puts the current local apparent time at the top."""
    return cyclic_to_angle(instant_to_day_fraction(utc_dt, location.lng), RotationConvention.NOW)


def event_angle(event_dt: datetime, location: GeoLocation) -> float:
    """Fixed position of a sun event on the day disc.

    Uses the same clockwise mapping as `ring_rotation_angle`, so the marker
    reaches the top exactly when the event happens.
    """
    return cyclic_to_angle(instant_to_day_fraction(event_dt, location.lng), RotationConvention.NOW)


def event_angles(events: SunEventSet, location: GeoLocation) -> dict[str, float]:
    """Angles of every sun event present in `events`."""
    return {name: event_angle(dt, location) for name, dt in events.instants().items()}


def _forward_span(a: float, b: float) -> float:
    """Clockwise distance from a to b, in [0, 360)."""
    return (b - a) % 360.0


def color_gradient_stops(angles: dict[str, float]) -> tuple[GradientStop, ...]:
    """Closed-loop color ramp for the day disc.

    Absent anchors (polar day or night) are skipped. The result is sorted by
    angle, starts at 0 and ends at 360 with the midnight color, so it is a
    valid non-decreasing stop list even when events coincide or wrap past
    midnight.

    Args:
        angles: Event name -> disc angle, as returned by `event_angles`.

    Returns:
        Gradient stops ordered by ascending angle.
    """
    present = [name for name in _ANCHOR_COLORS if name in angles]
    stops: list[GradientStop] = [
        GradientStop(angles[name], _ANCHOR_COLORS[name]) for name in present
    ]

    for a, b in zip(present, present[1:]):
        color = _MIDPOINT_COLORS.get((a, b))
        if color is None:
            continue
        mid = normalize_degrees(angles[a] + _forward_span(angles[a], angles[b]) * 0.5)
        stops.append(GradientStop(mid, color))

    # Skipped when astronomical dusk falls after midnight
    if "night" in angles and angles["night"] > angles.get("solar_noon", 180.0):
        start = angles["night"]
        tail = 360.0 - start
        for fraction, color in _NIGHT_TAIL:
            stops.append(GradientStop(start + tail * fraction, color))

    stops.sort(key=lambda s: s.angle)
    return (GradientStop(0.0, _MIDNIGHT), *stops, GradientStop(360.0, _MIDNIGHT))


def gradient_for(events: SunEventSet, location: GeoLocation) -> tuple[GradientStop, ...]:
    """Color ramp for a day, with flat ramps for polar day and polar night."""
    angles = event_angles(events, location)
    if events.state == "polar_day" and "sunrise" not in angles:
        return _POLAR_DAY
    if events.state == "polar_night" and "dawn" not in angles:
        return _POLAR_NIGHT
    return color_gradient_stops(angles)


def current_period(now: datetime, events: SunEventSet) -> str:
    """Name the part of the day that `now` falls in."""
    if events.state == "polar_day":
        return "Polar Day"

    t = as_utc(now)
    if events.sunrise is None or events.sunset is None:
        # The sun stays below the horizon; civil twilight may still occur
        if (
            events.dawn is not None
            and events.dusk is not None
            and as_utc(events.dawn) <= t < as_utc(events.dusk)
        ):
            if events.solar_noon is None or t < as_utc(events.solar_noon):
                return "Dawn"
            return "Dusk"
        return "Polar Night" if events.state == "polar_night" else "Night"

    dawn = events.dawn or events.sunrise
    dusk = events.dusk or events.sunset
    noon = events.solar_noon or events.sunrise + (events.sunset - events.sunrise) / 2

    if t < as_utc(dawn):
        return "Night"
    if t < as_utc(events.sunrise):
        return "Dawn"
    if t < as_utc(noon):
        return "Morning"
    if t < as_utc(events.sunset):
        return "Afternoon"
    if t < as_utc(dusk):
        return "Dusk"
    return "Night"


def day_length(events: SunEventSet) -> timedelta:
    """Time between sunrise and sunset; a full day or nothing at the poles."""
    if events.sunrise is not None and events.sunset is not None:
        length = as_utc(events.sunset) - as_utc(events.sunrise)
        if length < timedelta(0):
            length += timedelta(days=1)
        return length
    if events.state == "polar_day":
        return timedelta(days=1)
    return timedelta(0)


def format_day_length(length: timedelta) -> str:
    minutes = int(length.total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60}m"
