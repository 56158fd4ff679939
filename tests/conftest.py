"""Shared fixtures: a deterministic stand-in for the skyfield almanac."""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone

import pytest

from almanacclock.angles import as_utc, utc_from_local_apparent
from almanacclock.models import EventType, GeoLocation, MoonState, SingleDayEvent, SunEventSet

# Full moon at this instant; the phase then advances linearly
_FULL_MOON_EPOCH = datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
_SYNODIC = 29.53

# Local apparent (hour, minute) of each sun event on every fake day
SUN_TIMES = {
    "night_end": (4, 0),
    "nautical_dawn": (4, 40),
    "dawn": (5, 20),
    "sunrise": (6, 0),
    "solar_noon": (12, 0),
    "sunset": (18, 0),
    "dusk": (18, 40),
    "nautical_dusk": (19, 20),
    "night": (20, 0),
}


def fake_phase(utc_dt: datetime) -> float:
    days = (as_utc(utc_dt) - _FULL_MOON_EPOCH).total_seconds() / 86400
    return (0.5 + days / _SYNODIC) % 1.0


class FakeAlmanac:
    """AstronomyService with a 6:00-18:00 day and a linear lunar cycle."""

    def __init__(self, state: str = "normal"):
        self.state = state

    def sun_events(self, day: date, location: GeoLocation) -> SunEventSet:
        if self.state == "polar_day":
            noon = utc_from_local_apparent(datetime.combine(day, time(12)), location.lng)
            return SunEventSet(day=day, solar_noon=noon, state="polar_day")
        if self.state == "polar_night":
            return SunEventSet(day=day, state="polar_night")
        found = {
            name: utc_from_local_apparent(datetime.combine(day, time(h, m)), location.lng)
            for name, (h, m) in SUN_TIMES.items()
        }
        return SunEventSet(day=day, **found)

    def moon_phase(self, utc_dt: datetime) -> float:
        return fake_phase(utc_dt)

    def moon_state(self, utc_dt: datetime, location: GeoLocation) -> MoonState:
        phase = self.moon_phase(utc_dt)
        return MoonState(phase=phase, illumination=(1 - math.cos(2 * math.pi * phase)) / 2)

    def seasons(self, year: int, location: GeoLocation) -> tuple[SingleDayEvent, ...]:
        return (
            SingleDayEvent("season-0", "Vernal Equinox", 3, 20, "#fbbf24", EventType.CELESTIAL),
            SingleDayEvent("season-1", "Summer Solstice", 6, 21, "#fbbf24", EventType.CELESTIAL),
            SingleDayEvent("season-2", "Autumnal Equinox", 9, 22, "#fbbf24", EventType.CELESTIAL),
            SingleDayEvent("season-3", "Winter Solstice", 12, 21, "#fbbf24", EventType.CELESTIAL),
        )


@pytest.fixture
def fake_service() -> FakeAlmanac:
    return FakeAlmanac()


@pytest.fixture
def minneapolis() -> GeoLocation:
    return GeoLocation(lat=45.0, lng=-93.0, name="Minneapolis")


@pytest.fixture
def greenwich() -> GeoLocation:
    return GeoLocation(lat=51.5, lng=0.0, name="Greenwich")
