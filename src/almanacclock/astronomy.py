"""Astronomical inputs to the rings: sun events, moon state, seasons.

The ring models only need the `AstronomyService` protocol. `SkyfieldAlmanac`
implements it with skyfield's almanac routines over a JPL ephemeris.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Protocol

import structlog
from skyfield import almanac
from skyfield.api import Loader, wgs84

from almanacclock.angles import as_utc, local_apparent_datetime, utc_from_local_apparent
from almanacclock.config import load_settings
from almanacclock.models import (
    EventType,
    GeoLocation,
    MoonState,
    SingleDayEvent,
    SunEventSet,
)

logger = structlog.get_logger(__name__)

# dark_twilight_day levels: 0 night, 1 astronomical, 2 nautical, 3 civil twilight, 4 day.
# A rise into level n / a fall out of level n marks these events.
_RISING_EVENT = {1: "night_end", 2: "nautical_dawn", 3: "dawn", 4: "sunrise"}
_SETTING_EVENT = {4: "sunset", 3: "dusk", 2: "nautical_dusk", 1: "night"}

_SEASON_COLOR = "#fbbf24"


class AstronomyService(Protocol):
    def sun_events(self, day: date, location: GeoLocation) -> SunEventSet: ...

    def moon_state(self, utc_dt: datetime, location: GeoLocation) -> MoonState: ...

    def moon_phase(self, utc_dt: datetime) -> float: ...

    def seasons(self, year: int, location: GeoLocation) -> tuple[SingleDayEvent, ...]: ...


@lru_cache(maxsize=2)
def _open_ephemeris(directory: str, name: str):
    loader = Loader(directory)
    eph = loader(name)
    logger.info("ephemeris_loaded", directory=directory, name=name)
    return loader, eph


def name_twilight_transitions(
    start_level: int, times: list[datetime], levels: list[int]
) -> dict[str, datetime]:
    """Name each change of twilight level by the sun event it marks.

    `levels[i]` is the level entered at `times[i]`. A rise is named by the
    level entered, a fall by the level left. Only the first occurrence of
    each event is kept.
    """
    found: dict[str, datetime] = {}
    previous = start_level
    for t, level in zip(times, levels):
        name = _RISING_EVENT.get(level) if level > previous else _SETTING_EVENT.get(previous)
        if name is not None and name not in found:
            found[name] = t
        previous = level
    return found


def _local_day_bounds(day: date, location: GeoLocation) -> tuple[datetime, datetime]:
    """UTC start/end of the local apparent day at the location."""
    start = utc_from_local_apparent(datetime.combine(day, time(0)), location.lng)
    return start, start + timedelta(days=1)


class SkyfieldAlmanac:
    """`AstronomyService` backed by skyfield."""

    def __init__(self, ephemeris_dir: Path | None = None, ephemeris_name: str | None = None):
        settings = load_settings()
        self._dir = str(ephemeris_dir or settings.ephemeris_dir)
        self._name = ephemeris_name or settings.ephemeris_name

    @property
    def _eph(self):
        return _open_ephemeris(self._dir, self._name)[1]

    @property
    def _ts(self):
        return _open_ephemeris(self._dir, self._name)[0].timescale()

    def sun_events(self, day: date, location: GeoLocation) -> SunEventSet:
        """Sun events within the local apparent day `day` at `location`.

        Events that do not happen that day are None. When the sun neither
        rises nor sets, the twilight level at local noon decides between
        polar day and polar night.
        """
        eph = self._eph
        ts = self._ts
        topos = wgs84.latlon(latitude_degrees=location.lat, longitude_degrees=location.lng)
        start, end = _local_day_bounds(day, location)
        t0 = ts.from_datetime(start)
        t1 = ts.from_datetime(end)

        f = almanac.dark_twilight_day(eph, topos)
        times, levels = almanac.find_discrete(t0, t1, f)
        found = name_twilight_transitions(
            int(f(t0)), [t.utc_datetime() for t in times], [int(level) for level in levels]
        )

        transits, kinds = almanac.find_discrete(
            t0, t1, almanac.meridian_transits(eph, eph["sun"], topos)
        )
        for t, kind in zip(transits, kinds):
            if int(kind) == 1:
                found["solar_noon"] = t.utc_datetime()
                break

        state = "normal"
        if "sunrise" not in found and "sunset" not in found:
            noon = ts.from_datetime(start + timedelta(hours=12))
            state = "polar_day" if int(f(noon)) == 4 else "polar_night"
            logger.debug("sun_polar_state", day=day.isoformat(), lat=location.lat, state=state)

        return SunEventSet(day=day, state=state, **found)

    def moon_phase(self, utc_dt: datetime) -> float:
        """Phase fraction: Moon-Sun ecliptic longitude difference over 360 degrees."""
        t = self._ts.from_datetime(as_utc(utc_dt))
        phase = float(almanac.moon_phase(self._eph, t).degrees) / 360.0
        return 0.0 if phase >= 1.0 else phase

    def moon_state(self, utc_dt: datetime, location: GeoLocation) -> MoonState:
        eph = self._eph
        ts = self._ts
        t = ts.from_datetime(as_utc(utc_dt))
        topos = wgs84.latlon(latitude_degrees=location.lat, longitude_degrees=location.lng)
        observer = eph["earth"] + topos
        moon = eph["moon"]

        day = local_apparent_datetime(utc_dt, location.lng).date()
        start, end = _local_day_bounds(day, location)
        t0 = ts.from_datetime(start)
        t1 = ts.from_datetime(end)
        rise_times, rise_flags = almanac.find_risings(observer, moon, t0, t1)
        set_times, set_flags = almanac.find_settings(observer, moon, t0, t1)
        rises = [r.utc_datetime() for r, ok in zip(rise_times, rise_flags) if ok]
        sets = [s.utc_datetime() for s, ok in zip(set_times, set_flags) if ok]

        alt, az, _ = observer.at(t).observe(moon).apparent().altaz()
        illumination = float(almanac.fraction_illuminated(eph, "moon", t))

        return MoonState(
            phase=self.moon_phase(utc_dt),
            illumination=min(1.0, max(0.0, illumination)),
            moonrise=rises[0] if rises else None,
            moonset=sets[0] if sets else None,
            altitude_deg=float(alt.degrees),
            azimuth_deg=float(az.degrees),
        )

    def seasons(self, year: int, location: GeoLocation) -> tuple[SingleDayEvent, ...]:
        """Equinoxes and solstices of `year`, dated in local apparent time."""
        ts = self._ts
        t0 = ts.utc(year, 1, 1)
        t1 = ts.utc(year + 1, 1, 1)
        times, kinds = almanac.find_discrete(t0, t1, almanac.seasons(self._eph))
        out: list[SingleDayEvent] = []
        for t, kind in zip(times, kinds):
            local = local_apparent_datetime(t.utc_datetime(), location.lng)
            name = almanac.SEASON_EVENTS[int(kind)]
            out.append(
                SingleDayEvent(
                    id=f"season-{year}-{int(kind)}",
                    name=name,
                    month=local.month,
                    day=local.day,
                    color=_SEASON_COLOR,
                    type=EventType.CELESTIAL,
                )
            )
        return tuple(out)
