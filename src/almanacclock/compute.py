"""Ring computation layer: turns an observer context into a full ClockState."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from almanacclock import annual, lunar, solar
from almanacclock.angles import as_utc, local_apparent_datetime
from almanacclock.astronomy import AstronomyService, SkyfieldAlmanac
from almanacclock.config import load_settings
from almanacclock.datemath import day_of_year, days_in_year
from almanacclock.eclipses import EclipseTable, eclipse_events, eclipses_visible_from, load_eclipse_table
from almanacclock.events import project_events
from almanacclock.location import geocode_address, observer_context
from almanacclock.models import (
    AnnualEvent,
    AnnualRing,
    ClockState,
    LunarRing,
    ObserverContext,
    QueryInput,
    SolarRing,
)
from almanacclock.moon_names import name_for_month

logger = structlog.get_logger(__name__)


def _default_eclipse_table() -> EclipseTable:
    path = load_settings().eclipse_data
    return load_eclipse_table() if path is None else load_eclipse_table(path)


def compute_clock_state(
    context: ObserverContext,
    events: Iterable[AnnualEvent] = (),
    service: AstronomyService | None = None,
    eclipse_table: EclipseTable | None = None,
) -> ClockState:
    """Compute all three rings for the context's instant and location.

    Args:
        context: Observer location and UTC instant.
        events: User events to place on the annual ring (read-only).
        service: Source of sun/moon data; a skyfield almanac when None.
        eclipse_table: Eclipse dataset; the configured or bundled table when None.

    Returns:
        ClockState holding the solar, lunar and annual rings. Seasonal
        markers and visible eclipses are projected alongside user events.
    """
    service = service or SkyfieldAlmanac()
    location = context.location
    utc_dt = as_utc(context.utc_dt)
    today = local_apparent_datetime(utc_dt, location.lng).date()

    sun = service.sun_events(today, location)
    solar_ring = SolarRing(
        rotation_deg=solar.ring_rotation_angle(utc_dt, location),
        events=sun,
        event_angles=solar.event_angles(sun, location),
        gradient=solar.gradient_for(sun, location),
        period=solar.current_period(utc_dt, sun),
        day_length=solar.day_length(sun),
    )

    moon = service.moon_state(utc_dt, location)
    lunar_ring = LunarRing(
        rotation_deg=lunar.ring_rotation_angle(moon.phase),
        moon=moon,
        phase_name=lunar.classify_phase(moon.phase),
        illumination_percent=lunar.illumination_percent(moon.illumination),
        anchors=lunar.quarter_anchors(),
        gradient=lunar.gradient_stops(),
        is_blue_moon_month=lunar.is_blue_moon_month(
            today.year, today.month, location, service.moon_phase
        ),
        traditional_moon=name_for_month(today.month),
    )

    table = _default_eclipse_table() if eclipse_table is None else eclipse_table
    visible = eclipses_visible_from(today.year, location, table)
    markers = (*events, *service.seasons(today.year, location), *eclipse_events(visible))
    annual_ring = AnnualRing(
        rotation_deg=annual.ring_rotation_angle(today),
        day_of_year=day_of_year(today),
        days_in_year=days_in_year(today.year),
        sign=annual.zodiac_sign_for(today.month, today.day),
        wedges=annual.all_wedges(today.year),
        events=project_events(markers, today),
        eclipses=visible,
    )

    logger.debug(
        "clock_state_computed",
        location=location.label,
        utc=utc_dt.isoformat(),
        period=solar_ring.period,
        phase=lunar_ring.phase_name,
        sign=annual_ring.sign.name,
        markers=len(annual_ring.events),
    )
    return ClockState(context=context, solar=solar_ring, lunar=lunar_ring, annual=annual_ring)


def run(
    query: QueryInput,
    events: Iterable[AnnualEvent] = (),
    service: AstronomyService | None = None,
) -> ClockState:
    """Geocode the query, localize its time, and compute the clock."""
    location = geocode_address(query.address)
    context = observer_context(location, query.when)
    return compute_clock_state(context, events, service)
