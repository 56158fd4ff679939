"""Per-year eclipse table and a coarse visibility filter.

Visibility is an inclusion test against bounding boxes and longitude
buckets, not a computation of local circumstances.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog

from almanacclock.errors import InvalidInputError
from almanacclock.models import (
    EclipseRecord,
    EventType,
    GeoLocation,
    SingleDayEvent,
    VisibilityRegion,
)

logger = structlog.get_logger(__name__)

DATA_PATH = Path(__file__).parent / "data" / "eclipses.json"

_COLORS = {
    EventType.SOLAR_ECLIPSE: "#FFD700",
    EventType.LUNAR_ECLIPSE: "#DC143C",
}

EclipseTable = dict[int, tuple[EclipseRecord, ...]]


_PATH_BOUNDS = ("minLat", "maxLat", "minLng", "maxLng")


def _parse_region(raw: dict[str, Any]) -> VisibilityRegion:
    if raw.get("type") == "path":
        missing = [k for k in _PATH_BOUNDS if not isinstance(raw.get(k), (int, float))]
        if missing:
            raise InvalidInputError(f"path region needs numeric {', '.join(missing)}: {raw!r}")
    return VisibilityRegion(
        kind=raw["type"],
        min_lat=raw.get("minLat"),
        max_lat=raw.get("maxLat"),
        min_lng=raw.get("minLng"),
        max_lng=raw.get("maxLng"),
        hemisphere=raw.get("hemisphere"),
    )


def _parse_record(raw: dict[str, Any]) -> EclipseRecord:
    event_type = EventType(raw["type"])
    if event_type not in _COLORS:
        raise InvalidInputError(f"{raw['id']}: not an eclipse type: {raw['type']}")
    return EclipseRecord(
        id=raw["id"],
        name=raw["name"],
        month=int(raw["month"]),
        day=int(raw["day"]),
        type=event_type,
        eclipse_type=raw["eclipseType"],
        visible_from=tuple(_parse_region(r) for r in raw.get("visibleFrom", ())),
        color=raw.get("color", _COLORS[event_type]),
    )


@lru_cache(maxsize=4)
def load_eclipse_table(path: Path = DATA_PATH) -> EclipseTable:
    """Parse the year-keyed eclipse dataset.

    File format: ``{"years": {"2026": [record, ...], ...}}`` where each record
    carries id, name, month, day, type, eclipseType and visibleFrom regions.
    """
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    return {
        int(year): tuple(_parse_record(r) for r in records)
        for year, records in raw["years"].items()
    }


def is_solar_eclipse_visible(record: EclipseRecord, location: GeoLocation) -> bool:
    for region in record.visible_from:
        if region.kind == "path":
            if (
                region.min_lat <= location.lat <= region.max_lat
                and region.min_lng <= location.lng <= region.max_lng
            ):
                return True
        elif region.kind == "hemisphere":
            if region.hemisphere == "north" and location.lat > 0:
                return True
            if region.hemisphere == "south" and location.lat < 0:
                return True
        elif region.kind == "global":
            return True
    return False


def _in_longitude_bucket(bucket: str | None, lng: float) -> bool:
    if bucket == "americas":
        return -180 <= lng <= -30
    if bucket == "europe-africa":
        return -30 <= lng <= 60
    if bucket == "asia-pacific":
        return lng >= 60 or lng <= -120
    return False


def is_lunar_eclipse_visible(record: EclipseRecord, location: GeoLocation) -> bool:
    """A lunar eclipse is seen from the whole night side; buckets approximate it."""
    for region in record.visible_from:
        if region.kind == "global":
            return True
        if region.kind == "hemisphere" and _in_longitude_bucket(region.hemisphere, location.lng):
            return True
    return False


def is_visible(record: EclipseRecord, location: GeoLocation) -> bool:
    if record.type is EventType.SOLAR_ECLIPSE:
        return is_solar_eclipse_visible(record, location)
    return is_lunar_eclipse_visible(record, location)


def eclipses_visible_from(
    year: int,
    location: GeoLocation,
    table: EclipseTable | None = None,
) -> tuple[EclipseRecord, ...]:
    """Eclipses of `year` that can be seen from `location`.

    Args:
        year: Calendar year to look up.
        location: Observer position.
        table: Dataset to query; the bundled table when None.

    Returns:
        Matching records in dataset order. Empty, with a logged warning, when
        the dataset has no entry for the year.
    """
    data = load_eclipse_table() if table is None else table
    records = data.get(year)
    if records is None:
        logger.warning(
            "eclipse_data_missing",
            year=year,
            available=sorted(data),
            hint="add the year to data/eclipses.json from https://eclipse.gsfc.nasa.gov/eclipse.html",
        )
        return ()
    return tuple(r for r in records if is_visible(r, location))


def eclipse_events(records: tuple[EclipseRecord, ...]) -> tuple[SingleDayEvent, ...]:
    """Eclipse records as single-day markers for the annual ring."""
    return tuple(
        SingleDayEvent(
            id=r.id, name=r.name, month=r.month, day=r.day, color=r.color, type=r.type
        )
        for r in records
    )
