"""Location layer: geocoding and local wall-clock to UTC conversion."""

from __future__ import annotations

from datetime import datetime

import httpx
import structlog
from pytz import timezone, utc
from pytz.exceptions import AmbiguousTimeError, NonExistentTimeError
from timezonefinder import TimezoneFinder

from almanacclock.config import load_settings
from almanacclock.errors import AlmanacClockError, InvalidInputError
from almanacclock.models import GeoLocation, ObserverContext

logger = structlog.get_logger(__name__)

_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
_tf = TimezoneFinder()


class GeocodingError(AlmanacClockError):
    """Geocoder call failure."""


def _geocode_nominatim(address: str) -> tuple[float, float, str] | None:
    """Nominatim (OpenStreetMap) geocoder. Returns (lat, lng, display_name) or None."""
    params = {"q": address, "format": "json", "limit": 1}
    headers = {"User-Agent": load_settings().user_agent}
    resp = httpx.get(_NOMINATIM_URL, params=params, headers=headers, timeout=10)
    resp.raise_for_status()
    results = resp.json()
    if not results:
        return None
    r = results[0]
    return float(r["lat"]), float(r["lon"]), r["display_name"]


def geocode_address(address: str) -> GeoLocation:
    """Resolve a free-form address to a GeoLocation.

    Raises:
        GeocodingError: On HTTP failure or when the address cannot be found.
    """
    if not address.strip():
        raise GeocodingError("Address must not be empty")
    try:
        result = _geocode_nominatim(address)
    except httpx.HTTPError as e:
        raise GeocodingError(f"Geocoder request failed: {e}") from e
    if result is None:
        raise GeocodingError(f"Address not found: {address}")
    lat, lng, display = result
    logger.info("address_geocoded", address=address, lat=lat, lng=lng)
    return GeoLocation(lat=lat, lng=lng, name=display)


def parse_when(when: str) -> datetime:
    try:
        return datetime.strptime(when.strip(), "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise InvalidInputError(f"Expected 'YYYY-MM-DD HH:MM', got {when!r}") from e


def observer_context(location: GeoLocation, when: str) -> ObserverContext:
    """Interpret `when` as wall-clock time at `location` and convert it to UTC.

    Args:
        location: Observer position; its time zone is looked up offline.
        when: Local time string in "YYYY-MM-DD HH:MM" format.

    Returns:
        ObserverContext with a timezone-aware UTC datetime.

    Raises:
        InvalidInputError: When `when` is malformed.
        GeocodingError: When no time zone covers the location, or the local
            time is skipped or repeated by a DST change.
    """
    dt = parse_when(when)
    tz_str = _tf.timezone_at(lat=location.lat, lng=location.lng)
    if tz_str is None:
        raise GeocodingError(f"Timezone not found: lat={location.lat}, lng={location.lng}")
    try:
        utc_dt = timezone(tz_str).localize(dt, is_dst=None).astimezone(utc)
    except (AmbiguousTimeError, NonExistentTimeError) as e:
        raise GeocodingError(f"{when} is not a unique local time in {tz_str}") from e
    return ObserverContext(location=location, utc_dt=utc_dt)
