import json

import pytest
from structlog.testing import capture_logs

from almanacclock.eclipses import (
    DATA_PATH,
    eclipse_events,
    eclipses_visible_from,
    is_lunar_eclipse_visible,
    is_solar_eclipse_visible,
    load_eclipse_table,
)
from almanacclock.errors import InvalidInputError
from almanacclock.models import EclipseRecord, EventType, GeoLocation, SingleDayEvent, VisibilityRegion

ARCTIC = GeoLocation(lat=70.0, lng=0.0)


def _record(event_type, *regions):
    return EclipseRecord(
        id="e", name="Eclipse", month=1, day=1, type=event_type, eclipse_type="total", visible_from=regions
    )


def test_bundled_table_is_keyed_by_year():
    table = load_eclipse_table()
    assert DATA_PATH.exists()
    assert 2026 in table
    assert all(r.type in (EventType.SOLAR_ECLIPSE, EventType.LUNAR_ECLIPSE) for r in table[2026])


def test_visible_from_arctic_2026():
    ids = {r.id for r in eclipses_visible_from(2026, ARCTIC)}
    # Aug 12 totality box (40..80 N, 50 W..20 E) and the Europe/Africa lunar bucket
    assert ids == {"solar-2026-08-12", "lunar-2026-03-03"}
    # The Feb 17 annular path lies at 60..90 S
    assert "solar-2026-02-17" not in ids
    assert "lunar-2026-08-28" not in ids


def test_visible_from_antarctica_2026():
    ids = {r.id for r in eclipses_visible_from(2026, GeoLocation(lat=-75.0, lng=0.0))}
    assert "solar-2026-02-17" in ids
    assert "solar-2026-08-12" not in ids


def test_missing_year_is_empty_with_warning():
    with capture_logs() as logs:
        assert eclipses_visible_from(1999, ARCTIC) == ()
    assert [entry["event"] for entry in logs] == ["eclipse_data_missing"]
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["year"] == 1999


def test_solar_path_box_is_inclusive():
    record = _record(
        EventType.SOLAR_ECLIPSE,
        VisibilityRegion("path", min_lat=40, max_lat=80, min_lng=-50, max_lng=20),
    )
    assert is_solar_eclipse_visible(record, GeoLocation(lat=40.0, lng=20.0))
    assert not is_solar_eclipse_visible(record, GeoLocation(lat=39.9, lng=0.0))


def test_solar_hemisphere_and_global():
    north = _record(EventType.SOLAR_ECLIPSE, VisibilityRegion("hemisphere", hemisphere="north"))
    everywhere = _record(EventType.SOLAR_ECLIPSE, VisibilityRegion("global"))
    assert is_solar_eclipse_visible(north, GeoLocation(lat=10.0, lng=100.0))
    assert not is_solar_eclipse_visible(north, GeoLocation(lat=-10.0, lng=100.0))
    assert is_solar_eclipse_visible(everywhere, GeoLocation(lat=-10.0, lng=100.0))


@pytest.mark.parametrize(
    "bucket,lng,expected",
    [
        ("americas", -100.0, True),
        ("americas", 0.0, False),
        ("europe-africa", 30.0, True),
        ("europe-africa", -30.0, True),
        ("asia-pacific", 120.0, True),
        ("asia-pacific", -150.0, True),
        ("asia-pacific", 0.0, False),
    ],
)
def test_lunar_longitude_buckets(bucket, lng, expected):
    record = _record(EventType.LUNAR_ECLIPSE, VisibilityRegion("hemisphere", hemisphere=bucket))
    assert is_lunar_eclipse_visible(record, GeoLocation(lat=0.0, lng=lng)) is expected


def test_lunar_global():
    record = _record(EventType.LUNAR_ECLIPSE, VisibilityRegion("global"))
    assert is_lunar_eclipse_visible(record, GeoLocation(lat=0.0, lng=0.0))


def test_custom_table(tmp_path):
    path = tmp_path / "eclipses.json"
    path.write_text(
        json.dumps(
            {
                "years": {
                    "2040": [
                        {
                            "id": "lunar-2040",
                            "name": "Total Lunar Eclipse",
                            "month": 5,
                            "day": 26,
                            "type": "lunar-eclipse",
                            "eclipseType": "total",
                            "visibleFrom": [{"type": "global"}],
                        }
                    ]
                }
            }
        )
    )
    table = load_eclipse_table(path)
    assert [r.id for r in eclipses_visible_from(2040, ARCTIC, table)] == ["lunar-2040"]
    assert table[2040][0].color == "#DC143C"


def test_table_rejects_non_eclipse_type(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps(
            {"years": {"2040": [{"id": "x", "name": "X", "month": 1, "day": 1, "type": "personal", "eclipseType": "total"}]}}
        )
    )
    with pytest.raises(InvalidInputError):
        load_eclipse_table(path)


def test_table_rejects_path_region_without_bounds(tmp_path):
    path = tmp_path / "no-bounds.json"
    record = {
        "id": "solar-2040",
        "name": "Total Solar Eclipse",
        "month": 11,
        "day": 4,
        "type": "solar-eclipse",
        "eclipseType": "total",
        "visibleFrom": [{"type": "path", "minLat": -50, "maxLat": -30}],
    }
    path.write_text(json.dumps({"years": {"2040": [record]}}))
    with pytest.raises(InvalidInputError, match="minLng, maxLng"):
        load_eclipse_table(path)


def test_eclipse_events():
    records = eclipses_visible_from(2026, ARCTIC)
    events = eclipse_events(records)
    assert all(isinstance(e, SingleDayEvent) for e in events)
    assert {e.id for e in events} == {r.id for r in records}
    solar = next(e for e in events if e.id == "solar-2026-08-12")
    assert (solar.month, solar.day, solar.type) == (8, 12, EventType.SOLAR_ECLIPSE)
    assert solar.color == "#FFD700"
