from datetime import datetime, timezone

import pytest

from almanacclock.angles import (
    RotationConvention,
    angle_to_cyclic,
    as_utc,
    cyclic_to_angle,
    format_clock_time,
    hour_of_day_to_fraction,
    instant_to_day_fraction,
    local_apparent_datetime,
    longitude_offset_hours,
    normalize_degrees,
    normalize_hours,
    utc_from_local_apparent,
)
from almanacclock.errors import InvalidInputError, InvalidLocationError

NOW = RotationConvention.NOW
FIXED = RotationConvention.FIXED_EVENT


def test_conventions_are_opposite_signs():
    assert NOW.value == 1
    assert FIXED.value == -1


def test_cyclic_to_angle_directions():
    assert cyclic_to_angle(0.25, NOW) == pytest.approx(90.0)
    assert cyclic_to_angle(0.25, FIXED) == pytest.approx(270.0)
    assert cyclic_to_angle(0.0, FIXED) == 0.0
    assert cyclic_to_angle(0.5, FIXED) == pytest.approx(180.0)


@pytest.mark.parametrize("convention", [NOW, FIXED])
@pytest.mark.parametrize("position", [0.0, 0.001, 0.1, 0.25, 0.333, 0.5, 0.75, 0.9, 0.999])
def test_angle_round_trip(position, convention):
    angle = cyclic_to_angle(position, convention)
    assert 0 <= angle < 360
    assert angle_to_cyclic(angle, convention) == pytest.approx(position, abs=1e-9)


def test_normalize_degrees():
    assert normalize_degrees(-90) == pytest.approx(270)
    assert normalize_degrees(720) == 0.0
    assert normalize_degrees(-1e-17) == 0.0
    with pytest.raises(InvalidInputError):
        normalize_degrees(float("nan"))


def test_normalize_hours_wraps():
    assert normalize_hours(-1) == 23
    assert normalize_hours(25) == 1
    assert normalize_hours(48) == 0
    assert normalize_hours(12.5) == 12.5


def test_hour_of_day_to_fraction():
    assert hour_of_day_to_fraction(6) == pytest.approx(0.25)
    assert hour_of_day_to_fraction(18, 30) == pytest.approx(18.5 / 24)
    assert hour_of_day_to_fraction(0, 0, 0) == 0.0


def test_longitude_offset():
    assert longitude_offset_hours(-90) == -6
    assert longitude_offset_hours(180) == 12
    with pytest.raises(InvalidLocationError):
        longitude_offset_hours(200)


def test_local_apparent_time_uses_longitude():
    utc = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert instant_to_day_fraction(utc, -90) == pytest.approx(0.25)
    assert local_apparent_datetime(utc, 90) == datetime(2024, 1, 1, 18)
    assert local_apparent_datetime(utc, -180) == datetime(2024, 1, 1, 0)


def test_local_apparent_round_trip():
    local = datetime(2024, 6, 21, 5, 30)
    assert local_apparent_datetime(utc_from_local_apparent(local, 45), 45) == local


def test_naive_datetimes_are_utc():
    naive = datetime(2024, 1, 1, 12)
    assert as_utc(naive) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert instant_to_day_fraction(naive, 0) == pytest.approx(0.5)


def test_format_clock_time():
    assert format_clock_time(datetime(2024, 1, 1, 18, 30, tzinfo=timezone.utc), 0) == "6:30 PM"
    assert format_clock_time(datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc), 0) == "12:05 AM"
    assert format_clock_time(datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc), -90) == "12:00 PM"
