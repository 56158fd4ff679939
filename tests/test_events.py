import json
from datetime import date

import pytest

from almanacclock import annual
from almanacclock.errors import InvalidInputError
from almanacclock.events import (
    arc_span,
    event_from_dict,
    is_active_today,
    is_multi_day,
    load_events,
    marker_shape,
    project_event,
    project_events,
    radial_label_rotation,
    validate_event,
)
from almanacclock.models import EventType, MultiDayEvent, SingleDayEvent

HOLIDAYS = MultiDayEvent("hol", "Holidays", 12, 20, 1, 5)
BIRTHDAY = SingleDayEvent("bday", "Birthday", 7, 4)


class TestEventFromDict:
    def test_single_day(self):
        event = event_from_dict({"id": 1, "name": "Birthday", "month": 7, "day": 4})
        assert event == SingleDayEvent("1", "Birthday", 7, 4)
        assert not is_multi_day(event)

    def test_multi_day_camel_and_snake(self):
        camel = event_from_dict(
            {"id": "a", "name": "Trip", "month": 8, "day": 1, "endMonth": 8, "endDay": 9}
        )
        snake = event_from_dict(
            {"id": "a", "name": "Trip", "month": 8, "day": 1, "end_month": 8, "end_day": 9}
        )
        assert camel == snake
        assert is_multi_day(camel)

    def test_null_end_fields_mean_single_day(self):
        event = event_from_dict(
            {"id": "x", "name": "Day", "month": 3, "day": 2, "endMonth": None, "endDay": 5}
        )
        assert isinstance(event, SingleDayEvent)

    def test_type_and_color(self):
        event = event_from_dict(
            {"id": "p", "name": "Perseids", "month": 8, "day": 12, "type": "meteor-shower", "color": "#fff"}
        )
        assert event.type is EventType.METEOR_SHOWER
        assert event.color == "#fff"

    @pytest.mark.parametrize(
        "raw",
        [
            {"id": "x", "name": "Bad", "month": 13, "day": 1},
            {"id": "x", "name": "Bad", "month": 4, "day": 31},
            {"id": "x", "name": "  ", "month": 4, "day": 1},
            {"id": "x", "name": "Bad", "month": 1, "day": 1, "endMonth": 2, "endDay": 30},
            {"id": "x", "name": "Bad", "month": 1, "day": 1, "type": "holiday"},
            {"id": "x", "name": "Bad", "day": 1},
        ],
    )
    def test_invalid_records_are_rejected(self, raw):
        with pytest.raises(InvalidInputError):
            event_from_dict(raw)

    @pytest.mark.parametrize("raw", [5, "birthday", ["id", "name"], None])
    def test_non_object_records_are_rejected(self, raw):
        with pytest.raises(InvalidInputError, match="must be an object"):
            event_from_dict(raw)

    @pytest.mark.parametrize(
        "end",
        [{"endMonth": "x", "endDay": 3}, {"endMonth": 3, "endDay": "soon"}, {"end_month": [1], "end_day": 2}],
    )
    def test_non_numeric_end_fields_are_rejected(self, end):
        with pytest.raises(InvalidInputError, match="malformed event record"):
            event_from_dict({"id": "x", "name": "Trip", "month": 1, "day": 1, **end})

    def test_feb_29_is_accepted(self):
        validate_event(SingleDayEvent("leap", "Leap day", 2, 29))


def test_load_events(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "name": "Birthday", "month": 7, "day": 4},
                {"id": "2", "name": "Holidays", "month": 12, "day": 20, "endMonth": 1, "endDay": 5},
            ]
        )
    )
    events = load_events(path)
    assert [type(e) for e in events] == [SingleDayEvent, MultiDayEvent]


def test_load_events_requires_list(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps({"id": "1"}))
    with pytest.raises(InvalidInputError):
        load_events(path)


def test_load_events_rejects_malformed_json(tmp_path):
    path = tmp_path / "events.json"
    path.write_text('[{"id": "1", "name": ')
    with pytest.raises(InvalidInputError, match="not valid JSON"):
        load_events(path)


class TestIsActiveToday:
    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2024, 12, 25), True),
            (date(2024, 1, 2), True),
            (date(2024, 12, 20), True),
            (date(2024, 1, 5), True),
            (date(2024, 1, 6), False),
            (date(2024, 6, 15), False),
        ],
    )
    def test_year_wrapping_range(self, today, expected):
        assert is_active_today(HOLIDAYS, today) is expected

    def test_plain_range_is_inclusive(self):
        trip = MultiDayEvent("t", "Trip", 8, 1, 8, 9)
        assert is_active_today(trip, date(2024, 8, 1))
        assert is_active_today(trip, date(2024, 8, 9))
        assert not is_active_today(trip, date(2024, 8, 10))

    def test_single_day(self):
        assert is_active_today(BIRTHDAY, date(2031, 7, 4))
        assert not is_active_today(BIRTHDAY, date(2031, 7, 5))

    def test_leap_day_falls_on_march_1_in_common_year(self):
        leap = SingleDayEvent("leap", "Leap day", 2, 29)
        assert arc_span(leap, 2023).start_angle == annual.event_angle(3, 1, 2023)
        assert is_active_today(leap, date(2023, 3, 1))
        assert not is_active_today(leap, date(2023, 2, 28))
        assert is_active_today(leap, date(2024, 2, 29))
        assert not is_active_today(leap, date(2024, 3, 1))


class TestArcSpan:
    def test_single_day_has_no_arc(self):
        arc = arc_span(BIRTHDAY, 2024)
        assert arc.arc_degrees == 0.0
        assert arc.start_angle == arc.end_angle == annual.event_angle(7, 4, 2024)

    def test_plain_range(self):
        arc = arc_span(MultiDayEvent("t", "Trip", 6, 1, 6, 10), 2023)
        assert arc.arc_degrees == pytest.approx(9 / 365 * 360)
        assert not arc.crosses_year_boundary

    def test_year_wrapping_range(self):
        arc = arc_span(HOLIDAYS, 2023)
        # Dec 20 is day 354, Jan 5 is day 5: 16 days forward across Dec 31
        assert arc.arc_degrees == pytest.approx(16 / 365 * 360)
        assert arc.crosses_year_boundary

    def test_feb_29_in_common_year_lands_on_mar_1(self):
        arc = arc_span(SingleDayEvent("leap", "Leap day", 2, 29), 2023)
        assert arc.start_angle == annual.event_angle(3, 1, 2023)


@pytest.mark.parametrize(
    "angle,rotation,flip",
    [
        (0, 0, False),
        (45, 45, False),
        (90, 90, False),
        (135, -45, True),
        (180, 0, True),
        (269, 89, True),
        (270, 270, False),
        (300, 300, False),
        (-90, 270, False),
        (450, 90, False),
    ],
)
def test_radial_label_rotation(angle, rotation, flip):
    placement = radial_label_rotation(angle)
    assert placement.rotation_degrees == pytest.approx(rotation)
    assert placement.needs_flip is flip


def test_marker_shapes():
    assert marker_shape(SingleDayEvent("s", "Eclipse", 8, 12, type=EventType.SOLAR_ECLIPSE)) == "starburst"
    assert marker_shape(SingleDayEvent("l", "Eclipse", 3, 3, type=EventType.LUNAR_ECLIPSE)) == "crescent"
    assert marker_shape(SingleDayEvent("c", "Summer Solstice", 6, 21, type=EventType.CELESTIAL)) == "diamond"
    assert marker_shape(SingleDayEvent("e", "March Equinox party", 3, 20)) == "diamond"
    assert marker_shape(BIRTHDAY) == "circle"


def test_project_event():
    projected = project_event(HOLIDAYS, date(2024, 12, 25))
    assert projected.is_today
    assert projected.arc.crosses_year_boundary
    assert projected.marker == "circle"
    assert projected.label == radial_label_rotation(projected.arc.start_angle)


def test_project_events_keeps_order():
    projected = project_events([BIRTHDAY, HOLIDAYS], date(2024, 7, 4))
    assert [p.event.id for p in projected] == ["bday", "hol"]
    assert [p.is_today for p in projected] == [True, False]
