"""Calendar events on the annual ring: arcs, today-checks, and label placement."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any

from almanacclock import annual
from almanacclock.angles import normalize_degrees
from almanacclock.datemath import resolve_date, validate_month_day
from almanacclock.errors import InvalidInputError
from almanacclock.models import (
    AnnualEvent,
    EventArc,
    EventType,
    LabelPlacement,
    MarkerShape,
    MultiDayEvent,
    ProjectedEvent,
    SingleDayEvent,
)


def is_multi_day(event: AnnualEvent) -> bool:
    return isinstance(event, MultiDayEvent)


def event_from_dict(raw: Mapping[str, Any]) -> AnnualEvent:
    """Build an event from a loose record (`endMonth`/`end_month` both accepted).

    A record is multi-day only when both end fields are present and not None.

    Raises:
        InvalidInputError: On missing fields, unknown type, or invalid dates.
    """
    if not isinstance(raw, Mapping):
        raise InvalidInputError(f"event record must be an object, got {raw!r}")
    try:
        event_id = str(raw["id"])
        name = str(raw["name"])
        month = int(raw["month"])
        day = int(raw["day"])
        end_month = raw.get("endMonth", raw.get("end_month"))
        end_day = raw.get("endDay", raw.get("end_day"))
        if end_month is not None and end_day is not None:
            end_month, end_day = int(end_month), int(end_day)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError(f"malformed event record {raw!r}: {e}") from e

    color = str(raw.get("color") or "#60a5fa")
    try:
        event_type = EventType(raw.get("type") or EventType.PERSONAL.value)
    except ValueError as e:
        raise InvalidInputError(f"unknown event type {raw.get('type')!r}") from e

    event: AnnualEvent
    if end_month is not None and end_day is not None:
        event = MultiDayEvent(
            id=event_id,
            name=name,
            month=month,
            day=day,
            end_month=end_month,
            end_day=end_day,
            color=color,
            type=event_type,
        )
    else:
        event = SingleDayEvent(
            id=event_id, name=name, month=month, day=day, color=color, type=event_type
        )
    validate_event(event)
    return event


def validate_event(event: AnnualEvent) -> None:
    """Reject an event whose name is blank or whose dates cannot occur."""
    if not event.name.strip():
        raise InvalidInputError("event name must not be empty")
    validate_month_day(event.month, event.day)
    if isinstance(event, MultiDayEvent):
        validate_month_day(event.end_month, event.end_day)


def load_events(path: Path) -> tuple[AnnualEvent, ...]:
    """Read a JSON list of event records."""
    with path.open(encoding="utf-8") as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"{path}: not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise InvalidInputError(f"{path}: expected a JSON list of events")
    return tuple(event_from_dict(r) for r in records)


def _event_dates(event: MultiDayEvent, year: int) -> tuple[date, date]:
    return (
        resolve_date(year, event.month, event.day),
        resolve_date(year, event.end_month, event.end_day),
    )


def is_active_today(event: AnnualEvent, today: date) -> bool:
    """Whether `today` falls on the event, including year-wrapping ranges."""
    if isinstance(event, SingleDayEvent):
        return resolve_date(today.year, event.month, event.day) == today

    start, end = _event_dates(event, today.year)
    if end < start:
        return today >= start or today <= end
    return start <= today <= end


def arc_span(event: AnnualEvent, year: int) -> EventArc:
    """Angular extent of an event on the annual disc.

    Angles decrease with forward time, so the arc is start minus end, wrapped
    positive for ranges that cross Dec 31.
    """
    start_angle = annual.event_angle(event.month, event.day, year)
    if isinstance(event, SingleDayEvent):
        return EventArc(start_angle, start_angle, 0.0, False)

    end_angle = annual.event_angle(event.end_month, event.end_day, year)
    arc = start_angle - end_angle
    if arc < 0:
        arc += 360.0
    start, end = _event_dates(event, year)
    return EventArc(start_angle, end_angle, arc, end < start)


def radial_label_rotation(angle: float) -> LabelPlacement:
    """Rotation for a label pointing out from the disc centre.

    Labels on the lower half would read upside down, so they are turned
    half a revolution and anchored on the opposite side of the marker.
    """
    a = normalize_degrees(angle)
    if 90 < a < 270:
        return LabelPlacement(a - 180, True)
    return LabelPlacement(a, False)


def marker_shape(event: AnnualEvent) -> MarkerShape:
    if event.type is EventType.SOLAR_ECLIPSE:
        return "starburst"
    if event.type is EventType.LUNAR_ECLIPSE:
        return "crescent"
    if event.type is EventType.CELESTIAL or "Solstice" in event.name or "Equinox" in event.name:
        return "diamond"
    return "circle"


def project_event(event: AnnualEvent, today: date) -> ProjectedEvent:
    arc = arc_span(event, today.year)
    return ProjectedEvent(
        event=event,
        arc=arc,
        label=radial_label_rotation(arc.start_angle),
        marker=marker_shape(event),
        is_today=is_active_today(event, today),
    )


def project_events(events: Iterable[AnnualEvent], today: date) -> tuple[ProjectedEvent, ...]:
    return tuple(project_event(e, today) for e in events)
