"""Data model definitions: explicit boundaries between input, compute, and render layers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Literal, Union

from almanacclock.errors import InvalidInputError, InvalidLocationError


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    address: str  # Free-form place name ("Minneapolis, MN")
    when: str  # "YYYY-MM-DD HH:MM" local wall-clock string


@dataclass(frozen=True)
class GeoLocation:
    """A validated observer position."""

    lat: float  # Latitude (decimal degrees, [-90, 90])
    lng: float  # Longitude (decimal degrees, [-180, 180])
    name: str | None = None  # Display name, if known

    def __post_init__(self) -> None:
        if not math.isfinite(self.lat) or not -90 <= self.lat <= 90:
            raise InvalidLocationError(f"latitude must be in [-90, 90], got {self.lat}")
        if not math.isfinite(self.lng) or not -180 <= self.lng <= 180:
            raise InvalidLocationError(f"longitude must be in [-180, 180], got {self.lng}")

    @property
    def label(self) -> str:
        return self.name or f"{self.lat:.2f}, {self.lng:.2f}"


@dataclass(frozen=True)
class ObserverContext:
    """Result of geocoding + timezone conversion. Input to ring computation."""

    location: GeoLocation
    utc_dt: datetime  # UTC datetime (with tzinfo=utc)


SunState = Literal["normal", "polar_day", "polar_night"]

SUN_EVENT_NAMES: tuple[str, ...] = (
    "night_end",
    "nautical_dawn",
    "dawn",
    "sunrise",
    "solar_noon",
    "sunset",
    "dusk",
    "nautical_dusk",
    "night",
)


@dataclass(frozen=True)
class SunEventSet:
    """Named sun instants (UTC) for one local apparent day at one location.

    Any instant may be None when the sun never crosses the matching altitude
    that day (high latitudes).
    """

    day: date
    night_end: datetime | None = None  # Astronomical dawn
    nautical_dawn: datetime | None = None
    dawn: datetime | None = None  # Civil dawn
    sunrise: datetime | None = None
    solar_noon: datetime | None = None
    sunset: datetime | None = None
    dusk: datetime | None = None  # Civil dusk
    nautical_dusk: datetime | None = None
    night: datetime | None = None  # Astronomical dusk
    state: SunState = "normal"

    def instants(self) -> dict[str, datetime]:
        """Present instants keyed by event name, in daily order."""
        out: dict[str, datetime] = {}
        for name in SUN_EVENT_NAMES:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


@dataclass(frozen=True)
class MoonState:
    """Moon phase and sky position for one instant."""

    phase: float  # 0=new, 0.25=first quarter, 0.5=full, 0.75=last quarter
    illumination: float  # Illuminated fraction of the disc, [0, 1]
    moonrise: datetime | None = None
    moonset: datetime | None = None
    altitude_deg: float | None = None
    azimuth_deg: float | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.phase) or not 0 <= self.phase < 1:
            raise InvalidInputError(f"moon phase must be in [0, 1), got {self.phase}")
        if not math.isfinite(self.illumination) or not 0 <= self.illumination <= 1:
            raise InvalidInputError(
                f"illumination must be in [0, 1], got {self.illumination}"
            )


@dataclass(frozen=True)
class ZodiacSign:
    """One tropical sign. Capricorn is the only entry with start_month > end_month."""

    name: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int
    element: str  # "fire" | "earth" | "air" | "water"
    color: str  # Hex color used for the wedge and glyph

    @property
    def crosses_year_boundary(self) -> bool:
        return self.start_month > self.end_month


class EventType(str, Enum):
    PERSONAL = "personal"
    CELESTIAL = "celestial"
    METEOR_SHOWER = "meteor-shower"
    SOLAR_ECLIPSE = "solar-eclipse"
    LUNAR_ECLIPSE = "lunar-eclipse"


@dataclass(frozen=True)
class SingleDayEvent:
    """A yearly event on one month/day."""

    id: str
    name: str
    month: int
    day: int
    color: str = "#60a5fa"
    type: EventType = EventType.PERSONAL


@dataclass(frozen=True)
class MultiDayEvent:
    """A yearly event spanning month/day -> end_month/end_day.

    An end that falls before the start within one year means the range wraps
    into the next year (Dec 20 -> Jan 5).
    """

    id: str
    name: str
    month: int
    day: int
    end_month: int
    end_day: int
    color: str = "#60a5fa"
    type: EventType = EventType.PERSONAL


AnnualEvent = Union[SingleDayEvent, MultiDayEvent]


RegionKind = Literal["path", "hemisphere", "global"]


@dataclass(frozen=True)
class VisibilityRegion:
    """Coarse area from which an eclipse can be seen."""

    kind: RegionKind
    min_lat: float | None = None
    max_lat: float | None = None
    min_lng: float | None = None
    max_lng: float | None = None
    hemisphere: str | None = None  # north/south, or americas/europe-africa/asia-pacific


@dataclass(frozen=True)
class EclipseRecord:
    id: str
    name: str
    month: int
    day: int
    type: EventType  # SOLAR_ECLIPSE or LUNAR_ECLIPSE
    eclipse_type: Literal["total", "partial", "annular"]
    visible_from: tuple[VisibilityRegion, ...]
    color: str = "#FFD700"


@dataclass(frozen=True)
class TraditionalMoon:
    name: str
    description: str
    folklore: str


@dataclass(frozen=True)
class GradientStop:
    angle: float  # Degrees on the disc, [0, 360]
    color: str


@dataclass(frozen=True)
class PhaseAnchor:
    """Fixed position of a principal lunar phase on the lunar disc."""

    name: str
    phase: float
    angle: float


@dataclass(frozen=True)
class SignWedge:
    """Angular span of a zodiac sign on the annual disc.

    The wedge runs from `start_angle` towards decreasing angles (forward time)
    for `arc_degrees`.
    """

    sign: ZodiacSign
    start_angle: float
    end_angle: float
    arc_degrees: float
    midpoint_angle: float


@dataclass(frozen=True)
class EventArc:
    start_angle: float
    end_angle: float
    arc_degrees: float
    crosses_year_boundary: bool


@dataclass(frozen=True)
class LabelPlacement:
    """Radial text rotation that keeps a label upright."""

    rotation_degrees: float
    needs_flip: bool  # Anchor the label on the inner side of its marker


MarkerShape = Literal["starburst", "crescent", "diamond", "circle"]


@dataclass(frozen=True)
class ProjectedEvent:
    event: AnnualEvent
    arc: EventArc
    label: LabelPlacement
    marker: MarkerShape
    is_today: bool


@dataclass(frozen=True)
class SolarRing:
    rotation_deg: float
    events: SunEventSet
    event_angles: dict[str, float] = field(hash=False)  # Present events only
    gradient: tuple[GradientStop, ...]
    period: str  # "Night" | "Dawn" | "Morning" | "Afternoon" | "Dusk" | "Polar Day" | "Polar Night"
    day_length: timedelta


@dataclass(frozen=True)
class LunarRing:
    rotation_deg: float
    moon: MoonState
    phase_name: str
    illumination_percent: int
    anchors: tuple[PhaseAnchor, ...]
    gradient: tuple[GradientStop, ...]
    is_blue_moon_month: bool
    traditional_moon: TraditionalMoon


@dataclass(frozen=True)
class AnnualRing:
    rotation_deg: float
    day_of_year: int
    days_in_year: int
    sign: ZodiacSign
    wedges: tuple[SignWedge, ...]
    events: tuple[ProjectedEvent, ...]
    eclipses: tuple[EclipseRecord, ...]


@dataclass(frozen=True)
class ClockState:
    """The sole input to renderers. Fully computed state."""

    context: ObserverContext
    solar: SolarRing
    lunar: LunarRing
    annual: AnnualRing
