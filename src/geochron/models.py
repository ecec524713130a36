"""Data model definitions — explicit boundaries between clock, geometry, and render layers."""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from geochron.errors import CorruptSnapshot

LatLon = tuple[float, float]  # (latitude, longitude) in degrees
BoundaryCurve = tuple[LatLon, ...]


class DaylightSide(enum.Enum):
    """Which side of a boundary curve holds the subsolar point.

    WEST: the lit side is the ring traced by the curve itself.
    EAST: the lit side lies outside that ring.
    """

    EAST = "east"
    WEST = "west"


@dataclass(frozen=True)
class SubsolarPoint:
    """Point on Earth where the sun is directly overhead."""

    latitude: float  # Solar declination (degrees, within ±23.45)
    longitude: float  # Degrees east, normalized into (-180, 180]


@dataclass(frozen=True)
class TwilightZones:
    """Boundary curves at the four standard solar depression angles."""

    terminator: BoundaryCurve  # 0°
    civil: BoundaryCurve  # 6°
    nautical: BoundaryCurve  # 12°
    astronomical: BoundaryCurve  # 18°


@dataclass(frozen=True)
class DayNightState:
    """One complete solar geometry pass. The sole input to map renderers."""

    instant: datetime  # UTC
    subsolar: SubsolarPoint
    zones: TwilightZones
    astronomical_nautical: BoundaryCurve  # Blend curves for visual smoothing
    nautical_civil: BoundaryCurve
    civil_day: BoundaryCurve
    daylight_side: DaylightSide  # Side of the terminator that is lit
    step: float  # Bearing step every curve was traced with (degrees)


@dataclass
class ClockConfig:
    """A configured clock. Owned and mutated only by ClockRegistry."""

    id: int
    timezone: str  # IANA zone identifier ("Asia/Tokyo")


@dataclass(frozen=True)
class LocalFields:
    """Zone-local calendar fields handed to the locale formatter."""

    year: int
    month: int
    day: int
    weekday: int  # 0=Monday … 6=Sunday
    hour: int  # 24-hour
    minute: int
    second: int


@dataclass(frozen=True)
class ClockReading:
    """Derived clock face state for one clock at one instant. Never persisted."""

    clock_id: int
    timezone: str
    local: LocalFields
    hour: int
    minute: int
    second: int
    millisecond: int  # From the instant itself; zones never differ by sub-second offsets
    formatted_time: str
    formatted_date: str
    formatted_weekday: str
    hour_hand_degrees: float  # Clockwise from 12 o'clock
    minute_hand_degrees: float
    second_hand_degrees: float


@dataclass(frozen=True)
class WorldCity:
    """A labelled city on the world map."""

    name: str
    lat: float
    lon: float
    timezone: str


@dataclass(frozen=True)
class CityLabel:
    """Zone-local time label for a world city."""

    city: WorldCity
    time: str  # "HH:MM", 24-hour


@dataclass(frozen=True)
class RegistrySnapshot:
    """The only clock state that crosses the persistence boundary."""

    next_id: int
    clocks: tuple[ClockConfig, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape ``{"nextId": .., "clocks": [..]}``."""
        return {
            "nextId": self.next_id,
            "clocks": [{"id": c.id, "timezone": c.timezone} for c in self.clocks],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegistrySnapshot":
        """Parse the JSON wire shape.

        Raises:
            CorruptSnapshot: On missing keys, wrong types, duplicate or
                non-positive ids, or a nextId not above every id.
        """
        if not isinstance(data, Mapping):
            raise CorruptSnapshot(f"snapshot must be an object, got {type(data).__name__}")
        try:
            next_id = data["nextId"]
            raw_clocks = data["clocks"]
        except KeyError as e:
            raise CorruptSnapshot(f"snapshot missing key {e}") from e
        if not _is_int(next_id) or not isinstance(raw_clocks, list):
            raise CorruptSnapshot("snapshot has wrong field types")
        if next_id < 1:
            raise CorruptSnapshot(f"nextId must be positive, got {next_id}")

        clocks: list[ClockConfig] = []
        seen: set[int] = set()
        for raw in raw_clocks:
            if not isinstance(raw, Mapping):
                raise CorruptSnapshot(f"clock entry must be an object: {raw!r}")
            clock_id = raw.get("id")
            tz = raw.get("timezone")
            if not _is_int(clock_id) or clock_id < 1 or not isinstance(tz, str) or not tz:
                raise CorruptSnapshot(f"bad clock entry: {raw!r}")
            if clock_id in seen:
                raise CorruptSnapshot(f"duplicate clock id {clock_id}")
            if clock_id >= next_id:
                raise CorruptSnapshot(f"nextId {next_id} not above clock id {clock_id}")
            seen.add(clock_id)
            clocks.append(ClockConfig(id=clock_id, timezone=tz))

        return cls(next_id=next_id, clocks=tuple(clocks))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
