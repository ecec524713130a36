"""Zone-local clock fields and analog hand angles for an instant."""

from datetime import datetime, tzinfo
from typing import Protocol

import pytz
import tzlocal
from loguru import logger

from geochron.errors import InvalidTimezone
from geochron.i18n import LocaleFormatter
from geochron.models import ClockReading, LocalFields
from geochron.solar import to_utc

FALLBACK_TIMEZONE = "UTC"


class TimezoneDatabase(Protocol):
    """Resolves opaque zone identifiers. Injected into the engine and the registry."""

    def resolve(self, name: str) -> tzinfo: ...

    def is_valid(self, name: str) -> bool: ...

    def local_zone_name(self) -> str: ...


class PytzTimezoneDatabase:
    """TimezoneDatabase backed by the Olson database shipped with pytz."""

    def resolve(self, name: str) -> tzinfo:
        """Return the tzinfo for ``name``.

        Raises:
            InvalidTimezone: If pytz does not know the identifier.
        """
        if not self.is_valid(name):
            raise InvalidTimezone(name)
        return pytz.timezone(name)

    def is_valid(self, name: str) -> bool:
        return isinstance(name, str) and name in pytz.all_timezones_set

    def local_zone_name(self) -> str:
        """IANA name of the host's zone, or UTC when it cannot be determined."""
        try:
            name = tzlocal.get_localzone_name()
        except (LookupError, ValueError, OSError) as e:
            logger.warning("[clock] Host timezone lookup failed: {}", e)
            return FALLBACK_TIMEZONE
        if name and self.is_valid(name):
            return name
        logger.warning("[clock] Host timezone {!r} unknown, using {}", name, FALLBACK_TIMEZONE)
        return FALLBACK_TIMEZONE


def hand_angles(
    hour: int, minute: int, second: int, millisecond: int
) -> tuple[float, float, float]:
    """Analog hand angles in degrees clockwise from 12 o'clock.

    Each hand includes the progress of the next smaller unit so it sweeps
    rather than ticks.

    Returns:
        (hour, minute, second) hand angles.
    """
    hour_deg = (hour % 12) * 30 + minute * 0.5
    minute_deg = minute * 6 + second * 0.1
    second_deg = second * 6 + millisecond * 0.006
    return hour_deg, minute_deg, second_deg


class ClockTimeEngine:
    """Stateless conversion of (instant, zone) into a ClockReading."""

    def __init__(
        self,
        tzdb: TimezoneDatabase | None = None,
        formatter: LocaleFormatter | None = None,
    ) -> None:
        self.tzdb = tzdb if tzdb is not None else PytzTimezoneDatabase()
        self.formatter = formatter if formatter is not None else LocaleFormatter()

    def compute_local_fields(self, instant: datetime, timezone: str) -> LocalFields:
        """Resolve ``instant`` into calendar fields of ``timezone``.

        Raises:
            InvalidTimezone: If the zone identifier is unknown.
        """
        local = to_utc(instant).astimezone(self.tzdb.resolve(timezone))
        return LocalFields(
            year=local.year,
            month=local.month,
            day=local.day,
            weekday=local.weekday(),
            hour=local.hour,
            minute=local.minute,
            second=local.second,
        )

    def compute_reading(
        self, instant: datetime, timezone: str, clock_id: int = 0
    ) -> ClockReading:
        """Compute the clock face for one zone at one instant.

        Args:
            instant: Absolute time. Naive values are interpreted as UTC.
            timezone: IANA zone identifier.
            clock_id: Identity of the configured clock, copied into the reading.

        Returns:
            ClockReading with zone-local fields, formatted strings, and hand angles.

        Raises:
            InvalidTimezone: If the zone identifier is unknown.
        """
        fields = self.compute_local_fields(instant, timezone)
        millisecond = instant.microsecond // 1000
        hour_deg, minute_deg, second_deg = hand_angles(
            fields.hour, fields.minute, fields.second, millisecond
        )
        return ClockReading(
            clock_id=clock_id,
            timezone=timezone,
            local=fields,
            hour=fields.hour,
            minute=fields.minute,
            second=fields.second,
            millisecond=millisecond,
            formatted_time=self.formatter.format_time(fields),
            formatted_date=self.formatter.format_date(fields),
            formatted_weekday=self.formatter.format_weekday(fields),
            hour_hand_degrees=hour_deg,
            minute_hand_degrees=minute_deg,
            second_hand_degrees=second_deg,
        )
