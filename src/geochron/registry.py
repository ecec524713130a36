"""Ordered set of configured clocks and their id counter."""

from collections.abc import Iterator, Mapping
from typing import Any

from loguru import logger

from geochron.clock import PytzTimezoneDatabase, TimezoneDatabase
from geochron.errors import CorruptSnapshot, InvalidTimezone
from geochron.models import ClockConfig, RegistrySnapshot


class ClockRegistry:
    """Owns ClockConfig identity and display order.

    Ids come from a monotonic counter starting at 1 and are never reused
    within the registry's lifetime, including across removals and restore
    fallbacks. Timezones are validated against ``tzdb`` before any mutation.
    """

    def __init__(self, tzdb: TimezoneDatabase | None = None) -> None:
        self.tzdb = tzdb if tzdb is not None else PytzTimezoneDatabase()
        self._next_id = 1
        self._clocks: list[ClockConfig] = []

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def clocks(self) -> tuple[ClockConfig, ...]:
        return tuple(self._clocks)

    def __len__(self) -> int:
        return len(self._clocks)

    def __iter__(self) -> Iterator[ClockConfig]:
        return iter(tuple(self._clocks))

    def ids(self) -> list[int]:
        return [c.id for c in self._clocks]

    def get(self, clock_id: int) -> ClockConfig | None:
        """Return the config with ``clock_id``, or None."""
        for clock in self._clocks:
            if clock.id == clock_id:
                return clock
        return None

    def _check(self, timezone: str) -> None:
        if not self.tzdb.is_valid(timezone):
            raise InvalidTimezone(timezone)

    def create(self, timezone: str) -> ClockConfig:
        """Append a new clock showing ``timezone``.

        Raises:
            InvalidTimezone: If the zone is unknown. Nothing is changed.
        """
        self._check(timezone)
        clock = ClockConfig(id=self._next_id, timezone=timezone)
        self._next_id += 1
        self._clocks.append(clock)
        logger.debug("[registry] Created clock #{} ({})", clock.id, timezone)
        return clock

    def remove(self, clock_id: int) -> None:
        """Remove the clock with ``clock_id``. Absent ids are ignored."""
        for i, clock in enumerate(self._clocks):
            if clock.id == clock_id:
                del self._clocks[i]
                logger.debug("[registry] Removed clock #{}", clock_id)
                return

    def retimezone(self, clock_id: int, timezone: str) -> None:
        """Switch the clock with ``clock_id`` to ``timezone``. Absent ids are ignored.

        Raises:
            InvalidTimezone: If the zone is unknown. Nothing is changed.
        """
        self._check(timezone)
        clock = self.get(clock_id)
        if clock is not None:
            clock.timezone = timezone
            logger.debug("[registry] Clock #{} now {}", clock_id, timezone)

    def snapshot(self) -> RegistrySnapshot:
        """Copy of the full state for the persistence collaborator."""
        return RegistrySnapshot(
            next_id=self._next_id,
            clocks=tuple(ClockConfig(id=c.id, timezone=c.timezone) for c in self._clocks),
        )

    def restore(self, snapshot: RegistrySnapshot | Mapping[str, Any] | None) -> None:
        """Replace the whole state with ``snapshot``.

        Raw mappings are parsed with :meth:`RegistrySnapshot.from_dict`.
        Corrupt data, a snapshot naming an unknown zone, or ``None`` fall back
        to a single clock in the host's local zone.
        """
        try:
            parsed = self._parse(snapshot)
        except CorruptSnapshot as e:
            logger.warning("[registry] Discarding saved clocks: {}", e)
            self.restore_default()
            return
        if parsed is None:
            self.restore_default()
            return

        self._clocks = [ClockConfig(id=c.id, timezone=c.timezone) for c in parsed.clocks]
        self._next_id = parsed.next_id
        logger.info("[registry] Restored {} clocks", len(self._clocks))

    def _parse(
        self, snapshot: RegistrySnapshot | Mapping[str, Any] | None
    ) -> RegistrySnapshot | None:
        if snapshot is None:
            return None
        if isinstance(snapshot, RegistrySnapshot):
            snapshot = snapshot.to_dict()
        snapshot = RegistrySnapshot.from_dict(snapshot)
        for clock in snapshot.clocks:
            if not self.tzdb.is_valid(clock.timezone):
                raise CorruptSnapshot(f"clock #{clock.id} has unknown timezone {clock.timezone!r}")
        return snapshot

    def restore_default(self) -> None:
        """Reset to one clock in the host's local zone. The id counter never goes back."""
        self._clocks = []
        clock = self.create(self.tzdb.local_zone_name())
        logger.info("[registry] Started with default clock #{} ({})", clock.id, clock.timezone)
