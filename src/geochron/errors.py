"""Error kinds shared by the engines, the registry, and the scheduler."""

from collections.abc import Callable


class GeochronError(Exception):
    """Base class for all geochron errors."""


class InvalidTimezone(GeochronError, ValueError):
    """Timezone identifier not found in the timezone database."""

    def __init__(self, timezone: str) -> None:
        super().__init__(f"Unknown timezone: {timezone!r}")
        self.timezone = timezone


class CorruptSnapshot(GeochronError):
    """Persisted registry state could not be parsed."""


class RenderTargetUnavailable(GeochronError):
    """A rendering collaborator could not draw.

    Raised by renderer sinks, never by the engines. ``retry`` is filled in by
    the scheduler with an action that restarts the failed activity.
    """

    def __init__(self, message: str, retry: Callable[[], None] | None = None) -> None:
        super().__init__(message)
        self.retry = retry
