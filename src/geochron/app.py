"""Geochron application: one clock board wired to its store, engines and scheduler."""

from loguru import logger

from geochron.clock import ClockTimeEngine, PytzTimezoneDatabase, TimezoneDatabase
from geochron.config import Settings
from geochron.errors import CorruptSnapshot
from geochron.i18n import LocaleFormatter
from geochron.models import ClockConfig
from geochron.persistence import JsonSnapshotStore
from geochron.registry import ClockRegistry
from geochron.scheduler import ClockSink, ErrorHandler, LabelSink, MapSink, UpdateScheduler
from geochron.timers import Timer


class GeochronApp:
    """One independent clock board with its own registry and scheduler.

    Every registry mutation is saved through the store straight away.

    Args:
        settings: Resolved configuration.
        timer: Tick source for the scheduler.
        store: Persistence collaborator. Defaults to a JSON file at
            ``settings.state_path``.
        tzdb: Timezone database shared by the registry and the engine.
        on_clock_readings / on_day_night / on_city_labels / on_render_error:
            Renderer sinks passed through to the scheduler.
    """

    def __init__(
        self,
        settings: Settings,
        timer: Timer,
        store: JsonSnapshotStore | None = None,
        tzdb: TimezoneDatabase | None = None,
        *,
        on_clock_readings: ClockSink | None = None,
        on_day_night: MapSink | None = None,
        on_city_labels: LabelSink | None = None,
        on_render_error: ErrorHandler | None = None,
    ) -> None:
        self.settings = settings
        self.tzdb = tzdb if tzdb is not None else PytzTimezoneDatabase()
        self.store = store if store is not None else JsonSnapshotStore(settings.state_path)
        self.registry = ClockRegistry(self.tzdb)
        self.engine = ClockTimeEngine(self.tzdb, LocaleFormatter(settings.lang))
        self.scheduler = UpdateScheduler(
            self.registry,
            self.engine,
            timer,
            on_clock_readings=on_clock_readings,
            on_day_night=on_day_night,
            on_city_labels=on_city_labels,
            on_render_error=on_render_error,
            frame_interval=settings.frame_interval,
            label_interval=settings.label_interval,
            curve_step=settings.curve_step,
        )
        self.load()

    def load(self) -> None:
        """Restore the registry from the store, falling back to one local clock."""
        try:
            snapshot = self.store.load()
        except CorruptSnapshot as e:
            logger.warning("[app] Saved clocks unreadable: {}", e)
            snapshot = None
        self.registry.restore(snapshot)
        try:
            self.save()
        except OSError as e:
            logger.warning("[app] Could not save clocks: {}", e)

    def save(self) -> None:
        self.store.save(self.registry.snapshot())

    def add_clock(self, timezone: str | None = None) -> ClockConfig:
        """Add a clock, in the host's local zone unless ``timezone`` is given."""
        clock = self.registry.create(timezone or self.tzdb.local_zone_name())
        self.save()
        return clock

    def remove_clock(self, clock_id: int) -> None:
        self.registry.remove(clock_id)
        self.save()

    def set_timezone(self, clock_id: int, timezone: str) -> None:
        self.registry.retimezone(clock_id, timezone)
        self.save()

    @property
    def map_visible(self) -> bool:
        return self.scheduler.map_visible

    def show_map(self) -> None:
        """Resume the solar pass and the city labels."""
        self.scheduler.map_visible = True
        self.scheduler.start_slow()

    def hide_map(self) -> None:
        """Stop the solar pass and the city labels. Clocks keep ticking."""
        self.scheduler.map_visible = False
        self.scheduler.stop_slow()

    def start(self) -> None:
        self.scheduler.start_continuous()
        if self.scheduler.map_visible:
            self.scheduler.start_slow()

    def stop(self) -> None:
        self.scheduler.stop_all()
