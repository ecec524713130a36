"""Periodic recomputation: the continuous tick (clock hands, terminator) and the slow tick (city labels).

Both activities reschedule themselves through an injected Timer and can be
started and stopped independently. Every continuous tick captures one
instant and uses it for all clock readings and the solar pass.
"""

import enum
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from geochron.cities import WORLD_CITIES, compute_city_labels
from geochron.clock import ClockTimeEngine
from geochron.errors import InvalidTimezone, RenderTargetUnavailable
from geochron.models import CityLabel, ClockReading, DayNightState, WorldCity
from geochron.registry import ClockRegistry
from geochron.solar import DEFAULT_STEP, compute_day_night
from geochron.timers import Timer, TimerHandle

FRAME_INTERVAL = 1 / 60  # Seconds, display refresh cadence
LABEL_INTERVAL = 30.0  # Seconds

ClockSink = Callable[[datetime, tuple[ClockReading, ...]], None]
MapSink = Callable[[DayNightState], None]
LabelSink = Callable[[tuple[CityLabel, ...]], None]
ErrorHandler = Callable[["Activity", RenderTargetUnavailable], None]


class Activity(enum.Enum):
    CONTINUOUS = "continuous"
    SLOW = "slow"


class ActivityState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class Frame:
    """Everything one continuous tick computed, all for the same instant."""

    instant: datetime
    readings: tuple[ClockReading, ...]
    day_night: DayNightState | None  # None while the map is hidden


class UpdateScheduler:
    """Drives periodic recomputation for a ClockRegistry.

    Args:
        registry: Clocks to read on every continuous tick.
        engine: Clock math engine.
        timer: Source of instants and delayed callbacks.
        on_clock_readings: Clock-face sink, called with (instant, readings).
        on_day_night: Map sink, called with the solar pass result.
        on_city_labels: Label sink, called on every slow tick.
        on_render_error: Called when a sink raises RenderTargetUnavailable.
        frame_interval: Continuous tick period in seconds.
        label_interval: Slow tick period in seconds.
        curve_step: Bearing step for boundary curves.
        cities: Cities labelled by the slow tick.
    """

    def __init__(
        self,
        registry: ClockRegistry,
        engine: ClockTimeEngine,
        timer: Timer,
        *,
        on_clock_readings: ClockSink | None = None,
        on_day_night: MapSink | None = None,
        on_city_labels: LabelSink | None = None,
        on_render_error: ErrorHandler | None = None,
        frame_interval: float = FRAME_INTERVAL,
        label_interval: float = LABEL_INTERVAL,
        curve_step: float = DEFAULT_STEP,
        cities: tuple[WorldCity, ...] = WORLD_CITIES,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.timer = timer
        self.on_clock_readings = on_clock_readings
        self.on_day_night = on_day_night
        self.on_city_labels = on_city_labels
        self.on_render_error = on_render_error
        self.frame_interval = frame_interval
        self.label_interval = label_interval
        self.curve_step = curve_step
        self.cities = cities

        self.map_visible = True
        self.last_frame: Frame | None = None
        self.last_labels: tuple[CityLabel, ...] = ()
        self._handles: dict[Activity, TimerHandle | None] = {a: None for a in Activity}
        self._states: dict[Activity, ActivityState] = {
            a: ActivityState.STOPPED for a in Activity
        }

    def state(self, activity: Activity) -> ActivityState:
        return self._states[activity]

    # --- lifecycle ---

    def start(self, activity: Activity) -> None:
        """Start ``activity``. Starting a running activity does nothing."""
        if self._states[activity] is ActivityState.RUNNING:
            return
        self._states[activity] = ActivityState.RUNNING
        logger.debug("[scheduler] {} started", activity.value)
        if activity is Activity.CONTINUOUS:
            self._schedule(activity, self.frame_interval)
        else:
            self._run_slow()

    def stop(self, activity: Activity) -> None:
        """Stop ``activity`` and cancel its pending tick."""
        if self._states[activity] is ActivityState.STOPPED:
            return
        self._states[activity] = ActivityState.STOPPED
        handle = self._handles[activity]
        if handle is not None:
            handle.cancel()
        self._handles[activity] = None
        logger.debug("[scheduler] {} stopped", activity.value)

    def start_continuous(self) -> None:
        self.start(Activity.CONTINUOUS)

    def stop_continuous(self) -> None:
        self.stop(Activity.CONTINUOUS)

    def start_slow(self) -> None:
        self.start(Activity.SLOW)

    def stop_slow(self) -> None:
        self.stop(Activity.SLOW)

    def start_all(self) -> None:
        self.start_continuous()
        self.start_slow()

    def stop_all(self) -> None:
        self.stop_continuous()
        self.stop_slow()

    def _schedule(self, activity: Activity, delay: float) -> None:
        callback = self._run_continuous if activity is Activity.CONTINUOUS else self._run_slow
        self._handles[activity] = self.timer.call_later(delay, callback)

    # --- ticks ---

    def tick(self) -> Frame:
        """Compute one continuous frame at the timer's current instant and deliver it."""
        instant = self.timer.now()
        readings = []
        for clock in self.registry:
            try:
                readings.append(
                    self.engine.compute_reading(instant, clock.timezone, clock_id=clock.id)
                )
            except InvalidTimezone as e:
                logger.warning("[scheduler] Skipping clock #{}: {}", clock.id, e)

        day_night = None
        if self.map_visible:
            day_night = compute_day_night(instant, self.curve_step)

        frame = Frame(instant=instant, readings=tuple(readings), day_night=day_night)
        self.last_frame = frame
        if self.on_clock_readings is not None:
            self.on_clock_readings(instant, frame.readings)
        if day_night is not None and self.on_day_night is not None:
            self.on_day_night(day_night)
        return frame

    def refresh_labels(self) -> tuple[CityLabel, ...]:
        """Compute city labels at the timer's current instant and deliver them."""
        labels = compute_city_labels(self.timer.now(), self.engine, self.cities)
        self.last_labels = labels
        if self.on_city_labels is not None:
            self.on_city_labels(labels)
        return labels

    def _run_continuous(self) -> None:
        self._handles[Activity.CONTINUOUS] = None
        if self._states[Activity.CONTINUOUS] is not ActivityState.RUNNING:
            return
        if self._guarded(Activity.CONTINUOUS, self.tick):
            self._schedule(Activity.CONTINUOUS, self.frame_interval)

    def _run_slow(self) -> None:
        self._handles[Activity.SLOW] = None
        if self._states[Activity.SLOW] is not ActivityState.RUNNING:
            return
        if self._guarded(Activity.SLOW, self.refresh_labels):
            self._schedule(Activity.SLOW, self.label_interval)

    def _guarded(self, activity: Activity, work: Callable[[], object]) -> bool:
        """Run one tick. Any failure stops only this activity.

        A render failure is handed to ``on_render_error`` with a retry
        action. Other errors are logged with their traceback; the activity
        is left STOPPED so ``start`` can bring it back.
        """
        try:
            work()
        except RenderTargetUnavailable as e:
            self.stop(activity)
            e.retry = lambda: self.start(activity)
            logger.warning("[scheduler] {} paused, render target unavailable: {}", activity.value, e)
            if self.on_render_error is not None:
                self.on_render_error(activity, e)
            return False
        except Exception:
            self.stop(activity)
            logger.exception("[scheduler] {} stopped after a failed tick", activity.value)
            return False
        # A sink may have restarted the activity, which already scheduled it
        return (
            self._states[activity] is ActivityState.RUNNING
            and self._handles[activity] is None
        )
