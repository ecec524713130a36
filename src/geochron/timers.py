"""Timer capabilities driving the update scheduler.

``AsyncioTimer`` schedules on a running event loop; ``VirtualTimer`` keeps
its own clock and only moves when told to, so ticks can be replayed
deterministically.
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    """Source of the current instant and of delayed callbacks."""

    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioTimer:
    """Timer backed by ``loop.call_later``. Callbacks run on the loop thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class VirtualHandle:
    """Cancellable entry in a VirtualTimer queue."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTimer:
    """Manually advanced timer.

    Example:
        >>> timer = VirtualTimer(datetime(2024, 6, 21, 12, tzinfo=timezone.utc))
        >>> fired = []
        >>> _ = timer.call_later(1.0, lambda: fired.append(timer.now()))
        >>> timer.advance(1.0)
        >>> fired[0].second
        1
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start if start is not None else datetime.now(timezone.utc)
        self._queue: list[tuple[datetime, int, VirtualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualHandle:
        handle = VirtualHandle(callback)
        due = self._now + timedelta(seconds=max(0.0, delay))
        heapq.heappush(self._queue, (due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running due callbacks in order.

        Callbacks scheduled while advancing run too if they fall due before
        the target time. The clock reads each callback's due time while it runs.
        """
        target = self._now + timedelta(seconds=seconds)
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            handle.callback()
        self._now = target
