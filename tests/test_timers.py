"""Tests for the timer capabilities."""

import asyncio
from datetime import timedelta

from geochron.timers import AsyncioTimer, VirtualTimer
from tests.conftest import SOLSTICE_NOON


class TestVirtualTimer:
    def test_runs_due_callbacks_in_order(self, timer):
        fired = []
        timer.call_later(2.0, lambda: fired.append("b"))
        timer.call_later(1.0, lambda: fired.append("a"))
        timer.call_later(5.0, lambda: fired.append("c"))
        timer.advance(2.0)
        assert fired == ["a", "b"]
        assert timer.pending == 1
        assert timer.now() == SOLSTICE_NOON + timedelta(seconds=2)

    def test_same_due_time_keeps_scheduling_order(self, timer):
        fired = []
        for name in "xyz":
            timer.call_later(1.0, lambda name=name: fired.append(name))
        timer.advance(1.0)
        assert fired == ["x", "y", "z"]

    def test_cancel(self, timer):
        fired = []
        handle = timer.call_later(1.0, lambda: fired.append(1))
        handle.cancel()
        assert timer.pending == 0
        timer.advance(10.0)
        assert fired == []

    def test_callbacks_see_their_due_time(self, timer):
        seen = []

        def reschedule():
            seen.append(timer.now())
            timer.call_later(0.5, reschedule)

        timer.call_later(0.5, reschedule)
        timer.advance(2.0)
        assert seen == [SOLSTICE_NOON + timedelta(seconds=0.5 * n) for n in (1, 2, 3, 4)]
        assert timer.pending == 1

    def test_negative_delay_runs_on_next_advance(self, timer):
        fired = []
        timer.call_later(-1.0, lambda: fired.append(timer.now()))
        timer.advance(0)
        assert fired == [SOLSTICE_NOON]


class TestAsyncioTimer:
    def test_fires_on_running_loop(self):
        fired = []

        async def scenario():
            timer = AsyncioTimer()
            timer.call_later(0.01, lambda: fired.append(timer.now()))
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert len(fired) == 1
        assert fired[0].utcoffset() == timedelta(0)

    def test_cancel(self):
        fired = []

        async def scenario():
            timer = AsyncioTimer()
            handle = timer.call_later(0.01, lambda: fired.append(1))
            handle.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fired == []
