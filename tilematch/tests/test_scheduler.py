"""
Tests for the scheduler implementations.
"""

import asyncio

import pytest

from ..engine_core.scheduler import AsyncioScheduler, ManualScheduler


class TestManualScheduler:

    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(300, lambda: fired.append("late"))
        scheduler.call_later(100, lambda: fired.append("early"))

        assert scheduler.advance(300) == 2
        assert fired == ["early", "late"]

    def test_ties_fire_in_scheduling_order(self):
        scheduler = ManualScheduler()
        fired = []
        for name in ("first", "second", "third"):
            scheduler.call_later(50, lambda name=name: fired.append(name))

        scheduler.advance(50)
        assert fired == ["first", "second", "third"]

    def test_nothing_fires_early(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(100, lambda: fired.append(True))

        assert scheduler.advance(99) == 0
        assert fired == []
        assert scheduler.now_ms == 99

    def test_cancel(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.call_later(10, lambda: fired.append(True))
        handle.cancel()

        assert scheduler.pending == 0
        assert scheduler.next_due() is None
        assert scheduler.advance(100) == 0
        assert fired == []

    def test_clock_seen_by_callback(self):
        scheduler = ManualScheduler()
        seen = []
        scheduler.call_later(40, lambda: seen.append(scheduler.now_ms))

        scheduler.advance(100)
        assert seen == [40]
        assert scheduler.now_ms == 100

    def test_chained_callback_fires_in_same_advance(self):
        scheduler = ManualScheduler()
        fired = []

        def first():
            fired.append(scheduler.now_ms)
            scheduler.call_later(20, lambda: fired.append(scheduler.now_ms))

        scheduler.call_later(10, first)
        scheduler.advance(50)
        assert fired == [10, 30]

    def test_run_all(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1000, lambda: fired.append(1))
        scheduler.call_later(5000, lambda: fired.append(2))

        assert scheduler.run_all() == 2
        assert fired == [1, 2]
        assert scheduler.now_ms == 5000
        assert scheduler.pending == 0

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_later(-1, lambda: None)

    def test_clock_cannot_go_backwards(self):
        with pytest.raises(ValueError):
            ManualScheduler().advance(-5)


class TestAsyncioScheduler:

    def test_runs_on_event_loop(self):
        fired = []

        async def scenario():
            scheduler = AsyncioScheduler()
            scheduler.call_later(10, lambda: fired.append("done"))
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert fired == ["done"]

    def test_cancelled_handle_never_fires(self):
        fired = []

        async def scenario():
            scheduler = AsyncioScheduler()
            handle = scheduler.call_later(10, lambda: fired.append("done"))
            handle.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fired == []

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().call_later(10, lambda: None)
