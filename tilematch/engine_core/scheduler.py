"""
Schedulers - Timer collaborators for deferred transitions.

The engine never sleeps. When a second tile is revealed it asks a scheduler
to run the resolution later and keeps the returned handle.

Implementations:
- AsyncioScheduler: real delays on the running asyncio event loop
- ManualScheduler: a virtual clock advanced explicitly (tests, terminal play)
"""

from __future__ import annotations
import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in milliseconds."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Schedules callbacks on an asyncio event loop.

    With no explicit loop, the running loop is looked up at scheduling time,
    so one instance can be shared by every session of a web app.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)


@dataclass(order=True)
class ScheduledCall:
    """A callback queued on a ManualScheduler."""
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by a virtual clock.

    Usage:
        scheduler = ManualScheduler()
        scheduler.call_later(600, callback)
        scheduler.advance(599)   # nothing fires
        scheduler.advance(1)     # callback fires

    Callbacks fire in due-time order, ties in scheduling order. A callback
    scheduled while advancing fires in the same advance() if it falls due.
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: list[ScheduledCall] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        call = ScheduledCall(due_ms=self.now_ms + delay_ms, seq=next(self._seq), callback=callback)
        heapq.heappush(self._queue, call)
        return call

    @property
    def pending(self) -> int:
        """Number of queued, non-cancelled callbacks."""
        return sum(1 for call in self._queue if not call.cancelled)

    def next_due(self) -> int | None:
        """Virtual time of the next live callback, or None."""
        live = [call.due_ms for call in self._queue if not call.cancelled]
        return min(live) if live else None

    def advance(self, ms: int) -> int:
        """
        Move the clock forward and fire everything that falls due.

        Returns the number of callbacks fired.
        """
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards ({ms} ms)")
        target = self.now_ms + ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self.now_ms = call.due_ms
            call.callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_all(self) -> int:
        """Advance until no live callbacks remain."""
        fired = 0
        due = self.next_due()
        while due is not None:
            fired += self.advance(due - self.now_ms)
            due = self.next_due()
        return fired
