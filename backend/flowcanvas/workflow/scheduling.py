"""
Cancellable delayed-call primitives used by the simulator.

``AsyncioScheduler`` runs on a live event loop. ``VirtualClockScheduler``
keeps its own clock that only moves when ``advance`` is called, so a
whole simulation can be replayed instantly and deterministically.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal timer interface: current time plus one-shot delayed calls."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks with ``loop.call_later``.

    When no loop is given the running loop is looked up on every call,
    so the scheduler can be created outside of a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay, callback)


class VirtualTimer:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClockScheduler:
    """Deterministic scheduler driven by explicit clock advances.

    Timers due at the same instant fire in scheduling order.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: List[Tuple[float, int, VirtualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that falls due.

        Returns the number of callbacks run.
        """
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        deadline = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            self._now = when
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        self._now = deadline
        return fired

    def run_until_idle(self, max_callbacks: int = 10_000) -> int:
        """Fire timers in order until none remain.

        Raises:
            RuntimeError: If more than ``max_callbacks`` fire, which
                usually means a cyclic simulation with no step limit.
        """
        fired = 0
        while self._queue:
            when, _, timer = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if timer.cancelled:
                continue
            if fired >= max_callbacks:
                raise RuntimeError(f"Scheduler still busy after {max_callbacks} callbacks")
            timer.callback()
            fired += 1
        return fired
