"""
Clock / Scheduling Facility
===========================

The session and pulse scheduler never sleep. Everything they do is driven by
callbacks armed on a Clock:

    arm_repeating(interval, callback) -> handle
    schedule_once(delay, callback) -> handle
    cancel(handle)

Two implementations:
- AsyncioClock: real time, on the running asyncio event loop
- ManualClock: virtual time, advanced explicitly (tests, simulation)

cancel() is safe on handles that already fired or were already cancelled.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]

# Tolerance when comparing virtual deadlines (sums of 0.05/0.8/0.6 steps)
_EPSILON = 1e-9


class TimerHandle:
    """A one-shot or repeating timer armed on a Clock."""

    def __init__(
        self,
        callback: Callback,
        interval: Optional[float] = None,
        origin: float = 0.0,
    ):
        self.callback = callback
        self.interval = interval
        self.origin = origin
        self.fire_count = 0
        self.cancelled = False

        # Underlying asyncio.TimerHandle (AsyncioClock only)
        self._loop_handle: Optional[asyncio.TimerHandle] = None

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def pending(self) -> bool:
        """True while the timer can still fire."""
        if self.cancelled:
            return False
        return self.repeating or self.fire_count == 0

    def next_deadline(self) -> float:
        """Absolute deadline of the next repeat (no drift accumulation)."""
        assert self.interval is not None
        return self.origin + (self.fire_count + 1) * self.interval

    def cancel(self) -> None:
        self.cancelled = True
        if self._loop_handle is not None:
            self._loop_handle.cancel()
            self._loop_handle = None

    def __repr__(self) -> str:
        kind = f"every {self.interval}s" if self.repeating else "once"
        state = "pending" if self.pending else "done"
        return f"<TimerHandle {kind} {state} fired={self.fire_count}>"


class Clock(ABC):
    """Abstract scheduling facility."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds (monotonic, arbitrary origin)."""

    @abstractmethod
    def arm_repeating(self, interval: float, callback: Callback) -> TimerHandle:
        """Call ``callback`` every ``interval`` seconds until cancelled."""

    @abstractmethod
    def schedule_once(self, delay: float, callback: Callback) -> TimerHandle:
        """Call ``callback`` once, ``delay`` seconds from now."""

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        """Cancel a timer. No-op for None, fired or cancelled handles."""
        if handle is not None:
            handle.cancel()

    @staticmethod
    def _check_interval(interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

    @staticmethod
    def _check_delay(delay: float) -> None:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")


# =============================================================================
# Asyncio Clock
# =============================================================================

class AsyncioClock(Clock):
    """
    Real-time clock on an asyncio event loop.

    If no loop is given, the running loop is used, so timers must be armed
    from inside a coroutine or loop callback.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def arm_repeating(self, interval: float, callback: Callback) -> TimerHandle:
        self._check_interval(interval)
        timer = TimerHandle(callback, interval=interval, origin=self.now())
        timer._loop_handle = self.loop.call_at(timer.next_deadline(), self._fire, timer)
        return timer

    def schedule_once(self, delay: float, callback: Callback) -> TimerHandle:
        self._check_delay(delay)
        timer = TimerHandle(callback, origin=self.now())
        timer._loop_handle = self.loop.call_later(delay, self._fire, timer)
        return timer

    def _fire(self, timer: TimerHandle) -> None:
        timer._loop_handle = None
        if timer.cancelled:
            return

        timer.fire_count += 1
        if timer.repeating:
            # Re-arm before running so the callback may cancel its own timer
            timer._loop_handle = self.loop.call_at(timer.next_deadline(), self._fire, timer)

        timer.callback()


# =============================================================================
# Manual Clock
# =============================================================================

class ManualClock(Clock):
    """
    Virtual-time clock.

    Nothing fires until advance() is called. Callbacks run in deadline order
    (ties in the order they were scheduled), and callbacks scheduled while
    advancing fire in the same call if they fall inside the window.

    Usage:
        clock = ManualClock()
        clock.arm_repeating(1.0, on_tick)
        clock.advance(4.0)  # on_tick runs four times
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def arm_repeating(self, interval: float, callback: Callback) -> TimerHandle:
        self._check_interval(interval)
        timer = TimerHandle(callback, interval=interval, origin=self._now)
        self._push(timer.next_deadline(), timer)
        return timer

    def schedule_once(self, delay: float, callback: Callback) -> TimerHandle:
        self._check_delay(delay)
        timer = TimerHandle(callback, origin=self._now)
        self._push(self._now + delay, timer)
        return timer

    def advance(self, seconds: float) -> int:
        """
        Move virtual time forward, firing everything that falls due.

        advance(0) flushes callbacks that are due right now.

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise ValueError(f"cannot move time backwards ({seconds}s)")

        target = self._now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target + _EPSILON:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue

            self._now = max(self._now, deadline)
            timer.fire_count += 1
            if timer.repeating:
                self._push(timer.next_deadline(), timer)

            timer.callback()
            fired += 1

        self._now = max(self._now, target)
        return fired

    def run_until(self, predicate: Callable[[], bool], step: float = 0.05,
                  limit: float = 3600.0) -> float:
        """
        Advance in small steps until ``predicate()`` holds.

        Returns the virtual time spent. Raises TimeoutError after ``limit``
        virtual seconds.
        """
        spent = 0.0
        while not predicate():
            if spent >= limit:
                raise TimeoutError(f"condition not met after {limit}s of virtual time")
            self.advance(step)
            spent += step
        return spent

    @property
    def pending_count(self) -> int:
        """Timers still queued (excluding cancelled ones)."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def _push(self, deadline: float, timer: TimerHandle) -> None:
        heapq.heappush(self._queue, (deadline, next(self._sequence), timer))
