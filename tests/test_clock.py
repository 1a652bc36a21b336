"""
Tests for the scheduling facility (virtual and asyncio clocks).
"""

import asyncio

import pytest

from breathpulse.clock import AsyncioClock, ManualClock


# =============================================================================
# ManualClock
# =============================================================================

class TestManualClock:
    """Virtual time."""

    def test_nothing_fires_without_advance(self, clock):
        fired = []
        clock.schedule_once(0.0, lambda: fired.append(1))
        assert fired == []
        assert clock.pending_count == 1

    def test_advance_zero_flushes_due_callbacks(self, clock):
        """Callbacks due now run on advance(0)."""
        fired = []
        clock.schedule_once(0.0, lambda: fired.append("now"))
        clock.schedule_once(0.5, lambda: fired.append("later"))
        clock.advance(0)
        assert fired == ["now"]

    def test_repeating_fire_count(self, clock):
        """A 1s repeater fires once per virtual second."""
        ticks = []
        clock.arm_repeating(1.0, lambda: ticks.append(clock.now()))
        clock.advance(4.0)
        assert ticks == [1.0, 2.0, 3.0, 4.0]

    def test_repeating_does_not_drift(self, clock):
        """Deadlines stay on origin + k * interval."""
        times = []
        clock.arm_repeating(0.6, lambda: times.append(clock.now()))
        clock.advance(6.0)
        assert len(times) == 10
        assert times[-1] == pytest.approx(6.0)

    def test_deadline_order_and_ties(self, clock):
        """Earlier deadlines first; equal deadlines in scheduling order."""
        fired = []
        clock.schedule_once(0.2, lambda: fired.append("b"))
        clock.schedule_once(0.1, lambda: fired.append("a"))
        clock.schedule_once(0.2, lambda: fired.append("c"))
        clock.advance(1.0)
        assert fired == ["a", "b", "c"]

    def test_callbacks_scheduled_while_advancing(self, clock):
        """A callback may schedule another inside the same window."""
        fired = []

        def first():
            fired.append(clock.now())
            clock.schedule_once(0.25, lambda: fired.append(clock.now()))

        clock.schedule_once(0.5, first)
        clock.advance(1.0)
        assert fired == [0.5, 0.75]
        assert clock.now() == 1.0

    def test_cancel_repeating(self, clock):
        ticks = []
        handle = clock.arm_repeating(1.0, lambda: ticks.append(1))
        clock.advance(2.0)
        clock.cancel(handle)
        clock.advance(5.0)
        assert len(ticks) == 2
        assert not handle.pending

    def test_cancel_from_own_callback(self, clock):
        """A repeater can cancel itself when it fires."""
        ticks = []
        holder = {}

        def on_tick():
            ticks.append(1)
            if len(ticks) == 3:
                clock.cancel(holder["handle"])

        holder["handle"] = clock.arm_repeating(1.0, on_tick)
        clock.advance(10.0)
        assert len(ticks) == 3

    def test_cancel_is_safe_after_fire_or_twice(self, clock):
        """cancel() tolerates fired, cancelled and None handles."""
        handle = clock.schedule_once(0.1, lambda: None)
        clock.advance(1.0)
        assert handle.fire_count == 1
        clock.cancel(handle)
        clock.cancel(handle)
        clock.cancel(None)

    def test_invalid_arguments(self, clock):
        with pytest.raises(ValueError):
            clock.arm_repeating(0, lambda: None)
        with pytest.raises(ValueError):
            clock.schedule_once(-0.1, lambda: None)
        with pytest.raises(ValueError):
            clock.advance(-1)

    def test_run_until(self, clock):
        fired = []
        clock.schedule_once(2.0, lambda: fired.append(1))
        spent = clock.run_until(lambda: bool(fired), step=0.5)
        assert spent == pytest.approx(2.0)

    def test_run_until_limit(self):
        clock = ManualClock()
        with pytest.raises(TimeoutError):
            clock.run_until(lambda: False, step=1.0, limit=5.0)


# =============================================================================
# AsyncioClock
# =============================================================================

@pytest.mark.realtime
class TestAsyncioClock:
    """Real event-loop timers (short intervals)."""

    @pytest.mark.asyncio
    async def test_schedule_once(self):
        clock = AsyncioClock()
        fired = []
        handle = clock.schedule_once(0.01, lambda: fired.append(1))
        await asyncio.sleep(0.05)
        assert fired == [1]
        assert not handle.pending

    @pytest.mark.asyncio
    async def test_repeating_and_cancel(self):
        clock = AsyncioClock()
        ticks = []
        handle = clock.arm_repeating(0.01, lambda: ticks.append(1))
        await asyncio.sleep(0.1)
        clock.cancel(handle)
        count = len(ticks)
        assert count >= 3
        await asyncio.sleep(0.05)
        assert len(ticks) == count

    @pytest.mark.asyncio
    async def test_cancel_before_fire(self):
        clock = AsyncioClock()
        fired = []
        handle = clock.schedule_once(0.02, lambda: fired.append(1))
        clock.cancel(handle)
        await asyncio.sleep(0.05)
        assert fired == []
        clock.cancel(handle)

    @pytest.mark.asyncio
    async def test_now_follows_loop_time(self):
        clock = AsyncioClock()
        assert clock.now() == pytest.approx(asyncio.get_running_loop().time(), abs=0.01)
