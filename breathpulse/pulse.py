"""
Pulse Scheduler
===============

Drives the rhythmic haptic clicks for the active phase.

While armed, the scheduler triggers a *burst* every ``interval`` seconds (and
once immediately on arming), never on or past the end of the phase it was
armed for. A burst is ``intensity`` clicks fanned out 0.05s apart:

    t+0.00  click
    t+0.05  click
    ...
    t+(N-1)*0.05  click

Each click is its own one-shot timer. Nothing is removed from the clock on
stop; instead every click checks, when it fires, that the session is still
active *and* still on the generation the burst was tagged with. A click from
a stopped session can therefore never leak into a restarted one.

The scheduler only reads the session (active, generation, intensity) and
holds it through a weak reference; the session owns the scheduler.
"""

from __future__ import annotations

import logging
import weakref
from functools import partial
from typing import TYPE_CHECKING, Optional

from .clock import Clock, TimerHandle
from .haptics import HapticDevice, HapticKind

if TYPE_CHECKING:
    from .session import BreathingSession

logger = logging.getLogger(__name__)

BURST_SPACING_S = 0.05

# Float slack when a repeat offset (k * interval) meets the phase duration
_BOUNDARY_EPSILON = 1e-9


class PulseScheduler:
    """Repeating burst trigger plus guarded one-shot click emissions."""

    def __init__(
        self,
        session: BreathingSession,
        clock: Clock,
        device: HapticDevice,
        enabled: bool = True,
    ):
        self._session_ref = weakref.ref(session)
        self.clock = clock
        self.device = device
        self.enabled = enabled

        self.interval: Optional[float] = None
        self.duration: Optional[float] = None
        self._repeating: Optional[TimerHandle] = None

        # Diagnostics
        self.bursts_triggered = 0
        self.pulses_emitted = 0
        self.pulses_dropped = 0
        self.bursts_skipped = 0

    @property
    def armed(self) -> bool:
        return self._repeating is not None and self._repeating.pending

    def arm(self, interval: float, generation: int, duration: Optional[float] = None) -> None:
        """
        Replace the repeating trigger with one at ``interval`` and fire a
        burst right away.

        With ``duration`` set, the trigger stays inside that window: a repeat
        landing on or past ``duration`` seconds after arming belongs to the
        next phase and is skipped, whichever of it and the countdown tick
        was queued first.
        """
        self.disarm()
        self.interval = interval
        self.duration = duration
        if not self.enabled:
            return

        self._repeating = self.clock.arm_repeating(
            interval, partial(self._repeat, generation)
        )
        self.burst(generation)

    def disarm(self) -> None:
        """Cancel the repeating trigger. Pending clicks drop themselves."""
        self.clock.cancel(self._repeating)
        self._repeating = None

    def _repeat(self, generation: int) -> None:
        timer = self._repeating
        if self.duration is not None and timer is not None:
            offset = timer.fire_count * timer.interval
            if offset >= self.duration - _BOUNDARY_EPSILON:
                self.bursts_skipped += 1
                logger.debug(f"Skipped burst at phase boundary (+{offset:.2f}s)")
                return
        self.burst(generation)

    def burst(self, generation: int) -> int:
        """
        Schedule one burst sized by the session's current intensity.

        Returns:
            Number of clicks scheduled (0 if the session is no longer live)
        """
        session = self._live_session(generation)
        if session is None:
            return 0

        count = session.intensity
        self.bursts_triggered += 1
        for i in range(count):
            self.clock.schedule_once(
                i * BURST_SPACING_S,
                partial(self._emit, HapticKind.RHYTHM_CLICK, generation),
            )

        logger.debug(f"Burst #{self.bursts_triggered}: {count} clicks (gen {generation})")
        return count

    def cue(self, kind: HapticKind, generation: int, count: int = 1) -> None:
        """
        Play a phase-change or cycle-complete cue.

        Cues are not scaled by intensity. The first event is played at once;
        any extra clicks follow at burst spacing under the same guard.
        """
        if not self.enabled or self._live_session(generation) is None:
            return

        self.device.play(kind)
        self.pulses_emitted += 1
        for i in range(1, count):
            self.clock.schedule_once(
                i * BURST_SPACING_S,
                partial(self._emit, kind, generation),
            )

    def _emit(self, kind: HapticKind, generation: int) -> None:
        if self._live_session(generation) is None:
            self.pulses_dropped += 1
            logger.debug(f"Dropped stale {kind.value} from generation {generation}")
            return

        self.device.play(kind)
        self.pulses_emitted += 1

    def _live_session(self, generation: int) -> Optional[BreathingSession]:
        session = self._session_ref()
        if session is None or not session.active:
            return None
        if session.generation != generation:
            return None
        return session
