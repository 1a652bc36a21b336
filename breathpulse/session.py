"""
Breathing Session
=================

The session state machine: active/inactive status, current phase, countdown
and cycle count, plus the intensity that sizes every pulse burst.

    Inactive --start()--> Inhale --4 ticks--> Hold --8--> Exhale --7--> Pause
                            ^                                            |
                            +---------------- 2 ticks (cycle + 1) -------+

    any active state --stop()--> Inactive

A 1-second repeating countdown drives tick(). Every phase change re-arms the
PulseScheduler at the new phase's interval. Closing a cycle (Pause -> Inhale)
bumps the cycle count and recomputes intensity.

Observers get a SessionSnapshot immediately on subscribe() and again after
every mutation; the session never calls into a UI directly.

Usage:
    session = BreathingSession(clock=AsyncioClock(), device=LoggingHapticDevice())
    unsubscribe = session.subscribe(print)
    session.start()
    ...
    session.stop()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .clock import Clock, TimerHandle
from .config import BreathConfig, get_config
from .decay import MAX_INTENSITY, intensity_for_cycles
from .haptics import HapticDevice, HapticKind
from .phases import Phase, PhaseSpec, is_cycle_wrap, next_phase, spec_for
from .pulse import PulseScheduler

logger = logging.getLogger(__name__)

TICK_INTERVAL_S = 1.0


@dataclass(frozen=True)
class SessionSnapshot:
    """Published view of the session state."""
    active: bool
    phase: Phase
    remaining: int
    cycle_count: int
    intensity: int
    generation: int

    @property
    def spec(self) -> PhaseSpec:
        return spec_for(self.phase)

    @property
    def label(self) -> str:
        return self.spec.label

    @property
    def color(self) -> str:
        return self.spec.color


Observer = Callable[[SessionSnapshot], None]


class BreathingSession:
    """
    4-8-7 breathing session with fading haptic pulses.

    All mutation happens on one thread of control (the clock's callbacks and
    the caller of start/stop), so no locking is done.
    """

    def __init__(
        self,
        clock: Clock,
        device: HapticDevice,
        config: Optional[BreathConfig] = None,
    ):
        self.clock = clock
        self.config = config or get_config()

        # State
        self._active = False
        self._phase = Phase.INHALE
        self._remaining = 0
        self._cycle_count = 0
        self._intensity = MAX_INTENSITY
        self._generation = 0

        self._countdown: Optional[TimerHandle] = None
        self._observers: List[Observer] = []

        self.pulses = PulseScheduler(
            self, clock, device, enabled=self.config.haptics.enabled
        )

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def intensity(self) -> int:
        return self._intensity

    @property
    def generation(self) -> int:
        """Incremented on every start(); tags pulses with their session run."""
        return self._generation

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            active=self._active,
            phase=self._phase,
            remaining=self._remaining,
            cycle_count=self._cycle_count,
            intensity=self._intensity,
            generation=self._generation,
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh session at Inhale, whatever happened before."""
        if self._active:
            logger.info("Restarting active session")
            self._disarm()

        self._generation += 1
        self._active = True
        self._phase = Phase.INHALE
        self._remaining = spec_for(Phase.INHALE).duration_s
        self._cycle_count = 0
        self._intensity = MAX_INTENSITY

        self._countdown = self.clock.arm_repeating(TICK_INTERVAL_S, self.tick)
        self._arm_pulses()

        logger.info(f"Breathing session started (generation {self._generation})")
        self._publish()

    def stop(self) -> None:
        """Go inactive. Phase, countdown, cycles and intensity are kept."""
        if not self._active:
            return

        self._active = False
        self._disarm()

        logger.info(
            f"Breathing session stopped after {self._cycle_count} cycles "
            f"({self._phase.value}, {self._remaining}s left)"
        )
        self._publish()

    def tick(self) -> None:
        """One second elapsed. No-op while inactive."""
        if not self._active:
            return

        self._remaining = max(0, self._remaining - 1)
        if self._remaining == 0:
            self.advance_phase()
        else:
            self._publish()

    def advance_phase(self) -> None:
        """Move to the next phase, closing a cycle on Pause -> Inhale."""
        if not self._active:
            return

        previous = self._phase
        self._phase = next_phase(previous)
        haptics = self.config.haptics

        if is_cycle_wrap(previous, self._phase):
            self._cycle_count += 1
            self._intensity = intensity_for_cycles(self._cycle_count)
            logger.info(f"Cycle {self._cycle_count} complete (intensity {self._intensity})")
            self.pulses.cue(
                HapticKind.CYCLE_COMPLETE, self._generation, haptics.cycle_complete_clicks
            )
        else:
            logger.debug(f"Phase {previous.value} -> {self._phase.value}")
            self.pulses.cue(
                HapticKind.PHASE_CHANGE, self._generation, haptics.phase_change_clicks
            )

        self._remaining = spec_for(self._phase).duration_s
        self._arm_pulses()
        self._publish()

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Receive the current snapshot now and a new one after every change.

        Returns:
            Zero-argument callable that removes the subscription
        """
        self._observers.append(observer)
        self._notify(observer, self.snapshot())

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            self._notify(observer, snapshot)

    def _notify(self, observer: Observer, snapshot: SessionSnapshot) -> None:
        try:
            observer(snapshot)
        except Exception:
            logger.exception("Session observer error")

    def _arm_pulses(self) -> None:
        spec = spec_for(self._phase)
        self.pulses.arm(spec.pulse_interval_s, self._generation, duration=spec.duration_s)

    def _disarm(self) -> None:
        self.clock.cancel(self._countdown)
        self._countdown = None
        self.pulses.disarm()

    def __repr__(self) -> str:
        state = "active" if self._active else "inactive"
        return (
            f"<BreathingSession {state} {self._phase.value} {self._remaining}s "
            f"cycles={self._cycle_count} intensity={self._intensity}>"
        )
