"""
Haptic Device Interface
=======================

The physical actuator is an external, fire-and-forget sink. The core only
ever calls ``play(kind)``; there is no acknowledgement channel and callers
must not depend on delivery order.

Three kinds of event exist:
- RHYTHM_CLICK: the regular pulses inside a burst (scaled by intensity)
- PHASE_CHANGE: one cue on every non-wrap phase advance
- CYCLE_COMPLETE: one cue on every Pause -> Inhale wrap

Implement HapticDevice for real hardware. MockHapticDevice records events for
tests; LoggingHapticDevice stands in when no hardware is attached.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class HapticKind(Enum):
    """Discrete haptic signals the device understands."""
    RHYTHM_CLICK = "rhythm_click"
    PHASE_CHANGE = "phase_change"
    CYCLE_COMPLETE = "cycle_complete"


class HapticEvent(BaseModel):
    """Record of one event delivered to a device."""

    kind: HapticKind
    timestamp: float                  # clock time the event was played
    wall_time: datetime = Field(default_factory=datetime.now)


class HapticDevice:
    """
    Interface for haptic output.

    Implement for real hardware.
    """

    def play(self, kind: HapticKind) -> None:
        """Play one discrete haptic event."""
        raise NotImplementedError


class MockHapticDevice(HapticDevice):
    """Mock device for testing. Keeps every event in memory."""

    def __init__(self, time_source: Optional[Callable[[], float]] = None):
        self.time_source = time_source or time.monotonic
        self.events: List[HapticEvent] = []

    def play(self, kind: HapticKind) -> None:
        self.events.append(HapticEvent(kind=kind, timestamp=self.time_source()))
        logger.debug(f"Haptic: {kind.value}")

    def count(self, kind: Optional[HapticKind] = None) -> int:
        """Number of events recorded, optionally of one kind."""
        if kind is None:
            return len(self.events)
        return sum(1 for event in self.events if event.kind is kind)

    def timestamps(self, kind: HapticKind) -> List[float]:
        return [event.timestamp for event in self.events if event.kind is kind]

    def clear(self) -> None:
        self.events.clear()


class LoggingHapticDevice(HapticDevice):
    """Device that only logs. Used when no actuator is attached."""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self.played = 0

    def play(self, kind: HapticKind) -> None:
        self.played += 1
        logger.log(self.level, f"Haptic #{self.played}: {kind.value}")
