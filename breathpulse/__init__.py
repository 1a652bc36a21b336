"""
breathpulse
===========

Guided 4-8-7 breathing with haptic pulse cues that fade as cycles accumulate.

Components:
- phases: fixed phase table (duration, pulse interval, label)
- decay: intensity per completed cycle count
- clock: scheduling facility (asyncio or virtual time)
- haptics: haptic device interface and mocks
- pulse: burst scheduler driven by the active phase
- session: the breathing state machine
- console: text rendering of session snapshots

Usage:
    from breathpulse import BreathingSession, AsyncioClock, LoggingHapticDevice

    session = BreathingSession(AsyncioClock(), LoggingHapticDevice())
    session.subscribe(print)
    session.start()

This is a relaxation aid, not medical treatment.
"""

from .phases import (
    Phase,
    PhaseSpec,
    PHASE_TABLE,
    PHASE_ORDER,
    CYCLE_DURATION_S,
    next_phase,
)

from .decay import (
    MAX_INTENSITY,
    MIN_INTENSITY,
    DECAY_RATE,
    intensity_for_cycles,
)

from .clock import (
    Clock,
    TimerHandle,
    AsyncioClock,
    ManualClock,
)

from .haptics import (
    HapticKind,
    HapticEvent,
    HapticDevice,
    MockHapticDevice,
    LoggingHapticDevice,
)

from .config import (
    BreathConfig,
    HapticsConfig,
    DisplayConfig,
    ConfigError,
    get_config,
    set_config,
)

from .pulse import PulseScheduler, BURST_SPACING_S

from .session import BreathingSession, SessionSnapshot

from .console import ConsolePresenter

__version__ = "0.1.0"

__all__ = [
    # Phases
    'Phase',
    'PhaseSpec',
    'PHASE_TABLE',
    'PHASE_ORDER',
    'CYCLE_DURATION_S',
    'next_phase',

    # Decay
    'MAX_INTENSITY',
    'MIN_INTENSITY',
    'DECAY_RATE',
    'intensity_for_cycles',

    # Clock
    'Clock',
    'TimerHandle',
    'AsyncioClock',
    'ManualClock',

    # Haptics
    'HapticKind',
    'HapticEvent',
    'HapticDevice',
    'MockHapticDevice',
    'LoggingHapticDevice',

    # Config
    'BreathConfig',
    'HapticsConfig',
    'DisplayConfig',
    'ConfigError',
    'get_config',
    'set_config',

    # Core
    'PulseScheduler',
    'BURST_SPACING_S',
    'BreathingSession',
    'SessionSnapshot',

    # Presentation
    'ConsolePresenter',
]
