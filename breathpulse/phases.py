"""
Breath Phases
=============

The fixed 4-8-7 breathing pattern with a short rest:

    Inhale (4s) -> Hold (8s) -> Exhale (7s) -> Pause (2s) -> Inhale ...

Each phase carries a duration, the interval between rhythm pulses while the
phase is active, and its display label/colour. None of this changes at
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Phase(Enum):
    """Phase of the breath cycle."""
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"
    PAUSE = "pause"


@dataclass(frozen=True)
class PhaseSpec:
    """Constants for one phase."""
    duration_s: int
    pulse_interval_s: float
    label: str
    label_ja: str
    color: str

    def label_for(self, locale: str = "en") -> str:
        """Display label for a locale ("en" or "ja")."""
        if locale == "ja":
            return self.label_ja
        return self.label


PHASE_TABLE: Dict[Phase, PhaseSpec] = {
    Phase.INHALE: PhaseSpec(4, 0.8, "Inhale", "吸う", "green"),    # slow rhythm
    Phase.HOLD: PhaseSpec(8, 2.0, "Hold", "止める", "orange"),      # long gaps
    Phase.EXHALE: PhaseSpec(7, 0.6, "Exhale", "吐く", "blue"),      # a little quicker
    Phase.PAUSE: PhaseSpec(2, 1.0, "Pause", "休憩", "gray"),
}

PHASE_ORDER = (Phase.INHALE, Phase.HOLD, Phase.EXHALE, Phase.PAUSE)

CYCLE_DURATION_S = sum(spec.duration_s for spec in PHASE_TABLE.values())


def spec_for(phase: Phase) -> PhaseSpec:
    return PHASE_TABLE[phase]


def next_phase(phase: Phase) -> Phase:
    """Cyclic successor; Pause wraps to Inhale."""
    index = PHASE_ORDER.index(phase)
    return PHASE_ORDER[(index + 1) % len(PHASE_ORDER)]


def is_cycle_wrap(current: Phase, following: Phase) -> bool:
    """True for the Pause -> Inhale transition that closes a cycle."""
    return current is Phase.PAUSE and following is Phase.INHALE
