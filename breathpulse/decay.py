"""Intensity decay across completed breath cycles."""

from __future__ import annotations

MAX_INTENSITY = 5
MIN_INTENSITY = 1
DECAY_RATE = 0.1  # intensity steps lost per completed cycle

# floor(cycles * DECAY_RATE) == cycles // _CYCLES_PER_STEP for integer cycles
_CYCLES_PER_STEP = round(1 / DECAY_RATE)


def intensity_for_cycles(cycle_count: int) -> int:
    """
    Pulses per burst after ``cycle_count`` completed cycles.

    max(1, 5 - floor(cycle_count * 0.1)): stays at 5 for the first ten
    cycles, drops by one every ten cycles after that, and bottoms out at 1
    from cycle 40 on.
    """
    if cycle_count < 0:
        raise ValueError(f"cycle_count must be non-negative, got {cycle_count}")
    return max(MIN_INTENSITY, MAX_INTENSITY - cycle_count // _CYCLES_PER_STEP)
