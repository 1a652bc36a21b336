"""
Tests for intensity decay across cycles.
"""

import math

import pytest

from breathpulse.decay import MAX_INTENSITY, MIN_INTENSITY, intensity_for_cycles


class TestIntensityDecay:
    """intensity = max(1, 5 - floor(cycles * 0.1))"""

    @pytest.mark.parametrize("cycles,expected", [
        (0, 5),
        (1, 5),
        (9, 5),
        (10, 4),
        (19, 4),
        (20, 3),
        (30, 2),
        (39, 2),
        (40, 1),
        (41, 1),
        (1000, 1),
    ])
    def test_known_points(self, cycles, expected):
        assert intensity_for_cycles(cycles) == expected

    def test_matches_formula(self):
        """Agrees with the floor formula over a long run."""
        for cycles in range(500):
            expected = max(1, 5 - math.floor(cycles * 0.1))
            assert intensity_for_cycles(cycles) == expected, cycles

    def test_bounds(self):
        """Never above 5, never below 1."""
        values = {intensity_for_cycles(c) for c in range(0, 10_000, 7)}
        assert max(values) == MAX_INTENSITY
        assert min(values) == MIN_INTENSITY

    def test_non_increasing(self):
        previous = MAX_INTENSITY
        for cycles in range(100):
            current = intensity_for_cycles(cycles)
            assert current <= previous
            previous = current

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            intensity_for_cycles(-1)
