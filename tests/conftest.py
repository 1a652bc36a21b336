"""
breathpulse Test Configuration
==============================

Shared fixtures. Timing is driven by ManualClock so every test is
deterministic and runs in virtual time.
"""

import pytest

from breathpulse.clock import ManualClock
from breathpulse.config import BreathConfig
from breathpulse.haptics import MockHapticDevice
from breathpulse.session import BreathingSession


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "realtime: tests that sleep on a real event loop")


@pytest.fixture
def clock():
    """Virtual clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def device(clock):
    """Recording haptic device stamped with virtual time."""
    return MockHapticDevice(time_source=clock.now)


@pytest.fixture
def config():
    """Default configuration (independent of the environment)."""
    return BreathConfig()


@pytest.fixture
def session(clock, device, config):
    """Inactive breathing session on the virtual clock."""
    return BreathingSession(clock, device, config)


class FakeSession:
    """Minimal stand-in for the state the pulse scheduler reads."""

    def __init__(self, intensity: int = 5, generation: int = 1, active: bool = True):
        self.intensity = intensity
        self.generation = generation
        self.active = active


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_fake_session():
    """Factory for extra fake sessions."""
    return FakeSession
