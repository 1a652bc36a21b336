"""
Tests for haptic device implementations.
"""

import logging

import pytest

from breathpulse.haptics import (
    HapticDevice,
    HapticEvent,
    HapticKind,
    LoggingHapticDevice,
    MockHapticDevice,
)


class TestMockHapticDevice:

    def test_records_events(self, clock):
        device = MockHapticDevice(time_source=clock.now)
        device.play(HapticKind.RHYTHM_CLICK)
        clock.advance(1.5)
        device.play(HapticKind.CYCLE_COMPLETE)

        assert device.count() == 2
        assert device.count(HapticKind.RHYTHM_CLICK) == 1
        assert device.timestamps(HapticKind.CYCLE_COMPLETE) == [1.5]
        assert isinstance(device.events[0], HapticEvent)

    def test_clear(self):
        device = MockHapticDevice()
        device.play(HapticKind.PHASE_CHANGE)
        device.clear()
        assert device.count() == 0

    def test_event_serialises(self):
        event = HapticEvent(kind=HapticKind.PHASE_CHANGE, timestamp=2.0)
        data = event.model_dump(mode="json")
        assert data["kind"] == "phase_change"
        assert data["timestamp"] == 2.0


class TestLoggingHapticDevice:

    def test_logs_each_event(self, caplog):
        device = LoggingHapticDevice()
        with caplog.at_level(logging.INFO, logger="breathpulse.haptics"):
            device.play(HapticKind.RHYTHM_CLICK)
            device.play(HapticKind.CYCLE_COMPLETE)

        assert device.played == 2
        assert "rhythm_click" in caplog.text
        assert "cycle_complete" in caplog.text


def test_base_device_is_abstract():
    with pytest.raises(NotImplementedError):
        HapticDevice().play(HapticKind.RHYTHM_CLICK)
