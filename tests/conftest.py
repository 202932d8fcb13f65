"""
Shared fakes for battery monitoring tests.
"""

import threading

import pytest

from battery_manager.notifier import Notifier
from battery_manager.readings import ChargingStatus, RawBatteryStatus
from battery_manager.source import BatterySource


class FakeBatterySource(BatterySource):
    """Returns a configurable raw sample and counts reads."""

    def __init__(self, level=50, scale=100, status=ChargingStatus.DISCHARGING):
        self.sample = RawBatteryStatus(level, scale, status)
        self.reads = 0
        self.error = None

    @property
    def name(self) -> str:
        return "fake"

    def set(self, level, scale=100, status=ChargingStatus.CHARGING):
        self.sample = RawBatteryStatus(level, scale, status)

    def read(self) -> RawBatteryStatus:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.sample


class RecordingNotifier(Notifier):
    """Records every message delivered to the platform."""

    def __init__(self, notification_id=1):
        super().__init__(notification_id)
        self.posted = []
        self.posted_event = threading.Event()

    def _post(self, message: str) -> bool:
        self.posted.append(message)
        self.posted_event.set()
        return True


@pytest.fixture
def source():
    return FakeBatterySource()


@pytest.fixture
def notifier():
    return RecordingNotifier()
