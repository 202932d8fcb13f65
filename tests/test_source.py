from collections import namedtuple

import psutil
import pytest

from battery_manager import source as source_module
from battery_manager.readings import ChargingStatus, RawBatteryStatus
from battery_manager.source import (
    PlyerBatterySource,
    PsutilBatterySource,
    detect_battery_source,
)

sbattery = namedtuple("sbattery", ["percent", "secsleft", "power_plugged"])


class FakeBatteryFacade:
    def __init__(self, status):
        self._status = status

    @property
    def status(self):
        if isinstance(self._status, Exception):
            raise self._status
        return self._status


def make_plyer_source(status):
    source = PlyerBatterySource.__new__(PlyerBatterySource)
    source._battery = FakeBatteryFacade(status)
    return source


@pytest.mark.parametrize(
    "battery, expected",
    [
        (sbattery(81.6, 3600, True), RawBatteryStatus(82, 100, ChargingStatus.CHARGING)),
        (sbattery(100.0, -2, True), RawBatteryStatus(100, 100, ChargingStatus.FULL)),
        (sbattery(40.0, 1200, False), RawBatteryStatus(40, 100, ChargingStatus.DISCHARGING)),
        (sbattery(40.0, -2, None), RawBatteryStatus(40, 100, ChargingStatus.UNKNOWN)),
    ],
)
def test_psutil_source_maps_sensors_battery(monkeypatch, battery, expected):
    monkeypatch.setattr(psutil, "sensors_battery", lambda: battery, raising=False)
    assert PsutilBatterySource().read() == expected


def test_psutil_source_without_battery_reports_sentinel(monkeypatch):
    monkeypatch.setattr(psutil, "sensors_battery", lambda: None, raising=False)
    assert PsutilBatterySource().read() == RawBatteryStatus(-1, -1, ChargingStatus.UNKNOWN)


@pytest.mark.parametrize(
    "status, expected",
    [
        ({"isCharging": True, "percentage": 79.0}, RawBatteryStatus(79, 100, ChargingStatus.CHARGING)),
        ({"isCharging": True, "percentage": 100}, RawBatteryStatus(100, 100, ChargingStatus.FULL)),
        ({"isCharging": False, "percentage": 55.0}, RawBatteryStatus(55, 100, ChargingStatus.DISCHARGING)),
        ({"isCharging": None, "percentage": 55.0}, RawBatteryStatus(55, 100, ChargingStatus.UNKNOWN)),
    ],
)
def test_plyer_source_maps_status(status, expected):
    assert make_plyer_source(status).read() == expected


@pytest.mark.parametrize(
    "status",
    [{}, {"isCharging": None, "percentage": None}, None, NotImplementedError()],
)
def test_plyer_source_unavailable_values_report_sentinel(status):
    assert make_plyer_source(status).read() == RawBatteryStatus.unavailable()


def test_detect_prefers_configured_source():
    assert isinstance(detect_battery_source("psutil"), PsutilBatterySource)


def test_detect_uses_plyer_on_android(monkeypatch):
    monkeypatch.setattr(source_module, "_running_on_android", lambda: True)
    monkeypatch.setattr(PlyerBatterySource, "_initialize_battery_facade", lambda self: None)
    assert isinstance(detect_battery_source("auto"), PlyerBatterySource)


def test_detect_uses_psutil_elsewhere(monkeypatch):
    monkeypatch.setattr(source_module, "_running_on_android", lambda: False)
    assert isinstance(detect_battery_source("auto"), PsutilBatterySource)
