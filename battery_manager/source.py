"""
Battery sources.

A battery source is a black box over the host platform that returns one raw
sample per call. Desktop platforms are read through psutil, Android (and any
other platform plyer supports) through plyer's battery facade.
"""

import logging
from abc import ABC, abstractmethod

import psutil

from battery_manager.readings import ChargingStatus, RawBatteryStatus

logger = logging.getLogger("BatteryManager.Source")

# psutil and plyer both report a percentage
PERCENT_SCALE = 100


class BatterySource(ABC):
    """Provides raw battery samples."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name (e.g., 'psutil')."""
        ...

    @abstractmethod
    def read(self) -> RawBatteryStatus:
        """
        Sample the battery once.

        Unavailable values are reported with the -1 sentinel rather than raised.
        """
        ...


class PsutilBatterySource(BatterySource):
    """Battery source backed by psutil.sensors_battery()."""

    @property
    def name(self) -> str:
        return "psutil"

    def read(self) -> RawBatteryStatus:
        if not hasattr(psutil, "sensors_battery"):
            return RawBatteryStatus.unavailable()

        battery = psutil.sensors_battery()

        if battery is None:
            # No battery installed
            return RawBatteryStatus.unavailable()

        level = int(round(battery.percent))

        if battery.power_plugged is None:
            status = ChargingStatus.UNKNOWN
        elif battery.power_plugged:
            status = ChargingStatus.FULL if level >= PERCENT_SCALE else ChargingStatus.CHARGING
        else:
            status = ChargingStatus.DISCHARGING

        return RawBatteryStatus(
            current_level=level,
            scale_max=PERCENT_SCALE,
            charging_status=status,
        )


class PlyerBatterySource(BatterySource):
    """Battery source backed by plyer.battery (works on Android)."""

    def __init__(self):
        self._battery = None
        self._initialize_battery_facade()

    @property
    def name(self) -> str:
        return "plyer"

    def _initialize_battery_facade(self):
        """Import the plyer battery facade lazily."""
        try:
            from plyer import battery
            self._battery = battery
            logger.debug("Initialized battery source using plyer")
        except (ImportError, NotImplementedError) as e:
            logger.error(f"Failed to initialize plyer battery facade: {e}")

    def read(self) -> RawBatteryStatus:
        if self._battery is None:
            return RawBatteryStatus.unavailable()

        try:
            status = self._battery.status
        except NotImplementedError:
            logger.warning("Battery status not implemented for this platform")
            return RawBatteryStatus.unavailable()

        percentage = status.get("percentage") if status else None
        if not isinstance(percentage, (int, float)) or isinstance(percentage, bool):
            return RawBatteryStatus.unavailable()

        level = int(round(percentage))
        is_charging = status.get("isCharging")

        if is_charging is None:
            charging_status = ChargingStatus.UNKNOWN
        elif is_charging:
            charging_status = ChargingStatus.FULL if level >= PERCENT_SCALE else ChargingStatus.CHARGING
        else:
            charging_status = ChargingStatus.DISCHARGING

        return RawBatteryStatus(
            current_level=level,
            scale_max=PERCENT_SCALE,
            charging_status=charging_status,
        )


def _running_on_android() -> bool:
    try:
        from plyer.utils import platform
    except ImportError:
        return False
    return platform == "android"


def detect_battery_source(preference: str = "auto") -> BatterySource:
    """
    Pick a battery source for the current platform.

    Args:
        preference: 'psutil', 'plyer' or 'auto' (plyer on Android, psutil elsewhere)

    Returns:
        BatterySource instance
    """
    if preference == "plyer" or (preference == "auto" and _running_on_android()):
        source = PlyerBatterySource()
    else:
        source = PsutilBatterySource()

    logger.info(f"Using {source.name} battery source")
    return source
