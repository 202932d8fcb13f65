"""
Battery reading types.

Raw samples come from a battery source in the platform's own units
(level on a 0..scale range plus a status code). Every poll converts the
raw sample into an immutable BatteryReading.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


# Sentinel for values the platform could not report
UNAVAILABLE = -1


class InvalidReading(ValueError):
    """Raised when a raw battery sample cannot be turned into a percentage."""


class ChargingStatus(Enum):
    """Battery status codes as reported by Android's BatteryManager."""
    UNKNOWN = 1
    CHARGING = 2
    DISCHARGING = 3
    NOT_CHARGING = 4
    FULL = 5

    @classmethod
    def from_code(cls, code) -> "ChargingStatus":
        """Map a raw status code to a member, UNKNOWN for anything unrecognised."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_charging(self) -> bool:
        # A full battery is still connected to the charger
        return self in (ChargingStatus.CHARGING, ChargingStatus.FULL)


@dataclass(frozen=True)
class RawBatteryStatus:
    """One sample as the battery source reports it."""
    current_level: int = UNAVAILABLE
    scale_max: int = UNAVAILABLE
    charging_status: ChargingStatus = ChargingStatus.UNKNOWN

    @classmethod
    def unavailable(cls) -> "RawBatteryStatus":
        return cls()


@dataclass(frozen=True)
class BatteryReading:
    """A validated battery reading, produced once per poll."""
    level_percent: int
    is_charging: bool

    @classmethod
    def from_raw(cls, raw: RawBatteryStatus) -> "BatteryReading":
        """
        Build a reading from a raw sample.

        Args:
            raw: Sample returned by a BatterySource

        Returns:
            BatteryReading with the level recomputed as a percentage

        Raises:
            InvalidReading: If the level or scale is unavailable or the scale is not positive
        """
        level = raw.current_level
        scale = raw.scale_max

        if level is None or scale is None:
            raise InvalidReading(f"Battery level unavailable (level={level}, scale={scale})")
        if scale <= 0:
            raise InvalidReading(f"Invalid battery scale: {scale}")
        if level < 0:
            raise InvalidReading(f"Invalid battery level: {level}")

        # Halves round up: 80.5% reads as 81%
        percent = int(
            (Decimal(level) * 100 / Decimal(scale)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        )
        percent = max(0, min(100, percent))

        return cls(level_percent=percent, is_charging=raw.charging_status.is_charging)
