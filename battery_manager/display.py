"""
Text status display fed by the monitoring loop.
"""

import sys
import threading
from typing import List, Optional, TextIO

from battery_manager.monitor import DEFAULT_CHARGE_LIMIT_PERCENT
from battery_manager.readings import BatteryReading


def format_status(
    reading: BatteryReading, charge_limit_percent: int = DEFAULT_CHARGE_LIMIT_PERCENT
) -> List[str]:
    """
    Render a reading as status lines.

    Args:
        reading: Current battery reading
        charge_limit_percent: Level at which the user is asked to unplug

    Returns:
        List of lines: level, charging state and the charge limit hint
    """
    if reading.level_percent >= charge_limit_percent:
        hint = f"Battery at {charge_limit_percent}% - Please unplug your charger"
    else:
        hint = f"Will notify when battery reaches {charge_limit_percent}%"

    return [
        f"Battery Level: {reading.level_percent}%",
        "Charging" if reading.is_charging else "Not Charging",
        hint,
    ]


class StatusDisplay:
    """Writes the current battery status to a text stream whenever it changes."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        charge_limit_percent: int = DEFAULT_CHARGE_LIMIT_PERCENT,
    ):
        self.stream = stream if stream is not None else sys.stdout
        self.charge_limit_percent = charge_limit_percent
        self.last_reading: Optional[BatteryReading] = None
        self._lock = threading.Lock()

    def __call__(self, reading: BatteryReading):
        self.update(reading)

    def update(self, reading: BatteryReading) -> bool:
        """
        Show a reading.

        Returns:
            True if the status was written, False if it was unchanged
        """
        with self._lock:
            if reading == self.last_reading:
                return False

            self.last_reading = reading
            lines = format_status(reading, self.charge_limit_percent)
            self.stream.write(" | ".join(lines) + "\n")
            self.stream.flush()
            return True
