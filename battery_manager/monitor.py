"""
Battery monitoring loop.

Samples the battery source at a fixed interval, hands every valid reading to
the registered listeners and sends the charge reminder to the registered
notifiers while the device is charging.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

from battery_manager.notifier import NotificationType, Notifier
from battery_manager.readings import BatteryReading, InvalidReading
from battery_manager.source import BatterySource

DEFAULT_INTERVAL_SECONDS = 5.0
DEFAULT_CHARGE_LIMIT_PERCENT = 80

UNPLUG_MESSAGE = "Battery at {level}%. Please unplug your charger to prevent overcharging."
CHARGING_MESSAGE = "Battery at {level}%. Charging..."

ReadingListener = Callable[[BatteryReading], None]


def decide_notification(
    reading: BatteryReading, charge_limit_percent: int = DEFAULT_CHARGE_LIMIT_PERCENT
) -> Optional[Tuple[NotificationType, str]]:
    """
    Decide which notification a reading calls for.

    Args:
        reading: Current battery reading
        charge_limit_percent: Level at which the user is asked to unplug

    Returns:
        (type, message) to show, or None when the notification should be left untouched
    """
    if not reading.is_charging:
        return None

    if reading.level_percent >= charge_limit_percent:
        return NotificationType.UNPLUG, UNPLUG_MESSAGE.format(level=reading.level_percent)

    return NotificationType.CHARGING, CHARGING_MESSAGE.format(level=reading.level_percent)


def decide_message(
    reading: BatteryReading, charge_limit_percent: int = DEFAULT_CHARGE_LIMIT_PERCENT
) -> Optional[str]:
    """Message text for a reading, or None when nothing should be emitted."""
    decision = decide_notification(reading, charge_limit_percent)
    return decision[1] if decision else None


class BatteryMonitorLoop:
    """
    Periodically samples the battery and emits charge reminders.

    One loop serves any number of subscribers: listeners receive every valid
    reading (status display), notifiers receive the decided message.
    """

    def __init__(
        self,
        source: BatterySource,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        charge_limit_percent: int = DEFAULT_CHARGE_LIMIT_PERCENT,
        join_timeout: float = 2.0,
    ):
        """
        Initialize the monitoring loop.

        Args:
            source: BatterySource to sample
            interval_seconds: Pause between the end of one cycle and the start of the next
            charge_limit_percent: Level at which the user is asked to unplug
            join_timeout: Seconds stop() waits for the loop thread to exit
        """
        self.source = source
        self.interval_seconds = interval_seconds
        self.charge_limit_percent = charge_limit_percent
        self.join_timeout = join_timeout
        self.logger = logging.getLogger("BatteryManager.Monitor")

        self._listeners: List[ReadingListener] = []
        self._notifiers: List[Notifier] = []
        self._subscriber_lock = threading.Lock()

        # Threading control
        self.stop_event = threading.Event()
        self.monitor_thread: Optional[threading.Thread] = None
        self._lifecycle_lock = threading.Lock()

        # Suppresses repeated warnings while the source keeps failing
        self._invalid_streak = 0

    # Subscribers

    def add_listener(self, listener: ReadingListener):
        with self._subscriber_lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ReadingListener):
        with self._subscriber_lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def add_notifier(self, notifier: Notifier):
        with self._subscriber_lock:
            self._notifiers.append(notifier)

    def remove_notifier(self, notifier: Notifier):
        with self._subscriber_lock:
            if notifier in self._notifiers:
                self._notifiers.remove(notifier)

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self.monitor_thread is not None and self.monitor_thread.is_alive()

    def start(self):
        """Start monitoring in a background thread."""
        with self._lifecycle_lock:
            if self.is_running:
                self.logger.warning("Monitor already running")
                return

            self.logger.info("Starting battery monitor...")
            # Fresh event per run so a restart never shares state with a previous thread
            self.stop_event = threading.Event()
            self._invalid_streak = 0
            self.monitor_thread = threading.Thread(
                target=self._monitor_loop,
                args=(self.stop_event,),
                daemon=True,
                name="BatteryMonitorLoop",
            )
            self.monitor_thread.start()

    def stop(self) -> bool:
        """
        Stop monitoring and wait for the loop thread to exit.

        Returns:
            True if no loop thread is left running, False if the join timed out
        """
        with self._lifecycle_lock:
            if not self.is_running:
                self.logger.warning("Monitor not running")
                self.stop_event.set()
                self.monitor_thread = None
                return True

            self.logger.info("Stopping battery monitor...")
            self.stop_event.set()  # Wakes the loop out of its interval wait

            if threading.current_thread() is not self.monitor_thread:
                self.monitor_thread.join(timeout=self.join_timeout)

                if self.monitor_thread.is_alive():
                    self.logger.error(
                        "Monitor thread did not exit within %.1fs; it will stop after its current cycle",
                        self.join_timeout,
                    )
                    return False

            self.monitor_thread = None
            self.logger.info("Battery monitor stopped")
            return True

    def _monitor_loop(self, stop_event: threading.Event):
        """Main monitoring loop."""
        self.logger.info("Monitor loop started")

        while not stop_event.is_set():
            try:
                self.run_cycle()
            except Exception as e:
                self.logger.error(f"Error in monitor loop: {e}", exc_info=True)

            # Wait for next interval (wakes immediately if stop_event is set)
            stop_event.wait(timeout=self.interval_seconds)

        self.logger.info("Monitor loop exited")

    # Cycle

    def poll(self) -> Optional[BatteryReading]:
        """
        Sample the battery source once.

        Returns:
            BatteryReading, or None if the sample was invalid or unavailable
        """
        try:
            raw = self.source.read()
            reading = BatteryReading.from_raw(raw)
        except InvalidReading as e:
            self._log_invalid(f"Skipping invalid battery reading: {e}")
            return None
        except Exception as e:
            self._log_invalid(f"Error reading battery from {self.source.name}: {e}", exc_info=True)
            return None

        if self._invalid_streak:
            self.logger.info(f"Battery readings recovered after {self._invalid_streak} invalid cycle(s)")
            self._invalid_streak = 0

        return reading

    def _log_invalid(self, message: str, exc_info: bool = False):
        self._invalid_streak += 1
        level = logging.WARNING if self._invalid_streak == 1 else logging.DEBUG
        self.logger.log(level, message, exc_info=exc_info)

    def decide(self, reading: BatteryReading) -> Optional[str]:
        return decide_message(reading, self.charge_limit_percent)

    def run_cycle(self) -> Optional[str]:
        """
        Run one poll, decide and emit cycle.

        Returns:
            The emitted message, or None if nothing was emitted
        """
        reading = self.poll()
        if reading is None:
            return None

        self.logger.debug(
            f"Battery reading: level={reading.level_percent}%, charging={reading.is_charging}"
        )

        with self._subscriber_lock:
            listeners = list(self._listeners)
            notifiers = list(self._notifiers)

        for listener in listeners:
            try:
                listener(reading)
            except Exception as e:
                self.logger.error(f"Reading listener failed: {e}", exc_info=True)

        decision = decide_notification(reading, self.charge_limit_percent)
        if decision is None:
            return None

        notification_type, message = decision
        for notifier in notifiers:
            try:
                notifier.show(message, notification_type)
            except Exception as e:
                self.logger.error(f"Notifier failed: {e}", exc_info=True)

        return message
