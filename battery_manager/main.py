"""
Entry point for Battery Manager.

Wires the battery source, the monitoring loop, the status display and the
notifier together and keeps the process alive until it is told to stop.
"""

import signal
import sys
import threading
from typing import Optional

from battery_manager.config import ConfigManager
from battery_manager.display import StatusDisplay
from battery_manager.logger import setup_logging
from battery_manager.monitor import BatteryMonitorLoop
from battery_manager.notifier import LoggingNotifier, NotificationType, Notifier, PlyerNotifier
from battery_manager.source import BatterySource, detect_battery_source

STARTUP_MESSAGE = "Battery Monitor Active"


class BatteryManagerApp:
    """Main application class."""

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        source: Optional[BatterySource] = None,
        notifier: Optional[Notifier] = None,
        display: Optional[StatusDisplay] = None,
        log_dir: str = "data/logs",
    ):
        """
        Initialize the Battery Manager application.

        Args:
            config: ConfigManager instance (loaded from config.json if omitted)
            source: BatterySource override (detected from config if omitted)
            notifier: Notifier override (built from config if omitted)
            display: StatusDisplay override (stdout if omitted)
            log_dir: Directory for log files
        """
        self.config = config or ConfigManager("config.json")
        self.log_dir = log_dir
        self.logger = setup_logging(self.config, log_dir)

        charge_limit = self.config.get("charge_limit_percent", 80)

        self.source = source or detect_battery_source(self.config.get("battery_source", "auto"))
        self.notifier = notifier or self._create_notifier()
        self.display = display or StatusDisplay(charge_limit_percent=charge_limit)

        # One loop feeds both the status display and the notification
        self.monitor = BatteryMonitorLoop(
            self.source,
            interval_seconds=self.config.get("monitoring_interval_seconds", 5),
            charge_limit_percent=charge_limit,
        )
        self.monitor.add_listener(self.display)
        self.monitor.add_notifier(self.notifier)

        # Threading control
        self.shutdown_event = threading.Event()
        self.shutdown_initiated = False  # Prevent double-shutdown

        self.logger.info("Battery Manager initialized")

    def _create_notifier(self) -> Notifier:
        """Build the notifier described by the configuration."""
        notification_id = self.config.get("notification_id", 1)

        if not self.config.get("enable_notifications", True):
            self.logger.info("Notifications disabled, logging messages instead")
            return LoggingNotifier(notification_id)

        notifier = PlyerNotifier(notification_id)
        if not notifier.available:
            self.logger.warning("No notification backend available, logging messages instead")
            return LoggingNotifier(notification_id)

        return notifier

    def install_signal_handlers(self):
        """Stop monitoring on SIGINT/SIGTERM."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully."""
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.shutdown_event.set()

    def start_monitoring(self):
        """Post the ongoing notification and start the loop if not already running."""
        if self.monitor.is_running:
            self.logger.info("Monitoring already running")
            return

        self.logger.info("Starting monitoring...")
        self.notifier.show(STARTUP_MESSAGE, NotificationType.STATUS)
        self.monitor.start()

    def stop_monitoring(self):
        """Stop the loop."""
        if not self.monitor.is_running:
            self.logger.info("Monitoring not running")
            return

        self.logger.info("Stopping monitoring...")
        if not self.monitor.stop():
            self.logger.error("Monitoring loop is still finishing its last cycle")

    def shutdown(self):
        """Perform graceful shutdown of the application."""
        if self.shutdown_initiated:
            self.logger.debug("Shutdown already in progress, skipping")
            return

        self.shutdown_initiated = True
        self.logger.info("Initiating shutdown...")

        self.shutdown_event.set()
        self.stop_monitoring()

        self.logger.info("Shutdown complete")

    def run(self):
        """Run until a shutdown signal arrives."""
        try:
            if self.config.get("auto_start_monitoring", True):
                self.logger.info("Auto-starting monitoring")
                self.start_monitoring()

            # Short waits keep Ctrl+C responsive on every platform
            while not self.shutdown_event.wait(timeout=0.5):
                pass

        finally:
            self.shutdown()


def main():
    """Entry point for the application."""
    try:
        app = BatteryManagerApp()
        app.install_signal_handlers()
        app.run()

    except KeyboardInterrupt:
        print("\nShutdown requested by user")

    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
