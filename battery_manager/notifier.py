"""
Notification targets for battery monitoring messages.

Every notifier owns a single ongoing notification identified by a fixed id.
show() replaces its content instead of stacking a new one. Desktop toasts
posted through plyer cannot be replaced by id, so PlyerNotifier only raises a
new popup when the notification type changes (e.g. charging to unplug) and
folds same-type updates into current_message.
"""

import logging
import platform
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

logger = logging.getLogger("BatteryManager.Notifier")

DEFAULT_NOTIFICATION_ID = 1
APP_NAME = "Battery Manager"


class NotificationType(Enum):
    """Kinds of content the ongoing notification can hold."""
    STATUS = "status"
    CHARGING = "charging"
    UNPLUG = "unplug"


class Notifier(ABC):
    """Receives display requests from the monitoring loop."""

    def __init__(self, notification_id: int = DEFAULT_NOTIFICATION_ID):
        self.notification_id = notification_id
        self.current_message: Optional[str] = None
        self.current_type: Optional[NotificationType] = None

    def show(
        self, message: str, notification_type: NotificationType = NotificationType.STATUS
    ) -> bool:
        """
        Post or update the ongoing notification.

        Args:
            message: Notification text
            notification_type: Kind of content the message carries

        Returns:
            True if the notification holds the message, False otherwise
        """
        if message == self.current_message:
            logger.debug(f"Notification {self.notification_id} already shows: {message}")
            return True

        if self._should_post(notification_type):
            if not self._post(message):
                return False
        else:
            logger.debug(f"Notification {self.notification_id} updated in place: {message}")

        self.current_message = message
        self.current_type = notification_type
        return True

    def _should_post(self, notification_type: NotificationType) -> bool:
        """Whether an update must reach the platform."""
        return True

    @abstractmethod
    def _post(self, message: str) -> bool:
        """Deliver the message to the platform. Must not raise."""
        ...


class LoggingNotifier(Notifier):
    """Notifier that writes messages to the application log."""

    def _post(self, message: str) -> bool:
        logger.info(f"[notification {self.notification_id}] {message}")
        return True


class PlyerNotifier(Notifier):
    """Handles cross-platform notifications through plyer."""

    def __init__(self, notification_id: int = DEFAULT_NOTIFICATION_ID, timeout: int = 10):
        """
        Initialize the plyer notifier.

        Args:
            notification_id: Id of the ongoing notification
            timeout: Seconds the desktop toast stays visible
        """
        super().__init__(notification_id)
        self.timeout = timeout
        self._notification_module = None
        self._initialize_notification_system()

        logger.info("PlyerNotifier initialized")

    @property
    def available(self) -> bool:
        return self._notification_module is not None

    def _initialize_notification_system(self):
        """Initialize the notification system with fallback for frozen builds."""
        try:
            from plyer import notification
            self._notification_module = notification
            logger.debug("Initialized notification system using plyer")
        except (ImportError, NotImplementedError) as e:
            logger.warning(f"Failed to import plyer normally: {e}")

            # Frozen builds can miss plyer's dynamic platform lookup
            try:
                system = platform.system().lower()
                if system == 'windows':
                    from plyer.platforms.win import notification
                elif system == 'darwin':
                    from plyer.platforms.macosx import notification
                elif system == 'linux':
                    from plyer.platforms.linux import notification
                else:
                    logger.error(f"Unsupported platform: {system}")
                    return

                self._notification_module = notification
                logger.debug(f"Initialized notification system using direct platform import for {system}")
            except (ImportError, NotImplementedError) as e:
                logger.error(f"Failed to initialize notification system: {e}")

    def _should_post(self, notification_type: NotificationType) -> bool:
        # Toasts stack, so only a change of type raises a new one
        return notification_type != self.current_type

    def _post(self, message: str) -> bool:
        if not self._notification_module:
            logger.warning("Notification system not initialized, cannot send notification")
            return False

        try:
            self._notification_module.notify(
                title=APP_NAME,
                message=message,
                app_name=APP_NAME,
                timeout=self.timeout,
            )

            logger.info(f"Updated notification {self.notification_id}: {message}")
            return True

        except NotImplementedError:
            logger.error(
                "Notifications not implemented for this platform. "
                "Please install required system dependencies."
            )
            return False
        except Exception as e:
            logger.error(f"Failed to send notification: {e}", exc_info=True)
            return False
