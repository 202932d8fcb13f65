"""
Configuration management for Battery Manager.

Handles loading, validating, and saving application configuration.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict


class ConfigManager:
    """Thread-safe configuration manager."""

    DEFAULT_CONFIG = {
        "monitoring_interval_seconds": 5,
        "charge_limit_percent": 80,
        "notification_id": 1,
        "enable_notifications": True,
        "auto_start_monitoring": True,
        "battery_source": "auto",
        "log_level": "INFO",
        "console_log_level": "WARNING",
        "log_retention_days": 30
    }

    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    VALID_BATTERY_SOURCES = ["auto", "psutil", "plyer"]

    def __init__(self, config_path: str = "config.json"):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path)
        self.lock = threading.Lock()
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """
        Load configuration from file, applying defaults if missing.

        Returns:
            Configuration dictionary
        """
        config = self.DEFAULT_CONFIG.copy()

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_config = json.load(f)

                if isinstance(user_config, dict):
                    config.update(user_config)
                    print(f"Configuration loaded from {self.config_path}")
                else:
                    print(f"Config file {self.config_path} does not contain a JSON object")
                    print("Using default configuration")

            except json.JSONDecodeError as e:
                print(f"Error parsing config file: {e}")
                print("Using default configuration")
            except OSError as e:
                print(f"Error loading config: {e}")
                print("Using default configuration")
        else:
            print(f"Config file not found at {self.config_path}")
            print("Using default configuration")

        return self._validate_config(config)

    @staticmethod
    def _is_number(value) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def _validate_config(self, config: Dict) -> Dict:
        """
        Validate and sanitize configuration values.

        Args:
            config: Configuration dictionary to validate

        Returns:
            Validated configuration dictionary
        """
        defaults = self.DEFAULT_CONFIG

        # Validate monitoring interval
        if not self._is_number(config.get("monitoring_interval_seconds")):
            config["monitoring_interval_seconds"] = defaults["monitoring_interval_seconds"]
        else:
            config["monitoring_interval_seconds"] = max(1, min(300, config["monitoring_interval_seconds"]))

        # Validate charge limit
        if not self._is_number(config.get("charge_limit_percent")):
            config["charge_limit_percent"] = defaults["charge_limit_percent"]
        else:
            config["charge_limit_percent"] = int(max(50, min(100, config["charge_limit_percent"])))

        # Validate notification id
        notification_id = config.get("notification_id")
        if not isinstance(notification_id, int) or isinstance(notification_id, bool) or notification_id < 1:
            config["notification_id"] = defaults["notification_id"]

        # Validate log retention
        if not self._is_number(config.get("log_retention_days")):
            config["log_retention_days"] = defaults["log_retention_days"]
        else:
            config["log_retention_days"] = int(max(1, min(365, config["log_retention_days"])))

        # Validate choices
        if config.get("log_level") not in self.VALID_LOG_LEVELS:
            config["log_level"] = defaults["log_level"]

        if config.get("console_log_level") not in self.VALID_LOG_LEVELS:
            config["console_log_level"] = defaults["console_log_level"]

        if config.get("battery_source") not in self.VALID_BATTERY_SOURCES:
            config["battery_source"] = defaults["battery_source"]

        # Validate boolean settings
        if not isinstance(config.get("enable_notifications"), bool):
            config["enable_notifications"] = True

        if not isinstance(config.get("auto_start_monitoring"), bool):
            config["auto_start_monitoring"] = True

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        with self.lock:
            return self.config.get(key, default)

    def get_all(self) -> Dict:
        """Get a copy of all configuration values."""
        with self.lock:
            return self.config.copy()

    def update(self, updates: Dict) -> bool:
        """
        Update multiple configuration values.

        Args:
            updates: Dictionary of key-value pairs to update

        Returns:
            True if successful, False otherwise
        """
        with self.lock:
            new_config = self.config.copy()
            new_config.update(updates)
            self.config = self._validate_config(new_config)

            print(f"Configuration updated: {list(updates.keys())}")
            return True

    def set(self, key: str, value: Any) -> bool:
        """Set a single configuration value."""
        return self.update({key: value})

    def save(self) -> bool:
        """
        Save configuration to file.

        Returns:
            True if successful, False otherwise
        """
        with self.lock:
            try:
                self.config_path.parent.mkdir(parents=True, exist_ok=True)

                with open(self.config_path, 'w') as f:
                    json.dump(self.config, f, indent=2)

                print(f"Configuration saved to {self.config_path}")
                return True

            except OSError as e:
                print(f"Error saving configuration: {e}")
                return False

    def reset_to_defaults(self) -> bool:
        """Reset configuration to default values."""
        with self.lock:
            self.config = self.DEFAULT_CONFIG.copy()
            print("Configuration reset to defaults")
            return True

    def reload(self) -> bool:
        """Reload configuration from file."""
        with self.lock:
            self.config = self._load_config()
            print("Configuration reloaded")
            return True
