"""
Logging setup for Battery Manager.

Log records from the monitoring thread and the main thread share one rotating
file; the thread name is part of every file record so cycles can be told
apart from startup and shutdown messages.
"""

import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "battery_manager.log"

FILE_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def setup_logging(config, log_dir: str = "data/logs") -> logging.Logger:
    """
    Configure the BatteryManager logger hierarchy.

    Expired log files are removed first, according to ``log_retention_days``.
    File records use ``log_level``; the console only shows records at
    ``console_log_level`` and above.

    Args:
        config: ConfigManager instance
        log_dir: Directory for log files

    Returns:
        The "BatteryManager" logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    deleted = cleanup_old_logs(log_dir, config.get("log_retention_days", 30))

    log_level = getattr(logging, config.get("log_level", "INFO"), logging.INFO)
    console_level = getattr(logging, config.get("console_log_level", "WARNING"), logging.WARNING)

    logger = logging.getLogger("BatteryManager")
    logger.setLevel(log_level)

    # Reconfiguring replaces the previous handlers instead of duplicating output
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    log_file = log_path / LOG_FILE_NAME
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logger.info(
        f"Logging to {log_file} at {logging.getLevelName(log_level)} "
        f"(console {logging.getLevelName(console_level)}, {deleted} expired file(s) removed)"
    )

    return logger


def cleanup_old_logs(log_dir: str = "data/logs", retention_days: int = 30) -> int:
    """
    Delete log files older than retention period.

    Args:
        log_dir: Directory containing log files
        retention_days: Age threshold in days

    Returns:
        Number of files deleted
    """
    log_path = Path(log_dir)

    if not log_path.exists():
        return 0

    logger = logging.getLogger("BatteryManager.Logger")
    deleted_count = 0
    cutoff_time = time.time() - (retention_days * 24 * 3600)

    for log_file in log_path.glob("*.log*"):
        if log_file.stat().st_mtime < cutoff_time:
            try:
                log_file.unlink()
                deleted_count += 1
                logger.info(f"Deleted old log file: {log_file.name}")
            except OSError as e:
                logger.warning(f"Error deleting log file {log_file}: {e}")

    return deleted_count
