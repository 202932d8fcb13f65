import logging
import os
import threading
import time

import pytest

from battery_manager.config import ConfigManager
from battery_manager.logger import LOG_FILE_NAME, cleanup_old_logs, setup_logging


@pytest.fixture
def config(tmp_path):
    return ConfigManager(tmp_path / "config.json")


@pytest.fixture(autouse=True)
def close_handlers():
    yield
    logger = logging.getLogger("BatteryManager")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def age(path, days):
    stale = time.time() - days * 24 * 3600
    os.utime(path, (stale, stale))


def test_records_carry_thread_name(tmp_path, config):
    setup_logging(config, str(tmp_path))

    worker = threading.Thread(
        target=lambda: logging.getLogger("BatteryManager.Monitor").info("cycle done"),
        name="BatteryMonitorLoop",
    )
    worker.start()
    worker.join()

    text = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "BatteryMonitorLoop - BatteryManager.Monitor - INFO - cycle done" in text
    assert "MainThread - BatteryManager - INFO - Logging to" in text


def test_console_level_comes_from_config(tmp_path, config):
    config.set("console_log_level", "ERROR")
    config.set("log_level", "DEBUG")
    logger = setup_logging(config, str(tmp_path))

    levels = {type(h).__name__: h.level for h in logger.handlers}
    assert levels["StreamHandler"] == logging.ERROR
    assert levels["RotatingFileHandler"] == logging.DEBUG
    assert logger.level == logging.DEBUG


def test_reconfiguring_does_not_duplicate_handlers(tmp_path, config):
    setup_logging(config, str(tmp_path))
    logger = setup_logging(config, str(tmp_path))
    assert len(logger.handlers) == 2


def test_setup_removes_expired_logs(tmp_path, config):
    config.set("log_retention_days", 7)
    old = tmp_path / "battery_manager.log.3"
    old.write_text("old")
    age(old, 10)

    setup_logging(config, str(tmp_path))
    assert not old.exists()
    assert (tmp_path / LOG_FILE_NAME).exists()


def test_cleanup_old_logs(tmp_path):
    old = tmp_path / "battery_manager.log.1"
    fresh = tmp_path / "battery_manager.log"
    old.write_text("old")
    fresh.write_text("fresh")
    age(old, 40)

    assert cleanup_old_logs(str(tmp_path), retention_days=30) == 1
    assert not old.exists()
    assert fresh.exists()


def test_cleanup_missing_directory(tmp_path):
    assert cleanup_old_logs(str(tmp_path / "missing")) == 0
