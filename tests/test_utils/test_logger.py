"""Проверки подсистемы логирования."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockfleet.utils.logger import (
    NOISY_LOGGERS,
    configure_logging,
    quiet_third_party_loggers,
    resolve_log_level,
)


def test_configure_logging_creates_file(tmp_path: Path) -> None:
    """После конфигурации появляется dockfleet.log с записью."""

    log_dir = tmp_path / "logs"
    configure_logging(log_dir, level_name="INFO", max_bytes=1024, backup_count=1)

    logger = logging.getLogger("dockfleet.test")
    logger.info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = log_dir / "dockfleet.log"
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_console_handler_shows_warnings_only(tmp_path: Path) -> None:
    configure_logging(tmp_path / "logs", level_name="DEBUG")
    stream_handlers = [
        handler
        for handler in logging.getLogger().handlers
        if type(handler) is logging.StreamHandler
    ]
    assert [handler.level for handler in stream_handlers] == [logging.WARNING]


def test_third_party_loggers_are_quieted(tmp_path: Path) -> None:
    configure_logging(tmp_path / "logs", level_name="DEBUG")
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING

    quiet_third_party_loggers(["urllib3"], level=logging.ERROR)
    assert logging.getLogger("urllib3").level == logging.ERROR


def test_resolve_log_level_invalid() -> None:
    """Неизвестный уровень логирования приводит к ValueError."""

    assert resolve_log_level("debug") == logging.DEBUG
    with pytest.raises(ValueError):
        resolve_log_level("INVALID")
