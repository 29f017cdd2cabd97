"""Вспомогательные функции для настройки логирования."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# docker SDK и urllib3 пишут каждый HTTP-запрос на уровне DEBUG
NOISY_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "docker")


def resolve_log_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def configure_logging(
    log_dir: Path,
    *,
    log_file_name: str = "dockfleet.log",
    level_name: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    console_level_name: str = "WARNING",
) -> None:
    """Ротация файлов плюс вывод в stderr (stdout занят результатами команд)."""

    log_dir.mkdir(parents=True, exist_ok=True)
    level = resolve_log_level(level_name)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        log_dir / log_file_name,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(max(level, resolve_log_level(console_level_name)))

    logging.basicConfig(level=level, handlers=[file_handler, stream_handler], force=True)
    quiet_third_party_loggers(NOISY_LOGGERS)


def quiet_third_party_loggers(names: Iterable[str], level: int = logging.WARNING) -> None:
    """Поднимает уровень сторонних логгеров."""

    for name in names:
        logging.getLogger(name).setLevel(level)
