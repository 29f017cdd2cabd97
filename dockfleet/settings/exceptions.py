"""Ошибки подсистемы настроек."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


class SettingsError(Exception):
    """Базовая ошибка настроек; контекст попадает в лог при создании."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})
        LOGGER.error("%s %s", message, self.context)


class SettingsNotFoundError(SettingsError):
    def __init__(self, group: str, key: Optional[str] = None) -> None:
        self.group = group
        self.key = key
        dotted = f"{group}.{key}" if key else group
        super().__init__(f"Unknown setting '{dotted}'", context={"group": group, "key": key})


class SettingsValidationError(SettingsError):
    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value {value!r} for '{key}': {reason}",
            context={"key": key, "value": value},
        )


class SettingsIOError(SettingsError):
    """config.json нельзя прочитать, разобрать или записать."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot use settings file {path}: {reason}", context={"path": str(path)})
