"""Группы настроек: набор ключей, значения по умолчанию и проверки."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Dict, Mapping, NamedTuple, Tuple

from dockfleet.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from dockfleet.settings.validators import (
    CommandValidator,
    CompositeValidator,
    EnumValidator,
    RangeValidator,
    TypeValidator,
    Validator,
)

LOGGER = logging.getLogger(__name__)

TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
FALSE_WORDS = frozenset({"0", "false", "no", "off"})


class Option(NamedTuple):
    default: Any
    validator: Validator
    help: str = ""


def integer(minimum: int, maximum: int) -> Validator:
    return CompositeValidator(TypeValidator(int), RangeValidator(minimum, maximum))


def parse_text(raw: str, sample: Any) -> Any:
    """Приводит строку из командной строки к типу значения по умолчанию."""

    if isinstance(sample, bool):
        word = raw.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
        raise ValueError(f"'{raw}' is not a boolean (use true or false)")
    if isinstance(sample, int):
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError(f"'{raw}' is not an integer") from None
    return raw


class SettingsGroup:
    """База групп настроек. Подклассы объявляют name и options."""

    name: ClassVar[str] = ""
    options: ClassVar[Dict[str, Option]] = {}

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self.reset()

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.options)

    def _option(self, key: str) -> Option:
        option = self.options.get(key)
        if option is None:
            raise SettingsNotFoundError(self.name, key)
        return option

    def get(self, key: str) -> Any:
        self._option(key)
        return self._values[key]

    def default(self, key: str) -> Any:
        return self._option(key).default

    def set(self, key: str, value: Any) -> None:
        problem = self._option(key).validator.check(value)
        if problem is not None:
            raise SettingsValidationError(f"{self.name}.{key}", value, problem)
        self._values[key] = value

    def set_text(self, key: str, raw: str) -> Any:
        """Разбирает строковое значение, проверяет и сохраняет его."""

        option = self._option(key)
        try:
            value = parse_text(raw, option.default)
        except ValueError as exc:
            raise SettingsValidationError(f"{self.name}.{key}", raw, str(exc)) from exc
        self.set(key, value)
        return value

    def update(self, data: Mapping[str, Any]) -> None:
        for key, value in data.items():
            if key not in self.options:
                LOGGER.debug("Ignoring unknown setting %s.%s", self.name, key)
                continue
            self.set(key, value)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def reset(self) -> None:
        self._values = {key: option.default for key, option in self.options.items()}


class LoggingSettings(SettingsGroup):
    name = "logging"
    options = {
        "enabled": Option(True, TypeValidator(bool), "Write the log file at all"),
        "level": Option("INFO", EnumValidator(["DEBUG", "INFO", "WARNING", "ERROR"])),
        "max_file_size_mb": Option(10, integer(1, 1000), "Rotate the log after this size"),
        "max_archived_files": Option(5, integer(1, 50)),
    }


class ConnectionsSettings(SettingsGroup):
    """Опрос эндпоинтов."""

    name = "connections"
    options = {
        "connection_timeout_sec": Option(5, integer(1, 120), "Deadline for one call to all servers"),
        "connection_timeout_enabled": Option(True, TypeValidator(bool)),
        "max_parallel_requests": Option(8, integer(1, 64), "Servers queried at the same time"),
        "logs_tail_default": Option(100, integer(0, 100_000), "Lines shown by logs without --tail"),
    }


class ComposeSettings(SettingsGroup):
    """Запуск внешней программы compose."""

    name = "compose"
    options = {
        "command": Option("docker-compose", CommandValidator(), "Compose program, e.g. 'docker compose'"),
        "timeout_sec": Option(0, integer(0, 3600), "0 waits forever"),
        "temp_dir": Option("", TypeValidator(str), "Where compose files are written; empty uses the system default"),
    }
