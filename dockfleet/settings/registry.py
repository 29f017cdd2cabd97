"""Настройки dockfleet в config.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from dockfleet.settings.exceptions import SettingsIOError, SettingsNotFoundError
from dockfleet.settings.groups import (
    ComposeSettings,
    ConnectionsSettings,
    LoggingSettings,
    SettingsGroup,
)

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"
GROUP_TYPES = (LoggingSettings, ConnectionsSettings, ComposeSettings)


class SettingsRegistry:
    """Группы настроек и файл, в котором они хранятся.

    Создаётся явно в main и передаётся командам; отсутствующие в файле
    ключи берутся из значений по умолчанию.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._groups: Dict[str, SettingsGroup] = {kind.name: kind() for kind in GROUP_TYPES}

    def get_group(self, name: str) -> SettingsGroup:
        group = self._groups.get(name)
        if group is None:
            raise SettingsNotFoundError(name)
        return group

    def groups(self) -> List[SettingsGroup]:
        return list(self._groups.values())

    def get_value(self, group: str, key: str) -> Any:
        return self.get_group(group).get(key)

    def set_value(self, group: str, key: str, value: Any) -> None:
        self.get_group(group).set(key, value)

    def set_from_text(self, dotted_key: str, raw: str) -> Any:
        """Устанавливает значение вида ``group.key`` из строки командной строки."""

        group, _, key = dotted_key.partition(".")
        if not key:
            raise SettingsNotFoundError(dotted_key)
        return self.get_group(group).set_text(key, raw)

    def reset(self) -> None:
        for group in self._groups.values():
            group.reset()

    def as_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"version": SCHEMA_VERSION}
        for name, group in self._groups.items():
            document[name] = group.to_dict()
        return document

    def save(self) -> None:
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                json.dumps(self.as_document(), indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as exc:
            raise SettingsIOError(self.config_path, exc.strerror or str(exc)) from exc

    def load(self) -> None:
        """Читает config.json поверх значений по умолчанию.

        Если файла нет, он создаётся с умолчаниями. Неизвестные ключи
        пропускаются, недопустимые значения дают SettingsValidationError.
        """

        if not self.config_path.exists():
            LOGGER.info("Settings file %s not found, writing defaults", self.config_path)
            self.reset()
            self.save()
            return

        try:
            document = json.loads(self.config_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SettingsIOError(self.config_path, exc.strerror or str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise SettingsIOError(self.config_path, f"invalid JSON ({exc})") from exc
        if not isinstance(document, dict):
            raise SettingsIOError(self.config_path, "expected a JSON object")

        version = document.get("version")
        if version not in (None, SCHEMA_VERSION):
            LOGGER.warning(
                "Settings file %s has version %s, reading it as %s",
                self.config_path,
                version,
                SCHEMA_VERSION,
            )

        self.reset()
        for name, group in self._groups.items():
            section = document.get(name, {})
            if not isinstance(section, dict):
                raise SettingsIOError(self.config_path, f"section '{name}' must be an object")
            group.update(section)
