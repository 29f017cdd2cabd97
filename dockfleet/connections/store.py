"""Хранилище эндпоинтов, добавленных пользователем (endpoints.json)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api.exceptions import ConfigurationError

LOGGER = logging.getLogger(__name__)


class EndpointStore:
    """Загрузка/сохранение конфигураций эндпоинтов между запусками CLI."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._configs: Dict[str, EndpointConfig] = {}
        self.load_from_disk()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def list_configs(self) -> List[EndpointConfig]:
        """Возвращает сохранённые конфигурации в порядке добавления."""

        return list(self._configs.values())

    def save_config(self, config: EndpointConfig) -> None:
        """Добавляет или заменяет конфигурацию по её имени."""

        name = config.resolved_name
        if name in self._configs:
            LOGGER.warning("Stored endpoint %s is overwritten", name)
        self._configs[name] = config
        self.save_to_disk()

    def delete_config(self, name: str) -> bool:
        """Удаляет конфигурацию, если она существует."""

        if name not in self._configs:
            return False
        self._configs.pop(name)
        self.save_to_disk()
        return True

    # ------------------------------------------------------------- persistence --
    def load_from_disk(self) -> None:
        """Загружает endpoints.json, создаёт файл при отсутствии."""

        if not self._file_path.exists():
            self._configs.clear()
            self.save_to_disk()
            return

        try:
            content = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise self._broken(str(exc)) from exc
        entries = content.get("endpoints", []) if isinstance(content, dict) else None
        if not isinstance(entries, list):
            raise self._broken("expected an object with an \"endpoints\" list")

        loaded: Dict[str, EndpointConfig] = {}
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise self._broken(f"entry {position} is not an object")
            try:
                config = EndpointConfig.from_dict(entry)
            except (TypeError, ValueError) as exc:
                raise self._broken(f"entry {position}: {exc}") from exc
            loaded[config.resolved_name] = config
        self._configs = loaded

    def _broken(self, reason: str) -> ConfigurationError:
        return ConfigurationError(
            f"Cannot read endpoints file {self._file_path}: {reason}",
            context={"path": str(self._file_path)},
        )

    def save_to_disk(self) -> None:
        """Сериализует текущие конфигурации в JSON."""

        payload = {"endpoints": [config.to_dict() for config in self._configs.values()]}
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )
