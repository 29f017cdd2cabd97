"""Централизованное описание путей приложения."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_DIR_NAME = ".dockfleet"
DEFAULT_SOCKET_PATH = "/var/run/docker.sock"


def resolve_config_dir() -> Path:
    """Базовая директория настроек, эндпоинтов и логов (учитывает DOCKFLEET_HOME)."""

    home_dir = Path(os.environ.get("DOCKFLEET_HOME", Path.home()))
    return home_dir / CONFIG_DIR_NAME
