"""Различные вспомогательные функции."""

from __future__ import annotations

import re


_SOCKET_SCHEMES = ("unix://", "tcp://", "npipe://", "http://", "https://", "ssh://")
_ENV_KEY_PATTERN = re.compile(r"[^A-Z0-9]+")


def normalize_socket_path(raw_value: str) -> str:
    """Возвращает путь сокета с корректным префиксом unix://."""

    value = raw_value.strip()
    if not value:
        return value
    lowered = value.lower()
    if lowered.startswith(_SOCKET_SCHEMES):
        return value
    if value.startswith("/"):
        return f"unix://{value}"
    return value


def strip_socket_scheme(raw_value: str) -> str:
    """Убирает префикс unix:// и возвращает путь в файловой системе."""

    value = raw_value.strip()
    if value.lower().startswith("unix://"):
        return value[len("unix://") :]
    return value


def socket_endpoint_name(socket_path: str) -> str:
    """Строит имя эндпоинта по пути сокета: socket-_var_run_docker.sock."""

    return "socket-" + socket_path.replace("/", "_").replace("\\", "_")


def env_key(name: str) -> str:
    """Приводит имя эндпоинта к виду, пригодному для переменной окружения."""

    return _ENV_KEY_PATTERN.sub("_", name.upper()).strip("_")


def strip_leading_slash(name: str) -> str:
    """Docker отдаёт имена контейнеров с ведущим '/'."""

    return name[1:] if name.startswith("/") else name
