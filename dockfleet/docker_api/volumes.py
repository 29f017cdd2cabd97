"""Функции для работы с томами Docker."""

from __future__ import annotations

from typing import Any, Dict, List

from dockfleet.docker_api.client import DockerClientWrapper, translate_errors


def list_volumes(client: DockerClientWrapper) -> List[Dict[str, Any]]:
    """Возвращает документы томов (поле Volumes ответа /volumes)."""

    with translate_errors(client.name, "list volumes"):
        response = client.get_raw_client().api.volumes()
    return list((response or {}).get("Volumes") or [])
