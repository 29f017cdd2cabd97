"""Функции для работы с сетями Docker."""

from __future__ import annotations

from typing import Any, Dict, List

from dockfleet.docker_api.client import DockerClientWrapper, translate_errors


def list_networks(client: DockerClientWrapper) -> List[Dict[str, Any]]:
    with translate_errors(client.name, "list networks"):
        return list(client.get_raw_client().api.networks())
