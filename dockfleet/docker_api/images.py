"""Функции для работы с образами Docker."""

from __future__ import annotations

from typing import Any, Dict, List

from docker.utils import parse_repository_tag

from dockfleet.docker_api.client import DockerClientWrapper, translate_errors

DEFAULT_TAG = "latest"


def list_images(client: DockerClientWrapper) -> List[Dict[str, Any]]:
    """Возвращает документы образов в том виде, в каком их отдаёт движок."""

    with translate_errors(client.name, "list images"):
        return list(client.get_raw_client().api.images())


def pull_image(client: DockerClientWrapper, reference: str) -> str:
    """Скачивает образ и возвращает его id (без тега берётся latest)."""

    repository, tag = parse_repository_tag(reference)
    if not tag:
        tag = DEFAULT_TAG
    with translate_errors(client.name, f"pull image {reference}"):
        image = client.get_raw_client().images.pull(repository, tag=tag)
    return str(getattr(image, "id", ""))


def remove_image(client: DockerClientWrapper, image_id: str, force: bool = False) -> None:
    """Удаляет образ."""

    with translate_errors(client.name, f"remove image {image_id}"):
        client.get_raw_client().images.remove(image_id, force=force)
