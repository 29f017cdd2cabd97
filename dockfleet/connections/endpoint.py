"""Соединение с одним Docker-эндпоинтом.

Класс переводит доменные операции в вызовы функций ``dockfleet.docker_api``
для одного клиента и помечает результаты и ошибки именем эндпоинта.
Кеширования и повторов здесь нет: сломанное соединение остаётся сломанным,
пока его не заменят в реестре.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from dockfleet.compose import executor
from dockfleet.compose.executor import ComposeResult
from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api import containers, images, networks, volumes
from dockfleet.docker_api.client import DockerClientWrapper
from dockfleet.docker_api.exceptions import ConfigurationError, NotFoundError
from dockfleet.docker_api.models import ContainerStats, ContainerSummary, UpdateCheck

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ComposeOptions:
    """Параметры запуска внешнего docker-compose."""

    command: str = executor.DEFAULT_COMPOSE_COMMAND
    timeout_seconds: int = 0
    temp_dir: Optional[Path] = None


class EndpointConnection:
    """Полный набор операций над контейнерами, образами, сетями и томами одного демона."""

    def __init__(
        self,
        config: EndpointConfig,
        raw_client: Any | None = None,
        *,
        client_timeout: Optional[int] = None,
        compose: Optional[ComposeOptions] = None,
    ) -> None:
        if not config.socket_path and not config.host:
            raise ConfigurationError(
                "Endpoint needs either a socket path or a host",
                endpoint=config.name,
                context={"config": config.to_dict()},
            )
        self.config = config
        self.name = config.resolved_name
        self.compose = compose or ComposeOptions()
        self._client = DockerClientWrapper(config, raw_client, timeout=client_timeout)

    def __repr__(self) -> str:
        return f"EndpointConnection(name={self.name!r}, base_url={self.base_url!r})"

    @property
    def base_url(self) -> str:
        return self._client.base_url

    def describe(self) -> Dict[str, Any]:
        """Конфигурация эндпоинта для отображения пользователю."""

        data = self.config.to_dict()
        data["base_url"] = self.base_url
        return data

    def ping(self) -> bool:
        return self._client.ping()

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------- containers
    def list_containers(self, include_stopped: bool = False) -> List[ContainerSummary]:
        return containers.list_containers(self._client, include_stopped=include_stopped)

    def get_stats(self, container_id: str) -> ContainerStats:
        return containers.get_container_stats(self._client, container_id)

    def start_container(self, container_id: str) -> None:
        containers.start_container(self._client, container_id)
        LOGGER.info("Started container %s on %s", container_id, self.name)

    def stop_container(self, container_id: str) -> None:
        containers.stop_container(self._client, container_id)
        LOGGER.info("Stopped container %s on %s", container_id, self.name)

    def restart_container(self, container_id: str) -> None:
        containers.restart_container(self._client, container_id)
        LOGGER.info("Restarted container %s on %s", container_id, self.name)

    def remove_container(self, container_id: str, force: bool = False) -> None:
        containers.remove_container(self._client, container_id, force=force)
        LOGGER.info("Removed container %s on %s (force=%s)", container_id, self.name, force)

    def inspect_container(self, container_id: str) -> Dict[str, Any]:
        return containers.inspect_container(self._client, container_id)

    def get_logs(self, container_id: str, tail: int = 100) -> str:
        return containers.fetch_logs(self._client, container_id, tail=tail)

    # ---------------------------------------------------------------- images
    def list_images(self) -> List[Dict[str, Any]]:
        return images.list_images(self._client)

    def pull_image(self, reference: str) -> str:
        image_id = images.pull_image(self._client, reference)
        LOGGER.info("Pulled image %s on %s (%s)", reference, self.name, image_id)
        return image_id

    def remove_image(self, image_id: str, force: bool = False) -> None:
        images.remove_image(self._client, image_id, force=force)
        LOGGER.info("Removed image %s on %s (force=%s)", image_id, self.name, force)

    def check_updates(self, container_id: str) -> UpdateCheck:
        """Скачивает образ контейнера заново и сравнивает id образов."""

        attrs = self.inspect_container(container_id)
        image_ref = (attrs.get("Config") or {}).get("Image")
        if not image_ref:
            raise NotFoundError(
                f"Container {container_id} has no image reference", endpoint=self.name
            )
        latest_id = self.pull_image(image_ref)
        return UpdateCheck(
            container=container_id,
            endpoint=self.name,
            image_ref=image_ref,
            current_image_id=str(attrs.get("Image", "")),
            latest_image_id=latest_id,
        )

    # ------------------------------------------------------- networks/volumes
    def list_networks(self) -> List[Dict[str, Any]]:
        return networks.list_networks(self._client)

    def list_volumes(self) -> List[Dict[str, Any]]:
        return volumes.list_volumes(self._client)

    # ---------------------------------------------------------------- compose
    def docker_environment(self) -> Dict[str, str]:
        return executor.build_environment(self.config)

    def deploy_compose(self, yaml_text: str, project_name: Optional[str] = None) -> ComposeResult:
        """Разворачивает Compose-стек на этом эндпоинте."""

        result = executor.deploy_stack(
            yaml_text,
            project_name,
            env=self.docker_environment(),
            compose_command=self.compose.command,
            temp_dir=self.compose.temp_dir,
            timeout_seconds=self.compose.timeout_seconds,
            endpoint=self.name,
        )
        LOGGER.info("Deployed compose project %s on %s", project_name or "<default>", self.name)
        return result

    def teardown_compose(self, project_name: str) -> ComposeResult:
        """Останавливает Compose-проект и удаляет его тома."""

        result = executor.teardown_stack(
            project_name,
            env=self.docker_environment(),
            compose_command=self.compose.command,
            timeout_seconds=self.compose.timeout_seconds,
            endpoint=self.name,
        )
        LOGGER.info("Removed compose project %s from %s", project_name, self.name)
        return result
