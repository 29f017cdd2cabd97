"""Обёртка над docker-py с ленивой инициализацией и переводом ошибок."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import docker
import docker.tls
from docker.errors import APIError, DockerException, NotFound, TLSParameterError
from requests.exceptions import RequestException

from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api.exceptions import (
    ConfigurationError,
    ConflictError,
    DockerAPIError,
    NotFoundError,
    TransportError,
)
from dockfleet.utils.helpers import normalize_socket_path

LOGGER = logging.getLogger(__name__)


def build_base_url(config: EndpointConfig) -> str:
    """Адрес демона в формате docker-py: unix://... или tcp://host:port."""

    if config.uses_socket:
        return normalize_socket_path(config.socket_path or "")
    if not config.host:
        raise ConfigurationError(
            "Endpoint needs either a socket path or a host",
            endpoint=config.name,
        )
    return f"tcp://{config.host}:{config.port}"


def build_tls_config(config: EndpointConfig) -> docker.tls.TLSConfig | bool:
    """TLS-параметры клиента; False для незашифрованного соединения."""

    if not config.use_tls:
        return False
    if config.tls is None:
        return True
    try:
        return docker.tls.TLSConfig(
            client_cert=(config.tls.client_cert, config.tls.client_key),
            ca_cert=config.tls.ca_cert,
            verify=True,
        )
    except TLSParameterError as exc:
        raise ConfigurationError(str(exc), endpoint=config.resolved_name) from exc


@contextmanager
def translate_errors(endpoint: str, action: str) -> Iterator[None]:
    """Переводит исключения docker-py в доменные ошибки с именем эндпоинта."""

    try:
        yield
    except DockerAPIError:
        raise
    except NotFound as exc:
        raise NotFoundError(f"{action}: {_explain(exc)}", endpoint=endpoint) from exc
    except APIError as exc:
        if exc.status_code == 404:
            raise NotFoundError(f"{action}: {_explain(exc)}", endpoint=endpoint) from exc
        if exc.status_code == 409:
            raise ConflictError(f"{action}: {_explain(exc)}", endpoint=endpoint) from exc
        raise DockerAPIError(
            f"{action}: {_explain(exc)}",
            endpoint=endpoint,
            context={"status_code": exc.status_code},
        ) from exc
    except (DockerException, RequestException) as exc:
        raise TransportError(f"{action}: {exc}", endpoint=endpoint) from exc


def _explain(exc: APIError) -> str:
    return str(exc.explanation or exc)


class DockerClientWrapper:
    """Владеет единственным docker client для одного эндпоинта."""

    def __init__(
        self,
        config: EndpointConfig,
        raw_client: Any | None = None,
        *,
        timeout: Optional[int] = None,
    ) -> None:
        self.config = config
        self.name = config.resolved_name
        self.base_url = build_base_url(config)  # проверяем конфигурацию сразу
        self._tls = build_tls_config(config)
        self._timeout = timeout
        self._client = raw_client
        self._closed = False
        self._lock = threading.Lock()

    def _create_client(self) -> Any:
        kwargs: Dict[str, Any] = {"base_url": self.base_url, "tls": self._tls}
        if self._timeout:
            kwargs["timeout"] = self._timeout
        try:
            return docker.DockerClient(**kwargs)
        except (DockerException, RequestException) as exc:
            LOGGER.error(
                "Docker client init error for endpoint %s via %s: %s",
                self.name,
                self.base_url,
                exc,
            )
            raise TransportError(str(exc), endpoint=self.name) from exc

    def get_raw_client(self) -> Any:
        """Возвращает docker client, создавая его при первом обращении.

        После close() соединение не восстанавливается: нужен новый объект.
        """

        with self._lock:
            if self._closed:
                raise TransportError("connection closed", endpoint=self.name)
            if self._client is None:
                LOGGER.debug("Creating Docker client for %s (%s)", self.name, self.base_url)
                self._client = self._create_client()
            return self._client

    def ping(self) -> bool:
        """Проверяет доступность Docker."""

        try:
            self.get_raw_client().ping()
            return True
        except (DockerAPIError, DockerException, RequestException) as exc:
            LOGGER.error("Docker ping failed for %s: %s", self.name, exc)
            return False

    def close(self) -> None:
        """Освобождает HTTP-сессию клиента; повторный вызов ничего не делает."""

        with self._lock:
            self._closed = True
            client, self._client = self._client, None
        if client is None:
            return
        try:
            client.close()
        except (DockerException, RequestException, OSError) as exc:
            LOGGER.warning("Error closing Docker client for %s: %s", self.name, exc)
