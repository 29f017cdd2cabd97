"""Сборка конфигураций эндпоинтов из переменных окружения.

Поддерживаются три варианта:

* ``DOCKER_SERVERS=prod,staging`` и для каждого имени
  ``DOCKER_SERVER_<NAME>_HOST`` / ``_PORT`` / ``_PROTOCOL`` / ``_SOCKET`` /
  ``_CERT_PATH``;
* один эндпоинт через ``DOCKER_HOST`` (+ ``DOCKER_PORT``, ``DOCKER_PROTOCOL``,
  ``DOCKER_CERT_PATH``, ``DOCKER_NAME``);
* ничего не задано: локальный сокет, если он существует, иначе
  ``localhost:2375`` по http.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from dockfleet.connections.models import DEFAULT_PORT, DEFAULT_SCHEME, EndpointConfig, TLSConfig
from dockfleet.docker_api.exceptions import ConfigurationError
from dockfleet.utils.helpers import env_key, strip_socket_scheme
from dockfleet.utils.paths import DEFAULT_SOCKET_PATH

LOGGER = logging.getLogger(__name__)


def load_endpoint_configs(environ: Optional[Mapping[str, str]] = None) -> List[EndpointConfig]:
    """Возвращает упорядоченный список конфигураций из окружения."""

    env = os.environ if environ is None else environ
    servers = env.get("DOCKER_SERVERS", "").strip()
    if servers:
        return _load_multiple(servers, env)
    if env.get("DOCKER_HOST", "").strip():
        return [_load_single(env)]
    return [resolve_local_default(env)]


def environment_defines_endpoints(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True, если эндпоинты заданы явно (DOCKER_SERVERS или DOCKER_HOST)."""

    env = os.environ if environ is None else environ
    return bool(env.get("DOCKER_SERVERS", "").strip() or env.get("DOCKER_HOST", "").strip())


def resolve_local_default(environ: Optional[Mapping[str, str]] = None) -> EndpointConfig:
    """Конфигурация для случая, когда эндпоинты не заданы вовсе."""

    env = os.environ if environ is None else environ
    socket_path = env.get("DOCKER_SOCKET_PATH") or DEFAULT_SOCKET_PATH
    if Path(socket_path).exists():
        LOGGER.info("No endpoint configured, using local socket %s", socket_path)
        return EndpointConfig(socket_path=socket_path)
    LOGGER.info("No endpoint configured and %s is missing, using localhost:%s", socket_path, DEFAULT_PORT)
    return EndpointConfig(host="localhost", port=DEFAULT_PORT, scheme=DEFAULT_SCHEME)


def build_endpoint_config(
    name: Optional[str] = None,
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    scheme: Optional[str] = None,
    socket_path: Optional[str] = None,
    cert_path: Optional[str] = None,
) -> EndpointConfig:
    """Собирает EndpointConfig из разрозненных параметров (CLI, окружение)."""

    if socket_path:
        return EndpointConfig(name=name, socket_path=strip_socket_scheme(socket_path))
    if not host:
        raise ConfigurationError(
            "Either a host or a socket path must be provided",
            context={"name": name},
        )
    tls = TLSConfig.from_directory(cert_path) if cert_path else None
    return EndpointConfig(
        name=name,
        host=host,
        port=port or DEFAULT_PORT,
        scheme=scheme or ("https" if tls else DEFAULT_SCHEME),
        tls=tls,
    )


def parse_docker_host(value: str) -> tuple[Optional[str], Optional[str], Optional[int]]:
    """Разбирает DOCKER_HOST: (socket_path, host, port).

    Допускаются ``unix:///path``, ``tcp://host:port`` и просто имя хоста.
    """

    value = value.strip()
    if value.startswith("unix://"):
        return strip_socket_scheme(value), None, None
    if "://" in value:
        parsed = urlparse(value)
        try:
            port = parsed.port
        except ValueError as exc:
            raise ConfigurationError(f"Invalid DOCKER_HOST '{value}': {exc}") from exc
        return None, parsed.hostname, port
    return None, value, None


def _load_single(env: Mapping[str, str]) -> EndpointConfig:
    socket_path, host, port = parse_docker_host(env["DOCKER_HOST"])
    return build_endpoint_config(
        env.get("DOCKER_NAME") or None,
        host=host,
        port=_parse_port(env.get("DOCKER_PORT"), "DOCKER_PORT") or port,
        scheme=env.get("DOCKER_PROTOCOL") or None,
        socket_path=socket_path,
        cert_path=env.get("DOCKER_CERT_PATH") or None,
    )


def _load_multiple(servers: str, env: Mapping[str, str]) -> List[EndpointConfig]:
    names = [name.strip() for name in servers.split(",") if name.strip()]
    seen: set[str] = set()
    configs: List[EndpointConfig] = []
    for name in names:
        if name in seen:
            raise ConfigurationError(
                f"Docker server '{name}' is listed more than once in DOCKER_SERVERS",
                context={"name": name},
            )
        seen.add(name)
        prefix = f"DOCKER_SERVER_{env_key(name)}_"
        host_value = env.get(prefix + "HOST", "")
        socket_path, host, port = parse_docker_host(host_value) if host_value else (None, None, None)
        config = build_endpoint_config(
            name,
            host=host,
            port=_parse_port(env.get(prefix + "PORT"), prefix + "PORT") or port,
            scheme=env.get(prefix + "PROTOCOL") or None,
            socket_path=env.get(prefix + "SOCKET") or socket_path,
            cert_path=env.get(prefix + "CERT_PATH") or None,
        )
        configs.append(config)
    return configs


def _parse_port(raw_value: Optional[str], variable: str) -> Optional[int]:
    if not raw_value:
        return None
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ConfigurationError(
            f"{variable} must be an integer, got {raw_value!r}",
            context={"variable": variable},
        ) from exc
