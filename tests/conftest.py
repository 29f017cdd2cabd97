"""Общие фикстуры: эндпоинты и реестр поверх поддельных клиентов."""

from __future__ import annotations

from typing import Callable, Dict

import pytest

from dockfleet.connections.endpoint import EndpointConnection
from dockfleet.connections.models import EndpointConfig
from dockfleet.connections.registry import EndpointRegistry
from dockfleet.docker_api.client import DockerClientWrapper
from tests.fakes import FakeContainer, FakeRawClient


@pytest.fixture
def raw_client() -> FakeRawClient:
    return FakeRawClient(
        [
            FakeContainer("aaa111", "web"),
            FakeContainer("bbb222", "worker", status="exited"),
        ],
        images=[{"Id": "sha256:img1", "RepoTags": ["nginx:latest"], "Created": 1_700_000_000, "Size": 2048}],
        networks=[{"Name": "bridge", "Id": "net1", "Driver": "bridge", "Scope": "local"}],
        volumes=[{"Name": "data", "Driver": "local", "Mountpoint": "/var/lib/docker/volumes/data"}],
    )


@pytest.fixture
def client(raw_client: FakeRawClient) -> DockerClientWrapper:
    return DockerClientWrapper(EndpointConfig(name="alpha", host="alpha.local"), raw_client)


@pytest.fixture
def endpoint(raw_client: FakeRawClient) -> EndpointConnection:
    return EndpointConnection(EndpointConfig(name="alpha", host="alpha.local"), raw_client)


@pytest.fixture
def raw_clients() -> Dict[str, FakeRawClient]:
    """Поддельный клиент для каждого имени эндпоинта; заполняется тестом."""

    return {}


@pytest.fixture
def endpoint_factory(raw_clients: Dict[str, FakeRawClient]) -> Callable[[EndpointConfig], EndpointConnection]:
    def factory(config: EndpointConfig) -> EndpointConnection:
        return EndpointConnection(config, raw_clients.setdefault(config.resolved_name, FakeRawClient()))

    return factory


@pytest.fixture
def registry(endpoint_factory: Callable[[EndpointConfig], EndpointConnection]) -> EndpointRegistry:
    registry = EndpointRegistry(endpoint_factory, timeout=0.5)
    yield registry
    registry.close()
