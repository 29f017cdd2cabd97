"""Тесты EndpointConnection поверх поддельного клиента."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest

from dockfleet.compose import executor
from dockfleet.compose.executor import ComposeResult
from dockfleet.connections.endpoint import ComposeOptions, EndpointConnection
from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api.exceptions import ConfigurationError, ConflictError, NotFoundError, TransportError
from tests.fakes import FakeContainer, FakeRawClient


def test_connection_requires_target() -> None:
    with pytest.raises(ConfigurationError):
        EndpointConnection(EndpointConfig(name="nothing"))


def test_describe_includes_base_url(endpoint: EndpointConnection) -> None:
    data = endpoint.describe()
    assert data["name"] == "alpha"
    assert data["base_url"] == "tcp://alpha.local:2375"


def test_container_lifecycle(endpoint: EndpointConnection, raw_client: FakeRawClient) -> None:
    worker = raw_client.container_list[1]
    endpoint.start_container("worker")
    endpoint.stop_container("worker")
    endpoint.remove_container("worker")
    assert worker.calls == ["start", "stop", "remove"]


def test_remove_running_requires_force(endpoint: EndpointConnection) -> None:
    with pytest.raises(ConflictError):
        endpoint.remove_container("web")
    endpoint.remove_container("web", force=True)


def test_containers_are_tagged_with_endpoint(endpoint: EndpointConnection) -> None:
    assert {item.endpoint for item in endpoint.list_containers(include_stopped=True)} == {"alpha"}


def test_logs_and_inspect(endpoint: EndpointConnection) -> None:
    assert endpoint.get_logs("web", tail=1) == "line3\n"
    assert endpoint.inspect_container("aaa111")["Name"] == "web"


def test_check_updates_detects_new_image(endpoint: EndpointConnection, raw_client: FakeRawClient) -> None:
    check = endpoint.check_updates("web")
    assert check.image_ref == "nginx:latest"
    assert check.current_image_id == "sha256:old"
    assert check.latest_image_id == "sha256:new"
    assert check.outdated
    assert raw_client.images.pulled == [("nginx", "latest")]


def test_check_updates_up_to_date() -> None:
    raw = FakeRawClient([FakeContainer("x1", "api", image_id="sha256:same")], pulled_image_id="sha256:same")
    endpoint = EndpointConnection(EndpointConfig(name="beta", host="beta.local"), raw)
    assert endpoint.check_updates("api").outdated is False


def test_check_updates_unknown_container(endpoint: EndpointConnection) -> None:
    with pytest.raises(NotFoundError):
        endpoint.check_updates("ghost")


def test_docker_environment_points_at_endpoint(endpoint: EndpointConnection) -> None:
    env = endpoint.docker_environment()
    assert env["DOCKER_HOST"] == "tcp://alpha.local:2375"
    assert "DOCKER_TLS_VERIFY" not in env


def test_deploy_compose_uses_options(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: List[Dict[str, Any]] = []

    def fake_deploy(yaml_text: str, project_name: str | None = None, **kwargs: Any) -> ComposeResult:
        calls.append({"yaml": yaml_text, "project": project_name, **kwargs})
        return ComposeResult(command=["docker", "compose"], return_code=0, output="", endpoint=kwargs["endpoint"])

    monkeypatch.setattr(executor, "deploy_stack", fake_deploy)
    endpoint = EndpointConnection(
        EndpointConfig(name="gamma", socket_path="/run/docker.sock"),
        FakeRawClient(),
        compose=ComposeOptions(command="docker compose", timeout_seconds=30, temp_dir=tmp_path),
    )
    result = endpoint.deploy_compose("services: {}\n", "shop")
    assert result.endpoint == "gamma"
    (call,) = calls
    assert call["project"] == "shop"
    assert call["compose_command"] == "docker compose"
    assert call["timeout_seconds"] == 30
    assert call["temp_dir"] == tmp_path
    assert call["env"]["DOCKER_HOST"] == "unix:///run/docker.sock"


def test_close_releases_client(endpoint: EndpointConnection, raw_client: FakeRawClient) -> None:
    endpoint.close()
    assert raw_client.closed


def test_operations_fail_after_close(endpoint: EndpointConnection) -> None:
    endpoint.close()
    with pytest.raises(TransportError, match=r"^\[alpha\] connection closed$"):
        endpoint.list_containers()
