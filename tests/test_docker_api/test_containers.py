"""Тесты операций над контейнерами и расчёта метрик."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api import containers
from dockfleet.docker_api.client import DockerClientWrapper
from dockfleet.docker_api.exceptions import ConflictError, NotFoundError
from tests.fakes import STATS_SAMPLE, FakeContainer, FakeRawClient


def test_list_containers_running_only(client: DockerClientWrapper) -> None:
    result = containers.list_containers(client)
    assert [item.name for item in result] == ["web"]
    summary = result[0]
    assert summary.identifier == "aaa111"
    assert summary.endpoint == "alpha"
    assert summary.created == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)
    assert summary.ports[0].public_port == 8080


def test_list_containers_include_stopped(client: DockerClientWrapper) -> None:
    result = containers.list_containers(client, include_stopped=True)
    assert {item.name for item in result} == {"web", "worker"}


def test_remove_running_container_without_force_conflicts(
    client: DockerClientWrapper, raw_client: FakeRawClient
) -> None:
    with pytest.raises(ConflictError) as excinfo:
        containers.remove_container(client, "web")
    assert excinfo.value.endpoint == "alpha"
    assert str(excinfo.value).startswith("[alpha] ")
    assert raw_client.container_list[0].removed_with is None


def test_remove_running_container_with_force(client: DockerClientWrapper, raw_client: FakeRawClient) -> None:
    containers.remove_container(client, "web", force=True)
    assert raw_client.container_list[0].removed_with is True


def test_unknown_container_is_not_found(client: DockerClientWrapper) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        containers.stop_container(client, "missing")
    assert excinfo.value.endpoint == "alpha"


def test_start_unpauses_paused_container() -> None:
    paused = FakeContainer("ccc333", "paused-app", status="paused")
    wrapper = _wrap(FakeRawClient([paused]))
    containers.start_container(wrapper, "ccc333")
    assert paused.calls == ["unpause"]


def test_start_stop_restart(client: DockerClientWrapper, raw_client: FakeRawClient) -> None:
    worker = raw_client.container_list[1]
    containers.start_container(client, "worker")
    containers.restart_container(client, "worker")
    containers.stop_container(client, "worker")
    assert worker.calls == ["start", "restart", "stop"]


def test_fetch_logs_returns_tail(client: DockerClientWrapper) -> None:
    assert containers.fetch_logs(client, "web", tail=2) == "line2\nline3\n"


@pytest.mark.parametrize("tail", [-1, "10", True])
def test_fetch_logs_rejects_invalid_tail(client: DockerClientWrapper, tail: object) -> None:
    with pytest.raises(ValueError):
        containers.fetch_logs(client, "web", tail=tail)  # type: ignore[arg-type]


def test_inspect_strips_leading_slash(client: DockerClientWrapper) -> None:
    attrs = containers.inspect_container(client, "web")
    assert attrs["Name"] == "web"
    assert attrs["Config"]["Image"] == "nginx:latest"


def test_container_stats_sample(client: DockerClientWrapper) -> None:
    stats = containers.get_container_stats(client, "web")
    assert stats.cpu_percent == 100.0
    assert stats.memory_used == 67108864
    assert stats.memory_limit == 268435456
    assert stats.memory_percent == 25.0
    assert (stats.rx_bytes, stats.tx_bytes) == (1024, 2048)
    assert stats.endpoint == "alpha"
    assert stats.name == "web"


def test_cpu_percent_zero_without_deltas() -> None:
    sample = {
        "cpu_stats": {"cpu_usage": {"total_usage": 100}, "system_cpu_usage": 1000},
        "precpu_stats": {"cpu_usage": {"total_usage": 100}, "system_cpu_usage": 1000},
    }
    assert containers.calculate_cpu_percent(sample) == 0.0


def test_cpu_percent_falls_back_to_percpu_count() -> None:
    sample = {
        "cpu_stats": {
            "cpu_usage": {"total_usage": 300, "percpu_usage": [1, 1, 1, 1]},
            "system_cpu_usage": 1200,
        },
        "precpu_stats": STATS_SAMPLE["precpu_stats"],
    }
    assert containers.calculate_cpu_percent(sample) == 200.0


def test_memory_usage_uses_inactive_file_on_cgroup_v2() -> None:
    sample = {"memory_stats": {"usage": 1000, "limit": 4000, "stats": {"inactive_file": 200}}}
    assert containers.calculate_memory_usage(sample) == (800, 4000)


def test_memory_percent_zero_limit() -> None:
    assert containers.calculate_memory_percent(100, 0) == 0.0


def test_network_io_missing_interface() -> None:
    assert containers.calculate_network_io({"networks": {"eth1": {"rx_bytes": 5}}}) == (0, 0)


def _wrap(raw: FakeRawClient) -> DockerClientWrapper:
    return DockerClientWrapper(EndpointConfig(name="beta", host="beta.local"), raw)
