"""Функции для работы с контейнерами через Docker client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from dockfleet.docker_api.client import DockerClientWrapper, translate_errors
from dockfleet.docker_api.exceptions import DockerAPIError
from dockfleet.docker_api.models import ContainerStats, ContainerSummary, PortMapping
from dockfleet.utils.helpers import strip_leading_slash

PRIMARY_INTERFACE = "eth0"


def list_containers(
    client: DockerClientWrapper, *, include_stopped: bool = False
) -> List[ContainerSummary]:
    """Возвращает контейнеры эндпоинта в виде ContainerSummary."""

    with translate_errors(client.name, "list containers"):
        raw = client.get_raw_client()
        entries = raw.api.containers(all=include_stopped)
    return [_summary_from_entry(entry, client.name) for entry in entries]


def start_container(client: DockerClientWrapper, container_id: str) -> None:
    """Запускает контейнер, снимая паузу, если он приостановлен."""

    with translate_errors(client.name, f"start container {container_id}"):
        container = client.get_raw_client().containers.get(container_id)
        if getattr(container, "status", "") == "paused":
            container.unpause()
            return
        container.start()


def stop_container(client: DockerClientWrapper, container_id: str) -> None:
    """Останавливает контейнер."""

    with translate_errors(client.name, f"stop container {container_id}"):
        client.get_raw_client().containers.get(container_id).stop()


def restart_container(client: DockerClientWrapper, container_id: str) -> None:
    """Перезапускает контейнер."""

    with translate_errors(client.name, f"restart container {container_id}"):
        client.get_raw_client().containers.get(container_id).restart()


def remove_container(client: DockerClientWrapper, container_id: str, force: bool = False) -> None:
    """Удаляет контейнер; без force запущенный контейнер даёт ConflictError."""

    with translate_errors(client.name, f"remove container {container_id}"):
        client.get_raw_client().containers.get(container_id).remove(force=force)


def fetch_logs(client: DockerClientWrapper, container_id: str, *, tail: int = 100) -> str:
    """Возвращает последние ``tail`` строк stdout+stderr одной строкой."""

    if isinstance(tail, bool) or not isinstance(tail, int) or tail < 0:
        raise ValueError(f"tail must be a non-negative integer, got {tail!r}")
    with translate_errors(client.name, f"fetch logs for {container_id}"):
        container = client.get_raw_client().containers.get(container_id)
        data = container.logs(stdout=True, stderr=True, tail=tail)
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


def inspect_container(client: DockerClientWrapper, container_id: str) -> Dict[str, Any]:
    """Возвращает документ docker inspect без ведущего '/' в имени."""

    with translate_errors(client.name, f"inspect container {container_id}"):
        container = client.get_raw_client().containers.get(container_id)
    attrs = dict(getattr(container, "attrs", {}) or {})
    if isinstance(attrs.get("Name"), str):
        attrs["Name"] = strip_leading_slash(attrs["Name"])
    return attrs


def get_container_stats(client: DockerClientWrapper, container_id: str) -> ContainerStats:
    """Снимает один срез docker stats и считает метрики."""

    with translate_errors(client.name, f"collect stats for {container_id}"):
        container = client.get_raw_client().containers.get(container_id)
        raw_stats = container.stats(stream=False)
    if not isinstance(raw_stats, dict):
        raise DockerAPIError(f"Unexpected stats payload for {container_id}", endpoint=client.name)

    memory_used, memory_limit = calculate_memory_usage(raw_stats)
    rx_bytes, tx_bytes = calculate_network_io(raw_stats)
    return ContainerStats(
        identifier=container_id,
        name=strip_leading_slash(getattr(container, "name", "") or container_id),
        cpu_percent=calculate_cpu_percent(raw_stats),
        memory_used=memory_used,
        memory_limit=memory_limit,
        memory_percent=calculate_memory_percent(memory_used, memory_limit),
        rx_bytes=rx_bytes,
        tx_bytes=tx_bytes,
        endpoint=client.name,
    )


def calculate_cpu_percent(stats: Dict[str, Any]) -> float:
    """(Δ usage контейнера / Δ usage системы) * online_cpus * 100."""

    cpu_stats = stats.get("cpu_stats") or {}
    precpu = stats.get("precpu_stats") or {}
    cpu_delta = (cpu_stats.get("cpu_usage", {}).get("total_usage", 0)) - (
        precpu.get("cpu_usage", {}).get("total_usage", 0)
    )
    system_delta = cpu_stats.get("system_cpu_usage", 0) - precpu.get("system_cpu_usage", 0)
    online_cpus = (
        cpu_stats.get("online_cpus")
        or len(cpu_stats.get("cpu_usage", {}).get("percpu_usage") or [])
        or 1
    )
    if cpu_delta > 0 and system_delta > 0:
        return (cpu_delta / system_delta) * online_cpus * 100.0
    return 0.0


def calculate_memory_usage(stats: Dict[str, Any]) -> tuple[int, int]:
    """Возвращает (used, limit); used = usage минус page cache."""

    memory_stats = stats.get("memory_stats") or {}
    usage = int(memory_stats.get("usage") or 0)
    limit = int(memory_stats.get("limit") or 0)
    detail = memory_stats.get("stats") or {}
    # cgroup v1 отдаёт cache, cgroup v2 отдаёт inactive_file
    cache = detail.get("cache", detail.get("inactive_file", 0)) or 0
    return max(usage - int(cache), 0), limit


def calculate_memory_percent(used: int, limit: int) -> float:
    if limit <= 0:
        return 0.0
    return used / limit * 100.0


def calculate_network_io(stats: Dict[str, Any]) -> tuple[int, int]:
    """Счётчики rx/tx основного интерфейса (0, если его нет)."""

    interface = (stats.get("networks") or {}).get(PRIMARY_INTERFACE) or {}
    return int(interface.get("rx_bytes", 0) or 0), int(interface.get("tx_bytes", 0) or 0)


def _summary_from_entry(entry: Dict[str, Any], endpoint: str) -> ContainerSummary:
    names = entry.get("Names") or []
    ports = [
        PortMapping(
            private_port=int(port.get("PrivatePort", 0)),
            protocol=port.get("Type", "tcp"),
            public_port=port.get("PublicPort"),
        )
        for port in entry.get("Ports") or []
    ]
    return ContainerSummary(
        identifier=entry.get("Id", ""),
        name=strip_leading_slash(names[0]) if names else "",
        image=entry.get("Image", ""),
        state=entry.get("State", ""),
        status=entry.get("Status", ""),
        created=datetime.fromtimestamp(int(entry.get("Created", 0)), tz=timezone.utc),
        ports=ports,
        endpoint=endpoint,
    )
