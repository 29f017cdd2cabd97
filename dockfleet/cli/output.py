"""Форматирование результатов команд для rich-консоли."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dockfleet.docker_api.models import ContainerStats, ContainerSummary, PortMapping

if TYPE_CHECKING:
    from dockfleet.settings.groups import SettingsGroup

SHORT_ID_LENGTH = 12
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {escape(message)}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Одна строка с текстом ошибки; разметка rich в сообщении экранируется."""

    console.print(f"[red]{prefix}[/red] {escape(message)}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {escape(message)}")


def print_endpoint_header(console: Console, endpoint: str, subject: str = "") -> None:
    suffix = f" {escape(subject)}" if subject else ""
    console.print(f"[bold cyan]{escape(endpoint)}[/bold cyan]{suffix}")


def format_size(size_bytes: Any) -> str:
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, (int, float)):
        return "N/A"
    size = float(size_bytes)
    index = 0
    while size >= 1024 and index < len(SIZE_UNITS) - 1:
        size /= 1024.0
        index += 1
    return f"{size:.1f} {SIZE_UNITS[index]}"


def format_ports(ports: Iterable[PortMapping]) -> str:
    rendered = []
    for port in ports:
        if port.public_port:
            rendered.append(f"{port.public_port}->{port.private_port}/{port.protocol}")
        else:
            rendered.append(f"{port.private_port}/{port.protocol}")
    return ", ".join(rendered) if rendered else "-"


def format_timestamp(value: Any) -> str:
    """Unix-время из ответа движка в читаемую дату (UTC)."""

    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "N/A"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def short_id(identifier: str) -> str:
    if identifier.startswith("sha256:"):
        identifier = identifier[len("sha256:"):]
    return identifier[:SHORT_ID_LENGTH]


def containers_table(containers: Iterable[ContainerSummary]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVER", style="cyan")
    table.add_column("ID")
    table.add_column("NAME", style="bold")
    table.add_column("IMAGE")
    table.add_column("STATE")
    table.add_column("PORTS", style="dim")
    for container in containers:
        table.add_row(
            escape(container.endpoint or "-"),
            short_id(container.identifier),
            escape(container.name),
            escape(container.image),
            escape(container.state),
            format_ports(container.ports),
        )
    return table


def stats_table(stats: ContainerStats) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("metric", style="bold")
    table.add_column("value")
    table.add_row("SERVER", escape(stats.endpoint or "-"))
    table.add_row("CONTAINER", escape(stats.name or stats.identifier))
    table.add_row("CPU %", f"{stats.cpu_percent:.2f}")
    table.add_row(
        "MEMORY",
        f"{format_size(stats.memory_used)} / {format_size(stats.memory_limit)}",
    )
    table.add_row("MEMORY %", f"{stats.memory_percent:.2f}")
    table.add_row("NET RX/TX", f"{format_size(stats.rx_bytes)} / {format_size(stats.tx_bytes)}")
    return table


def images_table(images_by_endpoint: Mapping[str, List[Dict[str, Any]]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVER", style="cyan")
    table.add_column("REPOSITORY:TAG", style="bold")
    table.add_column("ID")
    table.add_column("CREATED")
    table.add_column("SIZE", justify="right")
    for endpoint, images in images_by_endpoint.items():
        for image in images:
            tags = image.get("RepoTags") or ["<none>:<none>"]
            table.add_row(
                escape(endpoint),
                escape(", ".join(tags)),
                short_id(str(image.get("Id", ""))),
                format_timestamp(image.get("Created")),
                format_size(image.get("Size")),
            )
    return table


def networks_table(networks_by_endpoint: Mapping[str, List[Dict[str, Any]]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVER", style="cyan")
    table.add_column("NAME", style="bold")
    table.add_column("ID")
    table.add_column("DRIVER")
    table.add_column("SCOPE", style="dim")
    for endpoint, networks in networks_by_endpoint.items():
        for network in networks:
            table.add_row(
                escape(endpoint),
                escape(str(network.get("Name", ""))),
                short_id(str(network.get("Id", ""))),
                escape(str(network.get("Driver", ""))),
                escape(str(network.get("Scope", ""))),
            )
    return table


def volumes_table(volumes_by_endpoint: Mapping[str, List[Dict[str, Any]]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVER", style="cyan")
    table.add_column("NAME", style="bold")
    table.add_column("DRIVER")
    table.add_column("MOUNTPOINT", style="dim")
    for endpoint, volumes in volumes_by_endpoint.items():
        for volume in volumes:
            table.add_row(
                escape(endpoint),
                escape(str(volume.get("Name", ""))),
                escape(str(volume.get("Driver", ""))),
                escape(str(volume.get("Mountpoint", ""))),
            )
    return table


def endpoints_table(rows: Iterable[Dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("SERVER", style="cyan")
    table.add_column("ADDRESS")
    table.add_column("TLS")
    table.add_column("SOURCE", style="dim")
    table.add_column("STATUS")
    for row in rows:
        reachable = row.get("reachable")
        if reachable is None:
            status = "-"
        else:
            status = "[green]online[/green]" if reachable else "[red]offline[/red]"
        table.add_row(
            escape(str(row.get("name", ""))),
            escape(str(row.get("base_url", ""))),
            "yes" if row.get("tls") else "no",
            escape(str(row.get("source", ""))),
            status,
        )
    return table


def settings_table(groups: Iterable["SettingsGroup"]) -> Table:
    """Текущие значения настроек; изменённые относительно умолчаний выделены."""

    table = Table(show_header=True, header_style="bold")
    table.add_column("SETTING", style="cyan")
    table.add_column("VALUE")
    table.add_column("DEFAULT", style="dim")
    for group in groups:
        for key in group.keys():
            value = group.get(key)
            default = group.default(key)
            rendered = escape(repr(value))
            table.add_row(
                f"{group.name}.{key}",
                rendered if value == default else f"[yellow]{rendered}[/yellow]",
                escape(repr(default)),
            )
    return table
