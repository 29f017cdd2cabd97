"""Команды управления контейнерами."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import typer
from rich.markup import escape

from dockfleet.cli.output import (
    containers_table,
    print_endpoint_header,
    print_success,
    print_warning,
    stats_table,
)
from dockfleet.cli.support import command_errors, locate_container

if TYPE_CHECKING:
    from dockfleet.app import CLIApp

SERVER_HELP = "Docker server name (searched on all servers when omitted)."


def register_container_commands(root: typer.Typer, app: "CLIApp") -> None:
    """Подключает команды ps/stats/start/stop/restart/rm/inspect/logs/check-updates."""

    console = app.console

    @root.command("ps")
    def ps_command(
        all_containers: bool = typer.Option(False, "--all", "-a", help="Include stopped containers."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help="Only list this Docker server."),
    ) -> None:
        """List containers across Docker servers."""
        with command_errors(app):
            if server:
                containers = app.registry.require(server).list_containers(all_containers)
            else:
                containers = app.registry.list_all_containers(
                    all_containers, require_endpoints=True
                )
        if not containers:
            console.print("[dim]No containers found[/dim]")
            return
        console.print(containers_table(containers))

    @root.command("stats")
    def stats_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Show one resource usage sample for a container."""
        with command_errors(app):
            location = locate_container(app, container, server)
            stats = location.endpoint.get_stats(container)
        console.print(stats_table(stats))

    @root.command("start")
    def start_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Start (or unpause) a container."""
        with command_errors(app):
            location = locate_container(app, container, server)
            location.endpoint.start_container(container)
        print_success(console, f"Started {container} on {location.name}")

    @root.command("stop")
    def stop_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Stop a running container."""
        with command_errors(app):
            location = locate_container(app, container, server)
            location.endpoint.stop_container(container)
        print_success(console, f"Stopped {container} on {location.name}")

    @root.command("restart")
    def restart_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Restart a container."""
        with command_errors(app):
            location = locate_container(app, container, server)
            location.endpoint.restart_container(container)
        print_success(console, f"Restarted {container} on {location.name}")

    @root.command("rm")
    def remove_command(
        container: str = typer.Argument(..., help="Container id or name."),
        force: bool = typer.Option(False, "--force", "-f", help="Remove even if the container is running."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Remove a container."""
        with command_errors(app):
            location = locate_container(app, container, server)
            location.endpoint.remove_container(container, force=force)
        print_success(console, f"Removed {container} on {location.name}")

    @root.command("inspect")
    def inspect_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Print the full inspection document of a container as JSON."""
        with command_errors(app):
            location = locate_container(app, container, server)
            attrs = location.endpoint.inspect_container(container)
        print_endpoint_header(console, location.name, container)
        console.print_json(data=attrs, default=str)

    @root.command("logs")
    def logs_command(
        container: str = typer.Argument(..., help="Container id or name."),
        tail: Optional[int] = typer.Option(None, "--tail", "-n", help="Number of trailing lines."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Print the last log lines of a container."""
        with command_errors(app):
            if tail is None:
                tail = app.settings.get_value("connections", "logs_tail_default")
            location = locate_container(app, container, server)
            text = location.endpoint.get_logs(container, tail=tail)
        print_endpoint_header(console, location.name, container)
        console.out(text.rstrip("\n"), highlight=False)

    @root.command("check-updates")
    def check_updates_command(
        container: str = typer.Argument(..., help="Container id or name."),
        server: Optional[str] = typer.Option(None, "--server", "-s", help=SERVER_HELP),
    ) -> None:
        """Pull the container's image and report whether a newer one exists."""
        with command_errors(app):
            location = locate_container(app, container, server)
            check = location.endpoint.check_updates(container)
        if check.outdated:
            print_warning(
                console,
                f"{container} on {location.name}: newer image available for {check.image_ref}",
            )
        else:
            print_success(
                console, f"{container} on {location.name} is up to date ({check.image_ref})"
            )
        console.print(
            f"[dim]current {escape(check.current_image_id)} / latest {escape(check.latest_image_id)}[/dim]"
        )
