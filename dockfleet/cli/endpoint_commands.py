"""Команды управления списком Docker-эндпоинтов."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import typer

from dockfleet.cli.output import endpoints_table, print_success, print_warning
from dockfleet.cli.support import command_errors
from dockfleet.connections.environment import build_endpoint_config
from dockfleet.docker_api.exceptions import EndpointNotFoundError

if TYPE_CHECKING:
    from dockfleet.app import CLIApp


def register_endpoint_commands(root: typer.Typer, app: "CLIApp") -> None:
    """Подключает группу endpoints (list/add/remove)."""

    console = app.console
    endpoints_app = typer.Typer(help="Manage Docker servers", no_args_is_help=True)

    @endpoints_app.command("list")
    def list_endpoints(
        check: bool = typer.Option(False, "--check", "-c", help="Ping every server and show its status."),
    ) -> None:
        """Show configured Docker servers."""
        status = app.registry.ping_all() if check else {}
        stored = {config.resolved_name for config in app.store.list_configs()}
        rows: List[Dict[str, Any]] = []
        for name in app.registry.names():
            endpoint = app.registry.get(name)
            if endpoint is None:
                continue
            row = endpoint.describe()
            row["tls"] = endpoint.config.use_tls
            row["source"] = "stored" if name in stored else "environment"
            row["reachable"] = status.get(name) if check else None
            rows.append(row)
        if not rows:
            console.print("[dim]No Docker servers configured[/dim]")
            return
        console.print(endpoints_table(rows))

    @endpoints_app.command("add")
    def add_endpoint(
        name: str = typer.Argument(..., help="Unique server name."),
        host: Optional[str] = typer.Option(None, "--host", help="Daemon host name or address."),
        port: Optional[int] = typer.Option(None, "--port", help="Daemon TCP port (default 2375)."),
        protocol: Optional[str] = typer.Option(None, "--protocol", help="http or https."),
        socket_path: Optional[str] = typer.Option(None, "--socket", help="Local unix socket path."),
        cert_path: Optional[str] = typer.Option(
            None, "--cert-path", help="Directory with ca.pem, cert.pem and key.pem."
        ),
    ) -> None:
        """Register a Docker server and remember it for later runs."""
        with command_errors(app):
            config = build_endpoint_config(
                name,
                host=host,
                port=port,
                scheme=protocol,
                socket_path=socket_path,
                cert_path=cert_path,
            )
            endpoint = app.registry.add(config)
            app.store.save_config(config)
        print_success(console, f"Added {endpoint.name} ({endpoint.base_url})")

    @endpoints_app.command("remove")
    def remove_endpoint(
        name: str = typer.Argument(..., help="Server name."),
    ) -> None:
        """Forget a Docker server."""
        with command_errors(app):
            removed = app.registry.remove(name)
            forgotten = app.store.delete_config(name)
            if not removed and not forgotten:
                raise EndpointNotFoundError(name, app.registry.names())
        print_success(console, f"Removed {name}")
        if removed and not forgotten:
            print_warning(
                console,
                f"{name} comes from the environment and will be back on the next run",
            )

    root.add_typer(endpoints_app, name="endpoints")
