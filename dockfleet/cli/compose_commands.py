"""Группа команд docker-compose: развёртывание и удаление стеков."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from dockfleet.cli.output import print_success
from dockfleet.cli.support import command_errors

if TYPE_CHECKING:
    from dockfleet.app import CLIApp


def register_compose_commands(root: typer.Typer, app: "CLIApp") -> None:
    """Подключает compose up/down к основному CLI."""

    console = app.console
    compose_app = typer.Typer(help="Deploy and tear down Compose stacks", no_args_is_help=True)

    @compose_app.command("up")
    def compose_up(
        compose_file: Path = typer.Argument(..., help="Path to the compose YAML file."),
        server: str = typer.Option(..., "--server", "-s", help="Docker server to deploy on."),
        project: Optional[str] = typer.Option(None, "--project", "-p", help="Compose project name."),
    ) -> None:
        """Deploy a compose file in detached mode."""
        with command_errors(app):
            yaml_text = compose_file.read_text(encoding="utf-8")
            endpoint = app.registry.require(server)
            result = endpoint.deploy_compose(yaml_text, project)
        if result.output.strip():
            console.out(result.output.rstrip(), highlight=False)
        print_success(console, f"Deployed {project or compose_file.name} on {server}")

    @compose_app.command("down")
    def compose_down(
        project: str = typer.Argument(..., help="Compose project name."),
        server: str = typer.Option(..., "--server", "-s", help="Docker server running the project."),
    ) -> None:
        """Stop a compose project and remove its volumes."""
        with command_errors(app):
            result = app.registry.require(server).teardown_compose(project)
        if result.output.strip():
            console.out(result.output.rstrip(), highlight=False)
        print_success(console, f"Removed project {project} from {server}")

    root.add_typer(compose_app, name="compose")
