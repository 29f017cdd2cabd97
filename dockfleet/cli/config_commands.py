"""Команды просмотра и изменения config.json."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from dockfleet.cli.output import print_success, settings_table
from dockfleet.cli.support import command_errors

if TYPE_CHECKING:
    from dockfleet.app import CLIApp


def register_config_commands(root: typer.Typer, app: "CLIApp") -> None:
    """Подключает группу config (show/set/reset)."""

    console = app.console
    config_app = typer.Typer(help="Show and change dockfleet settings", no_args_is_help=True)

    @config_app.command("show")
    def show_config() -> None:
        """Print every setting with its default."""
        console.print(f"[dim]{app.settings.config_path}[/dim]")
        console.print(settings_table(app.settings.groups()))

    @config_app.command("set")
    def set_config(
        key: str = typer.Argument(..., help="Setting as group.key, e.g. compose.command."),
        value: str = typer.Argument(..., help="New value."),
    ) -> None:
        """Change one setting and save it."""
        with command_errors(app):
            parsed = app.settings.set_from_text(key, value)
            app.settings.save()
        print_success(console, f"{key} = {parsed!r}")

    @config_app.command("reset")
    def reset_config() -> None:
        """Restore default settings."""
        with command_errors(app):
            app.settings.reset()
            app.settings.save()
        print_success(console, "Settings restored to defaults")

    root.add_typer(config_app, name="config")
