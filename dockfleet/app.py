"""Сборка CLI-приложения dockfleet из менеджеров."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import typer
from rich.console import Console

from dockfleet.cli.compose_commands import register_compose_commands
from dockfleet.cli.config_commands import register_config_commands
from dockfleet.cli.container_commands import register_container_commands
from dockfleet.cli.endpoint_commands import register_endpoint_commands
from dockfleet.cli.resource_commands import register_resource_commands
from dockfleet.connections.registry import EndpointRegistry
from dockfleet.connections.store import EndpointStore
from dockfleet.settings.registry import SettingsRegistry

LOGGER = logging.getLogger(__name__)

APP_HELP = """dockfleet - manage containers on several Docker servers

  dockfleet endpoints list --check   # which servers answer
  dockfleet ps --all                 # containers everywhere
  dockfleet logs web --tail 50       # server is found automatically
"""


@dataclass
class CLIApp:
    """Typer-приложение со всеми менеджерами, доступными командам."""

    settings: SettingsRegistry
    registry: EndpointRegistry
    store: EndpointStore
    console: Console = field(default_factory=Console)

    def __post_init__(self) -> None:
        self.cli = typer.Typer(
            name="dockfleet",
            help=APP_HELP,
            add_completion=False,
            no_args_is_help=True,
        )
        register_endpoint_commands(self.cli, self)
        register_container_commands(self.cli, self)
        register_resource_commands(self.cli, self)
        register_compose_commands(self.cli, self)
        register_config_commands(self.cli, self)

    def run(self, args: Optional[List[str]] = None) -> int:
        """Выполняет одну команду и возвращает код завершения."""

        try:
            self.cli(args=args, prog_name="dockfleet")
        except SystemExit as exc:
            if exc.code is None:
                return 0
            return exc.code if isinstance(exc.code, int) else 1
        finally:
            self.registry.close()
        return 0


def create_application(
    *,
    settings: SettingsRegistry,
    registry: EndpointRegistry,
    store: EndpointStore,
    console: Optional[Console] = None,
) -> CLIApp:
    """Создаёт CLIApp; консоль по умолчанию пишет в stdout."""

    LOGGER.debug("Creating CLI with endpoints: %s", ", ".join(registry.names()) or "none")
    return CLIApp(
        settings=settings,
        registry=registry,
        store=store,
        console=console or Console(),
    )
