"""Общие утилиты модулей CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

import typer

from dockfleet.cli.output import print_error
from dockfleet.connections.registry import ContainerLocation
from dockfleet.docker_api.exceptions import ComposeError, DockerAPIError, NoEndpointsError
from dockfleet.settings.exceptions import SettingsError

if TYPE_CHECKING:
    from dockfleet.app import CLIApp

LOGGER = logging.getLogger(__name__)


@contextmanager
def command_errors(app: "CLIApp") -> Iterator[None]:
    """Печатает ошибку одной строкой и завершает команду с кодом 1."""

    try:
        yield
    except ComposeError as exc:
        print_error(app.console, str(exc))
        if exc.output:
            app.console.out(exc.output.rstrip(), highlight=False)
        raise typer.Exit(1) from exc
    except (DockerAPIError, SettingsError, ValueError, OSError) as exc:
        LOGGER.debug("Command failed: %s", exc)
        print_error(app.console, str(exc))
        raise typer.Exit(1) from exc


def locate_container(app: "CLIApp", container: str, server: Optional[str]) -> ContainerLocation:
    """Эндпоинт по --server либо автопоиск по всем эндпоинтам."""

    if server is None and len(app.registry) == 0:
        raise NoEndpointsError()
    return app.registry.resolve(container, server)
