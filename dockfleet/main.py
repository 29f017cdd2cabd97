"""Точка входа в приложение dockfleet."""

from __future__ import annotations

import logging
import sys
from functools import partial
from pathlib import Path
from typing import List, Mapping, Optional

from rich.console import Console

from dockfleet import __version__
from dockfleet.app import create_application
from dockfleet.cli.output import print_error
from dockfleet.connections.endpoint import ComposeOptions, EndpointConnection
from dockfleet.connections.environment import environment_defines_endpoints, load_endpoint_configs
from dockfleet.connections.registry import EndpointRegistry
from dockfleet.connections.store import EndpointStore
from dockfleet.docker_api.exceptions import DockerAPIError
from dockfleet.settings.exceptions import SettingsError
from dockfleet.settings.registry import SettingsRegistry
from dockfleet.utils.logger import configure_logging
from dockfleet.utils.paths import resolve_config_dir

LOGGER = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
ENDPOINTS_FILE = "endpoints.json"


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Создаёт реестр настроек и загружает config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load()
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    """Настраивает логирование в соответствии с LoggingSettings."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level"),
        max_bytes=logging_settings.get("max_file_size_mb") * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files"),
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую структуру (~/.dockfleet, logs)."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Failed to initialize working directory %s: %s", base_dir, exc)
        return False


def build_registry(
    settings: SettingsRegistry,
    store: EndpointStore,
    environ: Optional[Mapping[str, str]] = None,
) -> EndpointRegistry:
    """Реестр из окружения и сохранённых эндпоинтов; сохранённые побеждают при совпадении имён.

    Локальный эндпоинт по умолчанию добавляется, только если не задано
    ничего: ни в окружении, ни в endpoints.json.
    """

    connections = settings.get_group("connections")
    timeout = (
        connections.get("connection_timeout_sec")
        if connections.get("connection_timeout_enabled")
        else None
    )
    compose = settings.get_group("compose")
    temp_dir = compose.get("temp_dir")
    options = ComposeOptions(
        command=compose.get("command"),
        timeout_seconds=compose.get("timeout_sec"),
        temp_dir=Path(temp_dir).expanduser() if temp_dir else None,
    )
    registry = EndpointRegistry(
        partial(EndpointConnection, client_timeout=timeout, compose=options),
        timeout=timeout,
        max_workers=connections.get("max_parallel_requests"),
    )

    stored = store.list_configs()
    stored_names = {config.resolved_name for config in stored}
    if environment_defines_endpoints(environ) or not stored:
        for config in load_endpoint_configs(environ):
            if config.resolved_name in stored_names:
                LOGGER.info("Endpoint %s from environment is overridden by stored one", config.resolved_name)
                continue
            registry.add(config)
    for config in stored:
        registry.add(config)
    return registry


def main(argv: Optional[List[str]] = None) -> int:
    """Основная точка входа: готовит окружение и выполняет команду."""

    base_dir = resolve_config_dir()
    configure_logging(base_dir / "logs")
    errors = Console(stderr=True)

    try:
        settings = initialize_settings(base_dir / CONFIG_FILE)
    except SettingsError as exc:
        print_error(errors, str(exc))
        return 1
    setup_logging_from_settings(base_dir, settings)

    if not initialize_workdir(base_dir):
        return 1

    try:
        store = EndpointStore(base_dir / ENDPOINTS_FILE)
        registry = build_registry(settings, store)
    except (DockerAPIError, OSError) as exc:
        print_error(errors, str(exc))
        return 1

    LOGGER.info("Starting dockfleet %s", __version__)
    app = create_application(settings=settings, registry=registry, store=store)
    return app.run(argv)


if __name__ == "__main__":
    sys.exit(main())
