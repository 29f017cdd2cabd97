"""Запуск внешнего docker-compose против выбранного эндпоинта."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api.client import build_base_url
from dockfleet.docker_api.exceptions import ComposeError, ConfigurationError

LOGGER = logging.getLogger(__name__)

DEFAULT_COMPOSE_COMMAND = "docker-compose"
COMPOSE_FILE_PREFIX = "docker-compose-"
COMPOSE_FILE_SUFFIX = ".yml"


@dataclass(slots=True)
class ComposeResult:
    """Результат выполнения docker-compose."""

    command: List[str]
    return_code: int
    output: str
    endpoint: Optional[str] = None
    project_name: Optional[str] = None


def build_environment(
    config: EndpointConfig, base: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Окружение, в котором docker-compose говорит с нужным демоном."""

    env = dict(os.environ if base is None else base)
    env["DOCKER_HOST"] = build_base_url(config)
    if config.tls is not None and not config.uses_socket:
        env["DOCKER_TLS_VERIFY"] = "1"
        env["DOCKER_CERT_PATH"] = config.tls.cert_dir
    else:
        env.pop("DOCKER_TLS_VERIFY", None)
        env.pop("DOCKER_CERT_PATH", None)
    return env


def validate_compose_document(yaml_text: str) -> None:
    """Проверяет, что текст является YAML-документом с верхним уровнем в виде словаря."""

    try:
        document = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid Compose YAML: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigurationError("Compose document must be a YAML mapping")


def deploy_stack(
    yaml_text: str,
    project_name: Optional[str] = None,
    *,
    env: Mapping[str, str],
    compose_command: str = DEFAULT_COMPOSE_COMMAND,
    temp_dir: Optional[Path] = None,
    timeout_seconds: int = 0,
    endpoint: Optional[str] = None,
) -> ComposeResult:
    """Пишет YAML во временный файл, выполняет `up -d` и удаляет файл.

    Файл удаляется на любом пути выхода: успех, ненулевой код, ошибка
    запуска процесса.
    """

    validate_compose_document(yaml_text)
    directory = temp_dir or Path(tempfile.gettempdir())
    compose_file = write_compose_file(yaml_text, directory)
    try:
        args: List[str] = []
        if project_name:
            args += ["-p", project_name]
        args += ["-f", str(compose_file), "up", "-d"]
        return _run_compose(
            build_compose_command(compose_command, args),
            cwd=directory,
            env=env,
            timeout_seconds=timeout_seconds,
            endpoint=endpoint,
            project_name=project_name,
        )
    finally:
        _remove_file(compose_file)


def teardown_stack(
    project_name: str,
    *,
    env: Mapping[str, str],
    compose_command: str = DEFAULT_COMPOSE_COMMAND,
    timeout_seconds: int = 0,
    endpoint: Optional[str] = None,
) -> ComposeResult:
    """Выполняет `down -v` для проекта, удаляя связанные тома."""

    if not project_name:
        raise ValueError("Project name is required to tear down a Compose stack")
    return _run_compose(
        build_compose_command(compose_command, ["-p", project_name, "down", "-v"]),
        cwd=Path(tempfile.gettempdir()),
        env=env,
        timeout_seconds=timeout_seconds,
        endpoint=endpoint,
        project_name=project_name,
    )


def build_compose_command(compose_command: str, args: List[str]) -> List[str]:
    """`docker compose` и `docker-compose` оба допустимы."""

    base = shlex.split(compose_command)
    if not base:
        raise ConfigurationError("Compose command must not be empty")
    return base + list(args)


def write_compose_file(yaml_text: str, directory: Path) -> Path:
    """Создаёт уникальный файл (mkstemp), не пересекающийся с параллельными запусками."""

    directory.mkdir(parents=True, exist_ok=True)
    fd, path = tempfile.mkstemp(
        prefix=COMPOSE_FILE_PREFIX, suffix=COMPOSE_FILE_SUFFIX, dir=str(directory)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(yaml_text)
    except OSError:
        _remove_file(Path(path))
        raise
    return Path(path)


def _remove_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.error("Failed to remove compose file %s: %s", path, exc)


def _run_compose(
    command: List[str],
    *,
    cwd: Path,
    env: Mapping[str, str],
    timeout_seconds: int,
    endpoint: Optional[str],
    project_name: Optional[str],
) -> ComposeResult:
    printable = shlex.join(command)
    timeout = None if timeout_seconds <= 0 else timeout_seconds
    LOGGER.info("Running %s on %s", printable, endpoint or "<default>")
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd),
            check=False,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
            env=dict(env),
        )
    except subprocess.TimeoutExpired as exc:
        LOGGER.error("%s timed out after %s seconds", printable, timeout)
        raise ComposeError(
            f"{command[0]} timed out after {timeout} seconds",
            output=_as_text(exc.output),
            endpoint=endpoint,
        ) from exc
    except OSError as exc:
        LOGGER.error("Cannot launch %s: %s", printable, exc)
        raise ComposeError(
            f"Failed to launch {command[0]}: {exc}",
            spawn_error=str(exc),
            endpoint=endpoint,
        ) from exc

    output = completed.stdout or ""
    if completed.returncode != 0:
        LOGGER.error("%s exited with code %s: %s", printable, completed.returncode, output)
        raise ComposeError(
            f"{command[0]} exited with code {completed.returncode}",
            exit_code=completed.returncode,
            output=output,
            endpoint=endpoint,
        )
    return ComposeResult(
        command=command,
        return_code=completed.returncode,
        output=output,
        endpoint=endpoint,
        project_name=project_name,
    )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
