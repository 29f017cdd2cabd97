"""Иерархия ошибок работы с Docker-эндпоинтами."""

from __future__ import annotations

from typing import Any, Dict, Optional


class DockerAPIError(Exception):
    """Базовая ошибка: хранит имя эндпоинта и контекст операции."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.endpoint = endpoint
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.endpoint:
            return f"[{self.endpoint}] {self.message}"
        return self.message


class NotFoundError(DockerAPIError):
    """Идентификатор не найден на целевом эндпоинте."""


class EndpointNotFoundError(NotFoundError):
    """В реестре нет эндпоинта с таким именем."""

    def __init__(self, name: str, available: list[str]) -> None:
        listing = ", ".join(available) if available else "none"
        super().__init__(
            f"Docker server '{name}' not found. Available servers: {listing}",
            context={"name": name, "available": list(available)},
        )


class ConflictError(DockerAPIError):
    """Операция недопустима для текущего состояния объекта."""


class TransportError(DockerAPIError):
    """Эндпоинт недоступен либо клиент не удалось создать."""


class ConfigurationError(DockerAPIError):
    """Некорректная конфигурация эндпоинта или входного документа."""


class NoEndpointsError(DockerAPIError):
    """Агрегирующая операция вызвана при пустом реестре."""

    def __init__(self) -> None:
        super().__init__("No Docker servers are registered")


class ComposeError(DockerAPIError):
    """Внешний Compose-процесс завершился ошибкой или не запустился."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: Optional[int] = None,
        spawn_error: Optional[str] = None,
        output: str = "",
        endpoint: Optional[str] = None,
    ) -> None:
        self.exit_code = exit_code
        self.spawn_error = spawn_error
        self.output = output
        super().__init__(
            message,
            endpoint=endpoint,
            context={"exit_code": exit_code, "spawn_error": spawn_error},
        )
