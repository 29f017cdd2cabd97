"""Модели данных для описания Docker-эндпоинтов."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dockfleet.docker_api.exceptions import ConfigurationError
from dockfleet.utils.helpers import socket_endpoint_name

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 2375
DEFAULT_SCHEME = "http"
LOCAL_DEFAULT_NAME = "localhost"
SCHEMES = ("http", "https")

CA_FILE = "ca.pem"
CERT_FILE = "cert.pem"
KEY_FILE = "key.pem"


@dataclass(frozen=True, slots=True)
class TLSConfig:
    """Пути к TLS-материалу: CA, клиентский сертификат и ключ (только вместе)."""

    ca_cert: str
    client_cert: str
    client_key: str

    def __post_init__(self) -> None:
        missing = [
            label
            for label, value in (
                ("ca_cert", self.ca_cert),
                ("client_cert", self.client_cert),
                ("client_key", self.client_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "TLS material must include CA, certificate and key together; "
                f"missing: {', '.join(missing)}",
                context={"missing": missing},
            )

    @classmethod
    def from_directory(cls, cert_path: str | Path) -> "TLSConfig":
        """Читает ca.pem/cert.pem/key.pem из каталога DOCKER_CERT_PATH."""

        directory = Path(cert_path).expanduser()
        files = {name: directory / name for name in (CA_FILE, CERT_FILE, KEY_FILE)}
        for name, path in files.items():
            if not path.is_file():
                raise ConfigurationError(
                    f"TLS file '{name}' not found in {directory}",
                    context={"cert_path": str(directory), "file": name},
                )
            try:
                with path.open("rb"):
                    pass
            except OSError as exc:
                raise ConfigurationError(
                    f"TLS file '{path}' is not readable: {exc}",
                    context={"cert_path": str(directory), "file": name},
                ) from exc
        return cls(
            ca_cert=str(files[CA_FILE]),
            client_cert=str(files[CERT_FILE]),
            client_key=str(files[KEY_FILE]),
        )

    @property
    def cert_dir(self) -> str:
        """Каталог клиентского сертификата (для DOCKER_CERT_PATH)."""

        return str(Path(self.client_cert).parent)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ca_cert": self.ca_cert,
            "client_cert": self.client_cert,
            "client_key": self.client_key,
        }


@dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Неизменяемое описание одного Docker-эндпоинта.

    Сокет имеет приоритет: при заданном ``socket_path`` host/port/scheme
    игнорируются.
    """

    name: Optional[str] = None
    host: Optional[str] = None
    port: int = DEFAULT_PORT
    scheme: str = DEFAULT_SCHEME
    socket_path: Optional[str] = None
    tls: Optional[TLSConfig] = None

    def __post_init__(self) -> None:
        if self.socket_path and self.host:
            LOGGER.warning(
                "Endpoint %s sets both socket %s and host %s; host is ignored",
                self.name or "<unnamed>",
                self.socket_path,
                self.host,
            )
        if self.socket_path:
            return
        if self.scheme not in SCHEMES:
            raise ConfigurationError(
                f"Unsupported scheme '{self.scheme}', expected one of {', '.join(SCHEMES)}",
                context={"name": self.name, "scheme": self.scheme},
            )
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ConfigurationError(
                f"Port {self.port!r} is out of range [1, 65535]",
                context={"name": self.name, "port": self.port},
            )

    @property
    def uses_socket(self) -> bool:
        return bool(self.socket_path)

    @property
    def resolved_name(self) -> str:
        """Явное имя либо производное от сокета/хоста."""

        if self.name:
            return self.name
        if self.socket_path:
            return socket_endpoint_name(self.socket_path)
        return self.host or LOCAL_DEFAULT_NAME

    @property
    def use_tls(self) -> bool:
        return not self.uses_socket and (self.tls is not None or self.scheme == "https")

    def to_dict(self) -> Dict[str, Any]:
        """Сериализует конфигурацию (без секретов: TLS хранится как пути)."""

        if self.uses_socket:
            return {"name": self.resolved_name, "socket_path": self.socket_path}
        return {
            "name": self.resolved_name,
            "host": self.host,
            "port": self.port,
            "scheme": self.scheme,
            "tls": self.tls.to_dict() if self.tls else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EndpointConfig":
        tls_data = data.get("tls")
        tls: Optional[TLSConfig] = None
        if isinstance(tls_data, dict):
            tls = TLSConfig(
                ca_cert=tls_data.get("ca_cert", ""),
                client_cert=tls_data.get("client_cert", ""),
                client_key=tls_data.get("client_key", ""),
            )
        return cls(
            name=data.get("name"),
            host=data.get("host"),
            port=int(data.get("port") or DEFAULT_PORT),
            scheme=data.get("scheme") or DEFAULT_SCHEME,
            socket_path=data.get("socket_path"),
            tls=tls,
        )
