"""Упрощённые структуры данных для описания объектов Docker."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class PortMapping:
    """Опубликованный порт контейнера."""

    private_port: int
    protocol: str = "tcp"
    public_port: Optional[int] = None


@dataclass(slots=True)
class ContainerSummary:
    """Представление контейнера из docker ps."""

    identifier: str
    name: str
    image: str
    state: str
    status: str
    created: datetime
    ports: List[PortMapping] = field(default_factory=list)
    endpoint: Optional[str] = None  # заполняется эндпоинтом, вернувшим запись

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.identifier,
            "name": self.name,
            "image": self.image,
            "state": self.state,
            "status": self.status,
            "ports": [asdict(port) for port in self.ports],
            "created": self.created.isoformat(),
            "endpoint": self.endpoint,
        }


@dataclass(slots=True)
class ContainerStats:
    """Вычисленные метрики контейнера."""

    identifier: str
    name: str
    cpu_percent: float
    memory_used: int
    memory_limit: int
    memory_percent: float
    rx_bytes: int = 0
    tx_bytes: int = 0
    endpoint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.identifier,
            "name": self.name,
            "cpu_percent": self.cpu_percent,
            "memory": {
                "used": self.memory_used,
                "limit": self.memory_limit,
                "percent": self.memory_percent,
            },
            "network": {"rx_bytes": self.rx_bytes, "tx_bytes": self.tx_bytes},
            "endpoint": self.endpoint,
        }


@dataclass(slots=True)
class UpdateCheck:
    """Результат сравнения образа контейнера со свежим pull."""

    container: str
    endpoint: str
    image_ref: str
    current_image_id: str
    latest_image_id: str

    @property
    def outdated(self) -> bool:
        return self.current_image_id != self.latest_image_id
