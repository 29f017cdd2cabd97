"""Тесты хранилища эндпоинтов endpoints.json."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dockfleet.connections.models import EndpointConfig
from dockfleet.connections.store import EndpointStore
from dockfleet.docker_api.exceptions import ConfigurationError


def make_config(name: str = "prod", host: str = "10.0.0.1") -> EndpointConfig:
    return EndpointConfig(name=name, host=host)


def test_missing_file_is_created(tmp_path: Path) -> None:
    file_path = tmp_path / "endpoints.json"
    store = EndpointStore(file_path)
    assert store.list_configs() == []
    assert json.loads(file_path.read_text(encoding="utf-8")) == {"endpoints": []}


def test_save_and_reload(tmp_path: Path) -> None:
    file_path = tmp_path / "endpoints.json"
    store = EndpointStore(file_path)
    store.save_config(make_config())
    store.save_config(EndpointConfig(name="local", socket_path="/var/run/docker.sock"))

    loaded = EndpointStore(file_path)
    assert [config.resolved_name for config in loaded.list_configs()] == ["prod", "local"]
    assert loaded.list_configs()[0] == make_config()


def test_overwrite_and_delete(tmp_path: Path) -> None:
    store = EndpointStore(tmp_path / "endpoints.json")
    store.save_config(make_config())
    store.save_config(make_config(host="10.0.0.2"))
    assert [config.host for config in store.list_configs()] == ["10.0.0.2"]

    assert store.delete_config("prod") is True
    assert store.delete_config("prod") is False
    assert store.list_configs() == []


def test_corrupted_file_raises(tmp_path: Path) -> None:
    file_path = tmp_path / "endpoints.json"
    file_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        EndpointStore(file_path)


@pytest.mark.parametrize(
    ("content", "reason"),
    [
        ("[]", "expected an object"),
        ('{"endpoints": {"prod": {}}}', "expected an object"),
        ('{"endpoints": ["prod"]}', "entry 0 is not an object"),
        ('{"endpoints": [{"name": "prod", "host": "10.0.0.1", "port": "abc"}]}', "entry 0:"),
    ],
)
def test_malformed_structure_raises(tmp_path: Path, content: str, reason: str) -> None:
    file_path = tmp_path / "endpoints.json"
    file_path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError, match=reason) as excinfo:
        EndpointStore(file_path)
    assert excinfo.value.context == {"path": str(file_path)}
