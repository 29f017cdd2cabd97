"""Тесты вспомогательных утилит."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockfleet.utils.helpers import (
    env_key,
    normalize_socket_path,
    socket_endpoint_name,
    strip_leading_slash,
    strip_socket_scheme,
)
from dockfleet.utils.paths import resolve_config_dir


def test_normalize_socket_path_adds_unix_prefix() -> None:
    assert normalize_socket_path("/var/run/docker.sock") == "unix:///var/run/docker.sock"
    assert normalize_socket_path("tcp://127.0.0.1:2375") == "tcp://127.0.0.1:2375"


def test_strip_socket_scheme() -> None:
    assert strip_socket_scheme("unix:///run/docker.sock") == "/run/docker.sock"
    assert strip_socket_scheme("/run/docker.sock") == "/run/docker.sock"


def test_socket_endpoint_name() -> None:
    assert socket_endpoint_name("/var/run/docker.sock") == "socket-_var_run_docker.sock"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("prod", "PROD"), ("staging-eu", "STAGING_EU"), ("dev.box 2", "DEV_BOX_2")],
)
def test_env_key(name: str, expected: str) -> None:
    assert env_key(name) == expected


def test_strip_leading_slash() -> None:
    assert strip_leading_slash("/web") == "web"
    assert strip_leading_slash("web") == "web"


def test_config_dir_honours_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DOCKFLEET_HOME", str(tmp_path))
    assert resolve_config_dir() == tmp_path / ".dockfleet"
