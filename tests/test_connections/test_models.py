"""Тесты моделей данных для эндпоинтов."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockfleet.connections.models import EndpointConfig, TLSConfig
from dockfleet.docker_api.exceptions import ConfigurationError


def test_endpoint_name_derivation() -> None:
    assert EndpointConfig(name="prod", host="10.0.0.1").resolved_name == "prod"
    assert EndpointConfig(host="10.0.0.1").resolved_name == "10.0.0.1"
    assert EndpointConfig(socket_path="/var/run/docker.sock").resolved_name == "socket-_var_run_docker.sock"
    assert EndpointConfig().resolved_name == "localhost"


def test_socket_wins_over_host(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("WARNING")
    config = EndpointConfig(name="mixed", host="10.0.0.1", socket_path="/run/docker.sock")
    assert config.uses_socket
    assert config.use_tls is False
    assert "host is ignored" in caplog.text


@pytest.mark.parametrize("port", [0, 70000])
def test_invalid_port_rejected(port: int) -> None:
    with pytest.raises(ConfigurationError):
        EndpointConfig(host="10.0.0.1", port=port)


def test_invalid_scheme_rejected() -> None:
    with pytest.raises(ConfigurationError):
        EndpointConfig(host="10.0.0.1", scheme="ftp")


def test_tls_material_is_all_or_none() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        TLSConfig(ca_cert="/certs/ca.pem", client_cert="/certs/cert.pem", client_key="")
    assert "client_key" in str(excinfo.value)


def test_tls_from_directory(tmp_path: Path) -> None:
    (tmp_path / "ca.pem").write_text("ca", encoding="utf-8")
    (tmp_path / "cert.pem").write_text("cert", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        TLSConfig.from_directory(tmp_path)

    (tmp_path / "key.pem").write_text("key", encoding="utf-8")
    tls = TLSConfig.from_directory(tmp_path)
    assert tls.client_key == str(tmp_path / "key.pem")
    assert tls.cert_dir == str(tmp_path)


def test_config_dict_roundtrip_keeps_tls_paths(tmp_path: Path) -> None:
    tls = TLSConfig(ca_cert="/c/ca.pem", client_cert="/c/cert.pem", client_key="/c/key.pem")
    config = EndpointConfig(name="secure", host="example.org", port=2376, scheme="https", tls=tls)
    restored = EndpointConfig.from_dict(config.to_dict())
    assert restored == config
    assert restored.use_tls


def test_socket_config_serializes_without_host() -> None:
    data = EndpointConfig(name="local", socket_path="/var/run/docker.sock").to_dict()
    assert data == {"name": "local", "socket_path": "/var/run/docker.sock"}
