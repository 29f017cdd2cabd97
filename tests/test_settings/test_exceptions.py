"""Сообщения и контекст ошибок настроек."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockfleet.settings.exceptions import (
    SettingsError,
    SettingsIOError,
    SettingsNotFoundError,
    SettingsValidationError,
)


def test_not_found_names_the_setting(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("ERROR")
    assert str(SettingsNotFoundError("compose", "command")) == "Unknown setting 'compose.command'"
    assert str(SettingsNotFoundError("ui")) == "Unknown setting 'ui'"
    assert "compose.command" in caplog.text


def test_validation_error_keeps_details() -> None:
    error = SettingsValidationError("logging.level", "TRACE", "must be one of DEBUG, INFO")
    assert (error.key, error.value, error.reason) == ("logging.level", "TRACE", "must be one of DEBUG, INFO")
    assert str(error) == "Invalid value 'TRACE' for 'logging.level': must be one of DEBUG, INFO"
    assert isinstance(error, SettingsError)


def test_io_error_mentions_path(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    error = SettingsIOError(path, "permission denied")
    assert error.path == path
    assert error.context == {"path": str(path)}
    assert str(error) == f"Cannot use settings file {path}: permission denied"
