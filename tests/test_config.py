"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from visor import config as config_module
from visor.config import AppSettings, DatabaseSettings, load_settings


def test_load_settings_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_settings(environ={})

    assert result == AppSettings()


def test_load_settings_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
log_level = "debug"

[database]
url = "postgresql://visor@localhost/visor"
database = "visor"
connect_timeout = 3
max_pool_size = 5
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_settings(environ={})

    assert result.log_level == "DEBUG"
    assert result.database.url == "postgresql://visor@localhost/visor"
    assert result.database.database == "visor"
    assert result.database.connect_timeout == 3.0
    assert result.database.max_pool_size == 5
    assert result.database.min_pool_size == 1


def test_load_settings_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("log_level = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_settings(environ={})

    assert result == AppSettings()


def test_log_level_environment_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_settings(environ={"VISOR_LOG_LEVEL": "warning"})

    assert result.log_level == "WARNING"


def test_resolve_url_prefers_environment() -> None:
    settings = DatabaseSettings(url="postgresql://file/visor")

    assert settings.resolve_url({"VISOR_DATABASE_URL": "postgresql://env/visor"}) == "postgresql://env/visor"
    assert settings.resolve_url({"DATABASE_URL": "postgresql://fallback/visor"}) == "postgresql://fallback/visor"
    assert settings.resolve_url({"VISOR_DATABASE_URL": "  "}) == "postgresql://file/visor"


def test_resolve_url_returns_none_when_unset() -> None:
    assert DatabaseSettings().resolve_url({}) is None
    assert DatabaseSettings(url="   ").resolve_url({}) is None


def test_with_database_url_returns_copy() -> None:
    settings = AppSettings()

    updated = settings.with_database_url("postgresql://other/visor")

    assert updated.database.url == "postgresql://other/visor"
    assert settings.database.url is None
