"""Settings loading helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import tomllib

from pydantic import BaseModel, Field

CONFIG_FILE = Path.home() / ".config" / "visor" / "config.toml"

DATABASE_URL_VARIABLES = ("VISOR_DATABASE_URL", "DATABASE_URL")
LOG_LEVEL_VARIABLE = "VISOR_LOG_LEVEL"


class DatabaseSettings(BaseModel):
    """Connection target and pool options for the application database."""

    url: str | None = None
    database: str | None = None
    connect_timeout: float | None = 10.0
    command_timeout: float | None = None
    min_pool_size: int = 1
    max_pool_size: int = 10

    def resolve_url(self, environ: Mapping[str, str] | None = None) -> str | None:
        """Return the connection target, preferring the environment."""

        env = os.environ if environ is None else environ
        for name in DATABASE_URL_VARIABLES:
            value = env.get(name, "").strip()
            if value:
                return value
        if self.url and self.url.strip():
            return self.url.strip()
        return None


class AppSettings(BaseModel):
    """Shape of the Visor settings file."""

    log_level: str = "INFO"
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    def with_database_url(self, url: str) -> AppSettings:
        """Return a copy pointing at another database."""

        database = self.database.model_copy(update={"url": url})
        return self.model_copy(update={"database": database})

    def with_log_level(self, level: str) -> AppSettings:
        return self.model_copy(update={"log_level": level.upper()})


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    """Load settings from disk and the environment; fall back to defaults."""

    env = os.environ if environ is None else environ
    try:
        data = _read_config_file()
    except FileNotFoundError:
        data = {}
    except (tomllib.TOMLDecodeError, OSError):
        data = {}

    settings = AppSettings(
        log_level=data.get("log_level", AppSettings.model_fields["log_level"].default),
        database=data.get("database", DatabaseSettings()),
    )
    level = env.get(LOG_LEVEL_VARIABLE, "").strip()
    if level:
        settings = settings.with_log_level(level)
    return settings


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if isinstance(raw, dict):
        log_level = raw.get("log_level")
        if isinstance(log_level, str):
            data["log_level"] = log_level.upper()
        database = raw.get("database")
        if isinstance(database, dict):
            parsed: dict[str, object] = {}
            for key in ("url", "database"):
                value = database.get(key)
                if isinstance(value, str):
                    parsed[key] = value
            for key in ("connect_timeout", "command_timeout"):
                value = database.get(key)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    parsed[key] = float(value)
            for key in ("min_pool_size", "max_pool_size"):
                value = database.get(key)
                if isinstance(value, int) and not isinstance(value, bool):
                    parsed[key] = value
            data["database"] = DatabaseSettings(**parsed)
    return data


__all__ = [
    "AppSettings",
    "CONFIG_FILE",
    "DATABASE_URL_VARIABLES",
    "DatabaseSettings",
    "LOG_LEVEL_VARIABLE",
    "load_settings",
]
