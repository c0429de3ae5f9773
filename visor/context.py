"""Application context created once at start-up and passed to callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .config import AppSettings, load_settings
from .connections import AsyncpgConnector, Connector
from .database import ConnectionCache


@dataclass(slots=True)
class AppContext:
    """Long-lived services shared by request handlers."""

    settings: AppSettings
    database: ConnectionCache

    async def get_connection(self) -> Any:
        return await self.database.get_connection()

    async def aclose(self) -> None:
        await self.database.close()

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_context(
    settings: AppSettings | None = None,
    *,
    connector: Connector | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppContext:
    """Build the process-wide context; connecting is deferred to first use."""

    resolved = settings or load_settings(environ)
    database = ConnectionCache(
        connector or AsyncpgConnector(resolved.database),
        settings=resolved.database,
        environ=environ,
    )
    return AppContext(settings=resolved, database=database)


__all__ = ["AppContext", "create_context"]
