"""Database connectors used by the connection cache."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

import asyncpg

from .config import DatabaseSettings


@runtime_checkable
class Connector(Protocol):
    """Protocol implemented by database connectors."""

    async def connect(self, url: str) -> Any:
        """Open a connection handle for the given target."""

    async def close(self, handle: Any) -> None:
        """Release a handle returned by :meth:`connect`."""


class AsyncpgConnector:
    """Connector that opens an asyncpg pool against PostgreSQL."""

    def __init__(self, settings: DatabaseSettings | None = None) -> None:
        self._settings = settings or DatabaseSettings()

    async def connect(self, url: str) -> asyncpg.Pool:
        kwargs: dict[str, object] = {
            "dsn": url,
            "min_size": self._settings.min_pool_size,
            "max_size": self._settings.max_pool_size,
        }
        if self._settings.database:
            kwargs["database"] = self._settings.database
        if self._settings.command_timeout is not None:
            kwargs["command_timeout"] = self._settings.command_timeout
        return await asyncpg.create_pool(**kwargs)

    async def close(self, handle: asyncpg.Pool) -> None:
        await handle.close()


@dataclass(slots=True)
class DemoConnection:
    """Handle returned by :class:`DemoConnector`."""

    url: str
    attempt: int
    connected_at: datetime
    closed: bool = False


@dataclass(slots=True)
class DemoConnector:
    """Offline connector that counts attempts and can simulate failures."""

    delay: float = 0.0
    failures: int = 0
    attempts: int = 0
    closed: list[DemoConnection] = field(default_factory=list)

    async def connect(self, url: str) -> DemoConnection:
        self.attempts += 1
        attempt = self.attempts
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures:
            self.failures -= 1
            raise OSError(f"demo connection {attempt} to {url} refused")
        return DemoConnection(url=url, attempt=attempt, connected_at=datetime.now(tz=timezone.utc))

    async def close(self, handle: DemoConnection) -> None:
        handle.closed = True
        self.closed.append(handle)


__all__ = [
    "AsyncpgConnector",
    "Connector",
    "DemoConnection",
    "DemoConnector",
]
