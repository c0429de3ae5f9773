"""Lazily initialised, single-flight database connection cache."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .config import DatabaseSettings
from .connections import Connector
from .errors import ConfigurationError, DatabaseConnectionError

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class ConnectionState:
    """Connection handle plus the attempt currently in flight, if any."""

    handle: Any = None
    pending: asyncio.Future[Any] | None = None

    @property
    def connected(self) -> bool:
        return self.handle is not None

    @property
    def connecting(self) -> bool:
        return self.handle is None and self.pending is not None


class ConnectionCache:
    """Hands out one shared connection handle, created on first use.

    Concurrent callers that arrive while an attempt is in flight await that
    same attempt. A failed attempt is reported to every waiter and then
    forgotten, so the next call starts a fresh one. The cache belongs to the
    event loop that first awaits it.
    """

    def __init__(
        self,
        connector: Connector,
        *,
        settings: DatabaseSettings | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._connector = connector
        self._settings = settings or DatabaseSettings()
        self._environ = environ
        self._state = ConnectionState()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state.connected

    async def get_connection(self) -> Any:
        """Return the shared handle, connecting on first use."""

        state = self._state
        if state.handle is not None:
            return state.handle
        if state.pending is None:
            url = self._settings.resolve_url(self._environ)
            if not url:
                raise ConfigurationError("Missing database URL; set VISOR_DATABASE_URL.")
            state.pending = asyncio.ensure_future(self._establish(url))
        return await asyncio.shield(state.pending)

    async def close(self) -> None:
        """Close the shared handle and return to the unconnected state."""

        state = self._state
        pending, handle = state.pending, state.handle
        state.pending = None
        state.handle = None
        if pending is not None and not pending.done():
            pending.cancel()
        if handle is not None:
            await self._connector.close(handle)
            LOG.info("Database connection closed")

    async def _establish(self, url: str) -> Any:
        timeout = self._settings.connect_timeout
        LOG.info("Connecting to database (timeout=%s)", timeout)
        try:
            if timeout:
                handle = await asyncio.wait_for(self._connector.connect(url), timeout)
            else:
                handle = await self._connector.connect(url)
        except asyncio.CancelledError:
            self._forget_attempt()
            raise
        except Exception as exc:
            self._forget_attempt()
            if timeout and isinstance(exc, asyncio.TimeoutError):
                LOG.warning("Database connection timed out after %ss", timeout)
                raise DatabaseConnectionError(f"Timed out connecting to database after {timeout}s") from exc
            LOG.warning("Database connection failed: %s", exc)
            raise DatabaseConnectionError(f"Failed to connect to database: {exc}") from exc
        if self._state.pending is not asyncio.current_task():
            # close() reset the state while the connector was returning.
            await self._connector.close(handle)
            LOG.info("Discarded database connection opened during close")
            raise DatabaseConnectionError("Connection cache was closed while connecting")
        self._state.handle = handle
        self._state.pending = None
        LOG.info("Database connection established")
        return handle

    def _forget_attempt(self) -> None:
        # close() may already have replaced the attempt this task belongs to.
        if self._state.pending is asyncio.current_task():
            self._state.pending = None


__all__ = ["ConnectionCache", "ConnectionState"]
