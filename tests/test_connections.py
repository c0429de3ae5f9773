"""Tests for the database connectors."""

from __future__ import annotations

from typing import Any

import pytest

from visor.config import DatabaseSettings
from visor.connections import AsyncpgConnector, Connector, DemoConnector


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class _FakePool:
    def __init__(self) -> None:
        self.closed = False

    async def close(self) -> None:
        self.closed = True


@pytest.mark.anyio
async def test_asyncpg_connector_creates_pool(monkeypatch: pytest.MonkeyPatch) -> None:
    pool = _FakePool()
    captured: dict[str, Any] = {}

    async def _fake_create_pool(**kwargs: Any) -> _FakePool:
        captured.update(kwargs)
        return pool

    monkeypatch.setattr("visor.connections.asyncpg.create_pool", _fake_create_pool)
    connector = AsyncpgConnector(
        DatabaseSettings(database="visor", command_timeout=5.0, min_pool_size=2, max_pool_size=4)
    )

    handle = await connector.connect("postgresql://localhost/app")

    assert handle is pool
    assert captured == {
        "dsn": "postgresql://localhost/app",
        "min_size": 2,
        "max_size": 4,
        "database": "visor",
        "command_timeout": 5.0,
    }
    await connector.close(handle)
    assert pool.closed is True


@pytest.mark.anyio
async def test_asyncpg_connector_omits_unset_options(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    async def _fake_create_pool(**kwargs: Any) -> _FakePool:
        captured.update(kwargs)
        return _FakePool()

    monkeypatch.setattr("visor.connections.asyncpg.create_pool", _fake_create_pool)

    await AsyncpgConnector().connect("postgresql://localhost/app")

    assert "database" not in captured
    assert "command_timeout" not in captured


@pytest.mark.anyio
async def test_demo_connector_fails_then_recovers() -> None:
    connector = DemoConnector(failures=1)

    with pytest.raises(OSError):
        await connector.connect("demo://local")
    handle = await connector.connect("demo://local")

    assert connector.attempts == 2
    assert handle.attempt == 2
    assert handle.url == "demo://local"


def test_connectors_satisfy_protocol() -> None:
    assert isinstance(DemoConnector(), Connector)
    assert isinstance(AsyncpgConnector(), Connector)
