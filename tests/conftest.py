"""Shared pytest fixtures for test modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cachefront.store.memory_store import MemoryStore
from cachefront.store.redis_store import RedisStore
from tests.fakes.clock import FakeClock
from tests.fakes.redis import FakeRedis

if TYPE_CHECKING:
    from pathlib import Path

    from cachefront.store.protocol import Store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis: FakeRedis) -> RedisStore:
    """RedisStore over an in-memory fake client, retrying without real sleeps."""
    return RedisStore(fake_redis, retries=0)  # type: ignore[arg-type]


STORE_TYPES = ["memory", "file", "sqlite", "redis"]


@pytest.fixture(params=STORE_TYPES)
def any_store(request: pytest.FixtureRequest, tmp_path: Path) -> Store:
    """Parametrized fixture that yields each Store implementation."""
    from cachefront.store.file_store import FileStore
    from cachefront.store.sqlite_store import SqliteStore

    if request.param == "memory":
        return MemoryStore()
    if request.param == "file":
        return FileStore(tmp_path / "files")
    if request.param == "sqlite":
        return SqliteStore(tmp_path / "cache.db")
    if request.param == "redis":
        return RedisStore(FakeRedis(), retries=0)  # type: ignore[arg-type]
    raise ValueError(f"Unknown store type: {request.param}")
