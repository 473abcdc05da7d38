from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from cachefront.config import config_bool
from cachefront.exceptions import StoreConfigurationError
from cachefront.registry import CacheRegistry
from cachefront.store.file_store import FileStore
from cachefront.store.memory_store import MemoryStore
from cachefront.store.redis_store import RedisStore
from cachefront.store.serialization import JsonSerializer, PickleSerializer
from cachefront.store.sqlite_store import SqliteStore

if TYPE_CHECKING:
    from cachefront.config import AppConfig
    from cachefront.store.protocol import Store
    from cachefront.store.serialization import Serializer

logger = logging.getLogger(__name__)

STORE_TYPES = ("memory", "file", "sqlite", "redis")


def _resolve_config(config: AppConfig | None) -> AppConfig:
    if config is None:
        from cachefront.config import create_config

        config = create_config()
    return config


def create_serializer(name: str) -> Serializer:
    if name == "pickle":
        return PickleSerializer()
    if name == "json":
        return JsonSerializer()
    raise StoreConfigurationError(f'Unknown serializer "{name}" (expected "pickle" or "json")')


def create_store(config: AppConfig | None = None) -> Store:
    """Build the store named by ``store.type`` in the app config."""
    config = _resolve_config(config)
    store_type = str(config["store.type"]).lower()

    if store_type == "memory":
        store: Store = MemoryStore()
    elif store_type == "file":
        serializer = create_serializer(str(config["store.serializer"]))
        store = FileStore(Path(str(config["store.file.directory"])).expanduser(), serializer=serializer)
    elif store_type == "sqlite":
        serializer = create_serializer(str(config["store.serializer"]))
        store = SqliteStore(Path(str(config["store.sqlite.db_path"])).expanduser(), serializer=serializer)
    elif store_type == "redis":
        serializer = create_serializer(str(config["store.serializer"]))
        max_age = float(str(config["store.redis.generation_max_age"]))
        store = RedisStore.from_url(
            str(config["store.redis.url"]),
            serializer=serializer,
            default_expiry=int(str(config["store.redis.default_expiry"])),
            retries=int(str(config["store.redis.retries"])),
            generation_max_age=max_age if max_age > 0 else None,
        )
    else:
        raise StoreConfigurationError(f'Unknown store type "{store_type}" (expected one of {", ".join(STORE_TYPES)})')

    logger.debug("Created %s store", store_type)
    return store


def create_registry(config: AppConfig | None = None) -> CacheRegistry:
    """Build a CacheRegistry whose default store comes from the app config."""
    config = _resolve_config(config)
    return CacheRegistry(
        create_store(config),
        global_namespace=str(config["cache.global_namespace"] or ""),
        enabled=config_bool(config["cache.enabled"]),
    )
