"""Namespaced TTL cache facade over interchangeable storage backends."""

from cachefront.cache import Cache
from cachefront.exceptions import (
    CacheDefinedError,
    CacheError,
    CorruptEntryError,
    NoCacheError,
    NoStoreError,
    StoreConfigurationError,
    StoreDefinedError,
)
from cachefront.metadata import EntryMetadata
from cachefront.registry import CacheRegistry
from cachefront.store import MISSING, FileStore, MemoryStore, RedisStore, SqliteStore, Store

__all__ = [
    "MISSING",
    "Cache",
    "CacheDefinedError",
    "CacheError",
    "CacheRegistry",
    "CorruptEntryError",
    "EntryMetadata",
    "FileStore",
    "MemoryStore",
    "NoCacheError",
    "NoStoreError",
    "RedisStore",
    "SqliteStore",
    "Store",
    "StoreConfigurationError",
    "StoreDefinedError",
]
