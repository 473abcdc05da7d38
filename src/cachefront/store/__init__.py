from cachefront.store.file_store import FileStore
from cachefront.store.memory_store import MemoryStore
from cachefront.store.protocol import MISSING, Store
from cachefront.store.redis_store import RedisStore
from cachefront.store.serialization import JsonSerializer, PickleSerializer, Serializer
from cachefront.store.sqlite_store import SqliteStore

__all__ = [
    "MISSING",
    "FileStore",
    "JsonSerializer",
    "MemoryStore",
    "PickleSerializer",
    "RedisStore",
    "Serializer",
    "SqliteStore",
    "Store",
]
