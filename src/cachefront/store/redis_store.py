"""Redis-backed store using versioned keys for namespace invalidation.

Redis has no cheap "delete everything under a prefix", so namespace removal
bumps a per-namespace generation counter (see cachefront.store.versioning)
instead of scanning keys. Every key this store touches is rewritten to embed
the current generation of its namespace.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import redis

from cachefront.exceptions import StoreConfigurationError
from cachefront.store._retry import default_redis_retry
from cachefront.store.protocol import MISSING
from cachefront.store.serialization import PickleSerializer
from cachefront.store.versioning import NamespaceGenerations

if TYPE_CHECKING:
    from collections.abc import Callable

    from cachefront.store.serialization import Serializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default socket timeout for clients built from a URL (seconds)
DEFAULT_SOCKET_TIMEOUT = 5


class RedisStore:
    """Store keeping serialized values in Redis.

    Args:
        client: A synchronous ``redis.Redis`` client returning bytes.
        serializer: Converts values to and from bytes.
        default_expiry: Optional Redis expiry in seconds for every write, so
            entries orphaned by a generation bump are reclaimed even without
            an eviction policy. Generation counters never expire.
        retries: Extra attempts for connection errors and timeouts.
        generation_max_age: Seconds after which a cached namespace
            generation is re-read from Redis. None caches forever.
    """

    def __init__(
        self,
        client: redis.Redis,
        serializer: Serializer | None = None,
        default_expiry: int | None = None,
        retries: int = 3,
        generation_max_age: float | None = None,
    ) -> None:
        if retries < 0:
            raise StoreConfigurationError(f"retries must be >= 0, got {retries}")
        self._client = client
        self._serializer = serializer if serializer is not None else PickleSerializer()
        self._default_expiry = default_expiry or None
        self._execute: Callable[..., Any] = default_redis_retry("redis command", retries)(self._call)
        self._generations = NamespaceGenerations(self, max_age=generation_max_age)

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisStore:
        """Build a store with a client connected to *url*."""
        try:
            client = redis.Redis.from_url(url, socket_timeout=DEFAULT_SOCKET_TIMEOUT, decode_responses=False)
        except ValueError as e:
            raise StoreConfigurationError(f"Invalid Redis URL {url!r}: {e}") from e
        return cls(client, **kwargs)

    @property
    def client(self) -> redis.Redis:
        return self._client

    @property
    def generations(self) -> NamespaceGenerations:
        return self._generations

    # -------------------------------------------------------------------------
    # Store contract
    # -------------------------------------------------------------------------

    def read(self, key: str) -> object:
        raw = self._execute(self._client.get, self._generations.rewrite(key))
        if raw is None:
            return MISSING
        return self._serializer.deserialize(raw, key)

    def exists(self, key: str) -> bool:
        return bool(self._execute(self._client.exists, self._generations.rewrite(key)))

    def write(self, key: str, value: object) -> None:
        data = self._serializer.serialize(value)
        self._execute(self._client.set, self._generations.rewrite(key), data, ex=self._default_expiry)

    def remove(self, key: str) -> None:
        self._execute(self._client.delete, self._generations.rewrite(key))

    def remove_all(self, namespace: str = "") -> None:
        if not namespace:
            self._generations.reset()
            return
        self._generations.bump(namespace)

    # -------------------------------------------------------------------------
    # Generation counter primitives
    # -------------------------------------------------------------------------

    def read_counter(self, key: str) -> int | None:
        raw = self._execute(self._client.get, key)
        return None if raw is None else int(raw)

    def init_counter(self, key: str, value: int) -> None:
        self._execute(self._client.set, key, value, nx=True)

    def increment_counter(self, key: str) -> int:
        return int(self._execute(self._client.incr, key))

    def flush_everything(self) -> None:
        self._execute(self._client.flushdb)

    def _call(self, command: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        return command(*args, **kwargs)
