"""TTL-aware cache facade over a Store.

Every value is written next to a small metadata record (see
cachefront.metadata) under derived keys (see cachefront.keys). Freshness is
decided from that record, so any store that can read, write and remove keys
becomes a cache with TTLs, age limits and namespace flushing.

Usage:
    cache = Cache(FileStore("~/.cache/myapp"), namespace="users")
    cache.set("42", user, ttl=300)
    user = cache.get("42", age=60, on_miss=lambda: load_user(42))
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from cachefront.exceptions import CorruptEntryError, StoreConfigurationError
from cachefront.keys import check_namespace, meta_key, resource_key
from cachefront.metadata import EntryMetadata, decode_metadata
from cachefront.store.protocol import MISSING, Store

if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

DEFAULT_METADATA_CACHE_SIZE = 1024


class Cache:
    """Namespaced cache with TTL and age checks on top of a raw Store.

    Metadata read from the store is remembered by this instance so that
    ``has`` followed by ``get`` costs one metadata read. At most
    *metadata_cache_size* records are kept, oldest dropped first, and a
    record is dropped once it has expired or its value is gone. Writes and
    removals made through this instance drop the remembered record. Other
    instances sharing the store are not notified.

    Args:
        store: Any object satisfying the Store protocol.
        namespace: Prefix for every key; lower-cased. May contain ``>>`` but
            not a key tag such as ``resource::``.
        enabled: When False the cache behaves as permanently empty.
        clock: Returns the current epoch time in seconds.
        metadata_cache_size: Maximum number of remembered metadata records.

    Raises:
        StoreConfigurationError: If *store* does not satisfy the Store protocol.
        ValueError: If *namespace* cannot be told apart from a key tag.
    """

    def __init__(
        self,
        store: Store,
        namespace: str = "",
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
        metadata_cache_size: int = DEFAULT_METADATA_CACHE_SIZE,
    ) -> None:
        if not isinstance(store, Store):
            raise StoreConfigurationError(
                f"Cache store must implement read/exists/write/remove/remove_all, {type(store).__name__} given"
            )
        self._store = store
        self._namespace = check_namespace((namespace or "").lower())
        self._enabled = enabled
        self._clock = clock
        self._meta_cache: dict[str, EntryMetadata] = {}
        self._meta_cache_size = metadata_cache_size
        # Bumped on every local write or removal; reads started before a bump are not remembered
        self._meta_epoch = 0
        self._meta_lock = threading.Lock()

    @property
    def store(self) -> Store:
        return self._store

    # -------------------------------------------------------------------------
    # Cache operations
    # -------------------------------------------------------------------------

    def set(self, key: str, value: object, ttl: int = 0) -> None:
        """Store *value* under *key*.

        A *ttl* of 0 stores the value without an absolute expiry; readers can
        still reject it by age.
        """
        if not self._enabled:
            return

        meta = meta_key(self._namespace, key)
        self._forget(meta)

        metadata = EntryMetadata.build(ttl, self._clock())
        # Value first: metadata must never point at a value that was not written
        self._store.write(resource_key(self._namespace, key), value)
        self._store.write(meta, metadata.to_dict())
        self._forget(meta)
        logger.debug("Cache SET %s (ttl=%ds)", meta, metadata.ttl)

    def get(self, key: str, age: int = 0, on_miss: Callable[[], object] | None = None) -> object:
        """Read *key*, optionally computing and caching it on a miss.

        Args:
            key: Cache key.
            age: Maximum age of the entry in seconds; 0 relies on its TTL only.
                Also used as the TTL when caching the result of *on_miss*.
            on_miss: Zero-argument callable producing the value when the
                entry is absent or stale.

        Returns:
            The cached value, the result of *on_miss*, or MISSING.
        """
        if not self._enabled:
            return MISSING if on_miss is None else on_miss()

        if self.has(key, age):
            value = self._read_resource(key)
            if value is not MISSING:
                logger.debug("Cache HIT %s", key)
                return value
            # The value vanished after its metadata was checked
            logger.debug("Cache resource missing for %s despite metadata", key)

        if on_miss is None:
            logger.debug("Cache MISS %s", key)
            return MISSING

        logger.debug("Cache MISS %s, computing value", key)
        value = on_miss()
        self.set(key, value, age)
        return value

    def has(self, key: str, age: int = 0) -> bool:
        """Return True when *key* holds a fresh value.

        The entry must have been written no more than *age* seconds ago (when
        *age* > 0), must not be past its TTL, and its value must still exist
        in the store.
        """
        if not self._enabled:
            return False

        meta = meta_key(self._namespace, key)
        metadata = self._metadata(meta)
        if metadata is None:
            return False

        now = self._clock()
        if metadata.is_expired(now):
            self._forget(meta)
            return False
        if not metadata.is_fresh(now, int(age)):
            return False

        # Metadata may outlive a value removed behind our back
        if not self._store.exists(resource_key(self._namespace, key)):
            self._forget(meta)
            return False
        return True

    def clear(self, key: str) -> None:
        """Remove *key* and its metadata. Clearing an absent key is a no-op."""
        meta = meta_key(self._namespace, key)
        self._forget(meta)
        self._store.remove(meta)
        self._store.remove(resource_key(self._namespace, key))
        self._forget(meta)
        logger.debug("Cache CLEAR %s", meta)

    def flush(self) -> None:
        """Remove every entry in this cache's namespace.

        With an empty namespace this removes everything in the store.
        """
        self._forget_all()
        self._store.remove_all(self._namespace)
        self._forget_all()
        logger.info("Flushed cache namespace %r", self._namespace)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    @property
    def namespace(self) -> str:
        return self._namespace

    @namespace.setter
    def namespace(self, namespace: str) -> None:
        self._namespace = check_namespace((namespace or "").lower())

    def set_namespace(self, namespace: str) -> None:
        self.namespace = namespace

    def get_namespace(self) -> str:
        return self._namespace

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def set_enabled(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _metadata(self, meta: str) -> EntryMetadata | None:
        with self._meta_lock:
            cached = self._meta_cache.get(meta)
            epoch = self._meta_epoch
        if cached is not None:
            return cached

        try:
            raw = self._store.read(meta)
        except CorruptEntryError as e:
            logger.warning("Treating corrupt cache metadata as a miss: %s", e)
            return None

        metadata = decode_metadata(raw, meta)
        if metadata is not None:
            self._remember(meta, metadata, epoch)
        return metadata

    def _read_resource(self, key: str) -> object:
        try:
            return self._store.read(resource_key(self._namespace, key))
        except CorruptEntryError as e:
            logger.warning("Treating corrupt cached value as a miss: %s", e)
            return MISSING

    def _remember(self, meta: str, metadata: EntryMetadata, epoch: int) -> None:
        with self._meta_lock:
            if epoch != self._meta_epoch or self._meta_cache_size <= 0:
                return
            self._meta_cache.pop(meta, None)
            while len(self._meta_cache) >= self._meta_cache_size:
                del self._meta_cache[next(iter(self._meta_cache))]
            self._meta_cache[meta] = metadata

    # Called before and after touching the store; a read overlapping either call is not remembered
    def _forget(self, meta: str) -> None:
        with self._meta_lock:
            self._meta_cache.pop(meta, None)
            self._meta_epoch += 1

    def _forget_all(self) -> None:
        with self._meta_lock:
            self._meta_cache.clear()
            self._meta_epoch += 1

    def __repr__(self) -> str:
        return f"Cache(namespace={self._namespace!r}, store={type(self._store).__name__}, enabled={self._enabled})"
