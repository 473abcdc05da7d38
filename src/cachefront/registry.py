"""Explicit registry of named stores and caches.

The registry is an ordinary object created by the application at startup
and passed to whoever needs a cache; nothing here is process-global.

Usage:
    registry = CacheRegistry(FileStore("~/.cache/myapp"), stores={"shared": redis_store})
    users = registry.provide("users")
    sessions = registry.provide("sessions", store="shared")
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from cachefront.cache import Cache
from cachefront.exceptions import (
    CacheDefinedError,
    NoCacheError,
    NoStoreError,
    StoreConfigurationError,
    StoreDefinedError,
)
from cachefront.keys import SEPARATOR
from cachefront.store.protocol import Store

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_STORE = "default"


class CacheRegistry:
    """Maps names to stores and to the caches built on top of them.

    Args:
        default_store: Registered under ``"default"``.
        stores: Additional stores to register by name.
        global_namespace: Prepended (with ``::``) to every cache name to form
            the cache's namespace, so several applications can share a store.
        enabled: Initial enabled flag for caches created by the registry.
    """

    def __init__(
        self,
        default_store: Store,
        stores: Mapping[str, Store] | None = None,
        global_namespace: str = "",
        enabled: bool = True,
    ) -> None:
        self._stores: dict[str, Store] = {}
        self._caches: dict[str, Cache] = {}
        self._global_namespace = global_namespace
        self._enabled = enabled

        self.register_store(DEFAULT_STORE, default_store)
        for name, store in (stores or {}).items():
            self.register_store(name, store)

    @property
    def global_namespace(self) -> str:
        return self._global_namespace

    @global_namespace.setter
    def global_namespace(self, global_namespace: str) -> None:
        """Change the prefix for caches registered from now on.

        Caches already registered keep their namespace and stay reachable
        through ``caches`` under their full name.
        """
        self._global_namespace = global_namespace or ""

    @property
    def caches(self) -> Mapping[str, Cache]:
        """Registered caches keyed by their full (globally namespaced) name."""
        return MappingProxyType(self._caches)

    @property
    def stores(self) -> Mapping[str, Store]:
        return MappingProxyType(self._stores)

    def register_store(self, name: str, store: Store) -> None:
        """Register *store* under *name*.

        Raises:
            StoreDefinedError: If a store with that name already exists.
            StoreConfigurationError: If *store* does not satisfy the Store protocol.
        """
        if name in self._stores:
            raise StoreDefinedError(f'Cannot overwrite already defined store "{name}"')
        if not isinstance(store, Store):
            raise StoreConfigurationError(
                f'Store "{name}" must implement read/exists/write/remove/remove_all, {type(store).__name__} given'
            )
        self._stores[name] = store
        logger.debug("Registered store %s (%s)", name, type(store).__name__)

    def register_cache(self, name: str, store: str | Store = DEFAULT_STORE) -> Cache:
        """Create and register a cache called *name* on top of *store*.

        *store* is either a registered store name or a Store instance.

        Raises:
            CacheDefinedError: If a cache with that name already exists.
            NoStoreError: If *store* names an unregistered store.
            StoreConfigurationError: If *store* does not satisfy the Store protocol.
        """
        full_name = self._full_name(name)
        if full_name in self._caches:
            raise CacheDefinedError(f'Cache "{name}" has already been registered')

        backend = self.get_store(store) if isinstance(store, str) else store
        cache = Cache(backend, namespace=full_name, enabled=self._enabled)
        self._caches[full_name] = cache
        logger.debug("Registered cache %s on %s", full_name, type(backend).__name__)
        return cache

    def provide(self, name: str, store: str | Store = DEFAULT_STORE) -> Cache:
        """Return the cache called *name*, registering it first if needed."""
        try:
            return self.get_cache(name)
        except NoCacheError:
            return self.register_cache(name, store)

    def get_cache(self, name: str) -> Cache:
        full_name = self._full_name(name)
        try:
            return self._caches[full_name]
        except KeyError:
            raise NoCacheError(f'There is no cache "{name}" registered') from None

    def get_store(self, name: str = DEFAULT_STORE) -> Store:
        try:
            return self._stores[name]
        except KeyError:
            raise NoStoreError(f'No store called "{name}" defined') from None

    def _full_name(self, name: str) -> str:
        if not self._global_namespace:
            return name.lower()
        return f"{self._global_namespace}{SEPARATOR}{name}".lower()
