"""Namespace invalidation for flat key/value stores.

Stores such as Redis or memcached cannot cheaply delete "everything under a
prefix". Instead each namespace owns a generation counter kept in the store
itself, and every key written or read under the namespace carries the
current generation:

    users>>resource::42   ->   users>>7>>resource::42

Flushing the namespace increments the counter. Keys of the previous
generation are never touched again and are left for the backend's own
eviction to reclaim.

Example:
    generations = NamespaceGenerations(counter)
    store_key = generations.rewrite("users>>resource::42")
    generations.bump("users")  # every previously written key is now unreachable
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from typing import TYPE_CHECKING, Protocol

from cachefront.keys import NAMESPACE_SEPARATOR, split_namespace

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

INITIAL_GENERATION = 1


class GenerationCounter(Protocol):
    """Raw counter primitives a flat store must offer for versioned keys."""

    def read_counter(self, key: str) -> int | None:
        """Return the counter stored under *key*, or None when absent."""
        ...

    def init_counter(self, key: str, value: int) -> None:
        """Store *value* under *key* only if the key does not exist yet."""
        ...

    def increment_counter(self, key: str) -> int:
        """Atomically increment the counter under *key* and return the new value."""
        ...

    def flush_everything(self) -> None:
        """Drop every key in the store."""
        ...


def generation_key(namespace: str) -> str:
    """Store key holding the generation counter of *namespace*."""
    digest = hashlib.md5(namespace.encode()).hexdigest()
    return f"{digest}{NAMESPACE_SEPARATOR}version"


class NamespaceGenerations:
    """Tracks and bumps namespace generations for a flat store.

    Generations are cached in-process so that key rewriting does not cost a
    round trip. When *max_age* is given, a cached generation is re-read from
    the store once it is older than that many seconds, which bounds how long
    this process keeps using a generation that another process has already
    flushed.
    """

    def __init__(
        self,
        counter: GenerationCounter,
        max_age: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._counter = counter
        self._max_age = max_age
        self._clock = clock
        self._lock = threading.Lock()
        self._generations: dict[str, tuple[int, float]] = {}

    def current(self, namespace: str) -> int:
        """Return the current generation of *namespace*."""
        now = self._clock()
        with self._lock:
            cached = self._generations.get(namespace)
        if cached is not None and (self._max_age is None or now - cached[1] < self._max_age):
            return cached[0]

        key = generation_key(namespace)
        generation = self._counter.read_counter(key)
        if generation is None:
            self._counter.init_counter(key, INITIAL_GENERATION)
            # Another process may have initialised or bumped it in between
            generation = self._counter.read_counter(key) or INITIAL_GENERATION

        with self._lock:
            known = self._generations.get(namespace)
            if known is not None and known[0] > generation:
                generation = known[0]
            self._generations[namespace] = (generation, now)
        return generation

    def rewrite(self, key: str) -> str:
        """Splice the namespace generation into a namespaced store key.

        Keys without a namespace segment are returned unchanged.
        """
        parts = split_namespace(key)
        if parts is None:
            return key
        namespace, rest = parts
        generation = self.current(namespace)
        return f"{namespace}{NAMESPACE_SEPARATOR}{generation}{NAMESPACE_SEPARATOR}{rest}"

    def bump(self, namespace: str) -> int:
        """Invalidate every key of *namespace* by moving to the next generation."""
        key = generation_key(namespace)
        generation = self._counter.increment_counter(key)
        if generation <= INITIAL_GENERATION:
            # The counter was missing, so readers may still be on the initial generation
            generation = self._counter.increment_counter(key)
        with self._lock:
            known = self._generations.get(namespace)
            if known is not None and known[0] > generation:
                generation = known[0]
            self._generations[namespace] = (generation, self._clock())
        logger.info("Namespace %r moved to generation %d", namespace, generation)
        return generation

    def reset(self) -> None:
        """Flush the whole store and forget every cached generation."""
        self._counter.flush_everything()
        with self._lock:
            self._generations.clear()
        logger.info("Flushed all namespaces")

    def cached_generations(self) -> dict[str, int]:
        """Snapshot of the generations this process currently knows."""
        with self._lock:
            return {namespace: entry[0] for namespace, entry in self._generations.items()}
