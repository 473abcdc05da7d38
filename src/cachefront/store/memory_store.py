from __future__ import annotations

import threading

from cachefront.keys import namespace_prefixes
from cachefront.store.protocol import MISSING


class MemoryStore:
    """Process-local store keeping values as-is in a dict.

    Nothing survives the process. Useful for tests and for per-process
    memoization behind the same Cache interface.
    """

    def __init__(self) -> None:
        self._data: dict[str, object] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> object:
        with self._lock:
            return self._data.get(key, MISSING)

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def write(self, key: str, value: object) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def remove_all(self, namespace: str = "") -> None:
        prefixes = namespace_prefixes(namespace)
        with self._lock:
            if not prefixes:
                self._data.clear()
                return
            for key in [k for k in self._data if k.startswith(prefixes)]:
                del self._data[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
