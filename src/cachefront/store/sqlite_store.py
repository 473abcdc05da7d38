from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Full, Queue
from typing import TYPE_CHECKING

from cachefront.keys import namespace_prefixes
from cachefront.store.protocol import MISSING
from cachefront.store.serialization import PickleSerializer

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from cachefront.store.serialization import Serializer


class SqliteConnectionPool:
    """Thread-safe connection pool for SQLite."""

    def __init__(self, db_path: Path, max_connections: int = 5) -> None:
        self._db_path = db_path
        self._max_connections = max_connections
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=max_connections)
        self._schema_lock = threading.Lock()
        self._schema_initialized = False

    def _ensure_initialized(self, conn: sqlite3.Connection) -> None:
        if self._schema_initialized:
            return
        with self._schema_lock:
            if self._schema_initialized:
                return
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                "CREATE TABLE IF NOT EXISTS entries ("
                "  key TEXT PRIMARY KEY,"
                "  value BLOB NOT NULL"
                ")"
            )
            conn.commit()
            self._schema_initialized = True

    def _create_connection(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA busy_timeout=5000")
        self._ensure_initialized(conn)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Acquire a connection from the pool, returning it when done."""
        conn: sqlite3.Connection | None = None
        try:
            conn = self._pool.get_nowait()
        except Empty:
            conn = self._create_connection()

        try:
            yield conn
        finally:
            try:
                self._pool.put_nowait(conn)
            except Full:
                conn.close()

    def close(self) -> None:
        """Close every idle pooled connection."""
        while True:
            try:
                conn = self._pool.get_nowait()
            except Empty:
                return
            conn.close()


class SqliteStore:
    """Store backed by a single SQLite table of serialized values.

    Namespace removal is a prefix ``DELETE`` in one statement, so it is
    atomic with respect to writers in other namespaces.
    """

    def __init__(self, db_path: Path, serializer: Serializer | None = None) -> None:
        self._db_path = db_path
        self._serializer = serializer if serializer is not None else PickleSerializer()
        self._pool = SqliteConnectionPool(db_path)

    def read(self, key: str) -> object:
        with self._pool.connection() as conn:
            row = conn.execute("SELECT value FROM entries WHERE key = ?", (key,)).fetchone()
        if row is None:
            return MISSING
        return self._serializer.deserialize(bytes(row[0]), key)

    def exists(self, key: str) -> bool:
        with self._pool.connection() as conn:
            row = conn.execute("SELECT 1 FROM entries WHERE key = ?", (key,)).fetchone()
        return row is not None

    def write(self, key: str, value: object) -> None:
        data = self._serializer.serialize(value)
        with self._pool.connection() as conn:
            conn.execute("INSERT OR REPLACE INTO entries (key, value) VALUES (?, ?)", (key, sqlite3.Binary(data)))
            conn.commit()

    def remove(self, key: str) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            conn.commit()

    def remove_all(self, namespace: str = "") -> None:
        prefixes = namespace_prefixes(namespace)
        with self._pool.connection() as conn:
            if prefixes:
                for prefix in prefixes:
                    conn.execute("DELETE FROM entries WHERE substr(key, 1, ?) = ?", (len(prefix), prefix))
            else:
                conn.execute("DELETE FROM entries")
            conn.commit()

    def close(self) -> None:
        self._pool.close()
