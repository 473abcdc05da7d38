"""Serialization protocols and implementations for byte-oriented stores.

Stores that persist outside the process (files, SQLite, Redis) convert
values to bytes with a Serializer. The cache facade never inspects values.

Usage:
    serializer = JsonSerializer()
    data = serializer.serialize({"a": [1, 2]})
    value = serializer.deserialize(data, key="users>>resource::1")
"""

from __future__ import annotations

import json
import pickle
from typing import Protocol

from cachefront.exceptions import CorruptEntryError


class Serializer(Protocol):
    """Protocol for converting cached values to and from bytes."""

    def serialize(self, value: object) -> bytes:
        """Convert a value to bytes for storage."""
        ...

    def deserialize(self, data: bytes, key: str = "") -> object:
        """Convert stored bytes back to a value.

        Raises CorruptEntryError when *data* cannot be decoded.
        """
        ...


class PickleSerializer:
    """Serializer for arbitrary picklable Python values."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def serialize(self, value: object) -> bytes:
        return pickle.dumps(value, protocol=self._protocol)

    def deserialize(self, data: bytes, key: str = "") -> object:
        try:
            return pickle.loads(data)
        except Exception as e:  # unpickling can fail with almost any exception type
            raise CorruptEntryError(key, str(e) or type(e).__name__) from e


class JsonSerializer:
    """Serializer for JSON-compatible values.

    Tuples come back as lists, as with any JSON round trip.
    """

    def serialize(self, value: object) -> bytes:
        return json.dumps(value, separators=(",", ":")).encode()

    def deserialize(self, data: bytes, key: str = "") -> object:
        try:
            return json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptEntryError(key, str(e)) from e
