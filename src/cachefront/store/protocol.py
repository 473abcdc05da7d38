from __future__ import annotations

from enum import Enum
from typing import Final, Literal, Protocol, runtime_checkable


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> Literal[False]:
        return False


MISSING: Final = _Missing.MISSING
"""Returned by stores and caches when a key is absent.

Distinct from None so that None, 0, "" and False can all be cached.
"""

Missing = Literal[_Missing.MISSING]


@runtime_checkable
class Store(Protocol):
    def read(self, key: str) -> object: ...

    def exists(self, key: str) -> bool: ...

    def write(self, key: str, value: object) -> None: ...

    def remove(self, key: str) -> None: ...

    def remove_all(self, namespace: str = "") -> None: ...
