"""TTL bookkeeping record stored beside every cached value."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cachefront.store.protocol import MISSING

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntryMetadata:
    """Freshness information for one cached value.

    ``ttl`` of 0 means the entry never expires on its own but can still be
    rejected by a caller-supplied age. ``expires`` of 0 means never.
    """

    ttl: int
    created_at: float
    expires: float

    @classmethod
    def build(cls, ttl: int, now: float) -> EntryMetadata:
        ttl = int(ttl)
        return cls(ttl=ttl, created_at=now, expires=now + ttl if ttl > 0 else 0)

    def is_fresh(self, now: float, age: int = 0) -> bool:
        """Check the age limit (when given) and the absolute expiry."""
        if age > 0 and now - age > self.created_at:
            return False
        return not self.is_expired(now)

    def is_expired(self, now: float) -> bool:
        return bool(self.expires) and now > self.expires

    def to_dict(self) -> dict[str, Any]:
        return {"ttl": self.ttl, "created_at": self.created_at, "expires": self.expires}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntryMetadata:
        """Parse a stored record, raising ValueError/TypeError on a malformed one."""
        ttl = data["ttl"]
        created_at = data["created_at"]
        expires = data["expires"]
        for name, value in (("ttl", ttl), ("created_at", created_at), ("expires", expires)):
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(f"{name} must be a number, got {type(value).__name__}")
        return cls(ttl=int(ttl), created_at=float(created_at), expires=float(expires))


def decode_metadata(raw: object, meta_key: str) -> EntryMetadata | None:
    """Turn whatever a store returned for *meta_key* into metadata.

    Anything that is not a well-formed record is reported as absent.
    """
    if not isinstance(raw, dict):
        if raw is not MISSING:
            logger.warning("Ignoring malformed cache metadata for %s: %r", meta_key, type(raw).__name__)
        return None
    try:
        return EntryMetadata.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring malformed cache metadata for %s: %s", meta_key, e)
        return None
