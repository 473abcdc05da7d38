"""Exception hierarchy for cachefront.

Misses are never raised. Only wiring problems, duplicate registrations and
unreadable store payloads have dedicated exceptions; store I/O errors
propagate as whatever the backend raises.
"""


class CacheError(Exception):
    """Base class for all cachefront errors."""


class StoreConfigurationError(CacheError):
    """Raised when a store is wired incorrectly or its configuration is invalid."""


class CacheDefinedError(CacheError):
    """Raised when registering a cache under a name that is already taken."""


class StoreDefinedError(CacheError):
    """Raised when registering a store under a name that is already taken."""


class NoCacheError(CacheError, KeyError):
    """Raised when looking up a cache that was never registered."""


class NoStoreError(CacheError, KeyError):
    """Raised when looking up a store that was never registered."""


class CorruptEntryError(CacheError):
    """Raised by a store when a persisted payload cannot be deserialized."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Corrupt cache entry {key!r}: {reason}")
        self.key = key
        self.reason = reason
