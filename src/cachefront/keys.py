"""Store key schema.

Key format: ``{namespace}>>{tag}::{key}``

Where:
- namespace: lower-cased cache namespace, omitted together with ``>>`` when empty
- tag: ``resource`` for the cached value, ``meta`` for its TTL record
- key: the caller's opaque cache key

A namespace segment ends at the ``>>`` that directly precedes the tag, so
stores can find and rewrite it even when the namespace or the caller's key
itself contains ``>>``. Keys without a namespace always start with their tag.
"""

from __future__ import annotations

from typing import Literal

SEPARATOR = "::"
NAMESPACE_SEPARATOR = ">>"

KeyTag = Literal["resource", "meta"]

RESOURCE_TAG: KeyTag = "resource"
META_TAG: KeyTag = "meta"

_TAGS: tuple[KeyTag, ...] = (RESOURCE_TAG, META_TAG)
_TAG_PREFIXES = tuple(f"{tag}{SEPARATOR}" for tag in _TAGS)
_TAG_MARKERS = tuple(f"{NAMESPACE_SEPARATOR}{prefix}" for prefix in _TAG_PREFIXES)


def build_key(namespace: str, key: str, tag: KeyTag = RESOURCE_TAG) -> str:
    """Build the full store key for *key* under *namespace*."""
    tagged = f"{tag}{SEPARATOR}{key}"
    if not namespace:
        return tagged
    return f"{namespace}{NAMESPACE_SEPARATOR}{tagged}"


def resource_key(namespace: str, key: str) -> str:
    return build_key(namespace, key, RESOURCE_TAG)


def meta_key(namespace: str, key: str) -> str:
    return build_key(namespace, key, META_TAG)


def namespace_prefixes(namespace: str) -> tuple[str, ...]:
    """Prefixes shared by every store key written under *namespace*.

    Empty for the global namespace. Keys of a nested namespace such as
    ``users>>archived`` do not start with any prefix of ``users``.
    """
    if not namespace:
        return ()
    return tuple(f"{namespace}{NAMESPACE_SEPARATOR}{tag}{SEPARATOR}" for tag in _TAGS)


def check_namespace(namespace: str) -> str:
    """Return *namespace* if store keys built from it can be split back apart.

    Raises:
        ValueError: If the namespace starts with a tag or embeds ``>>{tag}::``.
    """
    if namespace.startswith(_TAG_PREFIXES) or any(marker in namespace for marker in _TAG_MARKERS):
        raise ValueError(f"Invalid cache namespace {namespace!r}: it must not contain a key tag")
    return namespace


def split_namespace(store_key: str) -> tuple[str, str] | None:
    """Split a store key into ``(namespace, rest)``.

    The namespace ends at the first ``>>`` directly followed by a tag, so
    namespaces and caller keys may both contain ``>>``. Returns None for
    keys without a namespace segment, which always start with their tag.
    """
    if store_key.startswith(_TAG_PREFIXES):
        return None
    found = [i for i in (store_key.find(marker) for marker in _TAG_MARKERS) if i > 0]
    if not found:
        return None
    index = min(found)
    return store_key[:index], store_key[index + len(NAMESPACE_SEPARATOR) :]
