from __future__ import annotations

import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from cachefront.keys import SEPARATOR, split_namespace
from cachefront.store.protocol import MISSING
from cachefront.store.serialization import PickleSerializer

if TYPE_CHECKING:
    from cachefront.store.serialization import Serializer

logger = logging.getLogger(__name__)

_UNFRIENDLY = re.compile(r"[^A-Za-z0-9_.-]+")
_GLOBAL_DIR = "_global"
_SUFFIX = ".cache"


def _friendly(segment: str) -> str:
    return _UNFRIENDLY.sub("_", segment).strip("._") or "_"


def _digest(value: str) -> str:
    return hashlib.md5(value.encode()).hexdigest()


class FileStore:
    """Store keeping one file per key under a root directory.

    Layout: ``{root}/{namespace-dir}/{tag}/{md5(key)}.cache`` where the
    namespace directory is a filesystem-friendly slug plus a short digest of
    the exact namespace, so distinct namespaces never share a directory.
    Keys without a namespace live under ``{root}/_global``. Removing a
    namespace deletes its directory tree's cache files and leaves every
    other namespace alone.
    """

    def __init__(self, directory: Path | str, serializer: Serializer | None = None) -> None:
        self._root = Path(directory).expanduser()
        self._serializer = serializer if serializer is not None else PickleSerializer()

    @property
    def root(self) -> Path:
        return self._root

    def read(self, key: str) -> object:
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return MISSING
        return self._serializer.deserialize(data, key)

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def write(self, key: str, value: object) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self._serializer.serialize(value)
        # Write to a sibling temp file so readers never see a partial payload
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    def remove_all(self, namespace: str = "") -> None:
        directory = self._namespace_dir(namespace) if namespace else self._root
        if not directory.is_dir():
            return
        removed = 0
        for path in directory.rglob(f"*{_SUFFIX}"):
            path.unlink(missing_ok=True)
            removed += 1
        logger.debug("Removed %d cache files under %s", removed, directory)

    def path_for(self, key: str) -> Path:
        """Return the file path backing *key*."""
        parts = split_namespace(key)
        if parts is None:
            base, rest = self._root / _GLOBAL_DIR, key
        else:
            base, rest = self._namespace_dir(parts[0]), parts[1]
        tag, sep, name = rest.partition(SEPARATOR)
        if not sep:
            return base / (_digest(rest) + _SUFFIX)
        return base / _friendly(tag) / (_digest(name) + _SUFFIX)

    def _namespace_dir(self, namespace: str) -> Path:
        return self._root / f"{_friendly(namespace)}-{_digest(namespace)[:8]}"
