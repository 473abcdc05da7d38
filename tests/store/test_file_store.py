from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cachefront.exceptions import CorruptEntryError
from cachefront.store.file_store import FileStore
from cachefront.store.protocol import MISSING
from cachefront.store.serialization import JsonSerializer

if TYPE_CHECKING:
    from pathlib import Path


class TestFileStore:
    def test_auto_creates_directories(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path / "deep" / "nested")
        store.write("ns>>resource::k", "v")
        assert store.read("ns>>resource::k") == "v"

    def test_namespaced_key_layout(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        path = store.path_for("users>>resource::42")
        assert path.suffix == ".cache"
        assert path.parent.name == "resource"
        assert path.parent.parent.name.startswith("users-")
        assert path.parent.parent.parent == tmp_path

    def test_global_key_layout(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        path = store.path_for("meta::42")
        assert path.parent.name == "meta"
        assert path.parent.parent == tmp_path / "_global"

    def test_unfriendly_namespaces_get_distinct_directories(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        first = store.path_for("a b>>resource::k")
        second = store.path_for("a_b>>resource::k")
        assert first != second

    def test_namespace_named_like_a_tag_does_not_collide_with_global_keys(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.write("resource::k", "global")
        store.write("resource>>resource::k", "namespaced")
        store.remove_all("resource")
        assert store.read("resource::k") == "global"

    def test_namespace_containing_separator_has_its_own_directory(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        nested = store.path_for("a>>b>>resource::k")
        parent = store.path_for("a>>resource::k")
        assert nested.parent.parent != parent.parent.parent
        assert nested.parent.name == "resource"

        store.write("a>>b>>resource::k", 1)
        store.write("a>>resource::k", 2)
        store.remove_all("a>>b")
        assert store.read("a>>b>>resource::k") is MISSING
        assert store.read("a>>resource::k") == 2

    def test_global_key_containing_separator_lives_in_global_directory(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        assert store.path_for("resource::x>>y").parent == tmp_path / "_global" / "resource"

    def test_expands_user_directory(self) -> None:
        store = FileStore("~/cache-dir")
        assert "~" not in str(store.root)

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.write("ns>>resource::k", "v")
        store.write("ns>>resource::k", "v2")
        assert list(tmp_path.rglob("*.tmp")) == []

    def test_corrupt_file_raises_corrupt_entry(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.write("ns>>resource::k", "v")
        store.path_for("ns>>resource::k").write_bytes(b"\x00not a pickle")
        with pytest.raises(CorruptEntryError):
            store.read("ns>>resource::k")

    def test_json_serializer(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path, serializer=JsonSerializer())
        store.write("ns>>resource::k", {"a": 1})
        assert store.path_for("ns>>resource::k").read_bytes() == b'{"a":1}'
        assert store.read("ns>>resource::k") == {"a": 1}

    def test_remove_all_only_deletes_cache_files(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.write("ns>>resource::k", "v")
        unrelated = tmp_path / "notes.txt"
        unrelated.write_text("keep me")
        store.remove_all()
        assert store.read("ns>>resource::k") is MISSING
        assert unrelated.read_text() == "keep me"
