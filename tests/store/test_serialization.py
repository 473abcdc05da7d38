from __future__ import annotations

from fractions import Fraction

import pytest

from cachefront.exceptions import CorruptEntryError
from cachefront.store.serialization import JsonSerializer, PickleSerializer


class TestPickleSerializer:
    def test_round_trips_arbitrary_objects(self) -> None:
        serializer = PickleSerializer()
        value = {"ratio": Fraction(1, 3), "tags": {"a", "b"}, "pair": (1, 2)}
        assert serializer.deserialize(serializer.serialize(value)) == value

    def test_garbage_raises_corrupt_entry_with_key(self) -> None:
        with pytest.raises(CorruptEntryError) as exc_info:
            PickleSerializer().deserialize(b"\x00junk", key="ns>>resource::k")
        assert exc_info.value.key == "ns>>resource::k"

    def test_truncated_payload_raises_corrupt_entry(self) -> None:
        data = PickleSerializer().serialize({"a": list(range(100))})
        with pytest.raises(CorruptEntryError):
            PickleSerializer().deserialize(data[: len(data) // 2])


class TestJsonSerializer:
    def test_compact_encoding(self) -> None:
        assert JsonSerializer().serialize({"a": [1, 2]}) == b'{"a":[1,2]}'

    def test_tuples_come_back_as_lists(self) -> None:
        serializer = JsonSerializer()
        assert serializer.deserialize(serializer.serialize((1, 2))) == [1, 2]

    def test_invalid_json_raises_corrupt_entry(self) -> None:
        with pytest.raises(CorruptEntryError):
            JsonSerializer().deserialize(b"{not json")

    def test_invalid_utf8_raises_corrupt_entry(self) -> None:
        with pytest.raises(CorruptEntryError):
            JsonSerializer().deserialize(b"\xff\xfe")

    def test_unserializable_value_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            JsonSerializer().serialize(object())
