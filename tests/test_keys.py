import pytest

from cachefront.keys import (
    build_key,
    check_namespace,
    meta_key,
    namespace_prefixes,
    resource_key,
    split_namespace,
)


class TestBuildKey:
    def test_resource_key_with_namespace(self) -> None:
        assert resource_key("users", "42") == "users>>resource::42"

    def test_meta_key_with_namespace(self) -> None:
        assert meta_key("users", "42") == "users>>meta::42"

    def test_keys_without_namespace(self) -> None:
        assert resource_key("", "42") == "resource::42"
        assert meta_key("", "42") == "meta::42"

    def test_default_tag_is_resource(self) -> None:
        assert build_key("ns", "k") == resource_key("ns", "k")

    def test_caller_key_is_opaque(self) -> None:
        assert resource_key("ns", "a::b>>c") == "ns>>resource::a::b>>c"


class TestNamespacePrefixes:
    def test_one_prefix_per_tag(self) -> None:
        assert namespace_prefixes("users") == ("users>>resource::", "users>>meta::")

    def test_empty_namespace_has_no_prefixes(self) -> None:
        assert namespace_prefixes("") == ()

    def test_nested_namespace_keys_do_not_match_parent(self) -> None:
        assert not resource_key("a>>b", "k").startswith(namespace_prefixes("a"))


class TestCheckNamespace:
    @pytest.mark.parametrize("namespace", ["", "users", "a>>b", "app::users", "resource", "x>resource::"])
    def test_accepts(self, namespace: str) -> None:
        assert check_namespace(namespace) == namespace

    @pytest.mark.parametrize("namespace", ["resource::x", "meta::", "a>>resource::b", "a>>meta::b"])
    def test_rejects_embedded_tag(self, namespace: str) -> None:
        with pytest.raises(ValueError):
            check_namespace(namespace)


class TestSplitNamespace:
    def test_caller_key_may_contain_separator(self) -> None:
        assert split_namespace("users>>resource::a>>b") == ("users", "resource::a>>b")

    def test_namespace_may_contain_separator(self) -> None:
        assert split_namespace("a>>b>>meta::k") == ("a>>b", "meta::k")

    def test_key_without_namespace(self) -> None:
        assert split_namespace("resource::42") is None

    def test_global_key_containing_separator(self) -> None:
        assert split_namespace("resource::x>>y") is None
        assert split_namespace("meta::x>>resource::y") is None

    def test_leading_separator_means_no_namespace(self) -> None:
        assert split_namespace(">>resource::42") is None

    def test_global_namespace_with_inner_separator(self) -> None:
        assert split_namespace("app::users>>meta::1") == ("app::users", "meta::1")

    def test_round_trips_built_keys(self) -> None:
        for namespace in ("a", "a>>b", "a>", "a>>", "x>resource:"):
            for key in ("k", "k>>meta::j", ""):
                assert split_namespace(meta_key(namespace, key)) == (namespace, f"meta::{key}")
