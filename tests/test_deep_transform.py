"""
Tests for the deep transform engine and Collection.map_in_depth.

These tests verify:
    - Node classification
    - Shape-preserving rebuild with transformed leaves
    - Identity-preserving reconstruction of custom composites
    - Export mirroring and its silent degrade policy
    - The two map_in_depth contracts
"""

from collections import UserDict

import pytest
from okc.collection import Collection
from okc.deep_transform import NodeKind, classify_node, deep_map, supports_keyed_write
from okc.errors import InvalidArgument


class Bag(Collection):
    """Custom keyed composite rebuilt as its own type."""


class Record(UserDict):
    """Mapping-like object that knows how to create an empty copy."""

    def create_empty_like(self):
        return Record()


class Frozen:
    """Keyed iteration only; no way to rebuild it."""

    def __init__(self, data):
        self._data = dict(data)

    def items(self):
        return self._data.items()


def times_ten(x):
    return x * 10


class TestClassifyNode:
    """Test node classification."""

    def test_plain_containers(self):
        assert classify_node({}).kind is NodeKind.PLAIN
        assert classify_node([]).kind is NodeKind.PLAIN
        assert classify_node(()).kind is NodeKind.PLAIN

    def test_keyed_objects(self):
        assert classify_node(Collection()).kind is NodeKind.IDENTITY_PRESERVING
        assert classify_node(Frozen({})).kind is NodeKind.IDENTITY_PRESERVING

    @pytest.mark.parametrize("leaf", [1, 2.5, "text", b"raw", None, True, object()])
    def test_leaves(self, leaf):
        node = classify_node(leaf)
        assert node.kind is NodeKind.LEAF
        assert not node.is_composite
        assert list(node.entries()) == []

    def test_entries_in_order(self):
        assert list(classify_node(["a", "b"]).entries()) == [(0, "a"), (1, "b")]
        assert list(classify_node({"y": 1, "x": 2}).entries()) == [("y", 1), ("x", 2)]

    def test_supports_keyed_write(self):
        assert supports_keyed_write({})
        assert supports_keyed_write([])
        assert supports_keyed_write(Collection())
        assert not supports_keyed_write(Frozen({}))
        assert not supports_keyed_write(())
        assert not supports_keyed_write("abc")


class TestDeepMap:
    """Test deep_map without export."""

    def test_nested_dict(self):
        out = deep_map({"a": {"b": 1, "c": 2}, "d": 3}, times_ten)
        assert out == {"a": {"b": 10, "c": 20}, "d": 30}
        assert isinstance(out, Collection)
        assert isinstance(out["a"], Collection)

    def test_order_preserved(self):
        out = deep_map({"z": 1, "a": 2, "m": {"q": 3, "b": 4}}, times_ten)
        assert out.keys() == ["z", "a", "m"]
        assert out["m"].keys() == ["q", "b"]

    def test_lists_use_positions(self):
        out = deep_map([1, [2, 3]], times_ten)
        assert out == [10, [20, 30]]

    def test_identity_preserving_inner_composite(self):
        data = {"a": Bag({"b": 1, "c": 2}), "d": 3}
        out = deep_map(data, times_ten)
        assert type(out["a"]) is Bag
        assert out == {"a": {"b": 10, "c": 20}, "d": 30}

    def test_identity_preserving_mapping(self):
        out = deep_map(Record({"x": 1}), times_ten)
        assert type(out) is Record
        assert out["x"] == 10

    def test_force_generic(self):
        out = deep_map({"a": Bag({"b": 1})}, times_ten, force_generic=True)
        assert type(out["a"]) is Collection

    def test_fallback_without_capability(self):
        out = deep_map(Frozen({"a": 1}), times_ten)
        assert type(out) is Collection
        assert out == {"a": 10}

    def test_strict_types_raises_without_capability(self):
        with pytest.raises(InvalidArgument):
            deep_map({"a": Frozen({"b": 1})}, times_ten, strict_types=True)

    def test_empty_composite(self):
        assert deep_map({}, times_ten) == {}
        assert type(deep_map(Bag(), times_ten)) is Bag

    def test_leaf_root_rejected(self):
        with pytest.raises(InvalidArgument):
            deep_map(5, times_ten)

    def test_strings_are_leaves(self):
        out = deep_map({"s": "ab"}, lambda s: s.upper())
        assert out == {"s": "AB"}

    def test_transform_receives_value_only(self):
        seen = []
        deep_map({"a": 1, "b": [2]}, lambda *args: seen.append(args))
        assert seen == [(1,), (2,)]

    def test_leaves_visited_depth_first(self):
        seen = []
        deep_map({"a": {"b": 1, "c": 2}, "d": 3}, seen.append)
        assert seen == [1, 2, 3]

    def test_input_not_mutated(self):
        data = {"a": {"b": 1}}
        deep_map(data, times_ten)
        assert data == {"a": {"b": 1}}

    def test_deep_nesting_beyond_recursion_limit(self):
        data = leaf = {}
        for _ in range(5000):
            leaf["n"] = {}
            leaf = leaf["n"]
        leaf["v"] = 1
        out = deep_map(data, times_ten)
        node = out
        for _ in range(5000):
            node = node["n"]
        assert node["v"] == 10


class TestExport:
    """Test export mirroring."""

    def test_mirrors_leaves(self):
        export = {}
        deep_map({"a": {"b": 1, "c": 2}, "d": 3}, times_ten, export=export)
        assert export == {"b": 10, "c": 20, "d": 30}

    def test_nested_leaves_land_in_same_export(self):
        """Nested leaves are written into the caller's export under their own key."""
        export = {}
        deep_map({"a": {"b": 1}, "d": 3}, times_ten, export=export)
        assert export == {"b": 10, "d": 30}

    def test_existing_export_entries_are_not_descended(self):
        export = {"a": {}}
        deep_map({"a": {"b": 1}, "d": 3}, times_ten, export=export)
        assert export == {"a": {}, "b": 10, "d": 30}

    def test_later_leaf_wins_on_shared_key(self):
        export = {}
        deep_map({"k": 1, "n": {"k": 2}}, times_ten, export=export)
        assert export == {"k": 20}

    def test_unwritable_export_is_ignored(self):
        export = ("read", "only")
        out = deep_map([1, 2], times_ten, export=export)
        assert out == [10, 20]
        assert export == ("read", "only")

    def test_list_export(self):
        export = [0]
        deep_map([1, 2, 3], times_ten, export=export)
        assert export == [10, 20, 30]

    def test_list_export_out_of_range_skipped(self):
        export = []
        deep_map({5: 1}, times_ten, export=export)
        assert export == []

    def test_collection_export(self):
        export = Collection()
        deep_map({"a": {"b": 1}}, times_ten, export=export)
        assert export == {"b": 10}


class TestMapInDepth:
    """Test the two map_in_depth contracts."""

    def build(self):
        return Collection({"a": Bag({"b": 1, "c": 2}), "d": 3})

    def test_without_export_returns_new_generic_tree(self):
        c = self.build()
        out = c.map_in_depth(times_ten)
        assert out is not c
        assert type(out) is Collection
        assert type(out["a"]) is Collection
        assert out == deep_map(c, times_ten, True)
        assert out == {"a": {"b": 10, "c": 20}, "d": 30}

    def test_without_export_leaves_original_untouched(self):
        c = self.build()
        c.map_in_depth(times_ten)
        assert c == {"a": {"b": 1, "c": 2}, "d": 3}

    def test_without_export_ignores_false_force_flag(self):
        out = self.build().map_in_depth(times_ten, force_generic=False)
        assert type(out["a"]) is Collection

    def test_with_export_returns_self_unchanged(self):
        c = self.build()
        export = Collection()
        result = c.map_in_depth(times_ten, export=export)
        assert result is c
        assert c == {"a": {"b": 1, "c": 2}, "d": 3}
        assert export == {"b": 10, "c": 20, "d": 30}

    def test_subclass_output_is_generic(self):
        out = Bag({"x": 1}).map_in_depth(times_ten)
        assert type(out) is Collection
