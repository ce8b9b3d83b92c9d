import pytest
import os
import sys
import logging

# Add the src directory to Python path to import local map2d
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from map2d import Map2D, NullKeyError
from test_utils import validate_map2d, build_example_map


@pytest.fixture
def example_map() -> Map2D:
    """Pytest fixture with cells A/x=1, A/y=2, B/x=3."""
    return build_example_map()


class TestMap2D_core_operations:
    """Tests for put / get / remove and the structural queries."""

    def test_put_get_round_trip(self):
        """A stored value is returned by get and reported by contains_key."""
        m = Map2D()
        assert m.put("r", "c", 42) is None
        assert m.get("r", "c") == 42
        assert m.contains_key("r", "c")
        validate_map2d(m)

    def test_put_returns_previous_value(self):
        """Overwriting a cell returns the value it replaced."""
        m = Map2D()
        m.put(1, 2, "old")
        assert m.put(1, 2, "new") == "old"
        assert m.get(1, 2) == "new"
        assert m.size() == 1

    @pytest.mark.parametrize("row, column", [(None, "c"), ("r", None), (None, None)])
    def test_put_null_key_raises(self, row, column):
        """None keys are rejected before anything is stored."""
        m = Map2D()
        with pytest.raises(NullKeyError) as exc_info:
            m.put(row, column, 1)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.row == row
        assert exc_info.value.column == column
        assert m.is_empty()

    def test_none_value_is_allowed(self):
        """None can be stored and is visible through contains_key."""
        m = Map2D()
        assert m.put("r", "c", None) is None
        assert m.get("r", "c") is None
        assert m.contains_key("r", "c")
        assert m.contains_row("r")
        assert m.size() == 1

    def test_get_missing(self, example_map):
        """Missing rows and missing columns both return None."""
        assert example_map.get("Z", "x") is None
        assert example_map.get("B", "y") is None

    def test_get_or_default(self):
        """get_or_default separates a stored None from an absent cell."""
        m = Map2D()
        m.put("r", "c", None)
        assert m.get_or_default("r", "c", "default") is None
        assert m.get_or_default("r", "missing", "default") == "default"
        assert m.get_or_default("missing", "c", "default") == "default"

    def test_remove(self, example_map):
        """remove returns the removed value and keeps rows that still hold columns."""
        assert example_map.remove("A", "y") == 2
        assert example_map.row_view("A") == {"x": 1}
        assert example_map.contains_row("A")
        validate_map2d(example_map)

    def test_remove_prunes_empty_row(self, example_map):
        """Removing the last column of a row drops the row."""
        example_map.remove("A", "y")
        assert example_map.remove("A", "x") == 1
        assert not example_map.contains_row("A")
        assert example_map.get("A", "x") is None
        assert example_map.size() == 1
        validate_map2d(example_map)

    def test_remove_missing(self, example_map):
        """Removing an absent cell is a no-op returning None."""
        assert example_map.remove("Z", "x") is None
        assert example_map.remove("B", "nope") is None
        assert example_map.contains_row("B")
        assert example_map.size() == 3

    def test_contains_column_and_value(self, example_map):
        """Column and value lookups scan all rows."""
        assert example_map.contains_column("x")
        assert example_map.contains_column("y")
        assert not example_map.contains_column("z")
        assert example_map.contains_value(3)
        assert not example_map.contains_value(4)

    def test_contains_value_none(self):
        """A stored None is found by contains_value."""
        m = Map2D()
        assert not m.contains_value(None)
        m.put("r", "c", None)
        assert m.contains_value(None)

    def test_size_and_clear(self):
        """size counts distinct cells and clear empties the container."""
        m = Map2D()
        assert m.is_empty() and not m.non_empty()
        for i in range(5):
            for j in range(i + 1):
                m.put(i, j, i * j)
        assert m.size() == 15
        assert m.non_empty()
        validate_map2d(m)

        m.clear()
        assert m.size() == 0
        assert m.is_empty()
        validate_map2d(m)

    def test_structural_keys(self):
        """Tuple and frozenset keys compare by value."""
        m = Map2D()
        m.put((1, 2), frozenset({"a"}), "v")
        assert m.get((1, 2), frozenset({"a"})) == "v"
        assert m.contains_key(tuple([1, 2]), frozenset(["a"]))


class TestMap2D_views:
    """Tests for row / column views and map extraction."""

    def test_row_view(self, example_map):
        assert example_map.row_view("A") == {"x": 1, "y": 2}
        assert example_map.row_view("Z") == {}

    def test_column_view(self, example_map):
        assert example_map.column_view("x") == {"A": 1, "B": 3}
        assert example_map.column_view("y") == {"A": 2}
        assert example_map.column_view("z") == {}

    def test_column_view_includes_none_values(self):
        """A cell holding None is still part of its column."""
        m = Map2D()
        m.put("r1", "c", None)
        m.put("r2", "c", 5)
        assert m.column_view("c") == {"r1": None, "r2": 5}

    def test_row_map_view(self, example_map):
        assert example_map.row_map_view() == {"A": {"x": 1, "y": 2}, "B": {"x": 3}}

    def test_column_map_view(self, example_map):
        assert example_map.column_map_view() == {"x": {"A": 1, "B": 3}, "y": {"A": 2}}

    def test_views_are_independent(self, example_map):
        """Mutating a returned view never changes the container."""
        example_map.row_view("A")["x"] = 100
        example_map.column_view("x")["B"] = 100
        row_map = example_map.row_map_view()
        row_map["A"]["y"] = 100
        row_map["C"] = {"x": 100}
        column_map = example_map.column_map_view()
        column_map["x"]["A"] = 100
        del column_map["y"]

        assert example_map.get("A", "x") == 1
        assert example_map.get("B", "x") == 3
        assert example_map.get("A", "y") == 2
        assert not example_map.contains_row("C")
        assert example_map.size() == 3

    def test_fill_map_from_row(self, example_map):
        """Row entries merge into the target, overwriting collisions."""
        target = {"x": "old", "w": 0}
        result = example_map.fill_map_from_row(target, "A")
        assert result is example_map
        assert target == {"x": 1, "y": 2, "w": 0}

    def test_fill_map_from_missing_row(self, example_map):
        target = {"k": "v"}
        example_map.fill_map_from_row(target, "Z")
        assert target == {"k": "v"}

    def test_fill_map_from_column(self, example_map):
        target = {"B": "old", "Q": 0}
        result = example_map.fill_map_from_column(target, "x")
        assert result is example_map
        assert target == {"A": 1, "B": 3, "Q": 0}

    def test_fill_map_chaining(self, example_map):
        row_target, column_target = {}, {}
        example_map.fill_map_from_row(row_target, "B").fill_map_from_column(column_target, "y")
        assert row_target == {"x": 3}
        assert column_target == {"A": 2}


class TestMap2D_bulk_merge:
    """Tests for put_all and the row / column bulk puts."""

    def test_put_all_to_row(self):
        m = Map2D()
        assert m.put_all_to_row({"p": 10, "q": 20}, "Z") is m
        assert m.row_view("Z") == {"p": 10, "q": 20}

    def test_put_all_to_column(self):
        m = Map2D()
        assert m.put_all_to_column({"r1": 10, "r2": 20}, "c") is m
        assert m.column_view("c") == {"r1": 10, "r2": 20}
        assert m.row_keys() == {"r1", "r2"}

    def test_put_all_to_none_source(self, example_map):
        """A None source leaves the container untouched."""
        example_map.put_all_to_row(None, "A").put_all_to_column(None, "x")
        assert example_map.size() == 3

    def test_put_all_to_row_null_key(self):
        """A None column key inside the source raises NullKeyError."""
        m = Map2D()
        with pytest.raises(NullKeyError):
            m.put_all_to_row({None: 1}, "r")
        with pytest.raises(NullKeyError):
            m.put_all_to_column({"r": 1}, None)

    def test_put_all_merges_and_overwrites(self, example_map):
        other = Map2D()
        other.put("A", "x", 10)
        other.put("A", "z", 30)
        other.put("C", "x", 40)

        assert example_map.put_all(other) is example_map
        assert example_map.row_map_view() == {"A": {"x": 10, "y": 2, "z": 30}, "B": {"x": 3}, "C": {"x": 40}}
        validate_map2d(example_map)

    def test_put_all_independence(self, example_map):
        """Source and destination do not share structure after put_all, only values."""
        shared_value = ["payload"]
        other = Map2D()
        other.put("C", "c", shared_value)
        example_map.put_all(other)

        other.remove("C", "c")
        other.put("A", "x", -1)
        assert example_map.get("C", "c") is shared_value
        assert example_map.get("A", "x") == 1

        example_map.remove("B", "x")
        assert other.size() == 1


class TestMap2D_conversion:
    """Tests for copy_with_conversion."""

    def test_injective_conversion_keeps_size(self, example_map):
        converted = example_map.copy_with_conversion(str.lower, str.upper, lambda v: v * 10)
        assert converted.size() == example_map.size()
        assert converted.row_map_view() == {"a": {"X": 10, "Y": 20}, "b": {"X": 30}}
        validate_map2d(converted)

    def test_conversion_leaves_source_untouched(self, example_map):
        converted = example_map.copy_with_conversion(lambda r: r, lambda c: c, lambda v: v)
        converted.put("A", "x", 99)
        assert example_map.get("A", "x") == 1
        assert converted == Map2D({"A": {"x": 99, "y": 2}, "B": {"x": 3}})

    def test_conversion_calls_each_function_once_per_cell(self, example_map):
        calls = {"row": 0, "column": 0, "value": 0}

        def count(name):
            def fn(x):
                calls[name] += 1
                return x
            return fn

        example_map.copy_with_conversion(count("row"), count("column"), count("value"))
        assert calls == {"row": 3, "column": 3, "value": 3}

    def test_colliding_conversion_last_write_wins(self, example_map, caplog):
        """Collisions keep one of the colliding values and are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="map2d.map2d"):
            converted = example_map.copy_with_conversion(lambda r: "row", lambda c: "col", lambda v: v)
        assert converted.size() == 1
        assert converted.get("row", "col") in {1, 2, 3}
        assert "collided" in caplog.text

    def test_conversion_to_null_key_raises(self, example_map):
        with pytest.raises(NullKeyError):
            example_map.copy_with_conversion(lambda r: None, lambda c: c, lambda v: v)

    def test_conversion_of_empty(self):
        assert Map2D().copy_with_conversion(str, str, str).is_empty()


class TestMap2D_container_protocol:
    """Tests for the dict-like dunder interface."""

    def test_item_access(self, example_map):
        assert example_map["A", "x"] == 1
        assert example_map["Z", "x"] is None
        example_map["C", "z"] = 5
        assert example_map.get("C", "z") == 5
        del example_map["C", "z"]
        assert not example_map.contains_row("C")
        del example_map["C", "z"]  # absent cells delete silently

    def test_item_access_null_key(self):
        m = Map2D()
        with pytest.raises(NullKeyError):
            m[None, "c"] = 1

    @pytest.mark.parametrize("key", ["A", ("A",), ("A", "x", "y")])
    def test_bad_index(self, example_map, key):
        with pytest.raises(KeyError):
            example_map[key]
        with pytest.raises(KeyError):
            example_map[key] = 1
        assert key not in example_map

    def test_split_key_without_instance(self):
        """Index splitting needs no container state."""
        assert Map2D._split_key(("r", "c")) == ("r", "c")
        with pytest.raises(KeyError):
            Map2D._split_key("r")

    def test_contains_len_bool(self, example_map):
        assert ("A", "x") in example_map
        assert ("B", "y") not in example_map
        assert len(example_map) == 3
        assert example_map
        assert not Map2D()

    def test_iteration(self, example_map):
        assert set(example_map) == {("A", "x"), ("A", "y"), ("B", "x")}
        assert sorted(example_map.values()) == [1, 2, 3]
        assert dict(example_map.items()) == {("A", "x"): 1, ("A", "y"): 2, ("B", "x"): 3}
        assert example_map.row_keys() == {"A", "B"}
        assert example_map.column_keys() == {"x", "y"}

    def test_copy(self, example_map):
        duplicate = example_map.copy()
        assert duplicate == example_map
        duplicate.put("A", "x", 7)
        assert example_map.get("A", "x") == 1
        assert duplicate != example_map

    def test_init_from_nested_dict(self):
        """Initial data is copied and empty rows are dropped."""
        initial = {"A": {"x": 1}, "B": {}}
        m = Map2D(initial)
        assert m.row_keys() == {"A"}
        initial["A"]["x"] = 2
        assert m.get("A", "x") == 1
        validate_map2d(m)

    def test_init_null_key(self):
        with pytest.raises(NullKeyError):
            Map2D({None: {"x": 1}})

    def test_repr(self):
        assert repr(Map2D()) == "Map2D({})"
        m = Map2D()
        m.put("A", "x", 1)
        assert repr(m) == "Map2D({('A', 'x'): 1})"
