import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Hashable, Mapping, MutableMapping, Optional, TypeVar

from .map2d_errors import NullKeyError


logger = logging.getLogger(__name__)

R = TypeVar('R', bound=Hashable)
C = TypeVar('C', bound=Hashable)
V = TypeVar('V')
R2 = TypeVar('R2', bound=Hashable)
C2 = TypeVar('C2', bound=Hashable)
V2 = TypeVar('V2')


@dataclass
class Map2D(Generic[R, C, V]):
    """
    Two-dimensional associative container keyed by (row, column) pairs.

    Cells are stored row-major as a dict of rows, each holding a dict of
    columns to values. Row operations are direct; column operations and size()
    scan every row. A row never exists without at least one column.

    Keys can not be None, values can. get() returns None both for a missing
    cell and for a cell holding None; use contains_key() or get_or_default()
    to tell them apart.

    Every method that returns a dict returns a fresh copy, never the internal
    storage. The container is not thread-safe: callers sharing an instance
    across threads must provide their own locking.
    """
    data_store: dict[R, dict[C, V]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        initial = self.data_store
        self.data_store = {}
        for row, columns in initial.items():
            self.put_all_to_row(columns, row)

    def put(self, row: R, column: C, value: V) -> Optional[V]:
        """Store value at (row, column), replacing any existing one.

        Args:
            row: Row key, must not be None.
            column: Column key, must not be None.
            value: Value to store, may be None.

        Returns:
            The value previously at (row, column), or None if there was none.

        Raises:
            NullKeyError: If row or column is None. Nothing is modified.
        """
        if row is None or column is None:
            raise NullKeyError(row, column)

        previous = self.get(row, column)
        self.data_store.setdefault(row, {})[column] = value
        return previous

    def get(self, row: R, column: C) -> Optional[V]:
        """Get the value at (row, column), or None if the cell does not exist."""
        columns = self.data_store.get(row)
        if columns is None:
            return None
        return columns.get(column)

    def get_or_default(self, row: R, column: C, default: V) -> V:
        """Get the value at (row, column), or default if the cell does not exist.

        Unlike get(), a cell explicitly holding None returns None rather than default.
        """
        if self.contains_key(row, column):
            return self.data_store[row][column]
        return default

    def remove(self, row: R, column: C) -> Optional[V]:
        """Remove the cell at (row, column).

        The row itself is dropped once its last column is removed.

        Returns:
            The removed value, or None if the cell did not exist.
        """
        columns = self.data_store.get(row)
        if columns is None:
            return None

        removed = columns.pop(column, None)
        if not columns:
            del self.data_store[row]
        return removed

    def contains_key(self, row: R, column: C) -> bool:
        columns = self.data_store.get(row)
        return columns is not None and column in columns

    def contains_row(self, row: R) -> bool:
        return row in self.data_store

    def contains_column(self, column: C) -> bool:
        """Check whether any row holds the column. Scans every row."""
        return any(column in columns for columns in self.data_store.values())

    def contains_value(self, value: V) -> bool:
        """Check whether any cell holds a value equal to value. Scans every cell."""
        for columns in self.data_store.values():
            for v in columns.values():
                if v == value:
                    return True
        return False

    def is_empty(self) -> bool:
        return not self.data_store

    def non_empty(self) -> bool:
        return not self.is_empty()

    def size(self) -> int:
        """Returns the number of cells, recounted across all rows on every call."""
        return sum(len(columns) for columns in self.data_store.values())

    def clear(self) -> None:
        """Removes all cells."""
        self.data_store.clear()

    def row_view(self, row: R) -> dict[C, V]:
        """Returns a copy of the row as a column -> value dict (empty if the row is absent)."""
        return dict(self.data_store.get(row, {}))

    def column_view(self, column: C) -> dict[R, V]:
        """Returns a copy of the column as a row -> value dict (empty if no row holds it)."""
        view = {}
        for row, columns in self.data_store.items():
            if column in columns:
                view[row] = columns[column]
        return view

    def row_map_view(self) -> dict[R, dict[C, V]]:
        """Returns a deep copy of the row -> column -> value structure.

        Both the outer and the inner dicts are new objects. Values are not copied.
        """
        return {row: dict(columns) for row, columns in self.data_store.items()}

    def column_map_view(self) -> dict[C, dict[R, V]]:
        """Returns the transposed column -> row -> value structure as new dicts."""
        view: dict[C, dict[R, V]] = {}
        for row, columns in self.data_store.items():
            for column, value in columns.items():
                view.setdefault(column, {})[row] = value
        return view

    def fill_map_from_row(self, target: MutableMapping[C, V], row: R) -> 'Map2D[R, C, V]':
        """Copy every (column, value) pair of row into target.

        Entries already in target are overwritten on key collision. Nothing
        happens if the row is absent.

        Args:
            target: Mapping to write into.
            row: Row to read from.

        Returns:
            Self, so calls can be chained.
        """
        columns = self.data_store.get(row)
        if columns is not None:
            for column, value in columns.items():
                target[column] = value
        return self

    def fill_map_from_column(self, target: MutableMapping[R, V], column: C) -> 'Map2D[R, C, V]':
        """Copy every (row, value) pair of column into target. Returns self."""
        for row, columns in self.data_store.items():
            if column in columns:
                target[row] = columns[column]
        return self

    def put_all(self, other: 'Map2D[R, C, V]') -> 'Map2D[R, C, V]':
        """Merge every cell of other into this container, overwriting on collision.

        Args:
            other: Another Map2D. Only its row_map_view() is read.

        Returns:
            Self, with the cells from other added.
        """
        for row, columns in other.row_map_view().items():
            if columns is not None:
                self.put_all_to_row(columns, row)
        return self

    def put_all_to_row(self, source: Optional[Mapping[C, V]], row: R) -> 'Map2D[R, C, V]':
        """put(row, column, value) for every (column, value) pair of source. Returns self."""
        if source is not None:
            for column, value in source.items():
                self.put(row, column, value)
        return self

    def put_all_to_column(self, source: Optional[Mapping[R, V]], column: C) -> 'Map2D[R, C, V]':
        """put(row, column, value) for every (row, value) pair of source. Returns self."""
        if source is not None:
            for row, value in source.items():
                self.put(row, column, value)
        return self

    def copy_with_conversion(self,
                             row_fn: Callable[[R], R2],
                             column_fn: Callable[[C], C2],
                             value_fn: Callable[[V], V2]) -> 'Map2D[R2, C2, V2]':
        """
        Build a new Map2D by converting the row, column and value of every cell.

        Each function is called once per cell. If two cells convert to the same
        (row, column) pair the one visited last wins; the visiting order is not
        specified.

        Args:
            row_fn: Conversion applied to each row key.
            column_fn: Conversion applied to each column key.
            value_fn: Conversion applied to each value.

        Returns:
            New Map2D holding the converted cells.

        Raises:
            NullKeyError: If row_fn or column_fn returns None.
        """
        converted: Map2D[R2, C2, V2] = Map2D()
        n_overwritten = 0
        for row, columns in self.data_store.items():
            for column, value in columns.items():
                new_row = row_fn(row)
                new_column = column_fn(column)
                if converted.contains_key(new_row, new_column):
                    n_overwritten += 1
                converted.put(new_row, new_column, value_fn(value))

        if n_overwritten > 0:
            logger.debug("copy_with_conversion: %d of %d cells collided and were overwritten",
                         n_overwritten, self.size())
        return converted

    @staticmethod
    def _split_key(key: Any) -> tuple[R, C]:
        if isinstance(key, tuple) and len(key) == 2:
            return key
        raise KeyError("Map2D indices must be a tuple of length 2")

    def __getitem__(self, key) -> Optional[V]:
        """Returns the value at position (row, column).

        Args:
            key: Either a tuple (row, column) or comma-separated indices row, column

        Returns:
            The value at (row, column), or None if not found.
        """
        row, column = self._split_key(key)
        return self.get(row, column)

    def __setitem__(self, key, value: V) -> None:
        row, column = self._split_key(key)
        self.put(row, column, value)

    def __delitem__(self, key) -> None:
        row, column = self._split_key(key)
        self.remove(row, column)

    def __contains__(self, key) -> bool:
        if isinstance(key, tuple) and len(key) == 2:
            return self.contains_key(key[0], key[1])
        return False

    def __len__(self) -> int:
        return self.size()

    def __iter__(self):
        """Allows iteration over the (row, column) pairs of existing cells."""
        return iter(self.keys())

    def keys(self) -> list[tuple[R, C]]:
        """Returns the (row, column) pairs of existing cells."""
        return [(row, column) for row, columns in self.data_store.items() for column in columns]

    def values(self) -> list[V]:
        """Returns the values of existing cells."""
        return [value for columns in self.data_store.values() for value in columns.values()]

    def items(self) -> list[tuple[tuple[R, C], V]]:
        """Returns a list of ((row, column), value) pairs, mimicking dict.items()."""
        return [((row, column), value)
                for row, columns in self.data_store.items()
                for column, value in columns.items()]

    def row_keys(self) -> set[R]:
        return set(self.data_store)

    def column_keys(self) -> set[C]:
        return {column for columns in self.data_store.values() for column in columns}

    def copy(self) -> 'Map2D[R, C, V]':
        """Returns a copy of the container. Values are shared, structure is not."""
        return Map2D(self.row_map_view())

    def __repr__(self) -> str:
        """String representation of the container."""
        if not self.data_store:
            return "Map2D({})"
        items_str = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"Map2D({{{items_str}}})"
