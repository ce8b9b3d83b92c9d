import logging
import numpy as np
import pandas as pd
from typing import Hashable, Iterable, Optional
from scipy.sparse import coo_array

from .map2d import Map2D
from .config import Map2DConfig
from .map2d_errors import MissingFrameColumnError, DuplicateCellError, NullKeyError


logger = logging.getLogger(__name__)


class DenseMatrixData:
    # dense snapshot of a Map2D with explicit axis ids
    i_ids: np.ndarray  # Array of row keys for the y axis of the matrix
    j_ids: np.ndarray  # Array of column keys for the x axis of the matrix
    matrix: np.ndarray  # Cell values, fill_value where no cell exists

    def __init__(self, i_ids: np.ndarray, j_ids: np.ndarray, matrix: np.ndarray):
        self.i_ids = i_ids
        self.j_ids = j_ids
        self.matrix = matrix
        # lazily created, most callers only read the matrix
        self._row_id2idx_map = None
        self._column_id2idx_map = None

    def row_id2idx(self, id: Hashable) -> int:
        if self._row_id2idx_map is None:
            self._row_id2idx_map = {id: idx for idx, id in enumerate(self.i_ids)}
        return self._row_id2idx_map[id]

    def column_id2idx(self, id: Hashable) -> int:
        if self._column_id2idx_map is None:
            self._column_id2idx_map = {id: idx for idx, id in enumerate(self.j_ids)}
        return self._column_id2idx_map[id]

    def get_value(self, i: Hashable, j: Hashable):
        """Get the matrix value at coordinate (i,j).

        Args:
            i: Row key (not index)
            j: Column key (not index)

        Returns:
            Value at the specified coordinate, NaN if either key is not on its axis
        """
        try:
            i_idx = self.row_id2idx(i)
            j_idx = self.column_id2idx(j)
        except KeyError:
            return np.nan
        return self.matrix[i_idx, j_idx]

    def is_equal(self, other: 'DenseMatrixData', tol: float = 1e-8) -> bool:
        if not np.array_equal(self.i_ids, other.i_ids) or not np.array_equal(self.j_ids, other.j_ids):
            return False
        if self.matrix.shape != other.matrix.shape:
            return False
        if self.matrix.dtype == object or other.matrix.dtype == object:
            return bool(np.array_equal(self.matrix, other.matrix))
        return bool(np.allclose(self.matrix, other.matrix, rtol=tol, atol=tol, equal_nan=True))

    def copy(self) -> 'DenseMatrixData':
        """Returns a copy of the dense matrix.

        Returns:
            A new DenseMatrixData instance with copied data
        """
        result = DenseMatrixData(i_ids=self.i_ids.copy(), j_ids=self.j_ids.copy(), matrix=self.matrix.copy())
        result._row_id2idx_map = self._row_id2idx_map.copy() if self._row_id2idx_map is not None else None
        result._column_id2idx_map = self._column_id2idx_map.copy() if self._column_id2idx_map is not None else None
        return result


def _ordered_ids(keys: Iterable[Hashable]) -> list:
    keys = list(keys)
    try:
        return sorted(keys)
    except TypeError:
        # mixed key types have no common order
        return keys


def _to_id_array(keys: list) -> np.ndarray:
    # element-wise fill so tuple keys stay scalar entries
    ids = np.empty(len(keys), dtype=object)
    for idx, key in enumerate(keys):
        ids[idx] = key
    return ids


def _axis_ids(m: Map2D, row_ids: Optional[Iterable[Hashable]], column_ids: Optional[Iterable[Hashable]]) -> tuple[np.ndarray, np.ndarray]:
    i_keys = list(row_ids) if row_ids is not None else _ordered_ids(m.row_keys())
    j_keys = list(column_ids) if column_ids is not None else _ordered_ids(m.column_keys())
    return _to_id_array(i_keys), _to_id_array(j_keys)


def to_frame(m: Map2D, config: Map2DConfig = Map2DConfig()) -> pd.DataFrame:
    """
    Convert a Map2D into a long-form DataFrame with one row per cell.

    Args:
        m: Container to convert
        config: Map2DConfig naming the row, column and value columns

    Returns:
        DataFrame with columns [row_label, column_label, value_label]
    """
    config.validate()
    cells = m.items()
    # object values so a stored None is not coerced to NaN
    return pd.DataFrame({
        config.row_label: pd.Series([row for (row, _), _ in cells], dtype=object),
        config.column_label: pd.Series([column for (_, column), _ in cells], dtype=object),
        config.value_label: pd.Series([value for _, value in cells], dtype=object),
    })


def from_frame(df: pd.DataFrame, config: Map2DConfig = Map2DConfig()) -> Map2D:
    """
    Build a Map2D from a long-form DataFrame.

    Args:
        df: DataFrame holding one cell per row
        config: Map2DConfig naming the row, column and value columns

    Returns:
        New Map2D holding every cell of df

    Raises:
        MissingFrameColumnError: If any of the three label columns is missing
        NullKeyError: If a row or column key is null (None or NaN)
        DuplicateCellError: If a (row, column) pair appears more than once
    """
    config.validate()
    required_cols = [config.row_label, config.column_label, config.value_label]
    missing_cols = [col for col in required_cols if col not in df.columns]
    if len(missing_cols) > 0:
        raise MissingFrameColumnError(missing_cols, df.columns.tolist())

    # tolist() unwraps numpy scalars into plain python keys
    rows = df[config.row_label].tolist()
    columns = df[config.column_label].tolist()
    values = df[config.value_label].tolist()

    row_null = df[config.row_label].isna().to_numpy()
    column_null = df[config.column_label].isna().to_numpy()
    null_idx = np.flatnonzero(row_null | column_null)
    if len(null_idx) > 0:
        i = null_idx[0]
        raise NullKeyError(None if row_null[i] else rows[i], None if column_null[i] else columns[i])

    keys_df = df[[config.row_label, config.column_label]]
    duplicated = keys_df.duplicated()
    if duplicated.any():
        duplicate_cells = list(keys_df[duplicated].drop_duplicates().itertuples(index=False, name=None))
        raise DuplicateCellError(duplicate_cells)

    m = Map2D()
    for row, column, value in zip(rows, columns, values):
        m.put(row, column, value)

    logger.debug("from_frame: built Map2D with %d rows and %d cells", len(m.row_keys()), m.size())
    return m


def to_dense(m: Map2D, config: Map2DConfig = Map2DConfig(),
             row_ids: Optional[Iterable[Hashable]] = None,
             column_ids: Optional[Iterable[Hashable]] = None) -> DenseMatrixData:
    """
    Materialise a Map2D as a dense matrix.

    Args:
        m: Container to convert
        config: Map2DConfig providing dense_dtype and fill_value
        row_ids: Rows to materialise, in order. Defaults to every row key, sorted when the keys allow it
        column_ids: Columns to materialise, in order. Defaults to every column key, sorted when the keys allow it

    Returns:
        DenseMatrixData whose matrix[i, j] holds the cell (i_ids[i], j_ids[j]),
        fill_value where no such cell exists. Cells outside the requested ids are dropped.
    """
    config.validate()
    i_ids, j_ids = _axis_ids(m, row_ids, column_ids)
    matrix = np.full((len(i_ids), len(j_ids)), config.fill_value, dtype=config.dense_dtype)
    dense = DenseMatrixData(i_ids=i_ids, j_ids=j_ids, matrix=matrix)

    for i_idx, row in enumerate(i_ids):
        for column, value in m.row_view(row).items():
            try:
                j_idx = dense.column_id2idx(column)
            except KeyError:
                continue
            matrix[i_idx, j_idx] = value

    logger.debug("to_dense: materialised %d x %d matrix from %d cells", len(i_ids), len(j_ids), m.size())
    return dense


def to_wide_frame(m: Map2D, config: Map2DConfig = Map2DConfig(),
                  row_ids: Optional[Iterable[Hashable]] = None,
                  column_ids: Optional[Iterable[Hashable]] = None) -> pd.DataFrame:
    """
    Pivot a Map2D into a wide DataFrame, rows as the index and columns as the columns.

    Absent cells hold config.fill_value. Accepts the same row_ids / column_ids as to_dense.
    """
    dense = to_dense(m, config, row_ids=row_ids, column_ids=column_ids)
    return pd.DataFrame(dense.matrix,
                        index=pd.Index(dense.i_ids, name=config.row_label, tupleize_cols=False),
                        columns=pd.Index(dense.j_ids, name=config.column_label, tupleize_cols=False))


def to_sparse(m: Map2D,
              row_ids: Optional[Iterable[Hashable]] = None,
              column_ids: Optional[Iterable[Hashable]] = None) -> tuple[np.ndarray, np.ndarray, coo_array]:
    """
    Convert a Map2D with numeric values into a scipy COO array.

    Cells holding None are left out, as are cells outside the requested ids.

    Returns:
        (i_ids, j_ids, array) where array[i, j] holds the cell (i_ids[i], j_ids[j])
    """
    i_ids, j_ids = _axis_ids(m, row_ids, column_ids)
    j_index = {column: idx for idx, column in enumerate(j_ids)}

    i_idx, j_idx, data = [], [], []
    for row_idx, row in enumerate(i_ids):
        for column, value in m.row_view(row).items():
            if value is None or column not in j_index:
                continue
            i_idx.append(row_idx)
            j_idx.append(j_index[column])
            data.append(value)

    array = coo_array((np.asarray(data, dtype=float),
                       (np.asarray(i_idx, dtype=np.int64), np.asarray(j_idx, dtype=np.int64))),
                      shape=(len(i_ids), len(j_ids)))
    return i_ids, j_ids, array
