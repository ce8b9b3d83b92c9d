import numpy as np
from typing import Literal
from dataclasses import dataclass

from .constants import FrameColumn, DENSE_DTYPES
from .map2d_errors import DuplicateFrameLabelError, EmptyFrameLabelError, InvalidDenseDtypeError, InvalidFillValueError


@dataclass
class Map2DConfig:
    """
    Configuration for converting a Map2D to and from pandas / numpy structures.

    The container itself is not configurable; these options only control how
    the interop helpers in frame_utils lay out and fill their output.
    """

    row_label: str = FrameColumn.ROW
    """Name of the long-form column holding row keys (also the wide-form index name)."""

    column_label: str = FrameColumn.COLUMN
    """Name of the long-form column holding column keys (also the wide-form columns name)."""

    value_label: str = FrameColumn.VALUE
    """Name of the long-form column holding cell values."""

    fill_value: float = np.nan
    """Placeholder written into dense and wide outputs where no cell exists."""

    dense_dtype: Literal['float64', 'float32', 'int64', 'object'] = 'float64'
    """Element dtype of the dense matrix:
    - 'float64' / 'float32': numeric values, NaN fill works out of the box
    - 'int64': integer values, requires an integer fill_value
    - 'object': arbitrary values, nothing is cast
    """

    def validate(self) -> None:
        """Validate configuration parameters."""
        labels = [self.row_label, self.column_label, self.value_label]

        for name, label in zip(['row_label', 'column_label', 'value_label'], labels):
            if not label:
                raise EmptyFrameLabelError(name)
        if len(set(labels)) != len(labels):
            raise DuplicateFrameLabelError(labels)
        if self.dense_dtype not in DENSE_DTYPES:
            raise InvalidDenseDtypeError(self.dense_dtype, DENSE_DTYPES)
        if self.dense_dtype == 'int64' and (isinstance(self.fill_value, bool) or not isinstance(self.fill_value, (int, np.integer))):
            raise InvalidFillValueError(self.fill_value, self.dense_dtype)
