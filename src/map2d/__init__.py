"""
Two-dimensional associative container keyed by (row, column) pairs.

A generic row-major map with row-wise and column-wise views, bulk merges,
type-converting copies and pandas / numpy interop.
"""

__version__ = "0.1.0"

from .map2d import Map2D
from .config import Map2DConfig
from .constants import FrameColumn
from .frame_utils import DenseMatrixData, to_frame, from_frame, to_dense, to_wide_frame, to_sparse
from .map2d_errors import (Map2DConfigError, Map2DRuntimeError, NullKeyError, MissingFrameColumnError,
                           DuplicateCellError, DuplicateFrameLabelError, EmptyFrameLabelError,
                           InvalidDenseDtypeError, InvalidFillValueError)

__all__ = [
    "Map2D",
    "Map2DConfig",
    "FrameColumn",
    "DenseMatrixData",
    "to_frame",
    "from_frame",
    "to_dense",
    "to_wide_frame",
    "to_sparse",
    "Map2DConfigError",
    "Map2DRuntimeError",
    "NullKeyError",
    "MissingFrameColumnError",
    "DuplicateCellError",
    "DuplicateFrameLabelError",
    "EmptyFrameLabelError",
    "InvalidDenseDtypeError",
    "InvalidFillValueError",
]
