
class Map2DConfigError(ValueError):
    """Base class for Map2D configuration errors."""
    pass

class Map2DRuntimeError(ValueError):
    """Base class for Map2D runtime errors."""
    pass



class DuplicateFrameLabelError(Map2DConfigError):
    """Raised when two of the long-form frame labels are the same."""

    def __init__(self, labels: list):
        self.labels = labels
        message = f"Frame labels must be distinct, got: {labels}"
        super().__init__(message)


class EmptyFrameLabelError(Map2DConfigError):
    """Raised when a long-form frame label is empty."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        message = f"{field_name} cannot be empty"
        super().__init__(message)


class InvalidDenseDtypeError(Map2DConfigError):
    """Raised when an unsupported dense matrix dtype is provided."""

    def __init__(self, dtype: str, valid_dtypes: list = None):
        self.dtype = dtype
        self.valid_dtypes = valid_dtypes
        if valid_dtypes is None:
            message = f"Invalid dense dtype '{dtype}'. "
        else:
            message = f"Invalid dense dtype '{dtype}'. Must be one of: {valid_dtypes}"
        super().__init__(message)


class NullKeyError(Map2DRuntimeError):
    """Raised when a row or column key is None."""

    def __init__(self, row, column):
        self.row = row
        self.column = column

        missing = [name for name, key in (('Row', row), ('Column', column)) if key is None]
        message = f"{' and '.join(missing)} key can not be None (row={row!r}, column={column!r})"
        super().__init__(message)


class MissingFrameColumnError(Map2DRuntimeError):
    """Raised when a DataFrame lacks one of the columns needed to build a Map2D."""

    def __init__(self, missing_columns: list, available_columns: list):
        self.missing_columns = missing_columns
        self.available_columns = available_columns
        message = f"DataFrame is missing required columns {missing_columns}. Available columns: {available_columns}"
        super().__init__(message)


class DuplicateCellError(Map2DRuntimeError):
    """Raised when the same (row, column) pair appears more than once in a DataFrame."""

    def __init__(self, duplicate_cells):
        self.duplicate_cells = duplicate_cells

        message = f'Duplicate cells found: {duplicate_cells}. map2d cannot disambiguate which value to keep.'
        super().__init__(message)


class InvalidFillValueError(Map2DConfigError):
    """Raised when the fill value can not be stored in the dense matrix dtype."""

    def __init__(self, fill_value, dense_dtype: str):
        self.fill_value = fill_value
        self.dense_dtype = dense_dtype
        message = f"fill_value {fill_value!r} can not be stored in a '{dense_dtype}' dense matrix, use an integer fill_value"
        super().__init__(message)
