DENSE_DTYPES = ['float64', 'float32', 'int64', 'object']  # dtypes accepted for dense export

class FrameColumn:
    ROW = "row"
    COLUMN = "column"
    VALUE = "value"
