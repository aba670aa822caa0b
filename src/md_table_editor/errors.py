class TableEditorError(Exception):
    """Base class for every failure raised by the table editor."""


class InvalidPositionError(TableEditorError, IndexError):
    """A row, column, cell, move or drag index is out of range."""


class StructureError(TableEditorError, ValueError):
    """The operation would break the rectangular table shape."""


class InvalidArgumentError(TableEditorError, ValueError):
    """A count, name list or search pattern is unusable."""
