import logging

from ..errors import InvalidPositionError
from ..utils_structure import move_separator_column, move_separator_columns, reorder_indices
from .table import apply_table_update, reflow_separator

logger = logging.getLogger(__name__)


def _in_range(index, length):
    return isinstance(index, int) and 0 <= index < length


def move_row(context, from_index, to_index):
    """Move one row so it ends up at `to_index`; same index is a no-op."""
    row_count = len(context.record.rows)
    if not (_in_range(from_index, row_count) and _in_range(to_index, row_count)):
        raise InvalidPositionError(f"Invalid row indices: from {from_index}, to {to_index}")
    if from_index == to_index:
        return None

    def move_row_logic(table):
        row = table.rows.pop(from_index)
        table.rows.insert(to_index, row)

    return apply_table_update(context, move_row_logic, structural=True)


def move_column(context, from_index, to_index):
    col_count = len(context.record.headers)
    if not (_in_range(from_index, col_count) and _in_range(to_index, col_count)):
        raise InvalidPositionError(f"Invalid column indices: from {from_index}, to {to_index}")
    if from_index == to_index:
        return None

    def move_column_logic(table):
        table.headers.insert(to_index, table.headers.pop(from_index))
        for row in table.rows:
            row.insert(to_index, row.pop(from_index))
        reflow_separator(
            table, move_separator_column(table.separator_line, from_index, to_index)
        )

    return apply_table_update(context, move_column_logic, structural=True)


def move_rows(context, row_indices, target_index):
    """Move a block of rows so it lands before the row originally at `target_index`.

    Indices are deduplicated and taken in ascending order; out-of-range ones
    are dropped. `target_index` may equal the row count to move to the end.
    """
    row_count = len(context.record.rows)
    if not isinstance(target_index, int) or target_index < 0 or target_index > row_count:
        raise InvalidPositionError(f"Invalid target row index: {target_index}")

    order = reorder_indices(row_count, row_indices, target_index)
    if order == list(range(row_count)):
        return None

    def move_rows_logic(table):
        table.rows = [table.rows[i] for i in order]

    return apply_table_update(context, move_rows_logic, structural=True)


def move_columns(context, col_indices, target_index):
    col_count = len(context.record.headers)
    if not isinstance(target_index, int) or target_index < 0 or target_index > col_count:
        raise InvalidPositionError(f"Invalid target column index: {target_index}")

    order = reorder_indices(col_count, col_indices, target_index)
    if order == list(range(col_count)):
        return None

    def move_columns_logic(table):
        table.headers = [table.headers[i] for i in order]
        table.rows = [[row[i] for i in order] for row in table.rows]
        reflow_separator(
            table, move_separator_columns(table.separator_line, col_indices, target_index)
        )

    return apply_table_update(context, move_columns_logic, structural=True)


def _validate_move(kind, from_index, to_index, length):
    if not _in_range(from_index, length):
        return {"isValid": False, "error": f"Invalid source {kind} index: {from_index}"}
    if not _in_range(to_index, length):
        return {"isValid": False, "error": f"Invalid target {kind} index: {to_index}"}
    if from_index == to_index:
        return {"isValid": False, "error": "Source and target are the same position"}
    return {"isValid": True, "error": None}


def validate_row_move(context, from_index, to_index):
    return _validate_move("row", from_index, to_index, len(context.record.rows))


def validate_column_move(context, from_index, to_index):
    return _validate_move("column", from_index, to_index, len(context.record.headers))


def _safe_move(context, move_func, from_index, to_index):
    previous_state = context.record.clone()
    try:
        move_func(context, from_index, to_index)
        return {"success": True, "previousState": previous_state}
    except Exception as e:
        logger.warning("Move from %s to %s failed: %s", from_index, to_index, e)
        return {"success": False, "error": str(e), "previousState": previous_state}


def move_row_safe(context, from_index, to_index):
    return _safe_move(context, move_row, from_index, to_index)


def move_column_safe(context, from_index, to_index):
    return _safe_move(context, move_column, from_index, to_index)
