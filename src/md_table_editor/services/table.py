import logging
import re

from ..errors import InvalidArgumentError, InvalidPositionError, StructureError
from ..record import HEADER_ROW, cell_key, header_key, touch_metadata
from ..utils_structure import (
    delete_separator_columns,
    duplicate_separator_column,
    insert_separator_columns,
)

logger = logging.getLogger(__name__)


def apply_table_update(context, transform_func, structural=False):
    """Run `transform_func` against a working copy and commit it on success.

    The transform validates its arguments before touching the copy, so a
    failure leaves the live record untouched and notifies nobody. Structural
    edits drop the raw source lines, which no longer line up with the rows,
    and cancel any drag in progress, whose indices no longer hold.
    """
    working = context.record.clone()
    result = transform_func(working)

    if structural:
        working.raw_lines = None
    touch_metadata(working)

    context.record = working
    if structural and context.cancel_drag():
        logger.debug("Cancelled drag after structural edit")
    logger.debug(
        "Applied %s edit %s",
        "structural" if structural else "cell",
        getattr(transform_func, "__name__", "transform"),
    )
    context.notify_change()
    return result


def reflow_separator(table, reflowed):
    if table.separator_line is None:
        return
    if reflowed is None:
        logger.warning("Dropping separator line %r that no longer fits", table.separator_line)
    table.separator_line = reflowed


def _require_row(table, index, message="Invalid row index"):
    if not table.is_valid_row(index):
        raise InvalidPositionError(f"{message}: {index}")


def _require_column(table, index, message="Invalid column index"):
    if not table.is_valid_column(index):
        raise InvalidPositionError(f"{message}: {index}")


def _default_column_name(context, position):
    return f"{context.config.column_name_prefix} {position}"


def update_cell(context, row_idx, col_idx, value):
    def update_cell_logic(table):
        if not table.is_valid_position(row_idx, col_idx):
            raise InvalidPositionError(f"Invalid cell position: row {row_idx}, col {col_idx}")
        table.rows[row_idx][col_idx] = value
        table.mark_edited(cell_key(row_idx, col_idx))

    return apply_table_update(context, update_cell_logic)


def update_header(context, col_idx, value):
    def update_header_logic(table):
        _require_column(table, col_idx, "Invalid header column")
        table.headers[col_idx] = value
        table.mark_edited(header_key(col_idx))

    return apply_table_update(context, update_header_logic)


def batch_update_cells(context, updates):
    """Apply many `{row, col, value}` writes at once; row -1 targets the headers.

    Every entry is checked before the first write, so one bad position
    rejects the whole batch.
    """
    updates = list(updates)
    if not updates:
        return None

    def batch_update_logic(table):
        for update in updates:
            row, col = update["row"], update["col"]
            if row == -1:
                if not table.is_valid_column(col):
                    raise InvalidPositionError(f"Invalid column position: {col}")
            elif not table.is_valid_position(row, col):
                raise InvalidPositionError(f"Invalid cell position: row {row}, col {col}")

        for update in updates:
            row, col = update["row"], update["col"]
            if row == -1:
                table.headers[col] = update["value"]
                table.mark_edited(header_key(col))
            else:
                table.rows[row][col] = update["value"]
                table.mark_edited(cell_key(row, col))

    return apply_table_update(context, batch_update_logic)


def add_row(context, index=None, count=1):
    def add_row_logic(table):
        insert_at = len(table.rows) if index is None else index
        if not isinstance(insert_at, int) or insert_at < 0 or insert_at > len(table.rows):
            raise InvalidPositionError(f"Invalid row index: {insert_at}")
        if count < 1:
            raise InvalidArgumentError(f"Invalid count: {count}")

        width = len(table.headers)
        table.rows[insert_at:insert_at] = [[""] * width for _ in range(count)]

    return apply_table_update(context, add_row_logic, structural=True)


def insert_rows(context, start_index, count):
    def insert_rows_logic(table):
        if not isinstance(start_index, int) or start_index < 0 or start_index > len(table.rows):
            raise InvalidPositionError(f"Invalid start index: {start_index}")
        if count < 1:
            raise InvalidArgumentError(f"Invalid row count: {count}")

        width = len(table.headers)
        table.rows[start_index:start_index] = [[""] * width for _ in range(count)]

    return apply_table_update(context, insert_rows_logic, structural=True)


def delete_row(context, index):
    def delete_row_logic(table):
        _require_row(table, index)
        del table.rows[index]

    return apply_table_update(context, delete_row_logic, structural=True)


def delete_rows(context, indices):
    unique = sorted(set(indices), reverse=True)
    if not unique:
        return None

    def delete_rows_logic(table):
        for idx in unique:
            _require_row(table, idx)
        # Highest first so earlier deletions don't shift later ones
        for idx in unique:
            del table.rows[idx]

    return apply_table_update(context, delete_rows_logic, structural=True)


def _insert_columns(table, start, names):
    for offset, name in enumerate(names):
        table.headers.insert(start + offset, name)
        for row in table.rows:
            row.insert(start + offset, "")

    reflow_separator(
        table, insert_separator_columns(table.separator_line, start, len(names))
    )


def add_column(context, index=None, count=1, name=None):
    """Insert `count` blank columns at `index` (default: after the last column).

    Without a `name`, headers default to `<prefix> N` where N is the 1-based
    position each new column lands on.
    """

    def add_column_logic(table):
        insert_at = len(table.headers) if index is None else index
        if not isinstance(insert_at, int) or insert_at < 0 or insert_at > len(table.headers):
            raise InvalidPositionError(f"Invalid column index: {insert_at}")
        if count < 1:
            raise InvalidArgumentError(f"Invalid column count: {count}")

        if name is not None:
            names = [name] * count
        else:
            names = [_default_column_name(context, insert_at + i + 1) for i in range(count)]
        _insert_columns(table, insert_at, names)

    return apply_table_update(context, add_column_logic, structural=True)


def insert_columns(context, start_index, count, names=None):
    def insert_columns_logic(table):
        if not isinstance(start_index, int) or start_index < 0 or start_index > len(table.headers):
            raise InvalidPositionError(f"Invalid start index: {start_index}")
        if count < 1:
            raise InvalidArgumentError(f"Invalid column count: {count}")
        if names is not None and len(names) != count:
            raise InvalidArgumentError(
                f"Header count ({len(names)}) doesn't match column count ({count})"
            )

        new_names = list(names) if names is not None else [
            _default_column_name(context, start_index + i + 1) for i in range(count)
        ]
        _insert_columns(table, start_index, new_names)

    return apply_table_update(context, insert_columns_logic, structural=True)


def _remove_columns(table, indices):
    for idx in sorted(indices, reverse=True):
        del table.headers[idx]
        for row in table.rows:
            del row[idx]


def delete_column(context, index):
    def delete_column_logic(table):
        _require_column(table, index)
        if len(table.headers) <= 1:
            raise StructureError("Cannot delete the last column")

        reflowed = delete_separator_columns(table.separator_line, [index])
        _remove_columns(table, [index])
        reflow_separator(table, reflowed)

    return apply_table_update(context, delete_column_logic, structural=True)


def delete_columns(context, indices):
    unique = sorted(set(indices))
    if not unique:
        return None

    def delete_columns_logic(table):
        for idx in unique:
            _require_column(table, idx)
        if len(unique) >= len(table.headers):
            raise StructureError("Cannot delete all columns")

        reflowed = delete_separator_columns(table.separator_line, unique)
        _remove_columns(table, unique)
        reflow_separator(table, reflowed)

    return apply_table_update(context, delete_columns_logic, structural=True)


def update_row(context, index, values):
    values = list(values)

    def update_row_logic(table):
        _require_row(table, index)
        if len(values) != len(table.headers):
            raise StructureError(
                f"Row length ({len(values)}) doesn't match column count ({len(table.headers)})"
            )
        table.rows[index] = values
        for col in range(len(values)):
            table.mark_edited(cell_key(index, col))

    return apply_table_update(context, update_row_logic)


def update_column(context, index, values, new_header=None):
    values = list(values)

    def update_column_logic(table):
        _require_column(table, index)
        if len(values) != len(table.rows):
            raise StructureError(
                f"Column length ({len(values)}) doesn't match row count ({len(table.rows)})"
            )
        for row_idx, value in enumerate(values):
            table.rows[row_idx][index] = value
            table.mark_edited(cell_key(row_idx, index))
        if new_header is not None:
            table.headers[index] = new_header
            table.mark_edited(header_key(index))

    return apply_table_update(context, update_column_logic)


def clear_row(context, index):
    def clear_row_logic(table):
        _require_row(table, index)
        for col in range(len(table.headers)):
            table.rows[index][col] = ""
            table.mark_edited(cell_key(index, col))

    return apply_table_update(context, clear_row_logic)


def clear_column(context, index):
    def clear_column_logic(table):
        _require_column(table, index)
        for row_idx, row in enumerate(table.rows):
            row[index] = ""
            table.mark_edited(cell_key(row_idx, index))

    return apply_table_update(context, clear_column_logic)


def clear_all_cells(context):
    def clear_all_logic(table):
        for row_idx, row in enumerate(table.rows):
            for col in range(len(row)):
                row[col] = ""
                table.mark_edited(cell_key(row_idx, col))

    return apply_table_update(context, clear_all_logic)


def duplicate_row(context, index, insert_at=None):
    def duplicate_row_logic(table):
        _require_row(table, index)
        target = index + 1 if insert_at is None else insert_at
        if target < 0 or target > len(table.rows):
            raise InvalidPositionError(f"Invalid row index: {target}")
        table.rows.insert(target, list(table.rows[index]))

    return apply_table_update(context, duplicate_row_logic, structural=True)


def duplicate_column(context, index, insert_at=None):
    def duplicate_column_logic(table):
        _require_column(table, index)
        target = index + 1 if insert_at is None else insert_at
        if target < 0 or target > len(table.headers):
            raise InvalidPositionError(f"Invalid column index: {target}")

        table.headers.insert(target, table.headers[index] + context.config.copy_suffix)
        for row in table.rows:
            row.insert(target, row[index])
        reflow_separator(
            table, duplicate_separator_column(table.separator_line, index, target)
        )

    return apply_table_update(context, duplicate_column_logic, structural=True)


def _compile_search(pattern, options):
    flags = 0 if options.get("caseSensitive", False) else re.IGNORECASE
    source = pattern if options.get("useRegex", False) else re.escape(pattern)
    if options.get("wholeWord", False):
        source = rf"\b(?:{source})\b"
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InvalidArgumentError(f"Invalid search pattern: {e}") from e


def find_and_replace(context, pattern, replacement, options=None):
    """Replace every match of `pattern` in the data cells; returns the count.

    Options: useRegex, caseSensitive (default False), wholeWord and
    includeHeaders. Without useRegex both the pattern and the replacement
    are taken literally.
    """
    options = options or {}
    if not pattern:
        return 0

    regex = _compile_search(pattern, options)
    if options.get("useRegex", False):
        repl = replacement
    else:
        def repl(_match):
            return replacement

    table = context.record
    planned = []
    for row_idx, row in enumerate(table.rows):
        for col_idx, value in enumerate(row):
            new_value, n = regex.subn(repl, value)
            if n:
                planned.append((cell_key(row_idx, col_idx), new_value, n))

    if options.get("includeHeaders", False):
        for col_idx, value in enumerate(table.headers):
            new_value, n = regex.subn(repl, value)
            if n:
                planned.append((header_key(col_idx), new_value, n))

    if not planned:
        return 0

    def find_and_replace_logic(working):
        for key, new_value, _ in planned:
            row, col = key
            if row == HEADER_ROW:
                working.headers[col] = new_value
            else:
                working.rows[row][col] = new_value
            working.mark_edited(key)
        return sum(n for _, _, n in planned)

    return apply_table_update(context, find_and_replace_logic)


def replace_contents(context, headers, rows):
    """Swap in a whole new grid, dropping source lines, edits and sort state."""

    def replace_contents_logic(table):
        if not headers:
            raise StructureError("Headers must not be empty")
        for row in rows:
            if not isinstance(row, (list, tuple)):
                raise StructureError("Invalid row in rows")
            if len(row) != len(headers):
                raise StructureError("Row length mismatch")

        table.headers = [str(h) for h in headers]
        table.rows = [[str(v) for v in row] for row in rows]
        table.separator_line = None
        table.edited_cells = None
        table.sort_state = None

    return apply_table_update(context, replace_contents_logic, structural=True)


def get_row(context, index):
    table = context.record
    _require_row(table, index)
    return list(table.rows[index])


def get_column(context, index):
    table = context.record
    _require_column(table, index)
    return {"header": table.headers[index], "values": [row[index] for row in table.rows]}


def get_cell(context, row_idx, col_idx):
    table = context.record
    if not table.is_valid_position(row_idx, col_idx):
        raise InvalidPositionError(f"Invalid cell position: row {row_idx}, col {col_idx}")
    return table.rows[row_idx][col_idx]


def is_empty(context):
    table = context.record
    return all(not value.strip() for row in table.rows for value in row)


def get_empty_cells(context):
    return [
        {"row": row_idx, "col": col_idx}
        for row_idx, row in enumerate(context.record.rows)
        for col_idx, value in enumerate(row)
        if not value.strip()
    ]


def has_empty_cells(context):
    return any(not value.strip() for row in context.record.rows for value in row)


def get_statistics(context):
    table = context.record
    total = len(table.rows) * len(table.headers)
    empty = len(get_empty_cells(context))

    widths = []
    for col_idx, header in enumerate(table.headers):
        width = len(header)
        for row in table.rows:
            width = max(width, len(row[col_idx]))
        widths.append(width)

    if table.rows:
        average = sum(sum(len(v) for v in row) for row in table.rows) / len(table.rows)
    else:
        average = 0.0

    return {
        "totalCells": total,
        "emptyCells": empty,
        "fillRate": (total - empty) / total if total else 0.0,
        "columnWidths": widths,
        "averageRowLength": average,
    }
