import logging
from typing import List, NamedTuple, Optional

from ..record import HEADER_ROW
from ..utils_structure import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_NONE,
    ALIGN_RIGHT,
    is_separator_line,
    render_separator_token,
    separator_alignments,
)

logger = logging.getLogger(__name__)

_MIN_TOKEN_WIDTH = {ALIGN_NONE: 3, ALIGN_LEFT: 4, ALIGN_RIGHT: 4, ALIGN_CENTER: 5}


class SplitLine(NamedTuple):
    prefix: str
    cells: List[str]
    suffix: str

    def join(self):
        return self.prefix + "|" + "|".join(self.cells) + "|" + self.suffix


def escape_pipe(value):
    """Escape pipe characters for GFM table cells.

    Converts | to \\| so the parser treats it as literal pipe. Backslash
    sequences that are already present, including \\|, are kept as is.
    """
    if value is None:
        return ""
    if "|" not in value:
        return value

    result = []
    i = 0
    n = len(value)

    while i < n:
        char = value[i]

        if char == "\\" and i + 1 < n:
            # Already escaped, keep as is
            result.append(char)
            result.append(value[i + 1])
            i += 2
        elif char == "|":
            result.append("\\|")
            i += 1
        else:
            result.append(char)
            i += 1

    return "".join(result)


def split_line_by_unescaped_pipe(line) -> Optional[SplitLine]:
    """Split a table line on its unescaped pipes, keeping every span verbatim.

    Returns None when the line has fewer than two unescaped pipes.
    """
    pipes = []
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char == "|":
            pipes.append(i)
        i += 1

    if len(pipes) < 2:
        return None

    cells = [line[start + 1 : end] for start, end in zip(pipes, pipes[1:])]
    return SplitLine(line[: pipes[0]], cells, line[pipes[-1] + 1 :])


def _rewrite_span(span, value):
    if not span.strip():
        return f" {value} "

    lead = span[: len(span) - len(span.lstrip())]
    if len(span.rstrip()) == len(span):
        return lead + value

    pad = max(1, len(span) - len(lead) - len(value))
    return lead + value + " " * pad


def _extend_spans(spans, values, last_col):
    # Ragged source lines get the missing cells appended from the row values
    while len(spans) <= last_col:
        spans.append(f" {escape_pipe(values[len(spans)])} ")


def update_table_line(line, values, edited_cols):
    """Rewrite only the `edited_cols` spans of `line` with the matching `values`.

    Edited columns past the end of a short line are appended, along with any
    cells in between.
    """
    cols = sorted(col for col in edited_cols if 0 <= col < len(values))
    if not cols:
        return line

    split = split_line_by_unescaped_pipe(line)

    if split is None:
        logger.warning("Line %r has no pipe structure, using plain split", line)
        parts = line.split("|")
        if len(parts) < 3:
            logger.warning("Cannot place edits %s in line %r", cols, line)
            return line
        spans = parts[1:-1]
        _extend_spans(spans, values, cols[-1])
        for col in cols:
            spans[col] = f" {escape_pipe(values[col])} "
        return "|".join([parts[0]] + spans + [parts[-1]])

    cells = list(split.cells)
    _extend_spans(cells, values, cols[-1])
    for col in cols:
        cells[col] = _rewrite_span(cells[col], escape_pipe(values[col]))
    return split._replace(cells=cells).join()


def _group_edits(record):
    header_cols = set()
    row_cols = {}

    for key in record.edited_cells or ():
        if not isinstance(key, tuple) or len(key) != 2:
            continue
        row, col = key
        if not isinstance(col, int) or isinstance(col, bool) or not record.is_valid_column(col):
            continue
        if row == HEADER_ROW:
            header_cols.add(col)
        elif isinstance(row, int) and not isinstance(row, bool) and record.is_valid_row(row):
            row_cols.setdefault(row, set()).add(col)

    return header_cols, row_cols


def _differential_lines(record):
    header_cols, row_cols = _group_edits(record)

    lines = []
    separator_seen = False
    row_idx = 0

    for line_no, line in enumerate(record.raw_lines):
        if line_no == 0:
            if header_cols:
                line = update_table_line(line, record.headers, header_cols)
        elif not separator_seen and is_separator_line(line):
            separator_seen = True
        elif row_idx < len(record.rows):
            cols = row_cols.get(row_idx)
            if cols:
                line = update_table_line(line, record.rows[row_idx], cols)
            row_idx += 1
        lines.append(line)

    return lines


def _format_line(cells):
    return "| " + " | ".join(cells) + " |"


def generate_table_lines(record, pad_columns=True):
    column_count = len(record.headers)
    alignments = separator_alignments(record.separator_line, column_count)
    if alignments is None:
        alignments = [ALIGN_LEFT] * column_count

    header_cells = [escape_pipe(h) for h in record.headers]
    body = [[escape_pipe(v) for v in row] for row in record.rows]

    if not pad_columns:
        tokens = [render_separator_token(a, _MIN_TOKEN_WIDTH[a]) for a in alignments]
        return [_format_line(header_cells), _format_line(tokens)] + [
            _format_line(row) for row in body
        ]

    widths = []
    for col, align in enumerate(alignments):
        width = max(len(header_cells[col]), _MIN_TOKEN_WIDTH[align])
        for row in body:
            width = max(width, len(row[col]))
        widths.append(width)

    def padded(cells):
        return _format_line([cell.ljust(widths[i]) for i, cell in enumerate(cells)])

    tokens = [render_separator_token(a, widths[i]) for i, a in enumerate(alignments)]
    return [padded(header_cells), _format_line(tokens)] + [padded(row) for row in body]


def serialize_to_markdown(context):
    """Render the table as pipe-table Markdown.

    Untouched source text comes back verbatim; source text with cell edits is
    patched span by span; anything else is regenerated from the grid.
    """
    record = context.record
    newline = context.config.newline

    if record.raw_lines:
        if not record.has_edits():
            return newline.join(record.raw_lines)
        return newline.join(_differential_lines(record))

    return newline.join(generate_table_lines(record, context.config.pad_columns))
