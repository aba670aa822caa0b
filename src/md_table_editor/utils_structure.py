import re
from typing import List, Optional

_SEPARATOR_TOKEN = re.compile(r"^:?-+:?$")

ALIGN_NONE = "none"
ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"
ALIGN_CENTER = "center"

DEFAULT_SEPARATOR_TOKEN = " --- "


def reorder_indices(length, indices, target):
    """Return the permutation produced by moving `indices` before `target`.

    `indices` are positions in the original sequence, deduplicated and sorted
    here; entries outside [0, length) are ignored. The moved block keeps its
    relative order and is inserted before whatever item originally sat at
    `target` (or at the end when `target == length`).
    """
    moving = sorted({i for i in indices if 0 <= i < length})
    moving_set = set(moving)
    staying = [i for i in range(length) if i not in moving_set]

    insert_at = 0
    for i in range(min(target, length)):
        if i not in moving_set:
            insert_at += 1

    return staying[:insert_at] + moving + staying[insert_at:]


def _split_indent(line):
    stripped = line.strip()
    indent = line[: len(line) - len(line.lstrip())]
    return indent, stripped


def parse_separator_line(line) -> Optional[List[str]]:
    """Split a ruler line like `| --- | :--: |` into its raw inner parts.

    Returns None unless the line is wrapped in pipes and every part is a
    dash run with optional alignment colons.
    """
    if not line:
        return None
    _, stripped = _split_indent(line)
    if len(stripped) < 2 or not stripped.startswith("|") or not stripped.endswith("|"):
        return None

    parts = stripped[1:-1].split("|")
    for part in parts:
        if not _SEPARATOR_TOKEN.match(part.strip()):
            return None
    return parts


def is_separator_line(line) -> bool:
    return parse_separator_line(line) is not None


def token_alignment(token: str) -> str:
    token = token.strip()
    starts = token.startswith(":")
    ends = token.endswith(":")
    if starts and ends and len(token) > 1:
        return ALIGN_CENTER
    if ends:
        return ALIGN_RIGHT
    if starts:
        return ALIGN_LEFT
    return ALIGN_NONE


def separator_alignments(line, column_count) -> Optional[List[str]]:
    parts = parse_separator_line(line)
    if parts is None or len(parts) != column_count:
        return None
    return [token_alignment(p) for p in parts]


def render_separator_token(alignment, width=3):
    if alignment == ALIGN_CENTER:
        width = max(width, 3)
        return ":" + "-" * (width - 2) + ":"
    if alignment == ALIGN_RIGHT:
        width = max(width, 2)
        return "-" * (width - 1) + ":"
    if alignment == ALIGN_LEFT:
        width = max(width, 2)
        return ":" + "-" * (width - 1)
    return "-" * max(width, 1)


def _join(indent, parts):
    return indent + "|" + "|".join(parts) + "|"


def insert_separator_columns(line, index, count=1) -> Optional[str]:
    parts = parse_separator_line(line)
    if parts is None or index < 0 or index > len(parts):
        return None
    indent, _ = _split_indent(line)
    parts[index:index] = [DEFAULT_SEPARATOR_TOKEN] * count
    return _join(indent, parts)


def delete_separator_columns(line, indices) -> Optional[str]:
    parts = parse_separator_line(line)
    if parts is None:
        return None
    doomed = set(indices)
    if any(i < 0 or i >= len(parts) for i in doomed) or len(doomed) >= len(parts):
        return None
    indent, _ = _split_indent(line)
    return _join(indent, [p for i, p in enumerate(parts) if i not in doomed])


def move_separator_column(line, from_index, to_index) -> Optional[str]:
    parts = parse_separator_line(line)
    if parts is None:
        return None
    if not (0 <= from_index < len(parts) and 0 <= to_index < len(parts)):
        return None
    indent, _ = _split_indent(line)
    part = parts.pop(from_index)
    parts.insert(to_index, part)
    return _join(indent, parts)


def move_separator_columns(line, indices, target) -> Optional[str]:
    parts = parse_separator_line(line)
    if parts is None or target < 0 or target > len(parts):
        return None
    indent, _ = _split_indent(line)
    order = reorder_indices(len(parts), indices, target)
    return _join(indent, [parts[i] for i in order])


def duplicate_separator_column(line, index, insert_at) -> Optional[str]:
    parts = parse_separator_line(line)
    if parts is None or not (0 <= index < len(parts)) or not (0 <= insert_at <= len(parts)):
        return None
    indent, _ = _split_indent(line)
    parts.insert(insert_at, parts[index])
    return _join(indent, parts)
