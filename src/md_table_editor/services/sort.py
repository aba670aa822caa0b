import functools
import logging
import math
import random
import re
import unicodedata
from datetime import datetime, timezone

from dateutil import parser as date_parser
from natsort import natsort_keygen, ns

from ..errors import InvalidPositionError
from ..record import SortState
from .table import apply_table_update

logger = logging.getLogger(__name__)

_DATE_NUMERIC = re.compile(r"\d{1,4}[-/.]\d{1,2}")
_WORD = re.compile(r"[A-Za-z]+")
_DATE_INFO = date_parser.parserinfo()

_natural_key = natsort_keygen(alg=ns.IGNORECASE)
_natural_key_cased = natsort_keygen()


def _require_column(table, col_idx):
    if not table.is_valid_column(col_idx):
        raise InvalidPositionError(f"Invalid column index: {col_idx}")


def _cell(row, col_idx):
    return row[col_idx] if col_idx < len(row) else ""


def parse_number(value):
    s = value.strip()
    if not s:
        return None
    try:
        number = float(s.replace(",", ""))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _looks_like_date(s):
    if not any(c.isdigit() for c in s):
        return False
    if _DATE_NUMERIC.search(s):
        return True
    return any(_DATE_INFO.month(word) is not None for word in _WORD.findall(s))


def parse_date(value):
    s = value.strip()
    if not s or not _looks_like_date(s):
        return None
    try:
        parsed = date_parser.parse(s)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def collation_key(value, case_sensitive=False):
    """Accent-insensitive, case-folded key; ties broken by the raw text when case matters."""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    if case_sensitive:
        return (base, value)
    return (base,)


def _value_key(value, data_type, case_sensitive=False):
    if data_type == "number":
        number = parse_number(value)
        return float("-inf") if number is None else number
    if data_type == "date":
        parsed = parse_date(value)
        return datetime.min if parsed is None else parsed
    if data_type == "natural":
        return _natural_key_cased(value) if case_sensitive else _natural_key(value)
    return collation_key(value, case_sensitive)


def _cmp(a, b):
    return (a > b) - (a < b)


def compare_values(a, b, data_type="string", case_sensitive=False):
    return _cmp(
        _value_key(a, data_type, case_sensitive),
        _value_key(b, data_type, case_sensitive),
    )


def natural_compare(a, b):
    return compare_values(a, b, "natural")


def _infer_values_type(values, allow_date=True):
    present = [v.strip() for v in values if v.strip()]
    if not present:
        return "string"
    if all(parse_number(v) is not None for v in present):
        return "number"
    if allow_date and all(parse_date(v) is not None for v in present):
        return "date"
    return "string"


def detect_column_data_type(context, col_idx):
    table = context.record
    _require_column(table, col_idx)
    return _infer_values_type(_cell(row, col_idx) for row in table.rows)


def _sort_rows(context, col_idx, direction, data_type, key_func):
    def sort_logic(table):
        table.rows.sort(key=lambda r: key_func(_cell(r, col_idx)), reverse=direction == "desc")
        table.sort_state = SortState(col_idx, direction, data_type)

    return apply_table_update(context, sort_logic, structural=True)


def sort_by_column(context, col_idx, direction="asc"):
    """Sort rows by one column, numerically when every filled cell is a number."""
    table = context.record
    _require_column(table, col_idx)

    col_type = _infer_values_type((_cell(r, col_idx) for r in table.rows), allow_date=False)
    return _sort_rows(
        context, col_idx, direction, col_type, lambda v: _value_key(v, col_type)
    )


def sort_by_column_advanced(context, col_idx, direction="asc", options=None):
    options = options or {}
    table = context.record
    _require_column(table, col_idx)

    comparator = options.get("customComparator")
    if comparator is not None:
        return _sort_rows(context, col_idx, direction, "custom", functools.cmp_to_key(comparator))

    if options.get("locale"):
        logger.debug("Collation ignores locale %r", options["locale"])

    data_type = options.get("dataType", "auto")
    if data_type == "auto":
        data_type = _infer_values_type(_cell(r, col_idx) for r in table.rows)
    case_sensitive = options.get("caseSensitive", False)

    return _sort_rows(
        context,
        col_idx,
        direction,
        data_type,
        lambda v: _value_key(v, data_type, case_sensitive),
    )


def sort_by_multiple_columns(context, criteria):
    """Sort by several `{columnIndex, direction, dataType?}` criteria in priority order."""
    criteria = list(criteria)
    if not criteria:
        return None

    table = context.record
    for criterion in criteria:
        _require_column(table, criterion["columnIndex"])

    resolved = []
    for criterion in criteria:
        col_idx = criterion["columnIndex"]
        data_type = criterion.get("dataType") or _infer_values_type(
            _cell(r, col_idx) for r in table.rows
        )
        resolved.append((col_idx, -1 if criterion["direction"] == "desc" else 1, data_type))

    def compare_rows(row_a, row_b):
        for col_idx, sign, data_type in resolved:
            result = compare_values(_cell(row_a, col_idx), _cell(row_b, col_idx), data_type)
            if result:
                return sign * result
        return 0

    first_col, first_sign, first_type = resolved[0]

    def multi_sort_logic(working):
        working.rows.sort(key=functools.cmp_to_key(compare_rows))
        working.sort_state = SortState(first_col, "desc" if first_sign < 0 else "asc", first_type)

    return apply_table_update(context, multi_sort_logic, structural=True)


def sort_natural(context, col_idx, direction="asc"):
    _require_column(context.record, col_idx)
    return _sort_rows(context, col_idx, direction, "natural", _natural_key)


def sort_by_custom_function(context, comparator):
    """Order whole rows with a `(row_a, row_b) -> int` comparator."""

    def custom_sort_logic(table):
        table.rows.sort(key=functools.cmp_to_key(comparator))
        table.sort_state = None

    return apply_table_update(context, custom_sort_logic, structural=True)


def shuffle_rows(context, rng=None):
    shuffle = (rng or random).shuffle

    def shuffle_logic(table):
        shuffle(table.rows)
        table.sort_state = None

    return apply_table_update(context, shuffle_logic, structural=True)


def reverse_rows(context):
    def reverse_logic(table):
        table.rows.reverse()
        if table.sort_state is not None:
            table.sort_state.direction = "asc" if table.sort_state.direction == "desc" else "desc"

    return apply_table_update(context, reverse_logic, structural=True)


def get_sort_state(context):
    state = context.record.sort_state
    return None if state is None else SortState(state.column_index, state.direction, state.data_type)


def clear_sort_state(context):
    context.record.sort_state = None


def is_sorted(context):
    return context.record.sort_state is not None


def get_sort_indicators(context):
    state = context.record.sort_state
    indicators = []
    for col_idx in range(len(context.record.headers)):
        active = state is not None and state.column_index == col_idx
        indicators.append(
            {"direction": state.direction if active else None, "isPrimary": active}
        )
    return indicators


def get_sorted_column_stats(context, col_idx):
    table = context.record
    _require_column(table, col_idx)

    values = [_cell(r, col_idx) for r in table.rows]
    present = [v for v in values if v.strip()]
    data_type = _infer_values_type(values)

    min_value = max_value = ""
    if present:
        ordered = sorted(present, key=lambda v: _value_key(v, data_type))
        min_value, max_value = ordered[0], ordered[-1]

    samples = []
    for value in present:
        if value not in samples:
            samples.append(value)
        if len(samples) >= context.config.sample_size:
            break

    return {
        "dataType": data_type,
        "uniqueValues": len(set(present)),
        "nullValues": len(values) - len(present),
        "minValue": min_value,
        "maxValue": max_value,
        "sampleValues": samples,
    }
