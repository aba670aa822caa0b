import copy
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Set, Tuple, Union

from .errors import StructureError
from .types import RecordDict, TableNode, ValidationResult

# Edited-cell keys are (row, col) for data cells and (HEADER_ROW, col) for headers
HEADER_ROW = "header"

CellKey = Tuple[Union[int, str], int]


def cell_key(row: int, col: int) -> CellKey:
    return (row, col)


def header_key(col: int) -> CellKey:
    return (HEADER_ROW, col)


def format_cell_key(key: CellKey) -> str:
    return f"{key[0]},{key[1]}"


@dataclass
class TableMetadata:
    source_uri: str = ""
    start_line: int = 0
    end_line: int = 0
    table_index: int = 0
    last_modified: datetime = field(default_factory=datetime.now)
    column_count: int = 0
    row_count: int = 0
    is_valid: bool = True
    validation_issues: List[str] = field(default_factory=list)


@dataclass
class SortState:
    column_index: int
    direction: str
    data_type: str = "string"


@dataclass
class TableRecord:
    id: str
    headers: List[str]
    rows: List[List[str]]
    metadata: TableMetadata
    edited_cells: Optional[Set[CellKey]] = None
    raw_lines: Optional[List[str]] = None
    separator_line: Optional[str] = None
    sort_state: Optional[SortState] = None

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_valid_row(self, index) -> bool:
        return isinstance(index, int) and 0 <= index < len(self.rows)

    def is_valid_column(self, index) -> bool:
        return isinstance(index, int) and 0 <= index < len(self.headers)

    def is_valid_position(self, row, col) -> bool:
        return self.is_valid_row(row) and self.is_valid_column(col)

    def mark_edited(self, key: CellKey):
        if self.edited_cells is None:
            self.edited_cells = set()
        self.edited_cells.add(key)

    def has_edits(self) -> bool:
        return bool(self.edited_cells)

    def clone(self) -> "TableRecord":
        """Deep copy sharing no mutable state with this record."""
        return copy.deepcopy(self)

    def to_dict(self) -> RecordDict:
        sort_state = None
        if self.sort_state is not None:
            sort_state = {
                "columnIndex": self.sort_state.column_index,
                "direction": self.sort_state.direction,
                "dataType": self.sort_state.data_type,
            }

        edited = sorted(format_cell_key(k) for k in (self.edited_cells or ()))
        meta = self.metadata

        return {
            "id": self.id,
            "headers": list(self.headers),
            "rows": [list(r) for r in self.rows],
            "metadata": {
                "sourceUri": meta.source_uri,
                "startLine": meta.start_line,
                "endLine": meta.end_line,
                "tableIndex": meta.table_index,
                "lastModified": meta.last_modified.isoformat(),
                "columnCount": meta.column_count,
                "rowCount": meta.row_count,
                "isValid": meta.is_valid,
                "validationIssues": list(meta.validation_issues),
            },
            "editedCells": edited,
            "rawLines": list(self.raw_lines) if self.raw_lines is not None else None,
            "separatorLine": self.separator_line,
            "sortState": sort_state,
        }


def generate_table_id() -> str:
    millis = int(time.time() * 1000)
    return f"table_{millis}_{uuid.uuid4().hex[:9]}"


def validate_table_structure(headers, rows) -> ValidationResult:
    issues = []
    warnings = []

    if not headers:
        issues.append("Table has no headers")

    for i, header in enumerate(headers or []):
        if not str(header).strip():
            warnings.append(f"Header {i + 1} is empty")

    expected = len(headers or [])
    for i, row in enumerate(rows or []):
        if len(row) != expected:
            issues.append(f"Row {i + 1} has {len(row)} columns, expected {expected}")

    return {"isValid": not issues, "issues": issues, "warnings": warnings}


def touch_metadata(record: TableRecord):
    meta = record.metadata
    meta.last_modified = datetime.now()
    meta.column_count = len(record.headers)
    meta.row_count = len(record.rows)

    validation = validate_table_structure(record.headers, record.rows)
    meta.is_valid = validation["isValid"]
    meta.validation_issues = validation["issues"]


def _normalize_row(row, width):
    cells = ["" if v is None else str(v) for v in row]
    if len(cells) < width:
        cells.extend([""] * (width - len(cells)))
    return cells[:width]


def load_record(node: TableNode, source_uri: str = "", table_index: int = 0) -> TableRecord:
    """Build a TableRecord from a parsed table node.

    Ragged source rows are reported in the metadata issues and then padded or
    truncated to the header width, so every row has exactly one cell per column.
    """
    headers = [str(h) for h in node.get("headers") or []]
    if not headers:
        raise StructureError("Table has no headers")

    source_rows = node.get("rows") or []
    validation = validate_table_structure(headers, source_rows)

    raw_lines = node.get("rawLines")
    metadata = TableMetadata(
        source_uri=source_uri,
        start_line=node.get("startLine", 0),
        end_line=node.get("endLine", 0),
        table_index=table_index,
        column_count=len(headers),
        row_count=len(source_rows),
        is_valid=validation["isValid"],
        validation_issues=validation["issues"],
    )

    return TableRecord(
        id=generate_table_id(),
        headers=headers,
        rows=[_normalize_row(r, len(headers)) for r in source_rows],
        metadata=metadata,
        raw_lines=list(raw_lines) if raw_lines is not None else None,
        separator_line=node.get("separatorLine"),
    )
