try:
    from typing_extensions import TypedDict
except ImportError:
    from typing import TypedDict

from typing import Callable, List, Literal, Optional

Direction = Literal["asc", "desc"]
DragKind = Literal["row", "column"]
SortDataType = Literal["string", "number", "date", "natural", "custom"]
SortDataTypeOption = Literal["auto", "string", "number", "date"]


# Construction input handed over by the document parser
class _TableNodeRequired(TypedDict):
    startLine: int
    endLine: int
    headers: List[str]
    rows: List[List[str]]


class TableNode(_TableNodeRequired, total=False):
    rawLines: List[str]
    separatorLine: str


class CellUpdate(TypedDict):
    row: int  # -1 addresses the header row
    col: int
    value: str


class CellPosition(TypedDict):
    row: int
    col: int


class ColumnData(TypedDict):
    header: str
    values: List[str]


class FindReplaceOptions(TypedDict, total=False):
    useRegex: bool
    caseSensitive: bool
    wholeWord: bool
    includeHeaders: bool


class SortOptions(TypedDict, total=False):
    dataType: SortDataTypeOption
    caseSensitive: bool
    locale: str
    customComparator: Callable[[str, str], int]


class _SortCriterionRequired(TypedDict):
    columnIndex: int
    direction: Direction


class SortCriterion(_SortCriterionRequired, total=False):
    dataType: Literal["string", "number", "date"]


class SortIndicator(TypedDict):
    direction: Optional[Direction]
    isPrimary: bool


class ColumnStats(TypedDict):
    dataType: Literal["string", "number", "date"]
    uniqueValues: int
    nullValues: int
    minValue: str
    maxValue: str
    sampleValues: List[str]


class TableStatistics(TypedDict):
    totalCells: int
    emptyCells: int
    fillRate: float
    columnWidths: List[int]
    averageRowLength: float


class ValidationResult(TypedDict):
    isValid: bool
    issues: List[str]
    warnings: List[str]


class MoveValidation(TypedDict):
    isValid: bool
    error: Optional[str]


class MoveResult(TypedDict, total=False):
    success: bool
    error: str
    previousState: object  # TableRecord snapshot


class DragSnapshot(TypedDict):
    dragging: bool
    kind: Optional[DragKind]
    dragIndex: Optional[int]
    validTargets: List[int]
    previewRecord: Optional[object]


# JSON shape produced by TableRecord.to_dict()
class MetadataDict(TypedDict):
    sourceUri: str
    startLine: int
    endLine: int
    tableIndex: int
    lastModified: str
    columnCount: int
    rowCount: int
    isValid: bool
    validationIssues: List[str]


class SortStateDict(TypedDict):
    columnIndex: int
    direction: Direction
    dataType: SortDataType


class RecordDict(TypedDict):
    id: str
    headers: List[str]
    rows: List[List[str]]
    metadata: MetadataDict
    editedCells: List[str]
    rawLines: Optional[List[str]]
    separatorLine: Optional[str]
    sortState: Optional[SortStateDict]
