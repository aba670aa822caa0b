"""Tests for the table record: loading, validation, snapshots and JSON shape."""

import json
import re
from datetime import datetime

import pytest
from md_table_editor.errors import StructureError
from md_table_editor.record import (
    SortState,
    format_cell_key,
    generate_table_id,
    header_key,
    load_record,
    touch_metadata,
    validate_table_structure,
)


@pytest.fixture
def sample_node():
    return {
        "startLine": 0,
        "endLine": 4,
        "headers": ["Name", "Age", "City"],
        "rows": [
            ["John", "25", "NYC"],
            ["Jane", "30", "LA"],
            ["Bob", "35", "Chicago"],
        ],
    }


class TestLoadRecord:
    def test_loads_headers_rows_and_metadata(self, sample_node):
        record = load_record(sample_node, source_uri="test.md")

        assert record.headers == ["Name", "Age", "City"]
        assert record.rows[0] == ["John", "25", "NYC"]
        assert record.metadata.source_uri == "test.md"
        assert record.metadata.column_count == 3
        assert record.metadata.row_count == 3
        assert record.metadata.table_index == 0
        assert record.metadata.is_valid
        assert record.edited_cells is None
        assert record.sort_state is None

    def test_table_index_is_kept(self, sample_node):
        record = load_record(sample_node, table_index=2)
        assert record.metadata.table_index == 2

    def test_ragged_rows_are_normalized_and_reported(self):
        node = {
            "startLine": 0,
            "endLine": 3,
            "headers": ["A", "B", "C"],
            "rows": [["1"], ["1", "2", "3", "4"]],
        }
        record = load_record(node)

        assert record.rows == [["1", "", ""], ["1", "2", "3"]]
        assert not record.metadata.is_valid
        assert len(record.metadata.validation_issues) == 2

    def test_empty_headers_rejected(self):
        with pytest.raises(StructureError, match="Table has no headers"):
            load_record({"startLine": 0, "endLine": 0, "headers": [], "rows": []})

    def test_raw_lines_and_separator_are_copied(self, sample_node):
        raw = ["| A |", "| --- |", "| 1 |"]
        sample_node["rawLines"] = raw
        sample_node["separatorLine"] = "| --- |"

        record = load_record(sample_node)
        raw.append("| 2 |")

        assert record.raw_lines == ["| A |", "| --- |", "| 1 |"]
        assert record.separator_line == "| --- |"


class TestValidateTableStructure:
    def test_valid_table(self):
        result = validate_table_structure(["A", "B"], [["1", "2"]])
        assert result == {"isValid": True, "issues": [], "warnings": []}

    def test_no_headers(self):
        result = validate_table_structure([], [])
        assert not result["isValid"]
        assert "Table has no headers" in result["issues"]

    def test_row_length_mismatch_and_blank_header(self):
        result = validate_table_structure(["A", " "], [["1"]])
        assert not result["isValid"]
        assert result["issues"] == ["Row 1 has 1 columns, expected 2"]
        assert result["warnings"] == ["Header 2 is empty"]


class TestSnapshots:
    def test_clone_is_independent(self, sample_node):
        record = load_record(sample_node)
        record.mark_edited((0, 0))
        record.sort_state = SortState(0, "asc")

        copy = record.clone()
        copy.rows[0][0] = "Changed"
        copy.headers.append("Extra")
        copy.edited_cells.add((1, 1))
        copy.sort_state.direction = "desc"

        assert record.rows[0][0] == "John"
        assert record.headers == ["Name", "Age", "City"]
        assert record.edited_cells == {(0, 0)}
        assert record.sort_state.direction == "asc"
        assert copy.id == record.id

    def test_to_dict_is_json_ready(self, sample_node):
        record = load_record(sample_node, source_uri="doc.md")
        record.mark_edited((0, 1))
        record.mark_edited(header_key(2))
        record.sort_state = SortState(1, "desc", "number")

        data = json.loads(json.dumps(record.to_dict()))

        assert data["headers"] == ["Name", "Age", "City"]
        assert data["metadata"]["sourceUri"] == "doc.md"
        assert data["metadata"]["tableIndex"] == 0
        assert sorted(data["editedCells"]) == ["0,1", "header,2"]
        assert data["sortState"] == {"columnIndex": 1, "direction": "desc", "dataType": "number"}
        assert data["rawLines"] is None

    def test_format_cell_key(self):
        assert format_cell_key((3, 1)) == "3,1"
        assert format_cell_key(header_key(0)) == "header,0"


class TestMetadataHelpers:
    def test_touch_metadata_refreshes_counts(self, sample_node):
        record = load_record(sample_node)
        record.metadata.last_modified = datetime(2000, 1, 1)
        record.rows.append(["Ann", "41", "Rome"])

        touch_metadata(record)

        assert record.metadata.row_count == 4
        assert record.metadata.last_modified > datetime(2000, 1, 1)
        assert record.metadata.is_valid

    def test_generate_table_id_shape_and_uniqueness(self):
        ids = {generate_table_id() for _ in range(50)}
        assert len(ids) == 50
        for table_id in ids:
            assert re.match(r"^table_\d+_[0-9a-f]{9}$", table_id)
