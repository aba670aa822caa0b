"""Tests for row and column reordering (services/move.py)."""

import pytest
from md_table_editor.context import EditorContext
from md_table_editor.errors import InvalidPositionError
from md_table_editor.services import move as move_service


@pytest.fixture
def context():
    return EditorContext.from_node(
        {
            "startLine": 0,
            "endLine": 4,
            "headers": ["Name", "Age", "City"],
            "rows": [
                ["John", "25", "NYC"],
                ["Jane", "30", "LA"],
                ["Bob", "35", "Chicago"],
            ],
            "rawLines": [
                "| Name | Age | City |",
                "| :--- | ---: | :---: |",
                "| John | 25 | NYC |",
                "| Jane | 30 | LA |",
                "| Bob | 35 | Chicago |",
            ],
            "separatorLine": "| :--- | ---: | :---: |",
        }
    )


@pytest.fixture
def snapshots(context):
    received = []
    context.add_change_listener(received.append)
    return received


def names(context):
    return [r[0] for r in context.record.rows]


class TestMoveRow:
    def test_forward(self, context):
        move_service.move_row(context, 0, 2)
        assert names(context) == ["Jane", "Bob", "John"]

    def test_backward(self, context):
        move_service.move_row(context, 2, 0)
        assert names(context) == ["Bob", "John", "Jane"]

    def test_drops_raw_lines(self, context):
        move_service.move_row(context, 0, 1)
        assert context.record.raw_lines is None

    def test_same_index_is_silent(self, context, snapshots):
        move_service.move_row(context, 1, 1)
        assert snapshots == []
        assert context.record.raw_lines is not None

    @pytest.mark.parametrize("src,dst", [(-1, 0), (0, 10), (10, 0)])
    def test_invalid_indices(self, context, src, dst):
        with pytest.raises(InvalidPositionError, match="Invalid row indices"):
            move_service.move_row(context, src, dst)


class TestMoveColumn:
    def test_moves_headers_cells_and_separator(self, context):
        move_service.move_column(context, 0, 2)
        record = context.record
        assert record.headers == ["Age", "City", "Name"]
        assert record.rows[0] == ["25", "NYC", "John"]
        assert record.separator_line == "| ---: | :---: | :--- |"

    def test_backward(self, context):
        move_service.move_column(context, 2, 0)
        assert context.record.headers == ["City", "Name", "Age"]

    @pytest.mark.parametrize("src,dst", [(-1, 0), (0, 10), (10, 0)])
    def test_invalid_indices(self, context, src, dst):
        with pytest.raises(InvalidPositionError, match="Invalid column indices"):
            move_service.move_column(context, src, dst)


class TestMoveMultiple:
    def test_move_rows_to_end(self, context):
        move_service.move_rows(context, [0, 1], 3)
        assert names(context) == ["Bob", "John", "Jane"]

    def test_move_rows_keep_relative_order(self, context):
        move_service.move_rows(context, [0, 2], 1)
        assert names(context) == ["John", "Bob", "Jane"]

    def test_move_rows_dedupes_and_filters(self, context):
        move_service.move_rows(context, [2, 2, 7, -3], 0)
        assert names(context) == ["Bob", "John", "Jane"]

    def test_move_rows_unchanged_order_is_silent(self, context, snapshots):
        move_service.move_rows(context, [0], 0)
        move_service.move_rows(context, [], 2)
        assert snapshots == []

    @pytest.mark.parametrize("target", [-1, 100])
    def test_move_rows_bad_target(self, context, target):
        with pytest.raises(InvalidPositionError, match="Invalid target row index"):
            move_service.move_rows(context, [0], target)

    def test_move_columns(self, context):
        move_service.move_columns(context, [2], 0)
        record = context.record
        assert record.headers == ["City", "Name", "Age"]
        assert record.rows[1] == ["LA", "Jane", "30"]
        assert record.separator_line == "| :---: | :--- | ---: |"

    @pytest.mark.parametrize("target", [-1, 100])
    def test_move_columns_bad_target(self, context, target):
        with pytest.raises(InvalidPositionError, match="Invalid target column index"):
            move_service.move_columns(context, [0], target)


class TestValidationAndSafeMoves:
    def test_validate_row_move(self, context):
        assert move_service.validate_row_move(context, 0, 2) == {"isValid": True, "error": None}
        assert "source" in move_service.validate_row_move(context, -1, 0)["error"]
        assert "target" in move_service.validate_row_move(context, 0, 100)["error"]
        assert "same" in move_service.validate_row_move(context, 0, 0)["error"]

    def test_validate_column_move(self, context):
        assert move_service.validate_column_move(context, 0, 2)["isValid"]
        assert "source" in move_service.validate_column_move(context, 5, 0)["error"]
        assert "target" in move_service.validate_column_move(context, 0, -2)["error"]
        assert "same" in move_service.validate_column_move(context, 1, 1)["error"]

    def test_move_row_safe_success(self, context):
        result = move_service.move_row_safe(context, 0, 2)
        assert result["success"] is True
        assert "error" not in result
        assert [r[0] for r in result["previousState"].rows] == ["John", "Jane", "Bob"]
        assert names(context) == ["Jane", "Bob", "John"]

    def test_move_row_safe_failure(self, context):
        result = move_service.move_row_safe(context, -1, 0)
        assert result["success"] is False
        assert "Invalid row indices" in result["error"]
        assert result["previousState"] is not None

    def test_move_column_safe(self, context):
        assert move_service.move_column_safe(context, 0, 2)["success"] is True
        assert move_service.move_column_safe(context, -1, 0)["success"] is False

    def test_safe_move_catches_unexpected_errors(self, context, monkeypatch):
        def explode(*args):
            raise RuntimeError("unexpected error")

        monkeypatch.setattr(move_service, "move_row", explode)
        result = move_service.move_row_safe(context, 0, 2)

        assert result["success"] is False
        assert "unexpected error" in result["error"]
        assert result["previousState"].rows[0][0] == "John"
