"""Tests for the TableEditor facade.

The facade is a thin wrapper around the services; these tests verify it
end-to-end, including the public surface checked by scripts/verify_api_surface.py.
"""

import json

import pytest
import verify_api_surface
from md_table_editor import api
from md_table_editor.api import DragHooks, TableEditor


@pytest.fixture
def editor():
    return TableEditor(
        {
            "startLine": 0,
            "endLine": 4,
            "headers": ["Name", "Age", "City"],
            "rows": [
                ["John", "25", "NYC"],
                ["Jane", "30", "LA"],
                ["Bob", "35", "Chicago"],
            ],
        },
        source_uri="test.md",
    )


class TestSurface:
    def test_every_expected_method_exists(self):
        assert verify_api_surface.find_missing() == []

    def test_exports(self):
        assert set(api.__all__) == {"DragHooks", "EditorConfig", "EditorContext", "TableEditor"}


class TestSnapshots:
    def test_get_table_data_is_a_copy(self, editor):
        data = editor.get_table_data()
        data.rows[0][0] = "Changed"
        assert editor.get_cell(0, 0) == "John"

    def test_get_state(self, editor):
        state = json.loads(editor.get_state())
        assert state["table"]["metadata"]["sourceUri"] == "test.md"

    def test_clone_is_independent(self, editor):
        other = editor.clone()
        other.update_cell(0, 0, "Other")
        assert editor.get_cell(0, 0) == "John"
        assert other.get_cell(0, 0) == "Other"
        assert other.get_table_data().id == editor.get_table_data().id

    def test_clone_has_its_own_config(self, editor):
        other = editor.clone()
        other.context.config.pad_columns = False

        assert editor.context.config.pad_columns is True
        assert other.context.config is not editor.context.config

    def test_config_json(self):
        editor = TableEditor(
            {"startLine": 0, "endLine": 1, "headers": ["A"], "rows": [["1"]]},
            config_json='{"padColumns": false}',
        )
        assert editor.serialize_to_markdown() == "| A |\n| :--- |\n| 1 |"


class TestEditingFlow:
    def test_listener_sees_every_mutation(self, editor):
        seen = []
        editor.add_change_listener(lambda r: seen.append(r.rows[0][0]))

        editor.update_cell(0, 0, "Johnny")
        editor.sort_by_column(0, "asc")
        editor.move_row(0, 2)

        assert seen == ["Johnny", "Bob", "Jane"]

    def test_query_delegation(self, editor):
        assert editor.get_row(1) == ["Jane", "30", "LA"]
        assert editor.get_column(2)["values"] == ["NYC", "LA", "Chicago"]
        assert editor.detect_column_data_type(1) == "number"
        assert editor.compare_values("ABC", "abc") == 0
        assert editor.natural_compare("x2", "x10") == -1
        assert editor.validate_row_move(0, 0)["isValid"] is False

    def test_drag_flow(self, editor):
        completed = []
        hooks = DragHooks(on_drag_complete=lambda *args: completed.append(args))
        editor.add_drag_drop_listener(hooks)

        editor.start_row_drag(0)
        assert editor.is_valid_drop_zone(3)
        assert editor.update_drag_position(3)
        assert editor.complete_drag_drop(3)

        assert completed == [("row", 0, 3)]
        assert [r[0] for r in editor.get_table_data().rows] == ["Jane", "Bob", "John"]
        assert editor.get_drag_drop_state()["dragging"] is False

        editor.remove_drag_drop_listener(hooks)
        editor.start_column_drag(0)
        editor.cancel_drag_drop()
        assert completed == [("row", 0, 3)]

    def test_structure_then_serialize(self, editor):
        editor.add_column(name="Country")
        editor.update_column(3, ["US", "US", "US"])
        editor.delete_row(1)

        lines = editor.serialize_to_markdown().split("\n")
        assert lines[0] == "| Name | Age  | City    | Country |"
        assert lines[-1] == "| Bob  | 35   | Chicago | US      |"
