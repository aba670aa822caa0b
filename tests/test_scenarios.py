import pytest
from md_table_editor.api import TableEditor
from md_table_editor.errors import StructureError

RAW_LINES = [
    "| Name   | Age | City    |",
    "| ------ | --- | ------- |",
    "| John   | 25  | NYC     |",
    "| Jane   | 30  | LA      |",
    "| Bob    | 35  | Chicago |",
]


@pytest.fixture
def node():
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


@pytest.fixture
def editor(node):
    return TableEditor(node, source_uri="people.md")


def test_sort_by_age_descending(editor):
    editor.sort_by_column(1, "desc")

    assert editor.get_table_data().rows == [
        ["Bob", "35", "Chicago"],
        ["Jane", "30", "LA"],
        ["John", "25", "NYC"],
    ]


def test_move_first_and_last_rows_before_second(editor):
    editor.move_rows([0, 2], 1)

    assert [r[0] for r in editor.get_table_data().rows] == ["John", "Bob", "Jane"]


def test_cell_edit_patches_only_its_line(node):
    node["rawLines"] = list(RAW_LINES)
    node["separatorLine"] = RAW_LINES[1]
    editor = TableEditor(node)

    editor.update_cell(0, 0, "Johnny")
    lines = editor.serialize_to_markdown().split("\n")

    assert "Johnny" in lines[2]
    assert lines[3] == RAW_LINES[3]
    assert lines[4] == RAW_LINES[4]
    assert lines[:2] == RAW_LINES[:2]


def test_deleting_down_to_last_column_fails(editor):
    editor.delete_column(1)
    editor.delete_column(1)

    with pytest.raises(StructureError, match="last column"):
        editor.delete_column(0)
    assert editor.get_table_data().headers == ["Name"]


def test_drop_zones_for_middle_row(editor):
    editor.start_row_drag(1)

    assert set(editor.get_drag_drop_state()["validTargets"]) == {0, 3}
