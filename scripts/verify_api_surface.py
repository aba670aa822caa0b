import sys

from md_table_editor.api import TableEditor

EXPECTED_METHODS = [
    "add_change_listener",
    "add_column",
    "add_drag_drop_listener",
    "add_row",
    "batch_update_cells",
    "cancel_drag_drop",
    "clear_all_cells",
    "clear_column",
    "clear_row",
    "clear_sort_state",
    "clone",
    "compare_values",
    "complete_drag_drop",
    "delete_column",
    "delete_columns",
    "delete_row",
    "delete_rows",
    "detect_column_data_type",
    "duplicate_column",
    "duplicate_row",
    "find_and_replace",
    "get_cell",
    "get_column",
    "get_drag_drop_state",
    "get_empty_cells",
    "get_row",
    "get_sort_indicators",
    "get_sort_state",
    "get_sorted_column_stats",
    "get_state",
    "get_statistics",
    "get_table_data",
    "has_empty_cells",
    "insert_columns",
    "insert_rows",
    "is_empty",
    "is_sorted",
    "is_valid_drop_zone",
    "move_column",
    "move_column_safe",
    "move_columns",
    "move_row",
    "move_row_safe",
    "move_rows",
    "natural_compare",
    "remove_change_listener",
    "remove_drag_drop_listener",
    "replace_contents",
    "reverse_rows",
    "serialize_to_markdown",
    "shuffle_rows",
    "sort_by_column",
    "sort_by_column_advanced",
    "sort_by_custom_function",
    "sort_by_multiple_columns",
    "sort_natural",
    "start_column_drag",
    "start_row_drag",
    "update_cell",
    "update_column",
    "update_drag_position",
    "update_header",
    "update_row",
    "validate_column_move",
    "validate_row_move",
]


def find_missing():
    return [m for m in EXPECTED_METHODS if not callable(getattr(TableEditor, m, None))]


def verify_api():
    print("Verifying API surface area...")
    missing = find_missing()
    for method in EXPECTED_METHODS:
        if method in missing:
            print(f"❌ Missing: {method}")
        else:
            print(f"✅ Found: {method}")

    if missing:
        print(f"\nERROR: {len(missing)} methods missing from TableEditor")
        sys.exit(1)

    print("\nAPI Surface Verification Passed!")
    sys.exit(0)


if __name__ == "__main__":
    verify_api()
