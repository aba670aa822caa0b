import copy

from .context import EditorConfig, EditorContext
from .services import drag as drag_service
from .services import markdown as markdown_service
from .services import move as move_service
from .services import sort as sort_service
from .services import table as table_service
from .services.drag import DragHooks

__all__ = [
    "DragHooks",
    "EditorConfig",
    "EditorContext",
    "TableEditor",
]


class TableEditor:
    """Editing surface for one Markdown pipe table."""

    def __init__(self, node, source_uri="", table_index=0, config_json=None):
        self._ctx = EditorContext.from_node(
            node, source_uri=source_uri, table_index=table_index, config_json=config_json
        )

    @property
    def context(self) -> EditorContext:
        return self._ctx

    # Snapshots and listeners

    def get_table_data(self):
        return self._ctx.record.clone()

    def get_state(self):
        return self._ctx.get_state()

    def clone(self):
        other = TableEditor.__new__(TableEditor)
        other._ctx = EditorContext(self._ctx.record.clone(), copy.copy(self._ctx.config))
        return other

    def add_change_listener(self, listener):
        self._ctx.add_change_listener(listener)

    def remove_change_listener(self, listener):
        self._ctx.remove_change_listener(listener)

    # Cell and structure edits

    def update_cell(self, row, col, value):
        return table_service.update_cell(self._ctx, row, col, value)

    def update_header(self, col, value):
        return table_service.update_header(self._ctx, col, value)

    def batch_update_cells(self, updates):
        return table_service.batch_update_cells(self._ctx, updates)

    def add_row(self, index=None, count=1):
        return table_service.add_row(self._ctx, index, count)

    def insert_rows(self, start_index, count):
        return table_service.insert_rows(self._ctx, start_index, count)

    def delete_row(self, index):
        return table_service.delete_row(self._ctx, index)

    def delete_rows(self, indices):
        return table_service.delete_rows(self._ctx, indices)

    def add_column(self, index=None, count=1, name=None):
        return table_service.add_column(self._ctx, index, count, name)

    def insert_columns(self, start_index, count, names=None):
        return table_service.insert_columns(self._ctx, start_index, count, names)

    def delete_column(self, index):
        return table_service.delete_column(self._ctx, index)

    def delete_columns(self, indices):
        return table_service.delete_columns(self._ctx, indices)

    def update_row(self, index, values):
        return table_service.update_row(self._ctx, index, values)

    def update_column(self, index, values, new_header=None):
        return table_service.update_column(self._ctx, index, values, new_header)

    def clear_row(self, index):
        return table_service.clear_row(self._ctx, index)

    def clear_column(self, index):
        return table_service.clear_column(self._ctx, index)

    def clear_all_cells(self):
        return table_service.clear_all_cells(self._ctx)

    def duplicate_row(self, index, insert_at=None):
        return table_service.duplicate_row(self._ctx, index, insert_at)

    def duplicate_column(self, index, insert_at=None):
        return table_service.duplicate_column(self._ctx, index, insert_at)

    def find_and_replace(self, pattern, replacement, options=None):
        return table_service.find_and_replace(self._ctx, pattern, replacement, options)

    def replace_contents(self, headers, rows):
        return table_service.replace_contents(self._ctx, headers, rows)

    # Read queries

    def get_row(self, index):
        return table_service.get_row(self._ctx, index)

    def get_column(self, index):
        return table_service.get_column(self._ctx, index)

    def get_cell(self, row, col):
        return table_service.get_cell(self._ctx, row, col)

    def is_empty(self):
        return table_service.is_empty(self._ctx)

    def has_empty_cells(self):
        return table_service.has_empty_cells(self._ctx)

    def get_empty_cells(self):
        return table_service.get_empty_cells(self._ctx)

    def get_statistics(self):
        return table_service.get_statistics(self._ctx)

    # Ordering

    def sort_by_column(self, col, direction="asc"):
        return sort_service.sort_by_column(self._ctx, col, direction)

    def sort_by_column_advanced(self, col, direction="asc", options=None):
        return sort_service.sort_by_column_advanced(self._ctx, col, direction, options)

    def sort_by_multiple_columns(self, criteria):
        return sort_service.sort_by_multiple_columns(self._ctx, criteria)

    def sort_natural(self, col, direction="asc"):
        return sort_service.sort_natural(self._ctx, col, direction)

    def sort_by_custom_function(self, comparator):
        return sort_service.sort_by_custom_function(self._ctx, comparator)

    def shuffle_rows(self, rng=None):
        return sort_service.shuffle_rows(self._ctx, rng)

    def reverse_rows(self):
        return sort_service.reverse_rows(self._ctx)

    def get_sort_state(self):
        return sort_service.get_sort_state(self._ctx)

    def clear_sort_state(self):
        return sort_service.clear_sort_state(self._ctx)

    def is_sorted(self):
        return sort_service.is_sorted(self._ctx)

    def get_sort_indicators(self):
        return sort_service.get_sort_indicators(self._ctx)

    def get_sorted_column_stats(self, col):
        return sort_service.get_sorted_column_stats(self._ctx, col)

    def detect_column_data_type(self, col):
        return sort_service.detect_column_data_type(self._ctx, col)

    def compare_values(self, a, b, data_type="string", case_sensitive=False):
        return sort_service.compare_values(a, b, data_type, case_sensitive)

    def natural_compare(self, a, b):
        return sort_service.natural_compare(a, b)

    # Reordering

    def move_row(self, from_index, to_index):
        return move_service.move_row(self._ctx, from_index, to_index)

    def move_column(self, from_index, to_index):
        return move_service.move_column(self._ctx, from_index, to_index)

    def move_rows(self, indices, target_index):
        return move_service.move_rows(self._ctx, indices, target_index)

    def move_columns(self, indices, target_index):
        return move_service.move_columns(self._ctx, indices, target_index)

    def validate_row_move(self, from_index, to_index):
        return move_service.validate_row_move(self._ctx, from_index, to_index)

    def validate_column_move(self, from_index, to_index):
        return move_service.validate_column_move(self._ctx, from_index, to_index)

    def move_row_safe(self, from_index, to_index):
        return move_service.move_row_safe(self._ctx, from_index, to_index)

    def move_column_safe(self, from_index, to_index):
        return move_service.move_column_safe(self._ctx, from_index, to_index)

    # Drag and drop

    def start_row_drag(self, index):
        return drag_service.start_row_drag(self._ctx, index)

    def start_column_drag(self, index):
        return drag_service.start_column_drag(self._ctx, index)

    def update_drag_position(self, target):
        return drag_service.update_drag_position(self._ctx, target)

    def complete_drag_drop(self, target):
        return drag_service.complete_drag_drop(self._ctx, target)

    def cancel_drag_drop(self):
        return drag_service.cancel_drag_drop(self._ctx)

    def is_valid_drop_zone(self, target):
        return drag_service.is_valid_drop_zone(self._ctx, target)

    def get_drag_drop_state(self):
        return drag_service.get_drag_drop_state(self._ctx)

    def add_drag_drop_listener(self, hooks):
        return drag_service.add_drag_drop_listener(self._ctx, hooks)

    def remove_drag_drop_listener(self, hooks):
        return drag_service.remove_drag_drop_listener(self._ctx, hooks)

    # Serialization

    def serialize_to_markdown(self):
        return markdown_service.serialize_to_markdown(self._ctx)
