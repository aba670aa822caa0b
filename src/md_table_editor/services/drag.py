"""Drag-and-drop session for rows and columns.

A context is either idle (``context.drag_state is None``) or holds a
``Dragging`` state. Drop targets are gap positions in ``[0, n]``; the gaps
directly around the dragged item would leave the table unchanged and are not
offered as drop zones.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..errors import InvalidPositionError, TableEditorError
from ..record import TableRecord
from . import move as move_service

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DragHooks:
    on_drag_start: Optional[Callable[[str, int], None]] = None
    on_drag_over: Optional[Callable[[int, bool], None]] = None
    on_drag_preview: Optional[Callable[[TableRecord], None]] = None
    on_drag_complete: Optional[Callable[[str, int, int], None]] = None
    on_drag_cancel: Optional[Callable[[], None]] = None


@dataclass
class Dragging:
    kind: str
    drag_index: int
    valid_targets: List[int]
    preview: TableRecord
    target: Optional[int] = None


def _fire(context, hook_name, *args):
    for hooks in context.drag_listeners:
        callback = getattr(hooks, hook_name, None)
        if callback is not None:
            callback(*args)


def _item_count(record, kind):
    return len(record.rows) if kind == "row" else len(record.headers)


def compute_drop_zones(count, drag_index):
    return [t for t in range(count + 1) if t not in (drag_index, drag_index + 1)]


def _preview_move(record, kind, from_index, target):
    preview = record.clone()
    to_index = min(target, _item_count(record, kind) - 1)
    if kind == "row":
        preview.rows.insert(to_index, preview.rows.pop(from_index))
    else:
        preview.headers.insert(to_index, preview.headers.pop(from_index))
        for row in preview.rows:
            row.insert(to_index, row.pop(from_index))
    return preview


def _start_drag(context, kind, index):
    if context.drag_state is not None:
        cancel_drag_drop(context)

    count = _item_count(context.record, kind)
    if not isinstance(index, int) or index < 0 or index >= count:
        raise InvalidPositionError(f"Invalid {kind} index for drag: {index}")

    context.drag_state = Dragging(
        kind=kind,
        drag_index=index,
        valid_targets=compute_drop_zones(count, index),
        preview=context.record.clone(),
    )
    logger.debug("Started %s drag at %s", kind, index)
    _fire(context, "on_drag_start", kind, index)


def start_row_drag(context, index):
    _start_drag(context, "row", index)


def start_column_drag(context, index):
    _start_drag(context, "column", index)


def is_valid_drop_zone(context, target):
    state = context.drag_state
    return state is not None and target in state.valid_targets


def update_drag_position(context, target):
    """Track the hovered gap; returns whether dropping there would be accepted."""
    state = context.drag_state
    if state is None:
        return False

    count = _item_count(context.record, state.kind)
    if state.drag_index >= count:
        logger.debug("Dragged %s %s no longer exists", state.kind, state.drag_index)
        cancel_drag_drop(context)
        return False

    valid = target in state.valid_targets
    state.target = target
    _fire(context, "on_drag_over", target, valid)

    if isinstance(target, int) and 0 <= target <= count:
        state.preview = _preview_move(context.record, state.kind, state.drag_index, target)
        _fire(context, "on_drag_preview", state.preview.clone())

    return valid


def complete_drag_drop(context, target):
    state = context.drag_state
    if state is None:
        return False

    if target not in state.valid_targets:
        logger.debug("Rejected drop of %s %s at %s", state.kind, state.drag_index, target)
        cancel_drag_drop(context)
        return False

    context.drag_state = None
    to_index = min(target, _item_count(context.record, state.kind) - 1)
    try:
        if state.kind == "row":
            move_service.move_row(context, state.drag_index, to_index)
        else:
            move_service.move_column(context, state.drag_index, to_index)
    except TableEditorError as e:
        logger.warning("Drop of %s %s at %s failed: %s", state.kind, state.drag_index, target, e)
        _fire(context, "on_drag_cancel")
        return False

    _fire(context, "on_drag_complete", state.kind, state.drag_index, target)
    return True


def cancel_drag_drop(context):
    context.cancel_drag()


def get_drag_drop_state(context):
    state = context.drag_state
    if state is None:
        return {
            "dragging": False,
            "kind": None,
            "dragIndex": None,
            "validTargets": [],
            "previewRecord": None,
        }
    return {
        "dragging": True,
        "kind": state.kind,
        "dragIndex": state.drag_index,
        "validTargets": list(state.valid_targets),
        "previewRecord": state.preview.clone(),
    }


def add_drag_drop_listener(context, hooks: DragHooks):
    context.add_drag_listener(hooks)


def remove_drag_drop_listener(context, hooks: DragHooks):
    context.remove_drag_listener(hooks)
