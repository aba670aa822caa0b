import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .record import TableRecord, load_record
from .types import TableNode

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    pad_columns: bool = True
    column_name_prefix: str = "Column"
    copy_suffix: str = " Copy"
    sample_size: int = 5
    newline: str = "\n"

    @classmethod
    def from_json(cls, config_json: Optional[str]) -> "EditorConfig":
        config_dict = json.loads(config_json) if config_json else {}
        return cls(
            pad_columns=config_dict.get("padColumns", True),
            column_name_prefix=config_dict.get("columnNamePrefix", "Column"),
            copy_suffix=config_dict.get("copySuffix", " Copy"),
            sample_size=config_dict.get("sampleSize", 5),
            newline=config_dict.get("newline", "\n"),
        )


@dataclass
class EditorState:
    record: Optional[TableRecord] = None
    config: EditorConfig = field(default_factory=EditorConfig)
    # None while idle, a services.drag.Dragging while a drag is in progress
    drag_state: Any = None


class EditorContext:
    """Owns one table record plus the listeners and drag state around it."""

    def __init__(self, record: Optional[TableRecord] = None, config: Optional[EditorConfig] = None):
        self._state = EditorState(record=record, config=config or EditorConfig())
        self._change_listeners: List[Callable[[TableRecord], None]] = []
        self._drag_listeners: List[Any] = []

    @classmethod
    def from_node(
        cls,
        node: TableNode,
        source_uri: str = "",
        table_index: int = 0,
        config_json: Optional[str] = None,
    ) -> "EditorContext":
        record = load_record(node, source_uri=source_uri, table_index=table_index)
        return cls(record, EditorConfig.from_json(config_json))

    @property
    def record(self) -> TableRecord:
        return self._state.record

    @record.setter
    def record(self, value: TableRecord):
        self._state.record = value

    @property
    def config(self) -> EditorConfig:
        return self._state.config

    @config.setter
    def config(self, value: EditorConfig):
        self._state.config = value

    @property
    def drag_state(self):
        return self._state.drag_state

    @drag_state.setter
    def drag_state(self, value):
        self._state.drag_state = value

    @property
    def change_listeners(self):
        return list(self._change_listeners)

    @property
    def drag_listeners(self):
        return list(self._drag_listeners)

    def update_state(self, record: Optional[TableRecord] = None, config: Optional[EditorConfig] = None):
        """Update any part of the state."""
        if record is not None:
            self._state.record = record
        if config is not None:
            self._state.config = config

    def add_change_listener(self, listener: Callable[[TableRecord], None]):
        self._change_listeners.append(listener)

    def remove_change_listener(self, listener: Callable[[TableRecord], None]):
        if listener in self._change_listeners:
            self._change_listeners.remove(listener)

    def add_drag_listener(self, hooks):
        self._drag_listeners.append(hooks)

    def remove_drag_listener(self, hooks):
        if hooks in self._drag_listeners:
            self._drag_listeners.remove(hooks)

    def cancel_drag(self) -> bool:
        """Return to idle, firing on_drag_cancel; False when no drag was active."""
        if self._state.drag_state is None:
            return False
        self._state.drag_state = None
        for hooks in list(self._drag_listeners):
            callback = getattr(hooks, "on_drag_cancel", None)
            if callback is not None:
                callback()
        return True

    def notify_change(self):
        """Hand each change listener its own snapshot, in registration order."""
        for listener in list(self._change_listeners):
            listener(self.record.clone())

    def get_state(self) -> str:
        """Return the record as a JSON string."""
        if self._state.record is None:
            return json.dumps({"table": None})
        return json.dumps({"table": self._state.record.to_dict()})

    def reset(self):
        logger.debug("Resetting editor context")
        self._state = EditorState(config=self._state.config)
        self._change_listeners = []
        self._drag_listeners = []
