from __future__ import annotations

from typing import Any, Mapping

from vizframe.data import DataSet, has_column
from vizframe.frames.base import FrameContext, VisualFrame
from vizframe.scales import value_key


class TextFrame(VisualFrame):
    """Maps values to display text. Unmapped values render as themselves."""

    kind = "text"
    legend_bearing = False

    def __init__(self, field: str | None = None, labels: Mapping[Any, Any] | None = None) -> None:
        super().__init__(field)
        self._labels: dict[str, Any] = {}
        for value, label in (labels or {}).items():
            self.set_text(value, label)

    def set_text(self, value: Any, label: Any) -> None:
        self._labels[value_key(value)] = label

    def remove_text(self, value: Any) -> None:
        self._labels.pop(value_key(value), None)

    def lookup(self, value: Any, context: FrameContext | None = None) -> Any | None:
        """Explicit label for `value`, or None when nothing is mapped."""

        return self._labels.get(value_key(value))

    def get_text(self, value: Any, context: FrameContext | None = None) -> Any:
        label = self.lookup(value, context)
        return value if label is None else label

    def get_attribute(self, value: Any) -> Any:
        return self.get_text(value)

    def get_attribute_at(self, dataset: DataSet, column: str, row: int, context: FrameContext | None = None) -> Any:
        name = self.field if self.field is not None else column
        if not has_column(dataset, name):
            return None
        return self.get_text(dataset.get_data(name, row), context)

    def is_visible(self) -> bool:
        return False

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, TextFrame)
        other._labels = dict(self._labels)


class HierarchicalTextFrame(TextFrame):
    """Labels that depend on the active grouping level, passed in through `FrameContext.level`."""

    def __init__(self, field: str | None = None, labels: Mapping[Any, Any] | None = None) -> None:
        super().__init__(field, labels)
        self._level_labels: dict[str, dict[str, Any]] = {}

    def set_level_text(self, level: str, value: Any, label: Any) -> None:
        self._level_labels.setdefault(level, {})[value_key(value)] = label

    def lookup(self, value: Any, context: FrameContext | None = None) -> Any | None:
        if context is not None and context.level is not None:
            labels = self._level_labels.get(context.level)
            if labels is not None:
                label = labels.get(value_key(value))
                if label is not None:
                    return label
        return super().lookup(value, context)

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, HierarchicalTextFrame)
        other._level_labels = {level: dict(labels) for level, labels in self._level_labels.items()}
