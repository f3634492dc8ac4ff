from __future__ import annotations

import copy
from dataclasses import dataclass, field
import logging
import math
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Sequence

from vizframe.config import get_frame_defaults
from vizframe.data import DataSet, has_column
from vizframe.errors import LegendFrameError
from vizframe.scales import Scale, ScaleOption, _DataSetTracker, format_tick, is_number, value_key

if TYPE_CHECKING:
    from vizframe.frames.text import TextFrame


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameContext:
    """Per-call rendering context. `level` names the active grouping field for hierarchical labels."""

    level: str | None = None


@dataclass
class LegendSpec:
    title: str | None = None
    visible: bool = True
    title_visible: bool = True
    text_format: str | None = None
    background: tuple[int, int, int, int] | None = None
    hidden_values: set[str] = field(default_factory=set)

    def is_value_visible(self, value: Any) -> bool:
        return value_key(value) not in self.hidden_values

    def hide_value(self, value: Any) -> None:
        self.hidden_values.add(value_key(value))

    def copy(self) -> "LegendSpec":
        return LegendSpec(
            title=self.title,
            visible=self.visible,
            title_visible=self.title_visible,
            text_format=self.text_format,
            background=self.background,
            hidden_values=set(self.hidden_values),
        )


class VisualFrame:
    """Common contract of every encoding frame.

    A frame binds an optional field, owns the scale created for it on `init`,
    and answers two lookups: `get_attribute(value)` for a raw value (used by
    legends) and `get_attribute_at(dataset, column, row)` for a data cell.
    """

    kind: ClassVar[str] = "attribute"
    legend_bearing: ClassVar[bool] = True
    continuous: ClassVar[bool] = False

    def __init__(self, field: str | None = None) -> None:
        self._field = field
        self._scale: Scale | None = None
        self._scale_option = ScaleOption.NONE
        self._source = _DataSetTracker()
        self.legend_spec = LegendSpec()
        self.sort_key: Callable[[Any], Any] | None = None
        self.text_frame: TextFrame | None = None

    # -- binding -------------------------------------------------------------

    @property
    def field(self) -> str | None:
        return self._field

    @field.setter
    def field(self, value: str | None) -> None:
        if value == self._field:
            return
        self._field = value
        self._scale = None
        self._source.reset()
        self._invalidate()

    @property
    def scale(self) -> Scale | None:
        return self._scale

    @scale.setter
    def scale(self, scale: Scale | None) -> None:
        self._scale = scale
        self._source.reset()
        self._invalidate()

    @property
    def scale_option(self) -> ScaleOption:
        return self._scale_option

    @scale_option.setter
    def scale_option(self, option: ScaleOption) -> None:
        self._scale_option = ScaleOption(option)
        if self._scale is not None:
            self._scale.set_scale_option(self._scale_option)
        self._source.reset()
        self._invalidate()

    def create_scale(self) -> Scale | None:
        return None

    def init(self, dataset: DataSet) -> None:
        """Create (if needed) and initialize the scale for the bound field. Re-init with the same dataset is a no-op."""

        if self._source.same(dataset):
            LOGGER.debug("%s already initialized for %r", type(self).__name__, dataset)
            return
        scale = self._scale
        if scale is None:
            if self._field is None:
                return
            scale = self.create_scale()
            if scale is None:
                return
        scale.set_scale_option(self._scale_option)
        scale.init(dataset)
        self._scale = scale
        self._source.track(dataset)
        self._invalidate()

    def is_valid(self) -> bool:
        scale = self._scale
        if scale is None or not scale.values():
            return False
        return not (math.isnan(scale.min) or math.isnan(scale.max))

    def _invalidate(self) -> None:
        """Drop derived state that depends on configuration or scale."""

    # -- lookup --------------------------------------------------------------

    def get_attribute(self, value: Any) -> Any:
        raise NotImplementedError

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Any:
        name = self._field if self._field is not None else column
        value = dataset.get_data(name, row) if has_column(dataset, name) else None
        return self.get_attribute(value)

    def legend_attribute(self, value: Any) -> Any:
        """Attribute drawn next to a legend entry for `value`."""

        return self.get_attribute(value)

    # -- legend --------------------------------------------------------------

    def _check_legend(self, operation: str) -> None:
        if not self.legend_bearing:
            raise LegendFrameError(f"{type(self).__name__} never shows a legend; `{operation}` is not supported")

    def get_title(self) -> str:
        self._check_legend("get_title")
        if self.legend_spec.title is not None:
            return self.legend_spec.title
        return self._field or ""

    def get_values(self) -> list[Any]:
        self._check_legend("get_values")
        return self._legend_values()

    def _legend_values(self) -> list[Any]:
        if self._scale is None:
            return []
        values = self._scale.values()
        if self.continuous:
            values = reduce_legend_values(values, threshold=get_frame_defaults().legend_reduce_threshold)
        return values

    def get_labels(self, context: FrameContext | None = None) -> list[Any]:
        self._check_legend("get_labels")
        return [self.label_for(v, context) for v in self._legend_values()]

    def label_for(self, value: Any, context: FrameContext | None = None) -> Any:
        text = self.text_frame
        formatted = self.format_value(value)
        if text is not None:
            label = text.lookup(value, context)
            if label is None and formatted != value:
                # user overrides may be keyed on the formatted string
                label = text.lookup(formatted, context)
            if label is not None:
                return label
        return formatted

    def format_value(self, value: Any) -> Any:
        spec = self.legend_spec.text_format
        if spec:
            try:
                return spec.format(value) if "{" in spec else format(value, spec)
            except (TypeError, ValueError, IndexError, KeyError):
                return value_key(value)
        if isinstance(value, float):
            return format_tick(value)
        return value

    def is_visible(self) -> bool:
        if not self.legend_bearing or not self.legend_spec.visible:
            return False
        if self._field is not None:
            return True
        outputs = {repr(self.get_attribute(v)) for v in self._legend_values()}
        return len(outputs) >= 2

    # -- identity ------------------------------------------------------------

    def _identity_pairs(self) -> list[tuple[str, str]]:
        if not self.legend_bearing:
            return []
        return [(value_key(v), repr(self.get_attribute(v))) for v in self._legend_values()]

    def unique_id(self) -> str:
        """Identity including the value order; reordering changes which attribute lands on which value."""

        return f"{type(self).__name__}:{self._field}:{self._identity_pairs()!r}"

    def share_id(self) -> str:
        """Order-insensitive identity used to collapse equivalent legends."""

        return f"{self.kind}:{self._field}:{sorted(self._identity_pairs())!r}"

    # -- copying -------------------------------------------------------------

    def copy(self) -> "VisualFrame":
        """Independent copy: owned collections are duplicated so the copy can be mutated freely."""

        other = copy.copy(self)
        self._copy_into(other)
        return other

    def _copy_into(self, other: "VisualFrame") -> None:
        other._scale = self._scale.copy() if self._scale is not None else None
        other._source = _DataSetTracker()
        other.legend_spec = self.legend_spec.copy()
        other.text_frame = self.text_frame.copy() if self.text_frame is not None else None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field={self._field!r})"


def reduce_legend_values(values: Sequence[Any], *, threshold: int = 6) -> list[Any]:
    """Thin a continuous legend: halve the count until it is at most `threshold`.

    Even counts average interior pairs; odd counts keep every other value.
    The first and last values are always kept exactly.
    """

    out = list(values)
    if not all(is_number(v) for v in out):
        return out
    while len(out) > threshold and len(out) > 2:
        if len(out) % 2 == 1:
            out = out[::2]
            continue
        interior = out[1:-1]
        averaged = [(interior[i] + interior[i + 1]) / 2.0 for i in range(0, len(interior) - 1, 2)]
        out = [out[0], *averaged, out[-1]]
    return out
