from __future__ import annotations

from typing import Any, Iterator

from vizframe.config import get_frame_defaults
from vizframe.data import DataSet
from vizframe.errors import ConfigError
from vizframe.frames.base import FrameContext, VisualFrame
from vizframe.frames.categorical import CategoricalFrame
from vizframe.frames.static import StaticFrame
from vizframe.kinds import source_kind
from vizframe.scales import Scale


class CompositeFrame(VisualFrame):
    """Ordered same-kind frames.

    Cell lookups try every child in order and keep the first non-null
    attribute. Value lookups, legends and field/scale changes go to the guide
    child: the first visible one.
    """

    def __init__(self, *frames: VisualFrame) -> None:
        super().__init__(None)
        self._frames: list[VisualFrame] = []
        for frame in frames:
            self.add_frame(frame)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self._frames[0].kind if self._frames else VisualFrame.kind

    @property
    def continuous(self) -> bool:  # type: ignore[override]
        guide = self.guide_frame()
        return guide.continuous if guide is not None else False

    @property
    def legend_bearing(self) -> bool:  # type: ignore[override]
        return any(f.legend_bearing for f in self._frames)

    # -- children ------------------------------------------------------------

    @property
    def frames(self) -> tuple[VisualFrame, ...]:
        return tuple(self._frames)

    def __iter__(self) -> Iterator[VisualFrame]:
        return iter(tuple(self._frames))

    def __len__(self) -> int:
        return len(self._frames)

    def add_frame(self, frame: VisualFrame, index: int | None = None) -> None:
        kind = source_kind(frame)
        if self._frames and kind != self._frames[0].kind:
            raise ConfigError(f"cannot mix {kind} frame into a {self._frames[0].kind} composite")
        if index is None:
            self._frames.append(frame)
        else:
            self._frames.insert(index, frame)

    def remove_frame(self, frame: VisualFrame) -> None:
        self._frames.remove(frame)

    def guide_frame(self) -> VisualFrame | None:
        for frame in self._frames:
            if frame.is_visible():
                return frame
        return None

    def lookup_frame(self) -> VisualFrame | None:
        guide = self.guide_frame()
        if guide is not None:
            return guide
        # no visible child: static first, then categorical
        for frame in self._frames:
            if isinstance(frame, StaticFrame):
                return frame
        for frame in self._frames:
            if isinstance(frame, CategoricalFrame):
                return frame
        return None

    @property
    def fallback(self) -> Any:
        defaults = get_frame_defaults()
        if self.kind == "color":
            return defaults.default_rgba
        if self.kind == "size":
            return defaults.default_size
        return None

    # -- forwarding ----------------------------------------------------------

    @property
    def field(self) -> str | None:  # type: ignore[override]
        guide = self.guide_frame()
        return guide.field if guide is not None else None

    @field.setter
    def field(self, value: str | None) -> None:
        guide = self.guide_frame()
        if guide is not None:
            guide.field = value

    @property
    def scale(self) -> Scale | None:  # type: ignore[override]
        guide = self.guide_frame()
        return guide.scale if guide is not None else None

    @scale.setter
    def scale(self, scale: Scale | None) -> None:
        guide = self.guide_frame()
        if guide is not None:
            guide.scale = scale

    def init(self, dataset: DataSet) -> None:
        for frame in self._frames:
            frame.init(dataset)

    def get_attribute(self, value: Any) -> Any:
        frame = self.lookup_frame()
        if frame is None:
            return self.fallback
        return frame.get_attribute(value)

    def legend_attribute(self, value: Any) -> Any:
        guide = self.guide_frame()
        return guide.legend_attribute(value) if guide is not None else self.get_attribute(value)

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Any:
        for frame in self._frames:
            attr = frame.get_attribute_at(dataset, column, row)
            if attr is not None:
                return attr
        return self.fallback

    # -- legend --------------------------------------------------------------

    def get_title(self) -> str:
        self._check_legend("get_title")
        guide = self.guide_frame()
        return guide.get_title() if guide is not None else ""

    def get_values(self) -> list[Any]:
        self._check_legend("get_values")
        return self._legend_values()

    def _legend_values(self) -> list[Any]:
        guide = self.guide_frame()
        return guide.get_values() if guide is not None else []

    def get_labels(self, context: FrameContext | None = None) -> list[Any]:
        self._check_legend("get_labels")
        guide = self.guide_frame()
        return guide.get_labels(context) if guide is not None else []

    def is_visible(self) -> bool:
        return self.legend_spec.visible and self.guide_frame() is not None

    def unique_id(self) -> str:
        guide = self.guide_frame()
        return guide.unique_id() if guide is not None else f"{type(self).__name__}:{self.kind}:none"

    def share_id(self) -> str:
        guide = self.guide_frame()
        return guide.share_id() if guide is not None else f"{self.kind}:none"

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, CompositeFrame)
        other._frames = [f.copy() for f in self._frames]

    def __repr__(self) -> str:
        return f"CompositeFrame({', '.join(repr(f) for f in self._frames)})"
