from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vizframe.data import DataSet
from vizframe.errors import ConfigError
from vizframe.frames.base import FrameContext, VisualFrame
from vizframe.frames.categorical import CategoricalFrame
from vizframe.frames.composite import CompositeFrame
from vizframe.frames.continuous import LinearColorFrame
from vizframe.kinds import source_kind
from vizframe.scales import value_key


@dataclass(frozen=True)
class LegendPolicy:
    """How a stacked-measures frame contributes legends.

    `merged`: one legend over the union of every measure's values.
    `band`: the default frame is drawn as a continuous color band.
    `frames`: the frames that each contribute a legend.
    """

    merged: bool
    band: bool
    frames: tuple[VisualFrame, ...]


def guide_of(frame: VisualFrame) -> VisualFrame | None:
    if isinstance(frame, CompositeFrame):
        return frame.guide_frame()
    return frame


class StackedMeasuresFrame(VisualFrame):
    """Routes each measure column to its own frame, with a default for the rest."""

    def __init__(self, default_frame: VisualFrame | None = None, frames: dict[str, VisualFrame] | None = None) -> None:
        super().__init__(None)
        self._frames: dict[str, VisualFrame] = {}
        self.default_frame = default_frame
        for measure, frame in (frames or {}).items():
            self.set_frame(measure, frame)

    @property
    def kind(self) -> str:  # type: ignore[override]
        for frame in self._all_frames():
            return frame.kind
        return VisualFrame.kind

    def _all_frames(self) -> list[VisualFrame]:
        frames = list(self._frames.values())
        if self.default_frame is not None:
            frames.append(self.default_frame)
        return frames

    # -- children ------------------------------------------------------------

    def set_frame(self, measure: str, frame: VisualFrame) -> None:
        kind = self.kind
        other = source_kind(frame)
        if kind != VisualFrame.kind and other != kind:
            raise ConfigError(f"cannot mix {other} frame into a {kind} stacked frame")
        self._frames[measure] = frame

    def get_frame(self, measure: str) -> VisualFrame | None:
        return self._frames.get(measure)

    def remove_frame(self, measure: str) -> None:
        self._frames.pop(measure, None)

    def measures(self) -> list[str]:
        return list(self._frames)

    # -- lookup --------------------------------------------------------------

    def init(self, dataset: DataSet) -> None:
        for frame in self._all_frames():
            frame.init(dataset)

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Any:
        frame = self._frames.get(column)
        if frame is not None:
            return frame.get_attribute_at(dataset, column, row)
        if self.default_frame is not None:
            return self.default_frame.get_attribute_at(dataset, column, row)
        return None

    def get_attribute(self, value: Any) -> Any:
        for frame in self._frames.values():
            attr = frame.get_attribute(value)
            if attr is not None:
                return attr
        if self.default_frame is not None:
            return self.default_frame.get_attribute(value)
        return None

    # -- legend --------------------------------------------------------------

    def legend_policy(self) -> LegendPolicy:
        subs = list(self._frames.values())
        if subs:
            guides = [guide_of(f) for f in subs]
            if all(isinstance(g, CategoricalFrame) for g in guides):
                fields = {g.field for g in guides if g is not None}
                if len(fields) == 1:
                    return LegendPolicy(merged=True, band=False, frames=(self,))
            return LegendPolicy(merged=False, band=False, frames=tuple(f for f in subs if f.is_visible()))

        default = self.default_frame
        if default is None:
            return LegendPolicy(merged=False, band=False, frames=())
        guide = guide_of(default)
        if isinstance(guide, LinearColorFrame):
            return LegendPolicy(merged=False, band=True, frames=(default,))
        return LegendPolicy(merged=False, band=False, frames=(default,) if default.is_visible() else ())

    @property
    def field(self) -> str | None:  # type: ignore[override]
        policy = self.legend_policy()
        if policy.merged:
            first = guide_of(next(iter(self._frames.values())))
            return first.field if first is not None else None
        return self.default_frame.field if self.default_frame is not None else None

    @field.setter
    def field(self, value: str | None) -> None:
        if self.default_frame is not None:
            self.default_frame.field = value

    @property
    def legend_bearing(self) -> bool:  # type: ignore[override]
        return any(f.legend_bearing for f in self._all_frames())

    def _merged_guide(self) -> VisualFrame | None:
        """First measure guide; a merged legend takes its title, labels and format."""

        for frame in self._frames.values():
            guide = guide_of(frame)
            if guide is not None:
                return guide
        return None

    def _merged_values(self) -> list[Any]:
        seen: dict[str, Any] = {}
        for frame in self._frames.values():
            guide = guide_of(frame)
            if guide is None:
                continue
            for v in guide.get_values():
                if guide.legend_spec.is_value_visible(v):
                    seen.setdefault(value_key(v), v)
        return list(seen.values())

    def _merged_label(self, value: Any, context: FrameContext | None) -> Any:
        guide = self._merged_guide()
        if guide is None or self.text_frame is not None or self.legend_spec.text_format:
            return self.label_for(value, context)
        return guide.label_for(value, context)

    def _legend_values(self) -> list[Any]:
        policy = self.legend_policy()
        if policy.merged:
            return self._merged_values()
        if self.default_frame is not None and self.default_frame.legend_bearing:
            return self.default_frame.get_values()
        return []

    def get_title(self) -> str:
        self._check_legend("get_title")
        if self.legend_spec.title is not None:
            return self.legend_spec.title
        policy = self.legend_policy()
        if policy.merged:
            guide = self._merged_guide()
            return guide.get_title() if guide is not None else ""
        if self.default_frame is not None and self.default_frame.legend_bearing:
            return self.default_frame.get_title()
        return ""

    def get_labels(self, context: FrameContext | None = None) -> list[Any]:
        self._check_legend("get_labels")
        policy = self.legend_policy()
        if policy.merged:
            return [self._merged_label(v, context) for v in self._merged_values()]
        if self.default_frame is not None and self.default_frame.legend_bearing:
            return self.default_frame.get_labels(context)
        return []

    def is_visible(self) -> bool:
        if not self.legend_spec.visible:
            return False
        policy = self.legend_policy()
        if policy.merged:
            return any(f.is_visible() for f in self._frames.values())
        return any(f.is_visible() for f in policy.frames) or policy.band

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, StackedMeasuresFrame)
        other._frames = {m: f.copy() for m, f in self._frames.items()}
        other.default_frame = self.default_frame.copy() if self.default_frame is not None else None

    def __repr__(self) -> str:
        return f"StackedMeasuresFrame(measures={self.measures()!r}, default={self.default_frame!r})"
