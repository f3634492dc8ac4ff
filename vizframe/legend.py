from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Iterable

from vizframe.colors import WHITE, luminance
from vizframe.config import get_frame_defaults
from vizframe.frames.base import FrameContext, VisualFrame
from vizframe.frames.continuous import LinearColorFrame
from vizframe.frames.stacked import StackedMeasuresFrame, guide_of


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegendItem:
    label: Any
    value: Any
    attribute: Any


@dataclass(frozen=True)
class Legend:
    title: str
    kind: str
    items: tuple[LegendItem, ...]
    band: bool = False
    frame: VisualFrame | None = field(default=None, compare=False, repr=False)


def data_id(frame: VisualFrame) -> str:
    """Two frames with the same id show the same data, even when built separately."""

    if isinstance(frame, StackedMeasuresFrame) and frame.default_frame is None:
        return "stacked-measure"
    return frame.share_id()


def build_legend(
    frame: VisualFrame,
    *,
    context: FrameContext | None = None,
    band: bool | None = None,
) -> Legend | None:
    if not frame.legend_bearing or not frame.is_visible():
        return None
    defaults = get_frame_defaults()
    values = frame.get_values()
    labels = frame.get_labels(context)
    if len(values) > defaults.legend_max_count:
        LOGGER.debug("legend for %r truncated to %d items", frame, defaults.legend_max_count)

    background = frame.legend_spec.background or WHITE
    items: list[LegendItem] = []
    for value, label in zip(values[: defaults.legend_max_count], labels, strict=False):
        label = value if label is None else label
        if not frame.legend_spec.is_value_visible(value):
            continue
        attr = frame.legend_attribute(value)
        if frame.kind == "color" and attr is not None:
            # swatches indistinguishable from the background fall back to the renderer default
            if abs(luminance(attr) - luminance(background)) < defaults.legend_contrast_min:
                attr = None
        items.append(LegendItem(label=label, value=value, attribute=attr))

    if band is None:
        band = isinstance(guide_of(frame), LinearColorFrame)
    title = frame.get_title() if frame.legend_spec.title_visible else ""
    return Legend(title=title, kind=frame.kind, items=tuple(items), band=band, frame=frame)


def legend_frames(frame: VisualFrame) -> list[tuple[VisualFrame, bool]]:
    """Frames that contribute legends for `frame`, each with its band flag."""

    if isinstance(frame, StackedMeasuresFrame):
        policy = frame.legend_policy()
        if policy.merged:
            return [(frame, False)]
        return [(f, policy.band) for f in policy.frames]
    return [(frame, isinstance(guide_of(frame), LinearColorFrame))]


def build_legends(frames: Iterable[VisualFrame], *, context: FrameContext | None = None) -> list[Legend]:
    """Build the chart's legends; frames showing the same data collapse into the first one."""

    seen: set[str] = set()
    legends: list[Legend] = []
    for frame in frames:
        for member, band in legend_frames(frame):
            if not member.legend_bearing or not member.is_visible():
                continue
            key = data_id(member)
            if key in seen:
                continue
            seen.add(key)
            legend = build_legend(member, context=context, band=band)
            if legend is not None:
                legends.append(legend)
    return legends
