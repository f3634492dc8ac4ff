from __future__ import annotations

from dataclasses import replace
import math
from typing import Any, Sequence

import numpy as np

from vizframe.attributes import CIRCLE, LineStyle, Shape, Texture
from vizframe.colors import RGBA, color_ramp, hsl_to_rgb, rgb_to_hsl, to_rgba
from vizframe.config import get_frame_defaults
from vizframe.errors import ConfigError
from vizframe.frames.base import VisualFrame
from vizframe.scales import LinearScale, Scale


class LinearFrame(VisualFrame):
    """Maps a value to a 0..1 ratio through a linear scale, then to an attribute."""

    continuous = True

    def create_scale(self) -> Scale | None:
        if self.field is None:
            return None
        return LinearScale(self.field)

    def ratio_of(self, value: Any) -> float:
        scale = self.scale
        if scale is None:
            return math.nan
        v = scale.map(value)
        if math.isnan(v):
            return math.nan
        lo, hi = scale.min, scale.max
        if math.isnan(lo) or math.isnan(hi):
            return math.nan
        span = hi - lo
        # degenerate ranges (e.g. a zero group total) resolve to the low end
        ratio = (v - lo) / span if span != 0 else 0.0
        return max(0.0, min(1.0, ratio))

    def get_attribute(self, value: Any) -> Any:
        ratio = self.ratio_of(value)
        if math.isnan(ratio):
            return self.miss_value()
        return self.attribute_for_ratio(ratio)

    def attribute_for_ratio(self, ratio: float) -> Any:
        raise NotImplementedError

    def miss_value(self) -> Any:
        return None


def _check_sub_range(lo: float, hi: float, label: str) -> tuple[float, float]:
    lo = float(lo)
    hi = float(hi)
    if not (0.0 <= lo <= 1.0 and 0.0 <= hi <= 1.0):
        raise ConfigError(f"{label} range must lie within 0..1: ({lo}, {hi})")
    return lo, hi


# -- color -------------------------------------------------------------------


class LinearColorFrame(LinearFrame):
    kind = "color"

    def __init__(
        self,
        field: str | None = None,
        *,
        min_alpha: float = 1.0,
        max_alpha: float = 1.0,
        default: Any = None,
    ) -> None:
        super().__init__(field)
        self.min_alpha, self.max_alpha = _check_sub_range(min_alpha, max_alpha, "alpha")
        self.default = to_rgba(default) if default is not None else None

    def miss_value(self) -> RGBA | None:
        return self.default

    def _alpha(self, ratio: float) -> int:
        a = self.min_alpha + (self.max_alpha - self.min_alpha) * ratio
        return int(math.floor(a * 255 + 0.5))

    def attribute_for_ratio(self, ratio: float) -> RGBA:
        r, g, b, _ = self.color_for_ratio(ratio)
        return (r, g, b, self._alpha(ratio))

    def color_for_ratio(self, ratio: float) -> RGBA:
        raise NotImplementedError


class GradientColorFrame(LinearColorFrame):
    """Piecewise-linear path through RGB space defined by ordered waypoints.

    The ratio is first remapped into `[min_ratio, max_ratio]` so callers can
    avoid the near-white or near-black ends of a ramp.
    Waypoints take any `to_rgba` color: integer tuples are 0..255 channels,
    float tuples within 0..1 are unit channels.
    """

    def __init__(
        self,
        field: str | None = None,
        waypoints: Sequence[Any] = ("#F7FBFF", "#08306B"),
        *,
        min_ratio: float = 0.0,
        max_ratio: float = 1.0,
        min_alpha: float = 1.0,
        max_alpha: float = 1.0,
        default: Any = None,
    ) -> None:
        super().__init__(field, min_alpha=min_alpha, max_alpha=max_alpha, default=default)
        self.set_waypoints(waypoints)
        self.min_ratio, self.max_ratio = _check_sub_range(min_ratio, max_ratio, "ratio")

    @classmethod
    def named(cls, name: str, field: str | None = None, **kwargs: Any) -> "GradientColorFrame":
        return cls(field, color_ramp(name), **kwargs)

    @property
    def waypoints(self) -> tuple[RGBA, ...]:
        return tuple((int(r), int(g), int(b), 255) for r, g, b in self._path.tolist())

    def set_waypoints(self, waypoints: Sequence[Any]) -> None:
        if not waypoints:
            raise ConfigError("gradient requires at least one waypoint")
        colors = [to_rgba(c) for c in waypoints]
        self._path = np.asarray([c[:3] for c in colors], dtype=np.float64)

    def color_for_ratio(self, ratio: float) -> RGBA:
        r = self.min_ratio + ratio * (self.max_ratio - self.min_ratio)
        count = self._path.shape[0]
        if count == 1:
            rgb = self._path[0]
        else:
            pos = r * (count - 1)
            idx = min(int(math.floor(pos)), count - 2)
            frac = pos - idx
            lo = self._path[idx]
            hi = self._path[idx + 1]
            rgb = lo + (hi - lo) * frac
        rgb = np.clip(np.floor(rgb + 0.5), 0, 255).astype(int)
        return (int(rgb[0]), int(rgb[1]), int(rgb[2]), 255)

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        other._path = self._path.copy()  # type: ignore[attr-defined]


class _HslColorFrame(LinearColorFrame):
    """Varies one HSL channel of a base color. The base is converted to HSL once, when set."""

    def __init__(
        self,
        field: str | None = None,
        color: Any = "#518DB9",
        *,
        start: float,
        end: float,
        min_alpha: float = 1.0,
        max_alpha: float = 1.0,
        default: Any = None,
    ) -> None:
        super().__init__(field, min_alpha=min_alpha, max_alpha=max_alpha, default=default)
        self.start, self.end = _check_sub_range(start, end, type(self).__name__)
        self.color = color

    @property
    def color(self) -> RGBA:
        return self._color

    @color.setter
    def color(self, value: Any) -> None:
        self._color = to_rgba(value)
        self._hsl = rgb_to_hsl(self._color)

    def _channel(self, ratio: float) -> float:
        return self.start + (self.end - self.start) * ratio


class BrightnessColorFrame(_HslColorFrame):
    def __init__(self, field: str | None = None, color: Any = "#518DB9", *, start: float = 0.9, end: float = 0.3, **kwargs: Any) -> None:
        super().__init__(field, color, start=start, end=end, **kwargs)

    def color_for_ratio(self, ratio: float) -> RGBA:
        h, s, _ = self._hsl
        return hsl_to_rgb(h, s, self._channel(ratio))


class SaturationColorFrame(_HslColorFrame):
    def __init__(self, field: str | None = None, color: Any = "#518DB9", *, start: float = 0.1, end: float = 1.0, **kwargs: Any) -> None:
        super().__init__(field, color, start=start, end=end, **kwargs)

    def color_for_ratio(self, ratio: float) -> RGBA:
        h, _, l = self._hsl
        return hsl_to_rgb(h, self._channel(ratio), l)


class HueColorFrame(_HslColorFrame):
    """Rotates the hue of the base color by `start..end` turns."""

    def __init__(self, field: str | None = None, color: Any = "#FF0000", *, start: float = 0.0, end: float = 0.75, **kwargs: Any) -> None:
        super().__init__(field, color, start=start, end=end, **kwargs)

    def color_for_ratio(self, ratio: float) -> RGBA:
        h, s, l = self._hsl
        return hsl_to_rgb(h + self._channel(ratio), s, l)


# -- size --------------------------------------------------------------------


class LinearSizeFrame(LinearFrame):
    kind = "size"

    def __init__(self, field: str | None = None, *, smallest: float | None = None, largest: float | None = None) -> None:
        super().__init__(field)
        defaults = get_frame_defaults()
        self.smallest = float(defaults.default_size if smallest is None else smallest)
        self.largest = float(defaults.max_size if largest is None else largest)
        if self.smallest < 0 or self.largest < 0:
            raise ConfigError("sizes must be >= 0")

    def attribute_for_ratio(self, ratio: float) -> float:
        return self.smallest + (self.largest - self.smallest) * ratio

    def miss_value(self) -> float:
        return self.smallest


# -- line --------------------------------------------------------------------


class LinearLineFrame(LinearFrame):
    """Ramps stroke width and dash length between two line styles."""

    kind = "line"

    def __init__(
        self,
        field: str | None = None,
        *,
        begin: LineStyle = LineStyle(width=1.0, dash=0.0, gap=0.0),
        end: LineStyle = LineStyle(width=3.0, dash=10.0, gap=4.0),
    ) -> None:
        super().__init__(field)
        self.begin = begin
        self.end = end

    def attribute_for_ratio(self, ratio: float) -> LineStyle:
        lo = np.asarray([self.begin.width, self.begin.dash, self.begin.gap], dtype=np.float64)
        hi = np.asarray([self.end.width, self.end.dash, self.end.gap], dtype=np.float64)
        width, dash, gap = (lo + (hi - lo) * ratio).tolist()
        return LineStyle(width=width, dash=dash, gap=gap)


# -- texture -----------------------------------------------------------------


class LinearTextureFrame(LinearFrame):
    """Dense hatching for low values, sparse for high ones (or the reverse by swapping bounds)."""

    kind = "texture"

    def __init__(
        self,
        field: str | None = None,
        *,
        min_spacing: float = 2.0,
        max_spacing: float = 12.0,
        angle: float = 45.0,
        line_width: float = 1.0,
    ) -> None:
        super().__init__(field)
        if min_spacing <= 0 or max_spacing <= 0:
            raise ConfigError("texture spacing must be > 0")
        self.min_spacing = float(min_spacing)
        self.max_spacing = float(max_spacing)
        self.angle = float(angle)
        self.line_width = float(line_width)

    def attribute_for_ratio(self, ratio: float) -> Texture:
        spacing = self.min_spacing + (self.max_spacing - self.min_spacing) * ratio
        return Texture(spacing=spacing, angle=self.angle, line_width=self.line_width)


# -- shape -------------------------------------------------------------------


class LinearShapeFrame(LinearFrame):
    """Fills a shape to a level proportional to the value."""

    kind = "shape"

    def __init__(self, field: str | None = None, *, shape: Shape = CIRCLE) -> None:
        super().__init__(field)
        self.shape = shape

    def attribute_for_ratio(self, ratio: float) -> Shape:
        return replace(self.shape, fill_ratio=ratio)
