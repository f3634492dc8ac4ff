from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Sequence

import numpy as np

from vizframe.data import DataSet, has_column
from vizframe.errors import ConfigError
from vizframe.frames.base import FrameContext, VisualFrame
from vizframe.scales import LinearScale, Scale


@dataclass(frozen=True, eq=False)
class Glyph:
    """A multi-value shape in a unit box (x right, y up).

    `geometry` layout depends on `kind`:
    bar: (n, 4) rects `x, y, w, h`; pie: (n, 2) wedge `start, end` degrees;
    star/profile: (n, 2) polygon or polyline points; sun: (n, 4) ray segments;
    vine: (1, 3) stem end `x, y` and bud radius; thermo: (1, 4) fill rect.
    """

    kind: str
    ratios: tuple[float, ...]
    geometry: np.ndarray


class MultiFieldFrame(VisualFrame):
    """Encodes several fields of a row into one glyph.

    Fields share one linear scale unless `shared_scale` is False, so
    magnitudes stay comparable across the glyph's parts.
    """

    kind = "shape"
    glyph_kind = "glyph"
    min_fields = 1

    def __init__(self, fields: Sequence[str], *, shared_scale: bool = True) -> None:
        if len(fields) < self.min_fields:
            raise ConfigError(f"{type(self).__name__} needs at least {self.min_fields} field(s)")
        super().__init__(fields[0])
        self.fields = tuple(fields)
        self.shared_scale = shared_scale
        self._scales: dict[str, Scale] = {}

    def init(self, dataset: DataSet) -> None:
        if self._source.same(dataset):
            return
        if self.shared_scale:
            scale = LinearScale(*self.fields, option=self.scale_option)
            scale.init(dataset)
            self._scales = {name: scale for name in self.fields}
            self._scale = scale
        else:
            self._scales = {}
            for name in self.fields:
                scale = LinearScale(name, option=self.scale_option)
                scale.init(dataset)
                self._scales[name] = scale
            self._scale = self._scales[self.fields[0]]
        self._source.track(dataset)

    def scale_for(self, name: str) -> Scale | None:
        return self._scales.get(name)

    def ratios_of(self, values: Sequence[Any]) -> np.ndarray:
        out = np.zeros(len(self.fields), dtype=np.float64)
        for i, (name, raw) in enumerate(zip(self.fields, values, strict=False)):
            scale = self._scales.get(name)
            if scale is None:
                continue
            v = scale.map(raw)
            lo, hi = scale.min, scale.max
            if math.isnan(v) or math.isnan(lo) or math.isnan(hi):
                continue
            span = hi - lo
            out[i] = (v - lo) / span if span != 0 else 0.0
        return np.clip(out, 0.0, 1.0)

    def get_attribute(self, value: Any) -> Glyph | None:
        if value is None:
            return None
        values = value if isinstance(value, (tuple, list, np.ndarray)) else (value,)
        return self.glyph(self.ratios_of(values))

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Glyph | None:
        values = [dataset.get_data(name, row) if has_column(dataset, name) else None for name in self.fields]
        return self.glyph(self.ratios_of(values))

    def glyph(self, ratios: np.ndarray) -> Glyph:
        ratios = np.clip(np.asarray(ratios, dtype=np.float64), 0.0, 1.0)
        return Glyph(kind=self.glyph_kind, ratios=tuple(float(r) for r in ratios), geometry=self.build(ratios))

    def build(self, ratios: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    # one legend item per field: a one-hot glyph
    def legend_ratios(self) -> list[tuple[float, ...]]:
        n = len(self.fields)
        return [tuple(1.0 if i == j else 0.0 for j in range(n)) for i in range(n)]

    def _legend_values(self) -> list[Any]:
        return list(self.fields)

    def legend_glyphs(self) -> list[Glyph]:
        return [self.glyph(np.asarray(r)) for r in self.legend_ratios()]

    def legend_attribute(self, value: Any) -> Glyph | None:
        if value not in self.fields:
            return None
        return self.legend_glyphs()[self.fields.index(value)]

    def get_labels(self, context: FrameContext | None = None) -> list[Any]:
        self._check_legend("get_labels")
        return [self.label_for(name, context) for name in self.fields]

    def is_visible(self) -> bool:
        return self.legend_spec.visible and len(self.fields) > 1

    def _identity_pairs(self) -> list[tuple[str, str]]:
        return [(name, self.glyph_kind) for name in self.fields]

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, MultiFieldFrame)
        other._scales = {}


class BarGlyphFrame(MultiFieldFrame):
    glyph_kind = "bar"

    def build(self, ratios: np.ndarray) -> np.ndarray:
        n = ratios.size
        width = 1.0 / n
        x = np.arange(n, dtype=np.float64) * width
        return np.column_stack([x, np.zeros(n), np.full(n, width), ratios])


class PieGlyphFrame(MultiFieldFrame):
    glyph_kind = "pie"

    def build(self, ratios: np.ndarray) -> np.ndarray:
        total = float(ratios.sum())
        if total <= 0:
            return np.zeros((ratios.size, 2), dtype=np.float64)
        ends = np.cumsum(ratios) / total * 360.0
        starts = np.concatenate([[0.0], ends[:-1]])
        return np.column_stack([starts, ends])


def _spokes(n: int) -> tuple[np.ndarray, np.ndarray]:
    # first spoke points straight up, then clockwise
    angles = math.pi / 2 - np.arange(n, dtype=np.float64) * (2 * math.pi / n)
    return np.cos(angles), np.sin(angles)


class StarGlyphFrame(MultiFieldFrame):
    glyph_kind = "star"
    min_fields = 3

    def build(self, ratios: np.ndarray) -> np.ndarray:
        cx, cy = _spokes(ratios.size)
        r = ratios * 0.5
        return np.column_stack([0.5 + cx * r, 0.5 + cy * r])


class SunGlyphFrame(MultiFieldFrame):
    glyph_kind = "sun"
    inner_radius = 0.1

    def build(self, ratios: np.ndarray) -> np.ndarray:
        cx, cy = _spokes(ratios.size)
        r0 = self.inner_radius
        r1 = r0 + ratios * (0.5 - r0)
        return np.column_stack([0.5 + cx * r0, 0.5 + cy * r0, 0.5 + cx * r1, 0.5 + cy * r1])


class VineGlyphFrame(MultiFieldFrame):
    """First field bends the stem (0..90 degrees from vertical), second sizes the bud."""

    glyph_kind = "vine"
    min_fields = 2

    def build(self, ratios: np.ndarray) -> np.ndarray:
        angle = float(ratios[0]) * math.pi / 2
        radius = 0.05 + float(ratios[1]) * 0.2
        length = 1.0 - radius
        return np.asarray([[math.sin(angle) * length, math.cos(angle) * length, radius]], dtype=np.float64)


class ProfileGlyphFrame(MultiFieldFrame):
    glyph_kind = "profile"
    min_fields = 2

    def build(self, ratios: np.ndarray) -> np.ndarray:
        x = np.linspace(0.0, 1.0, ratios.size)
        return np.column_stack([x, ratios])


class ThermoGlyphFrame(MultiFieldFrame):
    """Single-field thermometer: a tube filled to the value's ratio."""

    glyph_kind = "thermo"
    tube_width = 0.3

    def build(self, ratios: np.ndarray) -> np.ndarray:
        x0 = (1.0 - self.tube_width) / 2
        return np.asarray([[x0, 0.0, self.tube_width, float(ratios[0])]], dtype=np.float64)

    def is_visible(self) -> bool:
        return self.legend_spec.visible
