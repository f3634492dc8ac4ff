from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import threading
from typing import Any, ClassVar, Mapping, Sequence

import numpy as np

from vizframe.attributes import LINE_STYLES, SHAPES, TEXTURES, LineStyle, Shape, Texture
from vizframe.colors import CATEGORICAL_COLORS, NEGATIVE_COLORS, RGBA, to_rgba
from vizframe.config import get_frame_defaults
from vizframe.errors import ConfigError
from vizframe.frames.base import VisualFrame
from vizframe.scales import CategoricalScale, Scale, is_number, value_key
from vizframe.style import StyleResolver


LOGGER = logging.getLogger(__name__)

_MAX_REBUILDS = 3


@dataclass(frozen=True)
class UnusedPalette:
    """Snapshot of the palette and values left over after explicit assignments are removed."""

    palette: tuple[Any, ...]
    scale: CategoricalScale
    negative_scale: CategoricalScale
    full_palette: tuple[Any, ...]


class CategoricalFrame(VisualFrame):
    """Assigns palette entries to distinct values.

    Explicit assignments always win. Every other value takes
    `unused[index % len(unused)]` where `unused` is the palette minus the
    attributes already pinned, and `index` is the value's position among the
    values without an explicit assignment. Pinned attributes are therefore
    never handed out a second time.
    """

    default_palette: ClassVar[tuple[Any, ...]] = ()

    def __init__(
        self,
        field: str | None = None,
        palette: Sequence[Any] | None = None,
        *,
        assignments: Mapping[Any, Any] | None = None,
        negative_palette: Sequence[Any] | None = None,
        default: Any = None,
        style_resolver: StyleResolver | None = None,
    ) -> None:
        super().__init__(field)
        self._palette: list[Any] = [self.coerce(p) for p in (self.default_palette if palette is None else palette)]
        self._cmap: dict[str, Any] = {}
        self._negative_palette = None if negative_palette is None else [self.coerce(p) for p in negative_palette]
        self._default = None if default is None else self.coerce(default)
        self._style_resolver = style_resolver
        self._unused: UnusedPalette | None = None
        self._generation = 0
        self._lock = threading.Lock()
        for value, attr in (assignments or {}).items():
            self.set_attribute(value, attr)

    def coerce(self, attr: Any) -> Any:
        return attr

    def create_scale(self) -> Scale | None:
        if self.field is None:
            return None
        return CategoricalScale(self.field, sort_key=self.sort_key)

    # -- configuration -------------------------------------------------------

    @property
    def palette(self) -> tuple[Any, ...]:
        return tuple(self._palette)

    def set_palette(self, palette: Sequence[Any]) -> None:
        self._palette = [self.coerce(p) for p in palette]
        self._invalidate()

    def set_palette_entry(self, index: int, attr: Any) -> None:
        if not self._palette:
            raise ConfigError("palette is empty")
        self._palette[index % len(self._palette)] = self.coerce(attr)
        self._invalidate()

    @property
    def negative_palette(self) -> tuple[Any, ...] | None:
        return None if self._negative_palette is None else tuple(self._negative_palette)

    def set_negative_palette(self, palette: Sequence[Any] | None) -> None:
        self._negative_palette = None if palette is None else [self.coerce(p) for p in palette]
        self._invalidate()

    @property
    def default(self) -> Any:
        return self._default

    @property
    def style_resolver(self) -> StyleResolver | None:
        return self._style_resolver

    @style_resolver.setter
    def style_resolver(self, resolver: StyleResolver | None) -> None:
        self._style_resolver = resolver
        self._invalidate()

    def set_attribute(self, value: Any, attr: Any) -> None:
        self._cmap[value_key(value)] = self.coerce(attr)
        self._invalidate()

    def remove_attribute(self, value: Any) -> None:
        if self._cmap.pop(value_key(value), None) is not None:
            self._invalidate()

    def clear_attributes(self) -> None:
        self._cmap.clear()
        self._invalidate()

    def assignments(self) -> dict[str, Any]:
        return dict(self._cmap)

    def explicit_attribute(self, value: Any) -> Any:
        attr = self._cmap.get(value_key(value))
        if attr is None and self._cmap:
            formatted = self.format_value(value)
            if formatted is not value:
                attr = self._cmap.get(value_key(formatted))
        return attr

    def _invalidate(self) -> None:
        # a build that started before this bump is never stored
        self._generation += 1
        self._unused = None

    # -- unused-palette cache ------------------------------------------------

    def _resolved_palette(self) -> list[Any]:
        palette = list(self._palette)
        resolver = self._style_resolver
        if resolver is None:
            return palette
        for i in range(len(palette)):
            override = resolver.resolve(self.kind, i)
            if override is None:
                continue
            try:
                palette[i] = self.coerce(override)
            except (ConfigError, TypeError, ValueError) as exc:
                LOGGER.warning("ignoring style override %r for %s[%d]: %s", override, self.kind, i, exc)
        return palette

    def palette_for(self, values: Sequence[Any]) -> list[Any]:
        """Palette used for the given distinct values; sized palettes override this."""

        return self._resolved_palette()

    def unused_palette(self) -> UnusedPalette:
        with self._lock:
            cached = self._unused
            if cached is not None:
                return cached
            for _ in range(_MAX_REBUILDS):
                generation = self._generation
                cached = self._build_unused()
                if generation == self._generation:
                    self._unused = cached
                    break
            else:
                LOGGER.debug("%s configuration kept changing while building its palette cache", type(self).__name__)
            return cached

    def _build_unused(self) -> UnusedPalette:
        values = self.scale.values() if self.scale is not None else []
        full = self.palette_for(values)
        claimed = {repr(a) for a in self._cmap.values()}
        unused = [p for p in full if repr(p) not in claimed]
        if not unused:
            unused = list(full)

        positive: list[Any] = []
        negative: list[Any] = []
        for v in values:
            if self.explicit_attribute(v) is not None:
                continue
            if self._negative_palette and _is_negative(v):
                negative.append(v)
            else:
                positive.append(v)
        return UnusedPalette(
            palette=tuple(unused),
            scale=CategoricalScale(values=positive),
            negative_scale=CategoricalScale(values=negative),
            full_palette=tuple(full),
        )

    # -- lookup --------------------------------------------------------------

    def get_attribute(self, value: Any) -> Any:
        attr = self.explicit_attribute(value)
        if attr is not None:
            return attr

        cache = self.unused_palette()
        full_idx = self.scale.map(value) if self.scale is not None else math.nan
        if not math.isnan(full_idx):
            # sign is decided on the stored value, "-1" and -1 share a key
            value = self.scale.values()[int(full_idx)]

        if self._negative_palette and _is_negative(value):
            neg_idx = cache.negative_scale.map(value)
            if not math.isnan(neg_idx):
                return self._negative_palette[int(neg_idx) % len(self._negative_palette)]

        idx = cache.scale.map(value)
        if math.isnan(full_idx) and math.isnan(idx):
            return self._default
        if not math.isnan(idx):
            palette = cache.palette
        else:
            idx = full_idx
            palette = cache.full_palette
        if not palette:
            return self._default
        return palette[int(idx) % len(palette)]

    # -- copying -------------------------------------------------------------

    def _copy_into(self, other: VisualFrame) -> None:
        super()._copy_into(other)
        assert isinstance(other, CategoricalFrame)
        other._palette = list(self._palette)
        other._cmap = dict(self._cmap)
        other._negative_palette = None if self._negative_palette is None else list(self._negative_palette)
        other._unused = None
        other._lock = threading.Lock()


def _is_negative(value: Any) -> bool:
    return is_number(value) and float(value) < 0


class CategoricalColorFrame(CategoricalFrame):
    kind = "color"
    default_palette = CATEGORICAL_COLORS

    def coerce(self, attr: Any) -> RGBA:
        return to_rgba(attr)

    def use_negative_colors(self) -> None:
        self.set_negative_palette(NEGATIVE_COLORS)

    def set_color(self, value: Any, color: Any) -> None:
        self.set_attribute(value, color)


class CategoricalShapeFrame(CategoricalFrame):
    kind = "shape"
    default_palette = SHAPES

    def coerce(self, attr: Any) -> Shape:
        if not isinstance(attr, Shape):
            raise ConfigError(f"not a shape: {attr!r}")
        return attr


class CategoricalLineFrame(CategoricalFrame):
    kind = "line"
    default_palette = LINE_STYLES

    def coerce(self, attr: Any) -> LineStyle:
        if not isinstance(attr, LineStyle):
            raise ConfigError(f"not a line style: {attr!r}")
        return attr


class CategoricalTextureFrame(CategoricalFrame):
    kind = "texture"
    default_palette = TEXTURES

    def coerce(self, attr: Any) -> Texture:
        if not isinstance(attr, Texture):
            raise ConfigError(f"not a texture: {attr!r}")
        return attr


class CategoricalSizeFrame(CategoricalFrame):
    """Evenly spaced sizes from `smallest` to `largest`, one step per distinct value, unless a palette is given."""

    kind = "size"

    def __init__(
        self,
        field: str | None = None,
        palette: Sequence[float] | None = None,
        *,
        smallest: float | None = None,
        largest: float | None = None,
        **kwargs: Any,
    ) -> None:
        defaults = get_frame_defaults()
        self.smallest = float(defaults.default_size if smallest is None else smallest)
        self.largest = float(defaults.max_size if largest is None else largest)
        kwargs.setdefault("default", self.smallest)
        super().__init__(field, palette if palette is not None else (), **kwargs)

    def coerce(self, attr: Any) -> float:
        try:
            return float(attr)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"not a size: {attr!r}") from exc

    def palette_for(self, values: Sequence[Any]) -> list[Any]:
        if self._palette:
            return self._resolved_palette()
        count = max(len(values), 1)
        if count == 1:
            return [self.largest]
        return [float(s) for s in np.linspace(self.smallest, self.largest, count)]
