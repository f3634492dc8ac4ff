from __future__ import annotations

import colorsys
import math
from typing import Any, Sequence

import numpy as np
from PIL import ImageColor

from vizframe.errors import ConfigError


RGBA = tuple[int, int, int, int]

GRAY: RGBA = (128, 128, 128, 255)
WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


def to_rgba(value: Any, alpha: float | None = None) -> RGBA:
    """Coerce a hex string, CSS color name, or 3/4-tuple into an RGBA tuple.

    Integer tuples are 0..255 channels. Tuples holding floats that all lie in
    0..1 are unit channels and are scaled, so `(1.0, 0.0, 0.0)` is red while
    `(1, 0, 0)` is almost black.
    """

    if isinstance(value, str):
        try:
            parsed = ImageColor.getrgb(value.strip())
        except ValueError as exc:
            raise ConfigError(f"unknown color: {value!r}") from exc
        rgba = parsed if len(parsed) == 4 else (*parsed, 255)
    elif isinstance(value, (tuple, list, np.ndarray)) and len(value) in (3, 4):
        if _is_unit_color(value):
            value = [math.floor(float(c) * 255.0 + 0.5) for c in value]
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ConfigError(f"color channels must be within 0..255: {value!r}")
        rgba = tuple(channels) if len(channels) == 4 else (*channels, 255)
    else:
        raise ConfigError(f"unsupported color value: {value!r}")
    if alpha is not None:
        a = max(0.0, min(1.0, float(alpha)))
        rgba = (rgba[0], rgba[1], rgba[2], int(round(a * 255)))
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))


def _is_unit_color(value: Any) -> bool:
    if not any(isinstance(c, (float, np.floating)) for c in value):
        return False
    return all(0.0 <= float(c) <= 1.0 for c in value)


def to_hex(color: RGBA) -> str:
    r, g, b, a = color
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


def rgb_to_hsl(color: RGBA) -> tuple[float, float, float]:
    h, l, s = colorsys.rgb_to_hls(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
    return (h, s, l)


def hsl_to_rgb(h: float, s: float, l: float, alpha: int = 255) -> RGBA:
    r, g, b = colorsys.hls_to_rgb(h % 1.0, _unit(s), _unit(l))
    return (_channel(r * 255.0), _channel(g * 255.0), _channel(b * 255.0), alpha)


def luminance(color: RGBA) -> float:
    """Relative luminance in 0..1 (sRGB, ITU-R BT.709 weights)."""

    def lin(c: int) -> float:
        v = c / 255.0
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4

    return 0.2126 * lin(color[0]) + 0.7152 * lin(color[1]) + 0.0722 * lin(color[2])


def brighter(color: RGBA, factor: float = 0.7) -> RGBA:
    r, g, b, a = color
    floor = int(1.0 / (1.0 - factor))
    if r == 0 and g == 0 and b == 0:
        return (floor, floor, floor, a)
    r = floor if 0 < r < floor else r
    g = floor if 0 < g < floor else g
    b = floor if 0 < b < floor else b
    return (_channel(r / factor), _channel(g / factor), _channel(b / factor), a)


def darker(color: RGBA, factor: float = 0.7) -> RGBA:
    r, g, b, a = color
    return (_channel(r * factor), _channel(g * factor), _channel(b * factor), a)


def interpolate(a: RGBA, b: RGBA, frac: float) -> RGBA:
    lo = np.asarray(a[:3], dtype=np.float64)
    hi = np.asarray(b[:3], dtype=np.float64)
    mixed = np.clip(np.floor(lo + (hi - lo) * frac + 0.5), 0, 255).astype(int)
    return (int(mixed[0]), int(mixed[1]), int(mixed[2]), 255)


def parse_palette(values: Sequence[Any]) -> tuple[RGBA, ...]:
    if not values:
        raise ConfigError("palette must contain at least one color")
    return tuple(to_rgba(v) for v in values)


def _unit(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


def _channel(v: float) -> int:
    if math.isnan(v):
        return 0
    return int(max(0, min(255, math.floor(v + 0.5))))


CATEGORICAL_COLORS: tuple[RGBA, ...] = parse_palette(
    (
        "#518DB9",
        "#B82E2E",
        "#8BB43A",
        "#F2A533",
        "#7C5AA6",
        "#3AA6A0",
        "#D96AA6",
        "#6B6B6B",
        "#C2B13B",
        "#2E5C8A",
        "#E07A5F",
        "#4E9A4E",
    )
)

NEGATIVE_COLORS: tuple[RGBA, ...] = parse_palette(
    (
        "#D62728",
        "#FF7F0E",
        "#B5443C",
        "#E377C2",
    )
)

COLOR_RAMPS: dict[str, tuple[RGBA, ...]] = {
    "blues": parse_palette(("#F7FBFF", "#C6DBEF", "#6BAED6", "#2171B5", "#08306B")),
    "greens": parse_palette(("#F7FCF5", "#C7E9C0", "#74C476", "#238B45", "#00441B")),
    "reds": parse_palette(("#FFF5F0", "#FCBBA1", "#FB6A4A", "#CB181D", "#67000D")),
    "heat": parse_palette(("#FFFFB2", "#FECC5C", "#FD8D3C", "#F03B20", "#BD0026")),
    "rainbow": parse_palette(("#0000FF", "#00FFFF", "#00FF00", "#FFFF00", "#FF0000")),
    "diverging": parse_palette(("#2166AC", "#92C5DE", "#F7F7F7", "#F4A582", "#B2182B")),
}


def color_ramp(name: str) -> tuple[RGBA, ...]:
    try:
        return COLOR_RAMPS[name.lower()]
    except KeyError as exc:
        raise ConfigError(f"unknown color ramp: {name!r}") from exc
