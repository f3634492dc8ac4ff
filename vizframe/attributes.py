from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shape:
    """A named point shape. `fill_ratio` is set by linear shape frames to partially fill the shape."""

    name: str
    filled: bool = False
    outline: bool = True
    fill_ratio: float | None = None

    def create(self, *, outline: bool, filled: bool) -> "Shape":
        return replace(self, outline=outline or not filled, filled=filled)

    @property
    def is_nil(self) -> bool:
        return self.name == "nil"


@dataclass(frozen=True)
class ImageShape(Shape):
    """A shape drawn from an icon file. Loading happens on first use."""

    path: str = ""

    def image(self) -> Image.Image | None:
        return _load_image(self.path)


@lru_cache(maxsize=64)
def _load_image(path: str) -> Image.Image | None:
    try:
        with Image.open(Path(path)) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError) as exc:
        LOGGER.warning("could not load shape image %s: %s", path, exc)
        return None


def image_shape(path: str | Path) -> ImageShape:
    p = str(path)
    return ImageShape(name=f"image:{Path(p).name}", filled=True, outline=False, path=p)


CIRCLE = Shape("circle")
TRIANGLE = Shape("triangle")
SQUARE = Shape("square")
CROSS = Shape("cross")
STAR = Shape("star")
DIAMOND = Shape("diamond")
XSHAPE = Shape("x")
VSHAPE = Shape("v")
LSHAPE = Shape("half-moon")
ARROW = Shape("arrow")
STICK = Shape("stick")
LINE = Shape("line")
HYPHEN = Shape("hyphen")
NIL = Shape("nil", outline=False)

FILLED_CIRCLE = CIRCLE.create(outline=False, filled=True)
FILLED_TRIANGLE = TRIANGLE.create(outline=False, filled=True)
FILLED_SQUARE = SQUARE.create(outline=False, filled=True)
FILLED_DIAMOND = DIAMOND.create(outline=False, filled=True)
FILLED_ARROW = ARROW.create(outline=False, filled=True)

SHAPES: tuple[Shape, ...] = (
    FILLED_CIRCLE,
    FILLED_TRIANGLE,
    FILLED_SQUARE,
    CROSS,
    STAR,
    FILLED_DIAMOND,
    XSHAPE,
    CIRCLE,
    TRIANGLE,
    SQUARE,
    DIAMOND,
    VSHAPE,
    LSHAPE,
    FILLED_ARROW,
)


@dataclass(frozen=True)
class LineStyle:
    """Stroke description: `dash` is the dash length in px (0 means solid), `gap` the space between dashes."""

    width: float = 1.0
    dash: float = 0.0
    gap: float = 0.0

    @property
    def solid(self) -> bool:
        return self.dash <= 0.0


THIN_LINE = LineStyle(width=1.0)
MEDIUM_LINE = LineStyle(width=2.0)
THICK_LINE = LineStyle(width=3.0)
DOT_LINE = LineStyle(width=1.0, dash=1.0, gap=2.0)
DASH_LINE = LineStyle(width=1.0, dash=4.0, gap=3.0)
MEDIUM_DASH = LineStyle(width=1.0, dash=6.0, gap=4.0)
LARGE_DASH = LineStyle(width=1.0, dash=10.0, gap=5.0)

LINE_STYLES: tuple[LineStyle, ...] = (
    THIN_LINE,
    DASH_LINE,
    DOT_LINE,
    MEDIUM_DASH,
    LARGE_DASH,
    MEDIUM_LINE,
    THICK_LINE,
)


@dataclass(frozen=True)
class Texture:
    """Hatch fill: parallel strokes `spacing` px apart at `angle` degrees."""

    spacing: float = 4.0
    angle: float = 45.0
    line_width: float = 1.0
    cross: bool = False


TEXTURES: tuple[Texture, ...] = (
    Texture(spacing=4.0, angle=45.0),
    Texture(spacing=4.0, angle=135.0),
    Texture(spacing=4.0, angle=0.0),
    Texture(spacing=4.0, angle=90.0),
    Texture(spacing=6.0, angle=45.0, cross=True),
    Texture(spacing=6.0, angle=0.0, cross=True),
    Texture(spacing=8.0, angle=45.0, line_width=2.0),
    Texture(spacing=8.0, angle=135.0, line_width=2.0),
    Texture(spacing=2.0, angle=45.0),
    Texture(spacing=2.0, angle=135.0),
)
