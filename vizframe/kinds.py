from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from vizframe.attributes import LineStyle, Shape, Texture
from vizframe.colors import RGBA
from vizframe.data import DataSet


@runtime_checkable
class ColorSource(Protocol):
    kind: str

    def get_attribute(self, value: Any) -> RGBA | None:
        ...

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> RGBA | None:
        ...


@runtime_checkable
class ShapeSource(Protocol):
    kind: str

    def get_attribute(self, value: Any) -> Shape | None:
        ...

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Shape | None:
        ...


@runtime_checkable
class SizeSource(Protocol):
    kind: str

    def get_attribute(self, value: Any) -> float | None:
        ...

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> float | None:
        ...


@runtime_checkable
class LineSource(Protocol):
    kind: str

    def get_attribute(self, value: Any) -> LineStyle | None:
        ...

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> LineStyle | None:
        ...


@runtime_checkable
class TextureSource(Protocol):
    kind: str

    def get_attribute(self, value: Any) -> Texture | None:
        ...

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Texture | None:
        ...


@runtime_checkable
class TextSource(Protocol):
    kind: str

    def get_text(self, value: Any, context: Any = None) -> Any:
        ...


SOURCE_KINDS: dict[str, type] = {
    "color": ColorSource,
    "shape": ShapeSource,
    "size": SizeSource,
    "line": LineSource,
    "texture": TextureSource,
    "text": TextSource,
}


def source_kind(frame: Any) -> str:
    """Kind name of a frame-like object; raises TypeError for objects that are not attribute sources."""

    kind = getattr(frame, "kind", None)
    protocol = SOURCE_KINDS.get(kind) if isinstance(kind, str) else None
    if protocol is None or not isinstance(frame, protocol):
        raise TypeError(f"not an attribute source: {frame!r}")
    return kind
