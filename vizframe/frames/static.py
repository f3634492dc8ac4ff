from __future__ import annotations

from typing import Any

from vizframe.attributes import FILLED_CIRCLE, THIN_LINE, LineStyle, Shape, Texture
from vizframe.colors import RGBA, to_rgba
from vizframe.config import get_frame_defaults
from vizframe.data import DataSet, has_column
from vizframe.errors import ConfigError
from vizframe.frames.base import VisualFrame
from vizframe.scales import is_number


class StaticFrame(VisualFrame):
    """Returns one constant attribute. When bound to a column holding attributes, the cell value wins."""

    legend_bearing = False

    def __init__(self, value: Any, field: str | None = None) -> None:
        super().__init__(field)
        self.value = self.coerce(value)

    def coerce(self, attr: Any) -> Any:
        return attr

    def get_attribute(self, value: Any) -> Any:
        return self.value

    def get_attribute_at(self, dataset: DataSet, column: str, row: int) -> Any:
        if self.field is not None and has_column(dataset, self.field):
            try:
                return self.coerce(dataset.get_data(self.field, row))
            except (ConfigError, TypeError, ValueError):
                return self.value
        return self.value

    def is_visible(self) -> bool:
        return False

    def unique_id(self) -> str:
        return f"{type(self).__name__}:{self.field}:{self.value!r}"

    def share_id(self) -> str:
        return f"{self.kind}:{self.field}:{self.value!r}"


class StaticColorFrame(StaticFrame):
    kind = "color"

    def __init__(self, value: Any = None, field: str | None = None) -> None:
        super().__init__(get_frame_defaults().default_color if value is None else value, field)

    def coerce(self, attr: Any) -> RGBA:
        return to_rgba(attr)


class StaticShapeFrame(StaticFrame):
    kind = "shape"

    def __init__(self, value: Shape = FILLED_CIRCLE, field: str | None = None) -> None:
        super().__init__(value, field)

    def coerce(self, attr: Any) -> Shape:
        if not isinstance(attr, Shape):
            raise ConfigError(f"not a shape: {attr!r}")
        return attr


class StaticSizeFrame(StaticFrame):
    kind = "size"

    def __init__(self, value: float | None = None, field: str | None = None) -> None:
        super().__init__(get_frame_defaults().default_size if value is None else value, field)

    def coerce(self, attr: Any) -> float:
        if not is_number(attr):
            raise ConfigError(f"not a size: {attr!r}")
        return float(attr)


class StaticLineFrame(StaticFrame):
    kind = "line"

    def __init__(self, value: LineStyle = THIN_LINE, field: str | None = None) -> None:
        super().__init__(value, field)

    def coerce(self, attr: Any) -> LineStyle:
        if not isinstance(attr, LineStyle):
            raise ConfigError(f"not a line style: {attr!r}")
        return attr


class StaticTextureFrame(StaticFrame):
    kind = "texture"

    def __init__(self, value: Texture | None = None, field: str | None = None) -> None:
        super().__init__(value, field)

    def coerce(self, attr: Any) -> Texture | None:
        if attr is not None and not isinstance(attr, Texture):
            raise ConfigError(f"not a texture: {attr!r}")
        return attr
