from vizframe.frames.base import FrameContext, LegendSpec, VisualFrame, reduce_legend_values
from vizframe.frames.categorical import (
    CategoricalColorFrame,
    CategoricalFrame,
    CategoricalLineFrame,
    CategoricalShapeFrame,
    CategoricalSizeFrame,
    CategoricalTextureFrame,
)
from vizframe.frames.composite import CompositeFrame
from vizframe.frames.continuous import (
    BrightnessColorFrame,
    GradientColorFrame,
    HueColorFrame,
    LinearColorFrame,
    LinearFrame,
    LinearLineFrame,
    LinearShapeFrame,
    LinearSizeFrame,
    LinearTextureFrame,
    SaturationColorFrame,
)
from vizframe.frames.glyph import (
    BarGlyphFrame,
    Glyph,
    MultiFieldFrame,
    PieGlyphFrame,
    ProfileGlyphFrame,
    StarGlyphFrame,
    SunGlyphFrame,
    ThermoGlyphFrame,
    VineGlyphFrame,
)
from vizframe.frames.stacked import LegendPolicy, StackedMeasuresFrame
from vizframe.frames.static import (
    StaticColorFrame,
    StaticFrame,
    StaticLineFrame,
    StaticShapeFrame,
    StaticSizeFrame,
    StaticTextureFrame,
)
from vizframe.frames.text import HierarchicalTextFrame, TextFrame

__all__ = [
    "BarGlyphFrame",
    "BrightnessColorFrame",
    "CategoricalColorFrame",
    "CategoricalFrame",
    "CategoricalLineFrame",
    "CategoricalShapeFrame",
    "CategoricalSizeFrame",
    "CategoricalTextureFrame",
    "CompositeFrame",
    "FrameContext",
    "Glyph",
    "GradientColorFrame",
    "HierarchicalTextFrame",
    "HueColorFrame",
    "LegendPolicy",
    "LegendSpec",
    "LinearColorFrame",
    "LinearFrame",
    "LinearLineFrame",
    "LinearShapeFrame",
    "LinearSizeFrame",
    "LinearTextureFrame",
    "MultiFieldFrame",
    "PieGlyphFrame",
    "ProfileGlyphFrame",
    "SaturationColorFrame",
    "StackedMeasuresFrame",
    "StarGlyphFrame",
    "StaticColorFrame",
    "StaticFrame",
    "StaticLineFrame",
    "StaticShapeFrame",
    "StaticSizeFrame",
    "StaticTextureFrame",
    "SunGlyphFrame",
    "TextFrame",
    "ThermoGlyphFrame",
    "VineGlyphFrame",
    "VisualFrame",
    "reduce_legend_values",
]
