from vizframe.data import DataSet, TableDataSet
from vizframe.errors import ConfigError, DataSetError, LegendFrameError, VizFrameError
from vizframe.frames import (
    CategoricalColorFrame,
    CategoricalShapeFrame,
    CompositeFrame,
    FrameContext,
    GradientColorFrame,
    LinearSizeFrame,
    StackedMeasuresFrame,
    StaticColorFrame,
    TextFrame,
    VisualFrame,
)
from vizframe.legend import Legend, LegendItem, build_legend, build_legends
from vizframe.scales import CategoricalScale, LinearScale, ScaleOption

__all__ = [
    "CategoricalColorFrame",
    "CategoricalScale",
    "CategoricalShapeFrame",
    "CompositeFrame",
    "ConfigError",
    "DataSet",
    "DataSetError",
    "FrameContext",
    "GradientColorFrame",
    "Legend",
    "LegendFrameError",
    "LegendItem",
    "LinearScale",
    "LinearSizeFrame",
    "ScaleOption",
    "StackedMeasuresFrame",
    "StaticColorFrame",
    "TableDataSet",
    "TextFrame",
    "VisualFrame",
    "VizFrameError",
    "build_legend",
    "build_legends",
]
