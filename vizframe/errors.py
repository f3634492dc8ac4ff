from __future__ import annotations


class VizFrameError(Exception):
    """Base class for visual-encoding errors."""


class LegendFrameError(VizFrameError):
    """Raised when legend-only operations are called on a frame that never shows a legend."""


class DataSetError(VizFrameError, ValueError):
    """Raised when a dataset is malformed or a column does not exist."""


class ConfigError(VizFrameError, ValueError):
    """Raised for invalid frame configuration or defaults."""
