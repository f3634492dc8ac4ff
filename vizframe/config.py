from __future__ import annotations

from dataclasses import asdict, dataclass
from functools import lru_cache
import os
from typing import Any, Mapping

from vizframe.colors import RGBA, to_rgba
from vizframe.errors import ConfigError


ENV_PREFIX = "VIZFRAME_"


@dataclass(frozen=True)
class FrameDefaults:
    """Tunables shared by every frame."""

    legend_reduce_threshold: int = 6
    legend_max_count: int = 500
    default_color: str = "#808080"
    default_size: float = 1.0
    max_size: float = 30.0
    legend_contrast_min: float = 0.05

    @property
    def default_rgba(self) -> RGBA:
        return to_rgba(self.default_color)


DEFAULT_FRAME_DEFAULTS = FrameDefaults()


def validate_frame_defaults(overrides: Mapping[str, Any] | None = None) -> FrameDefaults:
    raw: dict[str, Any] = asdict(DEFAULT_FRAME_DEFAULTS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ConfigError(f"Unknown frame default: {key}")
            raw[key] = value

    for key in ("legend_reduce_threshold", "legend_max_count"):
        try:
            raw[key] = int(raw[key])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Default `{key}` must be an integer") from exc
        if raw[key] <= 0:
            raise ConfigError(f"Default `{key}` must be a positive integer")

    for key in ("default_size", "max_size", "legend_contrast_min"):
        try:
            raw[key] = float(raw[key])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Default `{key}` must be a number") from exc
        if raw[key] < 0:
            raise ConfigError(f"Default `{key}` must be >= 0")
    if raw["max_size"] < raw["default_size"]:
        raise ConfigError("Default `max_size` must be >= `default_size`")

    if not isinstance(raw["default_color"], str):
        raise ConfigError("Default `default_color` must be a color string")
    to_rgba(raw["default_color"])

    return FrameDefaults(**raw)


def load_frame_defaults(environ: Mapping[str, str] | None = None) -> FrameDefaults:
    """Build defaults from `VIZFRAME_*` environment variables, e.g. `VIZFRAME_LEGEND_MAX_COUNT=200`."""

    env = os.environ if environ is None else environ
    fields = asdict(DEFAULT_FRAME_DEFAULTS)
    overrides = {}
    for key in fields:
        name = ENV_PREFIX + key.upper()
        if name in env:
            overrides[key] = env[name]
    return validate_frame_defaults(overrides)


@lru_cache(maxsize=1)
def get_frame_defaults() -> FrameDefaults:
    return load_frame_defaults()
