from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable


LOGGER = logging.getLogger(__name__)


@runtime_checkable
class StyleResolver(Protocol):
    def resolve(self, kind: str, index: int) -> Any | None:
        """Return the style-sheet override for palette slot `index` of `kind`, or None."""
        ...


class MappingStyleResolver:
    """Style overrides keyed by frame kind, then palette index, e.g. `{"color": {0: "#FF0000"}}`."""

    def __init__(self, overrides: Mapping[str, Mapping[int, Any]] | None = None) -> None:
        self._overrides: dict[str, dict[int, Any]] = {}
        for kind, slots in (overrides or {}).items():
            for index, value in slots.items():
                self.set_override(kind, index, value)

    def set_override(self, kind: str, index: int, value: Any) -> None:
        if index < 0:
            LOGGER.warning("ignoring negative palette index %d for %s", index, kind)
            return
        self._overrides.setdefault(kind, {})[int(index)] = value

    def resolve(self, kind: str, index: int) -> Any | None:
        return self._overrides.get(kind, {}).get(index)
