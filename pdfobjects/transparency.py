"""Alpha and blend-mode settings, and a cache of them keyed by value."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

__all__ = [
    "DEFAULT_ALPHA_VALUE",
    "BlendMode",
    "Transparency",
    "TransparencyMap",
    "parse_blend_mode",
]

DEFAULT_ALPHA_VALUE = 1


class BlendMode(str, Enum):
    """PDF blend modes."""

    HUE = "/Hue"
    COLOR = "/Color"
    NORMAL = "/Normal"
    DARKEN = "/Darken"
    SCREEN = "/Screen"
    OVERLAY = "/Overlay"
    LIGHTEN = "/Lighten"
    MULTIPLY = "/Multiply"
    EXCLUSION = "/Exclusion"
    COLOR_BURN = "/ColorBurn"
    HARD_LIGHT = "/HardLight"
    SOFT_LIGHT = "/SoftLight"
    DIFFERENCE = "/Difference"
    SATURATION = "/Saturation"
    LUMINOSITY = "/Luminosity"
    COLOR_DODGE = "/ColorDodge"


def parse_blend_mode(name: Union[str, BlendMode]) -> BlendMode:
    """Return the blend mode named ``name``; an empty name means Normal."""
    if isinstance(name, BlendMode):
        return name
    if name == "":
        return BlendMode.NORMAL
    try:
        return BlendMode(name)
    except ValueError:
        raise ValueError("blend mode is unknown") from None


@dataclass
class Transparency:
    """An alpha value with a blend mode; alpha must lie in 0.0 to 1.0."""

    alpha: float = DEFAULT_ALPHA_VALUE
    blend_mode: Union[str, BlendMode] = BlendMode.NORMAL
    ext_gstate_index: int = 0

    def __post_init__(self) -> None:
        if self.alpha < 0.0 or self.alpha > 1.0:
            raise ValueError(f"alpha value is out of range (0.0 - 1.0): {self.alpha:.3f}")
        self.blend_mode = parse_blend_mode(self.blend_mode)

    def key(self) -> str:
        """Identifier shared by transparencies that render the same."""
        return f"{self.alpha:.3f}_{BlendMode(self.blend_mode).value}"


class TransparencyMap:
    """Thread-safe cache of transparencies by key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, Transparency] = {}

    def find(self, transparency: Transparency) -> Optional[Transparency]:
        """Return the cached transparency with the same key, or None."""
        with self._lock:
            return self._table.get(transparency.key())

    def save(self, transparency: Transparency) -> Transparency:
        """Store ``transparency`` under its key and return it."""
        with self._lock:
            self._table[transparency.key()] = transparency
        return transparency

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)