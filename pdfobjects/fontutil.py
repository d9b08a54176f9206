"""Small helpers for fonts, byte reading and paint styles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

__all__ = [
    "PaintStyle",
    "TtfOption",
    "create_embedded_font_subset_name",
    "read_short",
    "read_ushort",
    "string_width",
    "parse_style",
    "default_glyph_substitute",
]


class PaintStyle(str, Enum):
    """PDF path painting operators."""

    DRAW = "S"
    FILL = "f"
    DRAW_FILL = "B"


def parse_style(style: str) -> PaintStyle:
    """Map a style string ("F", "FD", "DF" or anything else) to an operator."""
    if style == "F":
        return PaintStyle.FILL
    if style in ("FD", "DF"):
        return PaintStyle.DRAW_FILL
    return PaintStyle.DRAW


def default_glyph_substitute(char: str) -> str:
    """Replacement used when a glyph is missing: a space."""
    return "\u0020"


@dataclass
class TtfOption:
    """Options that control how a TrueType font is loaded and used."""

    use_kerning: bool = False
    style: int = 0
    on_glyph_not_found: Optional[Callable[[str], None]] = None
    on_glyph_not_found_substitute: Optional[Callable[[str], str]] = default_glyph_substitute

    def __post_init__(self) -> None:
        if self.on_glyph_not_found_substitute is None:
            self.on_glyph_not_found_substitute = default_glyph_substitute


def create_embedded_font_subset_name(name: str) -> str:
    """Name of an embedded subset font: spaces and slashes become '+'."""
    return name.replace(" ", "+").replace("/", "+")


def _two_bytes(data: bytes, offset: int) -> bytes:
    if offset < 0 or offset + 2 > len(data):
        raise ValueError(f"cannot read 2 bytes at offset {offset} of {len(data)}")
    return bytes(data[offset:offset + 2])


def read_short(data: bytes, offset: int) -> int:
    """Read a big-endian signed 16-bit integer."""
    return int.from_bytes(_two_bytes(data, offset), "big", signed=True)


def read_ushort(data: bytes, offset: int) -> int:
    """Read a big-endian unsigned 16-bit integer."""
    return int.from_bytes(_two_bytes(data, offset), "big", signed=False)


def string_width(text: str, font_size: float, char_widths: Mapping[int, int]) -> float:
    """Width of ``text`` from per-byte widths in thousandths of the font size."""
    total = sum(char_widths.get(byte, 0) for byte in text.encode("utf-8"))
    return total * (float(font_size) / 1000.0)