"""The /ToUnicode CMap stream that maps glyph indexes back to characters."""

from __future__ import annotations

from typing import BinaryIO, Optional

from .charmap import CharacterGlyphMap
from .protection import PDFProtection

__all__ = ["UnicodeMap"]

_PREFIX = (
    "/CIDInit /ProcSet findresource begin\n"
    "12 dict begin\n"
    "begincmap\n"
    "/CIDSystemInfo << /Registry (Adobe)/Ordering (UCS)/Supplement 0>> def\n"
    "/CMapName /Adobe-Identity-UCS def /CMapType 2 def\n"
)
_SUFFIX = "endcmap CMapName currentdict /CMap defineresource pop end end"


class UnicodeMap:
    """ToUnicode stream object for a subset font's glyph map."""

    type_name = "Unicode"

    def __init__(
        self,
        glyph_map: CharacterGlyphMap,
        protection: Optional[PDFProtection] = None,
    ) -> None:
        self.glyph_map = glyph_map
        self.protection = protection

    def _cmap(self) -> bytes:
        pairs = [(self.glyph_map.glyph(char), char) for char in self.glyph_map.keys()]
        low = min((glyph for glyph, _ in pairs), default=65536)
        high = max((glyph for glyph, _ in pairs), default=-1)
        first_char: dict[int, str] = {}
        for glyph, char in pairs:
            first_char.setdefault(glyph, char)

        lines = [
            _PREFIX,
            "1 begincodespacerange\n",
            f"<{low:04X}><{high:04X}>\n",
            "endcodespacerange\n",
            f"{len(pairs)} beginbfrange\n",
        ]
        lines.extend(
            f"<{glyph:04X}><{glyph:04X}><{ord(first_char[glyph]):04X}>\n" for glyph, _ in pairs
        )
        lines.append("endbfrange\n")
        lines.append(_SUFFIX)
        lines.append("\n")
        return "".join(lines).encode("ascii")

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the CMap stream object."""
        body = self._cmap()
        stream.write(f"<<\n/Length {len(body)}\n>>\nstream\n".encode("ascii"))
        if self.protection is not None:
            stream.write(self.protection.encrypt(obj_id, body))
        else:
            stream.write(body)
        stream.write(b"endstream\n")