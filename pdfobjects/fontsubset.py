"""Building the embedded TrueType subset (the /FontFile2 stream) of a font."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field, replace
from typing import BinaryIO, Optional

from .charmap import CharacterGlyphMap
from .fontutil import read_short, read_ushort
from .protection import PDFProtection

__all__ = [
    "ENTRY_SELECTORS",
    "SUBSET_TABLES",
    "TableEntry",
    "TrueTypeData",
    "FontFileObj",
    "check_sum",
    "entry_selector",
]

ENTRY_SELECTORS = (
    0, 0, 1, 1, 2, 2,
    2, 2, 3, 3, 3, 3,
    3, 3, 3, 3, 4, 4,
    4, 4, 4, 4, 4, 4,
    4, 4, 4, 4, 4, 4, 4,
)

# Tables copied into a subset font; "cvt " carries a trailing space.
SUBSET_TABLES = ("cvt ", "fpgm", "glyf", "head", "hhea", "hmtx", "loca", "maxp", "prep")

_ARG_1_AND_2_ARE_WORDS = 1
_HAS_SCALE = 8
_MORE_COMPONENTS = 32
_X_AND_Y_SCALE = 64
_TWO_BY_TWO = 128

_UINT32 = 0xFFFFFFFF


def entry_selector(table_count: int) -> int:
    """Entry selector of a font's table directory for the given table count."""
    if not 0 <= table_count < len(ENTRY_SELECTORS):
        raise ValueError(f"unsupported table count {table_count}")
    return ENTRY_SELECTORS[table_count]


def check_sum(data: bytes) -> int:
    """TrueType table checksum; the data length must be a multiple of 4."""
    if len(data) % 4:
        raise ValueError("data length must be a multiple of 4")
    byte3 = sum(data[0::4])
    byte2 = sum(data[1::4])
    byte1 = sum(data[2::4])
    byte0 = sum(data[3::4])
    return (
        ((byte3 << 24) & _UINT32)
        + ((byte2 << 16) & _UINT32)
        + ((byte1 << 8) & _UINT32)
        + (byte0 & _UINT32)
    ) & _UINT32


@dataclass
class TableEntry:
    """One record of a TrueType table directory."""

    checksum: int = 0
    offset: int = 0
    length: int = 0

    def padded_length(self) -> int:
        """Length rounded up to a multiple of four."""
        return (self.length + 3) & ~3


@dataclass
class TrueTypeData:
    """The parts of a parsed TrueType font that subsetting needs."""

    font_data: bytes
    tables: dict[str, TableEntry] = field(default_factory=dict)
    loca_table: list[int] = field(default_factory=list)
    num_glyphs: Optional[int] = None
    is_short_index: bool = True

    def __post_init__(self) -> None:
        self.font_data = bytes(self.font_data)
        if self.num_glyphs is None:
            self.num_glyphs = max(len(self.loca_table) - 1, 0)


def _write_at(buffer: bytearray, position: int, data: bytes) -> None:
    if len(buffer) < position:
        buffer.extend(bytes(position - len(buffer)))
    buffer[position:position + len(data)] = data


class FontFileObj:
    """PDF stream object holding the subset of a TrueType font."""

    type_name = "PdfDictionary"

    def __init__(
        self,
        font: TrueTypeData,
        glyph_map: CharacterGlyphMap,
        protection: Optional[PDFProtection] = None,
    ) -> None:
        self.font = font
        self.glyph_map = glyph_map
        self.protection = protection

    @property
    def _glyf(self) -> TableEntry:
        return self.font.tables.get("glyf", TableEntry())

    def glyph_offset(self, glyph: int) -> int:
        """Offset of a glyph's data within the font data."""
        return self._glyf.offset + self.font.loca_table[glyph]

    def _glyph_size(self, glyph: int) -> int:
        return self.glyph_offset(glyph + 1) - self.glyph_offset(glyph)

    def glyph_data(self, glyph: int) -> bytes:
        """Raw outline data of one glyph."""
        start = self.glyph_offset(glyph)
        end = self.glyph_offset(glyph + 1)
        if end > len(self.font.font_data):
            raise ValueError(f"glyph {glyph} lies outside the font data")
        return self.font.font_data[start:end]

    def add_composite_glyphs(self, glyphs: list[int], glyph: int) -> None:
        """Append to ``glyphs`` the components of ``glyph`` if it is composite."""
        start = self.glyph_offset(glyph)
        if start == self.glyph_offset(glyph + 1):
            return
        data = self.font.font_data
        if read_short(data, start) >= 0:
            return
        offset = start + 2 + 8
        while True:
            flags = read_ushort(data, offset)
            component = read_ushort(data, offset + 2)
            offset += 4
            if component not in glyphs:
                glyphs.append(component)
            if not flags & _MORE_COMPONENTS:
                return
            step = 4 if flags & _ARG_1_AND_2_ARE_WORDS else 2
            if flags & _HAS_SCALE:
                step += 2
            elif flags & _X_AND_Y_SCALE:
                step += 4
            if flags & _TWO_BY_TWO:
                step += 8
            offset += step

    def complete_glyph_closure(self, glyph_map: CharacterGlyphMap) -> list[int]:
        """Glyphs used by ``glyph_map``, plus glyph 0 and direct components."""
        values = glyph_map.values()
        glyphs = list(values)
        if 0 not in values:
            glyphs.append(0)
        for position in range(len(values)):
            self.add_composite_glyphs(glyphs, glyphs[position])
        return glyphs

    def make_glyf_and_loca(self) -> tuple[bytes, list[int]]:
        """Build the subset glyf table and the matching glyph offsets."""
        glyphs = sorted(set(self.complete_glyph_closure(self.glyph_map)))
        size = sum(self._glyph_size(glyph) for glyph in glyphs)
        table = bytearray(TableEntry(length=size).padded_length())
        wanted = set(glyphs)
        loca: list[int] = []
        offset = 0
        for index in range(self.font.num_glyphs or 0):
            loca.append(offset)
            if index in wanted:
                data = self.glyph_data(index)
                table[offset:offset + len(data)] = data
                offset += len(data)
        loca.append(offset)
        return bytes(table), loca

    def _loca_bytes(self, loca: list[int], entry: TableEntry) -> bytes:
        if self.font.is_short_index:
            entry.length = len(loca) * 2
            body = b"".join(((value // 2) & 0xFFFF).to_bytes(2, "big") for value in loca)
        else:
            entry.length = len(loca) * 4
            body = b"".join((value & _UINT32).to_bytes(4, "big") for value in loca)
        data = body + bytes(entry.padded_length() - len(body))
        entry.checksum = check_sum(data)
        return data

    def _table_bytes(self, entry: TableEntry) -> bytes:
        padded = entry.padded_length()
        data = self.font.font_data[entry.offset:entry.offset + padded]
        return data + bytes(padded - len(data))

    def make_font(self) -> bytes:
        """Assemble the subset font file."""
        tables = {
            tag: replace(self.font.tables.get(tag, TableEntry())) for tag in SUBSET_TABLES
        }
        count = len(tables)
        selector = entry_selector(count)
        glyph_table, loca = self.make_glyf_and_loca()

        buffer = bytearray()
        _write_at(
            buffer,
            0,
            struct.pack(
                ">IHHHH",
                0x00010000,
                count,
                ((1 << selector) * 16) & 0xFFFF,
                selector,
                ((count - (1 << selector)) * 16) & 0xFFFF,
            ),
        )

        position = 12 + 16 * count
        for number, tag in enumerate(sorted(tables)):
            entry = tables[tag]
            offset = position
            if tag == "glyf":
                entry.length = len(glyph_table)
                entry.checksum = check_sum(glyph_table)
                data = glyph_table[:entry.padded_length()]
            elif tag == "loca":
                data = self._loca_bytes(loca, entry)
            else:
                data = self._table_bytes(entry)
            _write_at(buffer, offset, data)
            position = offset + len(data)

            record = tag.encode("latin-1")[:4].ljust(4) + struct.pack(
                ">III", entry.checksum & _UINT32, offset & _UINT32, entry.length & _UINT32
            )
            _write_at(buffer, 12 + 16 * number, record)
        return bytes(buffer)

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the compressed font stream object."""
        font = self.make_font()
        compressed = zlib.compress(font)
        stream.write(
            (
                f"<</Length {len(compressed)}\n"
                "/Filter /FlateDecode\n"
                f"/Length1 {len(font)}\n"
                ">>\n"
                "stream\n"
            ).encode("ascii")
        )
        if self.protection is not None:
            stream.write(self.protection.encrypt(obj_id, compressed))
        else:
            stream.write(compressed)
        stream.write(b"\nendstream\n")