"""A TrueType font used as a subset: character lookup, widths, metrics and the font object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Optional, Sequence

from .charmap import CharacterGlyphMap
from .fontutil import TtfOption, create_embedded_font_subset_name, default_glyph_substitute

__all__ = [
    "GlyphNotFoundError",
    "CharNotFoundError",
    "CmapFormat4",
    "CmapGroup",
    "FontMetrics",
    "SubsetFont",
    "glyph_index_format12",
]


class GlyphNotFoundError(LookupError):
    """The font file has no glyph for a character."""

    def __init__(self, message: str = "glyph not found") -> None:
        super().__init__(message)


class CharNotFoundError(LookupError):
    """A character has not been added to the subset."""

    def __init__(self, message: str = "char not found") -> None:
        super().__init__(message)


@dataclass
class CmapFormat4:
    """Segment mapping (cmap format 4) for codes up to 0xFFFF."""

    end_count: list[int] = field(default_factory=list)
    start_count: list[int] = field(default_factory=list)
    id_delta: list[int] = field(default_factory=list)
    id_range_offset: list[int] = field(default_factory=list)
    glyph_id_array: list[int] = field(default_factory=list)

    @property
    def seg_count(self) -> int:
        return len(self.end_count)

    def glyph_index(self, code: int) -> int:
        """Glyph index for ``code``; raise GlyphNotFoundError if it is not mapped."""
        seg_count = self.seg_count
        seg = next(
            (number for number, end in enumerate(self.end_count) if code <= end),
            seg_count,
        )
        if seg >= seg_count or code < self.start_count[seg]:
            raise GlyphNotFoundError()

        delta = self.id_delta[seg]
        range_offset = self.id_range_offset[seg]
        if range_offset == 0:
            return (code + delta) & 0xFFFF

        idx = range_offset // 2 + (code - self.start_count[seg]) - (seg_count - seg)
        if not 0 <= idx < len(self.glyph_id_array):
            raise GlyphNotFoundError()
        glyph = self.glyph_id_array[idx]
        if glyph == 0:
            return 0
        return (glyph + delta) & 0xFFFF


@dataclass(frozen=True)
class CmapGroup:
    """A sequential map group (cmap format 12)."""

    start_char_code: int
    end_char_code: int
    glyph_id: int


def glyph_index_format12(code: int, groups: Iterable[CmapGroup]) -> int:
    """Glyph index for ``code`` from format 12 groups; raise GlyphNotFoundError if absent."""
    for group in groups:
        if group.start_char_code <= code <= group.end_char_code:
            return code - group.start_char_code + group.glyph_id
    raise GlyphNotFoundError()


@dataclass
class FontMetrics:
    """Metrics of a TrueType font in design units."""

    units_per_em: int = 1000
    ascender: int = 0
    descender: int = 0
    cap_height: int = 0
    x_height: int = 0
    underline_position: int = 0
    underline_thickness: int = 0
    widths: list[int] = field(default_factory=list)
    number_of_h_metrics: Optional[int] = None
    kerning: dict[int, dict[int, int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.number_of_h_metrics is None:
            self.number_of_h_metrics = len(self.widths)


class SubsetFont:
    """A Type0 font object whose glyphs are embedded as a subset."""

    type_name = "SubsetFont"

    def __init__(
        self,
        family: str = "",
        metrics: Optional[FontMetrics] = None,
        cmap4: Optional[CmapFormat4] = None,
        cmap12_groups: Sequence[CmapGroup] = (),
        option: Optional[TtfOption] = None,
    ) -> None:
        self.family = family
        self.metrics = metrics if metrics is not None else FontMetrics()
        self.cmap4 = cmap4
        self.cmap12_groups = list(cmap12_groups)
        self.character_to_glyph_index = CharacterGlyphMap()
        self.count_of_font = 0
        self.index_obj_cid_font = 0
        self.index_obj_unicode_map = 0
        self._option = TtfOption()
        self.ttf_option = option if option is not None else TtfOption()

    @property
    def ttf_option(self) -> TtfOption:
        return self._option

    @ttf_option.setter
    def ttf_option(self, option: TtfOption) -> None:
        if option.on_glyph_not_found_substitute is None:
            option.on_glyph_not_found_substitute = default_glyph_substitute
        self._option = option

    def char_code_to_glyph_index(self, char: str) -> int:
        """Glyph index of ``char`` in the font; raise GlyphNotFoundError if absent."""
        code = ord(char)
        if code <= 0xFFFF:
            if self.cmap4 is None:
                raise GlyphNotFoundError()
            return self.cmap4.glyph_index(code)
        return glyph_index_format12(code, self.cmap12_groups)

    def _replacement(self, missing: str) -> tuple[bool, str, int]:
        substitute = self._option.on_glyph_not_found_substitute
        if substitute is None:
            return False, missing, 0
        replacement = substitute(missing)
        if replacement in self.character_to_glyph_index:
            return True, replacement, 0
        try:
            return False, replacement, self.char_code_to_glyph_index(replacement)
        except GlyphNotFoundError:
            return False, replacement, 0

    def add_chars(self, text: str) -> str:
        """Add the characters of ``text`` to the subset.

        Returns the text as it will be drawn, with missing glyphs substituted.
        """
        result: list[str] = []
        glyph_map = self.character_to_glyph_index
        for char in text:
            if char in glyph_map:
                result.append(char)
                continue
            try:
                glyph = self.char_code_to_glyph_index(char)
            except GlyphNotFoundError:
                if self._option.on_glyph_not_found is not None:
                    self._option.on_glyph_not_found(char)
                exists, replacement, glyph = self._replacement(char)
                if not exists:
                    glyph_map.set(replacement, glyph)
                result.append(replacement)
                continue
            glyph_map.set(char, glyph)
            result.append(char)
        return "".join(result)

    def char_index(self, char: str) -> int:
        """Glyph index of a character already in the subset."""
        try:
            return self.character_to_glyph_index.glyph(char)
        except KeyError:
            raise CharNotFoundError() from None

    def char_width(self, char: str) -> int:
        """Width in thousandths of the font size of a character in the subset."""
        return self.glyph_index_to_pdf_width(self.char_index(char))

    def glyph_index_to_pdf_width(self, glyph_index: int) -> int:
        """Width of a glyph in thousandths of the font size."""
        count = self.metrics.number_of_h_metrics or 0
        if count <= 0:
            raise ValueError("font has no horizontal metrics")
        if glyph_index >= count:
            glyph_index = count - 1
        width = self.metrics.widths[glyph_index]
        units_per_em = self.metrics.units_per_em
        if units_per_em == 1000:
            return width
        return width * 1000 // units_per_em

    def kern_value_by_left(self, left: int) -> Optional[dict[int, int]]:
        """Kerning pairs whose left glyph is ``left``, or None."""
        if not self._option.use_kerning:
            return None
        return self.metrics.kerning.get(left)

    def _scaled(self, value: int, font_size: float) -> float:
        return (float(value) / float(self.metrics.units_per_em)) * font_size

    def underline_thickness_px(self, font_size: float) -> float:
        return self._scaled(self.metrics.underline_thickness, font_size)

    def underline_position_px(self, font_size: float) -> float:
        return self._scaled(self.metrics.underline_position, font_size)

    def ascender_px(self, font_size: float) -> float:
        return self._scaled(self.metrics.ascender, font_size)

    def descender_px(self, font_size: float) -> float:
        return self._scaled(self.metrics.descender, font_size)

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the Type0 font dictionary."""
        text = (
            "<<\n"
            f"/BaseFont /{create_embedded_font_subset_name(self.family)}\n"
            f"/DescendantFonts [{self.index_obj_cid_font + 1} 0 R]\n"
            "/Encoding /Identity-H\n"
            "/Subtype /Type0\n"
            f"/ToUnicode {self.index_obj_unicode_map + 1} 0 R\n"
            "/Type /Font\n"
            ">>\n"
        )
        stream.write(text.encode("utf-8"))