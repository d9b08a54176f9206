import io

import pytest

from pdfobjects.fontutil import TtfOption
from pdfobjects.subsetfont import (
    CharNotFoundError,
    CmapFormat4,
    CmapGroup,
    FontMetrics,
    GlyphNotFoundError,
    SubsetFont,
    glyph_index_format12,
)


def _cmap() -> CmapFormat4:
    # space -> 100, 'A'..'F' -> 1..6, terminal segment at 0xFFFF
    return CmapFormat4(
        end_count=[32, 70, 0xFFFF],
        start_count=[32, 65, 0xFFFF],
        id_delta=[68, (-64) & 0xFFFF, 1],
        id_range_offset=[0, 0, 0],
        glyph_id_array=[],
    )


def _font(option=None, metrics=None) -> SubsetFont:
    return SubsetFont(
        family="My Font",
        metrics=metrics or FontMetrics(widths=[500, 600, 700]),
        cmap4=_cmap(),
        cmap12_groups=[CmapGroup(0x1F600, 0x1F64F, 500)],
        option=option,
    )


def test_format4_delta_lookup():
    cmap = _cmap()
    assert cmap.glyph_index(ord("A")) == 1
    assert cmap.glyph_index(ord("F")) == 6
    assert cmap.glyph_index(ord(" ")) == 100


def test_format4_missing_code():
    with pytest.raises(GlyphNotFoundError):
        _cmap().glyph_index(ord("Z"))


def test_format4_range_offset_lookup():
    glyph_ids = [10, 0, 12]
    cmap = CmapFormat4(
        end_count=[99, 0xFFFF],
        start_count=[97, 0xFFFF],
        id_delta=[0, 1],
        id_range_offset=[4, 0],
        glyph_id_array=glyph_ids,
    )
    assert cmap.glyph_index(ord("a")) == glyph_ids[0]
    assert cmap.glyph_index(ord("b")) == 0
    assert cmap.glyph_index(ord("c")) == glyph_ids[2]


def test_format12_lookup():
    groups = [CmapGroup(0x1F600, 0x1F64F, 500)]
    assert glyph_index_format12(0x1F600, groups) == 500
    assert glyph_index_format12(0x1F601, groups) - glyph_index_format12(0x1F600, groups) == 1
    with pytest.raises(GlyphNotFoundError):
        glyph_index_format12(0x20000, groups)


def test_char_code_dispatches_by_plane():
    font = _font()
    assert font.char_code_to_glyph_index("B") == 2
    assert font.char_code_to_glyph_index("\U0001F600") == 500


def test_add_chars_substitutes_missing_glyph():
    missing = []
    font = _font(TtfOption(on_glyph_not_found=missing.append))
    assert font.add_chars("AZ") == "A "
    assert missing == ["Z"]
    assert font.character_to_glyph_index.keys() == ["A", " "]
    assert font.char_index("A") == 1
    assert font.char_index(" ") == 100


def test_add_chars_does_not_duplicate():
    font = _font()
    assert font.add_chars("AAB") == "AAB"
    assert font.add_chars("BA") == "BA"
    assert len(font.character_to_glyph_index) == 2


def test_add_chars_custom_substitute():
    font = _font(TtfOption(on_glyph_not_found_substitute=lambda c: "C"))
    assert font.add_chars("xy") == "CC"
    assert font.character_to_glyph_index.keys() == ["C"]
    assert font.char_index("C") == 3


def test_option_none_substitute_gets_default():
    option = TtfOption()
    option.on_glyph_not_found_substitute = None
    font = _font(option)
    assert font.add_chars("Z") == " "


def test_char_index_missing():
    with pytest.raises(CharNotFoundError):
        _font().char_index("A")


def test_widths():
    font = _font(metrics=FontMetrics(units_per_em=1000, widths=[500, 600, 700]))
    font.add_chars("A")
    assert font.char_width("A") == 600
    assert font.glyph_index_to_pdf_width(10) == 700
    scaled = _font(metrics=FontMetrics(units_per_em=2000, widths=[500, 600, 700]))
    assert scaled.glyph_index_to_pdf_width(1) == 300
    with pytest.raises(CharNotFoundError):
        scaled.char_width("A")


def test_kerning_requires_option():
    metrics = FontMetrics(widths=[1], kerning={1: {2: -80}})
    assert _font(metrics=metrics).kern_value_by_left(1) is None
    kerned = _font(TtfOption(use_kerning=True), metrics)
    assert kerned.kern_value_by_left(1) == {2: -80}
    assert kerned.kern_value_by_left(5) is None


def test_pixel_metrics_at_em_size():
    metrics = FontMetrics(
        units_per_em=1000,
        ascender=800,
        descender=-200,
        underline_position=-100,
        underline_thickness=50,
        widths=[1],
    )
    font = _font(metrics=metrics)
    assert font.ascender_px(1000) == pytest.approx(800)
    assert font.descender_px(1000) == pytest.approx(-200)
    assert font.underline_position_px(1000) == pytest.approx(-100)
    assert font.underline_thickness_px(1000) == pytest.approx(50)
    assert font.ascender_px(20) == pytest.approx(2 * font.ascender_px(10))


def test_write_font_dictionary():
    font = _font()
    font.index_obj_cid_font = 7
    font.index_obj_unicode_map = 9
    out = io.BytesIO()
    font.write(out, 3)
    text = out.getvalue().decode()
    assert text.startswith("<<\n/BaseFont /My+Font\n")
    assert "/DescendantFonts [8 0 R]\n" in text
    assert "/ToUnicode 10 0 R\n" in text
    assert "/Encoding /Identity-H\n/Subtype /Type0\n" in text
    assert text.endswith("/Type /Font\n>>\n")