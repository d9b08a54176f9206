import struct

import pytest

from pdfobjects.fontutil import (
    PaintStyle,
    TtfOption,
    create_embedded_font_subset_name,
    default_glyph_substitute,
    parse_style,
    read_short,
    read_ushort,
    string_width,
)


@pytest.mark.parametrize(
    "style, expected",
    [
        ("F", PaintStyle.FILL),
        ("FD", PaintStyle.DRAW_FILL),
        ("DF", PaintStyle.DRAW_FILL),
        ("D", PaintStyle.DRAW),
        ("", PaintStyle.DRAW),
    ],
)
def test_parse_style(style, expected):
    assert parse_style(style) is expected


@pytest.mark.parametrize(
    "style, operator",
    [("D", "S"), ("F", "f"), ("DF", "B")],
)
def test_paint_style_operators(style, operator):
    assert parse_style(style).value == operator


def test_subset_name_replaces_spaces_and_slashes():
    result = create_embedded_font_subset_name("Liberation Serif/Regular")
    assert " " not in result and "/" not in result
    assert result.replace("+", "") == "LiberationSerifRegular"


def test_subset_name_plain_unchanged():
    assert create_embedded_font_subset_name("Ubuntu-L") == "Ubuntu-L"


@pytest.mark.parametrize("value", [-32768, -1, 0, 1, 32767])
def test_read_short_round_trip(value):
    data = b"\x00" + struct.pack(">h", value)
    assert read_short(data, 1) == value


@pytest.mark.parametrize("value", [0, 1, 0x8000, 0xFFFF])
def test_read_ushort_round_trip(value):
    data = struct.pack(">H", value) + b"\x00"
    assert read_ushort(data, 0) == value


def test_short_and_ushort_agree_on_high_bit():
    data = struct.pack(">H", 0xFFFE)
    assert read_ushort(data, 0) - read_short(data, 0) == 65536


def test_read_past_end_raises():
    with pytest.raises(ValueError):
        read_short(b"\x01", 0)
    with pytest.raises(ValueError):
        read_ushort(b"\x01\x02", 1)


def test_string_width_scales_with_size():
    widths = {ord("a"): 500, ord("b"): 250}
    small = string_width("ab", 10, widths)
    large = string_width("ab", 20, widths)
    assert large == pytest.approx(2 * small)
    assert small > 0


def test_string_width_sums_characters():
    widths = {ord("a"): 500, ord("b"): 250}
    whole = string_width("aab", 12, widths)
    parts = string_width("aa", 12, widths) + string_width("b", 12, widths)
    assert whole == pytest.approx(parts)


def test_string_width_empty_and_unknown():
    assert string_width("", 12, {ord("a"): 500}) == 0
    assert string_width("zz", 12, {ord("a"): 500}) == 0


def test_default_substitute_is_space():
    assert default_glyph_substitute("あ") == "\u0020"


def test_ttf_option_defaults():
    option = TtfOption()
    assert option.use_kerning is False
    assert option.on_glyph_not_found is None
    assert option.on_glyph_not_found_substitute("x") == "\u0020"


def test_ttf_option_none_substitute_replaced():
    option = TtfOption(use_kerning=True, on_glyph_not_found_substitute=None)
    assert option.on_glyph_not_found_substitute is default_glyph_substitute
    assert option.use_kerning is True


def test_ttf_option_custom_substitute_kept():
    option = TtfOption(on_glyph_not_found_substitute=lambda c: "\u20b0")
    assert option.on_glyph_not_found_substitute("あ") == "\u20b0"