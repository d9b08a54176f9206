import dataclasses

import pytest

from pdfobjects import geometry
from pdfobjects.geometry import Box, PageOption, Point, Rect


def test_page_size_a4():
    assert geometry.PAGE_SIZE_A4 == Rect(595, 842)


def test_page_size_letter():
    assert geometry.PAGE_SIZE_LETTER == Rect(612, 792)


@pytest.mark.parametrize(
    "portrait, landscape",
    [
        (geometry.PAGE_SIZE_A4, geometry.PAGE_SIZE_A4_LANDSCAPE),
        (geometry.PAGE_SIZE_A3, geometry.PAGE_SIZE_A3_LANDSCAPE),
        (geometry.PAGE_SIZE_TABLOID, geometry.PAGE_SIZE_LEDGER),
    ],
)
def test_landscape_swaps_sides(portrait, landscape):
    assert (portrait.w, portrait.h) == (landscape.h, landscape.w)


def test_small_variants_match():
    assert geometry.PAGE_SIZE_A4_SMALL == Rect(595, 842)
    assert geometry.PAGE_SIZE_LETTER_SMALL == Rect(612, 792)


def test_rect_is_immutable():
    rect = Rect(10, 20)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rect.w = 1
    assert rect.w == 10


def test_point_holds_coordinates():
    p = Point(3.5, 7.25)
    assert (p.x, p.y) == (3.5, 7.25)


def test_page_option_empty_by_default():
    option = PageOption()
    assert option.is_empty() is True
    assert option.has_trim_box() is False


def test_page_option_with_size_not_empty():
    option = PageOption(page_size=geometry.PAGE_SIZE_A5)
    assert option.is_empty() is False


def test_zero_trim_box_counts_as_unset():
    option = PageOption(trim_box=Box())
    assert option.has_trim_box() is False


@pytest.mark.parametrize(
    "box",
    [Box(left=1), Box(top=2), Box(right=3), Box(bottom=4), Box(1, 2, 3, 4)],
)
def test_nonzero_trim_box_is_set(box):
    assert PageOption(trim_box=box).has_trim_box() is True