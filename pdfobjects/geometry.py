"""Points, rectangles, boxes, page options and standard page sizes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = [
    "Point",
    "Rect",
    "Box",
    "PageOption",
    "PAGE_SIZE_LETTER",
    "PAGE_SIZE_LETTER_SMALL",
    "PAGE_SIZE_TABLOID",
    "PAGE_SIZE_LEDGER",
    "PAGE_SIZE_LEGAL",
    "PAGE_SIZE_STATEMENT",
    "PAGE_SIZE_EXECUTIVE",
    "PAGE_SIZE_A0",
    "PAGE_SIZE_A1",
    "PAGE_SIZE_A2",
    "PAGE_SIZE_A3",
    "PAGE_SIZE_A3_LANDSCAPE",
    "PAGE_SIZE_A4",
    "PAGE_SIZE_A4_LANDSCAPE",
    "PAGE_SIZE_A4_SMALL",
    "PAGE_SIZE_A5",
    "PAGE_SIZE_B4",
    "PAGE_SIZE_B5",
    "PAGE_SIZE_FOLIO",
    "PAGE_SIZE_QUARTO",
    "PAGE_SIZE_10X14",
]


@dataclass
class Point:
    """A point in two dimensions."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Rect:
    """A width and a height."""

    w: float = 0.0
    h: float = 0.0


@dataclass
class Box:
    """Four edges of a box, such as a page's trim box."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0


@dataclass
class PageOption:
    """Per-page settings: an optional page size and trim box."""

    trim_box: Optional[Box] = None
    page_size: Optional[Rect] = None

    def is_empty(self) -> bool:
        """True when no page size is set."""
        return self.page_size is None

    def has_trim_box(self) -> bool:
        """True when a trim box is set and not all of its edges are zero."""
        box = self.trim_box
        if box is None:
            return False
        return not (box.top == 0 and box.left == 0 and box.bottom == 0 and box.right == 0)


# Standard page sizes, in points.
PAGE_SIZE_LETTER = Rect(612, 792)
PAGE_SIZE_LETTER_SMALL = Rect(612, 792)
PAGE_SIZE_TABLOID = Rect(792, 1224)
PAGE_SIZE_LEDGER = Rect(1224, 792)
PAGE_SIZE_LEGAL = Rect(612, 1008)
PAGE_SIZE_STATEMENT = Rect(396, 612)
PAGE_SIZE_EXECUTIVE = Rect(540, 720)
PAGE_SIZE_A0 = Rect(2384, 3371)
PAGE_SIZE_A1 = Rect(1685, 2384)
PAGE_SIZE_A2 = Rect(1190, 1684)
PAGE_SIZE_A3 = Rect(842, 1190)
PAGE_SIZE_A3_LANDSCAPE = Rect(1190, 842)
PAGE_SIZE_A4 = Rect(595, 842)
PAGE_SIZE_A4_LANDSCAPE = Rect(842, 595)
PAGE_SIZE_A4_SMALL = Rect(595, 842)
PAGE_SIZE_A5 = Rect(420, 595)
PAGE_SIZE_B4 = Rect(729, 1032)
PAGE_SIZE_B5 = Rect(516, 729)
PAGE_SIZE_FOLIO = Rect(612, 936)
PAGE_SIZE_QUARTO = Rect(610, 780)
PAGE_SIZE_10X14 = Rect(720, 1008)