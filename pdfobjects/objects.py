"""Page, page tree, resource and other simple PDF objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Iterable, Mapping, Optional

from .geometry import PAGE_SIZE_A4, PageOption, Rect
from .protection import PDFProtection

__all__ = [
    "LinkOption",
    "AnchorOption",
    "PageObj",
    "PagesObj",
    "RelateFont",
    "RelateXObject",
    "ExtGS",
    "ProcSetObj",
    "ImportedObj",
    "PdfInfo",
    "contains_family",
    "contains_family_and_style",
]


@dataclass
class AnchorOption:
    """Target of an internal link: a zero-based page and a height on it."""

    page: int = 0
    y: float = 0.0


@dataclass
class LinkOption:
    """A link area on a page, pointing at a URL or at a named anchor."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    url: str = ""
    anchor: str = ""


def _escape_pdf_string(data: bytes) -> bytes:
    return (
        data.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
    )


def _link_rect(link: LinkOption) -> str:
    return (
        f"{link.x:.2f} {link.y:.2f} {link.x + link.w:.2f} {link.y - link.h:.2f}"
    )


@dataclass(eq=False)
class PageObj:
    """A page object."""

    contents: str = ""
    resources_relate: str = ""
    page_option: PageOption = field(default_factory=PageOption)
    link_obj_ids: list[int] = field(default_factory=list)
    protection: Optional[PDFProtection] = None

    type_name = "Page"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the page dictionary."""
        lines = [
            "<<\n",
            f"  /Type /{self.type_name}\n",
            "  /Parent 2 0 R\n",
            f"  /Resources {self.resources_relate}\n",
        ]
        if self.link_obj_ids:
            refs = "".join(f"{ref} 0 R " for ref in self.link_obj_ids)
            lines.append(f"  /Annots [{refs}]\n")
        lines.append(f"  /Contents {self.contents}\n")
        size = self.page_option.page_size
        if size is not None:
            lines.append(f" /MediaBox [ 0 0 {size.w:0.2f} {size.h:0.2f} ]\n")
        if self.page_option.has_trim_box():
            box = self.page_option.trim_box
            lines.append(
                f" /TrimBox [ {box.left:0.2f} {box.top:0.2f} "
                f"{box.right:0.2f} {box.bottom:0.2f} ]\n"
            )
        lines.append(">>\n")
        stream.write("".join(lines).encode("utf-8"))

    def write_external_link(self, stream: BinaryIO, link: LinkOption, obj_id: int) -> None:
        """Write a link annotation opening ``link.url``; the URL is encrypted if protected."""
        url = link.url.encode("utf-8")
        if self.protection is not None:
            url = self.protection.encrypt(obj_id, url)
        stream.write(
            f"<</Type /Annot /Subtype /Link /Rect [{_link_rect(link)}] "
            "/Border [0 0 0] /A <</S /URI /URI (".encode("ascii")
        )
        stream.write(_escape_pdf_string(url))
        stream.write(b")>>>>")

    def write_internal_link(
        self,
        stream: BinaryIO,
        link: LinkOption,
        anchors: Mapping[str, AnchorOption],
    ) -> None:
        """Write a link annotation to a named anchor; nothing if the anchor is unknown."""
        anchor = anchors.get(link.anchor)
        if anchor is None:
            return
        stream.write(
            (
                f"<</Type /Annot /Subtype /Link /Rect [{_link_rect(link)}] "
                f"/Border [0 0 0] /Dest [{anchor.page + 1} 0 R /XYZ 0 {anchor.y:.2f} null]>>"
            ).encode("ascii")
        )


@dataclass(eq=False)
class PagesObj:
    """The page tree root."""

    page_count: int = 0
    kids: str = ""
    page_size: Rect = PAGE_SIZE_A4

    type_name = "Pages"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the page tree dictionary."""
        text = (
            "<<\n"
            f"  /Type /{self.type_name}\n"
            f"  /MediaBox [ 0 0 {self.page_size.w:0.2f} {self.page_size.h:0.2f} ]\n"
            f"  /Count {self.page_count}\n"
            f"  /Kids [ {self.kids} ]\n"
            ">>\n"
        )
        stream.write(text.encode("utf-8"))


@dataclass
class RelateFont:
    """A font resource: its family, /F number and object position."""

    family: str = ""
    count_of_font: int = 0
    index_of_obj: int = 0
    style: int = 0


@dataclass
class RelateXObject:
    """An image XObject resource by object position."""

    index_of_obj: int = 0


@dataclass
class ExtGS:
    """A graphics state resource by object position."""

    index: int = 0


def contains_family(fonts: Iterable[RelateFont], family: str) -> bool:
    """True if any font has the given family."""
    return any(font.family == family for font in fonts)


def contains_family_and_style(fonts: Iterable[RelateFont], family: str, style: int) -> bool:
    """True if any font has the given family and style."""
    return any(font.family == family and font.style == style for font in fonts)


@dataclass(eq=False)
class ProcSetObj:
    """The resource dictionary shared by the pages."""

    relates: list[RelateFont] = field(default_factory=list)
    relate_xobjs: list[RelateXObject] = field(default_factory=list)
    ext_gstates: list[ExtGS] = field(default_factory=list)
    imported_template_ids: dict[str, int] = field(default_factory=dict)

    type_name = "ProcSet"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the resource dictionary."""
        lines = ["<<\n", "\t/ProcSet [/PDF /Text /ImageB /ImageC /ImageI]\n", "\t/Font <<\n"]
        lines.extend(
            f"\t\t/F{font.count_of_font + 1} {font.index_of_obj + 1} 0 R\n"
            for font in self.relates
        )
        lines.append("\t>>\n")
        lines.append("\t/XObject <<\n")
        lines.extend(
            f"\t\t/I{xobj.index_of_obj + 1} {xobj.index_of_obj + 1} 0 R\n"
            for xobj in self.relate_xobjs
        )
        lines.extend(
            f"\t\t{name} {ref} 0 R\n" for name, ref in self.imported_template_ids.items()
        )
        lines.append("\t>>\n")
        lines.append("\t/ExtGState <<\n")
        lines.extend(
            f"\t\t/GS{gs.index + 1} {gs.index + 1} 0 R\n" for gs in self.ext_gstates
        )
        lines.append("\t>>\n")
        lines.append(">>\n")
        stream.write("".join(lines).encode("utf-8"))


@dataclass(eq=False)
class ImportedObj:
    """An object taken verbatim from another document."""

    data: str = ""

    type_name = "Imported"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the stored data unchanged."""
        stream.write(self.data.encode("latin-1"))


@dataclass
class PdfInfo:
    """The document information dictionary."""

    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = ""
    producer: str = ""
    creation_date: Optional[datetime] = None