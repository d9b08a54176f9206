"""Document outline (bookmarks): the outline dictionary and its items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Iterable, Optional

__all__ = [
    "OutlinesObj",
    "OutlineObj",
    "OutlineNode",
    "encode_utf16_hex",
    "parse_outline_nodes",
]


def encode_utf16_hex(text: str) -> str:
    """Text as upper-case hex of its UTF-16BE encoding, for a <FEFF...> string."""
    return text.encode("utf-16-be").hex().upper()


@dataclass(eq=False)
class OutlineObj:
    """One outline item; references are object numbers, -1 or 0 meaning none."""

    title: str = ""
    dest: int = 0
    parent: int = 0
    prev: int = -1
    next: int = -1
    first: int = 0
    last: int = 0
    height: float = 0.0
    index: int = 0

    type_name = "Outline"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the outline item dictionary."""
        lines = ["<<\n", f"  /Parent {self.parent} 0 R\n"]
        if self.prev >= 0:
            lines.append(f"  /Prev {self.prev} 0 R\n")
        if self.next >= 0:
            lines.append(f"  /Next {self.next} 0 R\n")
        if self.first > 0:
            lines.append(f"  /First {self.first} 0 R\n")
        if self.last > 0:
            lines.append(f"  /Last {self.last} 0 R\n")
        lines.append(f"  /Dest [ {self.dest} 0 R /XYZ 90 {self.height:f} 0 ]\n")
        lines.append(f"  /Title <FEFF{encode_utf16_hex(self.title)}>\n")
        lines.append(">>\n")
        stream.write("".join(lines).encode("ascii"))


class OutlinesObj:
    """The outline dictionary; new items are registered through ``add_obj``.

    ``add_obj`` stores an object in the document and returns its zero-based
    position, so the item's object number is that position plus one.
    """

    type_name = "Outlines"

    def __init__(self, add_obj: Callable[[object], int]) -> None:
        self._add_obj = add_obj
        self.index = 0
        self.first = -1
        self.last = -1
        self.count = 0
        self._last_obj: Optional[OutlineObj] = None

    def set_index(self, index: int) -> None:
        """Set the object number of this outline dictionary."""
        self.index = index

    def _append(self, obj: OutlineObj) -> None:
        self.last = self._add_obj(obj) + 1
        if self.first <= 0:
            self.first = self.last
        if self._last_obj is not None:
            self._last_obj.next = self.last
        self._last_obj = obj
        self.count += 1

    def add_outline(self, dest: int, title: str) -> None:
        """Append a top-level item pointing at page object ``dest``."""
        self._append(
            OutlineObj(title=title, dest=dest, parent=self.index, prev=self.last, next=-1)
        )

    def add_outline_with_position(self, dest: int, title: str, y: float) -> OutlineObj:
        """Append an item pointing at height ``y`` of page object ``dest``."""
        obj = OutlineObj(
            title=title, dest=dest, parent=self.index, prev=self.last, next=-1, height=y
        )
        self._append(obj)
        obj.index = self.last
        return obj

    def __len__(self) -> int:
        return self.count

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the outline dictionary."""
        lines = ["<<\n", f"\t/Type /{self.type_name}\n", f"\t/Count {self.count}\n"]
        if self.first >= 0:
            lines.append(f"\t/First {self.first} 0 R\n")
        if self.last >= 0:
            lines.append(f"\t/Last {self.last} 0 R\n")
        lines.append(">>\n")
        stream.write("".join(lines).encode("ascii"))


@dataclass(eq=False)
class OutlineNode:
    """An outline item with its child items, used to build a hierarchy."""

    obj: OutlineObj
    children: list[OutlineNode] = field(default_factory=list)

    def parse(self) -> None:
        """Link the children to each other and to this node, recursively."""
        children = self.children
        for position, child in enumerate(children):
            if position == 0:
                self.obj.first = child.obj.index
                child.obj.prev = -1
            else:
                child.obj.prev = children[position - 1].obj.index
            if position == len(children) - 1:
                self.obj.last = child.obj.index
                child.obj.next = -1
            else:
                child.obj.next = children[position + 1].obj.index
            child.obj.parent = self.obj.index
            child.parse()


def parse_outline_nodes(nodes: Iterable[OutlineNode]) -> None:
    """Link top-level nodes by their next references and parse each subtree."""
    items = list(nodes)
    for position, node in enumerate(items):
        if position == 0:
            node.obj.prev = -1
        if position == len(items) - 1:
            node.obj.next = -1
        else:
            node.obj.next = items[position + 1].obj.index
        node.parse()