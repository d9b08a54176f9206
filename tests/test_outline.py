import io

from pdfobjects.outline import (
    OutlineNode,
    OutlineObj,
    OutlinesObj,
    encode_utf16_hex,
    parse_outline_nodes,
)


class _Document:
    def __init__(self, preexisting=0):
        self.objs = [object() for _ in range(preexisting)]

    def add_obj(self, obj):
        self.objs.append(obj)
        return len(self.objs) - 1

    def number_of(self, obj):
        return next(i for i, o in enumerate(self.objs) if o is obj) + 1


def _written(obj, obj_id=1):
    buffer = io.BytesIO()
    obj.write(buffer, obj_id)
    return buffer.getvalue().decode("ascii")


def test_encode_ascii_title():
    assert encode_utf16_hex("A") == "0041"


def test_encode_roundtrip_with_non_bmp():
    text = "Hé \U0001F600"
    assert bytes.fromhex(encode_utf16_hex(text)).decode("utf-16-be") == text


def test_empty_outlines_write():
    doc = _Document()
    outlines = OutlinesObj(doc.add_obj)
    assert _written(outlines) == "<<\n\t/Type /Outlines\n\t/Count 0\n>>\n"
    assert len(outlines) == 0


def test_add_outline_links_items():
    doc = _Document(preexisting=3)
    outlines = OutlinesObj(doc.add_obj)
    outlines.set_index(2)
    outlines.add_outline(5, "first")
    outlines.add_outline(6, "second")
    first_obj, second_obj = doc.objs[-2], doc.objs[-1]

    assert outlines.count == 2
    assert outlines.first == doc.number_of(first_obj)
    assert outlines.last == doc.number_of(second_obj)
    assert first_obj.next == doc.number_of(second_obj)
    assert second_obj.prev == doc.number_of(first_obj)
    assert first_obj.prev == -1
    assert second_obj.next == -1
    assert first_obj.parent == 2 and second_obj.parent == 2
    assert first_obj.dest == 5 and second_obj.title == "second"


def test_outlines_write_references():
    doc = _Document(preexisting=1)
    outlines = OutlinesObj(doc.add_obj)
    outlines.add_outline(3, "a")
    outlines.add_outline(3, "b")
    text = _written(outlines)
    assert "\t/Count 2\n" in text
    assert f"\t/First {outlines.first} 0 R\n" in text
    assert f"\t/Last {outlines.last} 0 R\n" in text


def test_add_outline_with_position_sets_index():
    doc = _Document()
    outlines = OutlinesObj(doc.add_obj)
    obj = outlines.add_outline_with_position(4, "chapter", 12.5)
    assert obj.index == outlines.last == doc.number_of(obj)
    assert obj.height == 12.5


def test_outline_obj_write():
    obj = OutlineObj(title="A", dest=3, parent=2, prev=-1, next=7, height=12.5)
    text = _written(obj)
    assert text.startswith("<<\n  /Parent 2 0 R\n")
    assert "/Prev" not in text
    assert "  /Next 7 0 R\n" in text
    assert "/First" not in text and "/Last" not in text
    assert "  /Dest [ 3 0 R /XYZ 90 12.500000 0 ]\n" in text
    assert "  /Title <FEFF0041>\n" in text
    assert text.endswith(">>\n")


def test_outline_obj_write_children_refs():
    obj = OutlineObj(title="x", dest=1, parent=2, prev=4, next=-1, first=9, last=11)
    text = _written(obj)
    assert "  /Prev 4 0 R\n" in text
    assert "  /First 9 0 R\n" in text
    assert "  /Last 11 0 R\n" in text
    assert "/Next" not in text


def test_node_parse_links_children():
    parent = OutlineNode(OutlineObj(index=10))
    kids = [OutlineNode(OutlineObj(index=i)) for i in (20, 21, 22)]
    parent.children = kids
    parent.parse()

    assert parent.obj.first == 20
    assert parent.obj.last == 22
    assert [k.obj.prev for k in kids] == [-1, 20, 21]
    assert [k.obj.next for k in kids] == [21, 22, -1]
    assert all(k.obj.parent == 10 for k in kids)


def test_node_parse_recurses():
    grandchild = OutlineNode(OutlineObj(index=30))
    child = OutlineNode(OutlineObj(index=20), [grandchild])
    root = OutlineNode(OutlineObj(index=10), [child])
    root.parse()
    assert child.obj.first == child.obj.last == 30
    assert grandchild.obj.parent == 20
    assert grandchild.obj.prev == -1 and grandchild.obj.next == -1


def test_node_without_children_unchanged():
    node = OutlineNode(OutlineObj(index=5, first=0, last=0))
    node.parse()
    assert node.obj.first == 0 and node.obj.last == 0


def test_parse_outline_nodes_top_level():
    nodes = [OutlineNode(OutlineObj(index=i, prev=99)) for i in (1, 2, 3)]
    parse_outline_nodes(nodes)
    assert nodes[0].obj.prev == -1
    assert [n.obj.next for n in nodes] == [2, 3, -1]