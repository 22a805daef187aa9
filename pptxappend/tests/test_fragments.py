import unittest

import pytest
from lxml import etree

from pptxappend.container.fragments import (
    R_EMBED,
    item_box_fragment,
    minimal_slide,
    picture_fragment,
    pixels_to_emu,
    text_box_fragment,
)
from pptxappend.container.namespaces import A_NS, P_NS
from pptxappend.slides.data_types import (
    Color,
    Font,
    Image,
    Item,
    ItemBox,
    LineElement,
    TextBox,
    simple_lines,
)

tc = unittest.TestCase()

NS = {"a": A_NS, "p": P_NS}


def test_minimal_slide_has_empty_shape_tree():
    slide = minimal_slide()
    tree = slide.find("p:cSld/p:spTree", NS)
    tc.assertIsNotNone(tree)
    tc.assertEqual(["nvGrpSpPr", "grpSpPr"], [etree.QName(e).localname for e in tree])
    tc.assertEqual("1", tree.find("p:nvGrpSpPr/p:cNvPr", NS).get("id"))


def test_text_is_escaped():
    box = TextBox(x=1, y=2, lines=simple_lines('a < b & "c"'))
    xml = etree.tostring(text_box_fragment(box, 5, 0, 360000)).decode()

    tc.assertIn("a &lt; b &amp; \"c\"", xml)
    fragment = etree.fromstring(xml)
    tc.assertEqual('a < b & "c"', fragment.findtext(".//a:t", namespaces=NS))


def test_text_box_layout():
    box = TextBox(
        x=1080000,
        y=720000,
        lines=[[LineElement("one")], [LineElement("two"), LineElement("three")]],
        title=True,
    )
    shape = text_box_fragment(box, 4, 2, 360000)

    c_nv_pr = shape.find("p:nvSpPr/p:cNvPr", NS)
    tc.assertEqual("4", c_nv_pr.get("id"))
    tc.assertEqual("TextBox 3", c_nv_pr.get("name"))
    tc.assertEqual("1", shape.find("p:nvSpPr/p:cNvSpPr", NS).get("txBox"))
    tc.assertEqual("title", shape.find("p:nvSpPr/p:nvPr/p:ph", NS).get("type"))

    off = shape.find("p:spPr/a:xfrm/a:off", NS)
    tc.assertEqual(("1080000", "720000"), (off.get("x"), off.get("y")))

    paragraphs = shape.findall("p:txBody/a:p", NS)
    tc.assertEqual(2, len(paragraphs))
    tc.assertEqual(["two", "three"], [t.text for t in paragraphs[1].iter(f"{{{A_NS}}}t")])


def test_run_properties_only_when_needed():
    plain = text_box_fragment(TextBox(lines=simple_lines("x")), 2, 0, 1)
    tc.assertIsNone(plain.find(".//a:rPr", NS))

    styled = TextBox(
        lines=[[LineElement("x", color=Color(0x12, 0xAB, 0xFF))]],
        font=Font(name="Courier New", size=12.5),
    )
    properties = text_box_fragment(styled, 2, 0, 1).find(".//a:rPr", NS)
    tc.assertEqual("1250", properties.get("sz"))
    tc.assertEqual("12ABFF", properties.find("a:solidFill/a:srgbClr", NS).get("val"))
    tc.assertEqual("Courier New", properties.find("a:latin", NS).get("typeface"))
    tc.assertEqual("Courier New", properties.find("a:cs", NS).get("typeface"))


def test_empty_text_box_gets_a_paragraph():
    shape = text_box_fragment(TextBox(), 2, 0, 1)
    tc.assertEqual(1, len(shape.findall("p:txBody/a:p", NS)))
    tc.assertIsNone(shape.find("p:nvSpPr/p:nvPr/p:ph", NS))


def test_item_box_levels():
    box = ItemBox(x=0, y=0, width=100, height=50, items=[Item(0, "a"), Item(2, "b")])
    shape = item_box_fragment(box, 3, 0)

    tc.assertEqual("1", shape.find("p:nvSpPr/p:nvPr/p:ph", NS).get("idx"))
    levels = [p.get("lvl") for p in shape.iterfind("p:txBody/a:p/a:pPr", NS)]
    tc.assertEqual(["0", "2"], levels)
    ext = shape.find("p:spPr/a:xfrm/a:ext", NS)
    tc.assertEqual(("100", "50"), (ext.get("cx"), ext.get("cy")))


def test_item_level_out_of_range():
    with pytest.raises(ValueError):
        item_box_fragment(ItemBox(items=[Item(9, "deep")]), 3, 0)


def test_picture_fragment():
    picture = picture_fragment(Image(x=10, y=20), (96, 48), "rId2", 7, 0, 96)

    tc.assertEqual("Picture 1", picture.find("p:nvPicPr/p:cNvPr", NS).get("name"))
    tc.assertEqual("rId2", picture.find("p:blipFill/a:blip", NS).get(R_EMBED))
    ext = picture.find("p:spPr/a:xfrm/a:ext", NS)
    tc.assertEqual(("914400", "457200"), (ext.get("cx"), ext.get("cy")))


def test_pixels_to_emu():
    tc.assertEqual(914400, pixels_to_emu(96, 96))
    tc.assertEqual(914400, pixels_to_emu(300, 300))
    tc.assertEqual(0, pixels_to_emu(0, 96))
