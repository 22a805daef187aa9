import unittest

import pytest

from pptxappend.slides.data_types import (
    BLACK,
    Color,
    Font,
    Item,
    LineElement,
    Slide,
    TextBox,
    simple_items,
    simple_lines,
)

tc = unittest.TestCase()


def test_color_hex():
    tc.assertEqual("000000", BLACK.hex)
    tc.assertEqual("0AFF7F", Color(10, 255, 127).hex)
    tc.assertEqual(Color(10, 255, 127), Color.from_hex("0aff7f"))


@pytest.mark.parametrize("value", ["12345", "1234567", "+12345", "zz0000", ""])
def test_color_from_hex_rejects_malformed(value):
    with pytest.raises(ValueError):
        Color.from_hex(value)


def test_color_channel_range():
    with pytest.raises(ValueError):
        Color(256, 0, 0)
    with pytest.raises(ValueError):
        Color(0, -1, 0)


def test_simple_lines():
    tc.assertEqual(
        [[LineElement("a")], [LineElement("")], [LineElement("b c")]],
        simple_lines("a\n\nb c"),
    )
    tc.assertIsNone(simple_lines("x")[0][0].color)


def test_simple_items():
    tc.assertEqual(
        [Item(0, "top"), Item(1, "nested"), Item(3, "deep - dash"), Item(0, "")],
        simple_items("top\n-nested\n---deep - dash\n"),
    )


def test_font_defaults():
    tc.assertTrue(Font().is_default)
    tc.assertFalse(Font(size=12).is_default)
    tc.assertEqual({"name": "Arial", "size": 0.0}, Font(name="Arial").to_dict())


def test_slide_layout_and_assigned_fields():
    tc.assertEqual(1, Slide(master=0).layout)
    tc.assertEqual(2, Slide(master=2).layout)

    first = Slide(text_boxes=[TextBox(lines=simple_lines("x"))])
    second = Slide(text_boxes=[TextBox(lines=simple_lines("x"))])
    second.number = 4
    second.rel_id = "rId4"
    tc.assertEqual(first, second)
