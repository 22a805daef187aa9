import unittest

import pytest

from pptxappend.container.identifiers import (
    MAX_SLIDE_ID,
    allocate_relationship_id,
    allocate_slide_id,
    count_slide_parts,
)
from pptxappend.exceptions import IdentifierExhaustedError

tc = unittest.TestCase()


def test_relationship_id_starts_at_slide_number():
    tc.assertEqual("rId3", allocate_relationship_id(["rId1", "rId2"], 3))
    tc.assertEqual("rId5", allocate_relationship_id(["rId3", "rId4"], 3))
    tc.assertEqual("rId1", allocate_relationship_id([], 1))


def test_relationship_id_ignores_unrelated_ids():
    tc.assertEqual("rId2", allocate_relationship_id(["rId1", "rId20", "custom"], 2))


def test_relationship_id_window_exhausted():
    used = [f"rId{n}" for n in range(1, 11)]
    with pytest.raises(IdentifierExhaustedError) as info:
        allocate_relationship_id(used, 1, window=10, part="ppt/_rels/presentation.xml.rels")
    tc.assertEqual("ppt/_rels/presentation.xml.rels", info.value.part)


def test_slide_id_above_existing():
    tc.assertEqual(256, allocate_slide_id([]))
    tc.assertEqual(258, allocate_slide_id([256, 257]))
    tc.assertEqual(1001, allocate_slide_id([300, 1000, 257]))
    tc.assertEqual(256, allocate_slide_id([3, 4]))


def test_slide_id_limit():
    tc.assertEqual(MAX_SLIDE_ID - 1, allocate_slide_id([MAX_SLIDE_ID - 2]))
    with pytest.raises(IdentifierExhaustedError):
        allocate_slide_id([MAX_SLIDE_ID - 1])


def test_count_slide_parts():
    names = [
        "ppt/slides/slide1.xml",
        "ppt/slides/slide2.xml",
        "ppt/slides/_rels/slide1.xml.rels",
        "ppt/slideLayouts/slideLayout1.xml",
        "ppt/notesSlides/notesSlide1.xml",
    ]
    tc.assertEqual(2, count_slide_parts(names))
    tc.assertEqual(0, count_slide_parts([]))
