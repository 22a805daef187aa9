import logging
import unittest
import zipfile
from pathlib import Path

import pytest
from PIL import Image as PILImage

from pptxappend.container.editor import new_container, open_container
from pptxappend.container.minimal_template import PARTS, template_archive
from pptxappend.container.package_limits import DEFAULT_PACKAGE_LIMITS, PackageLimits
from pptxappend.exceptions import ArchiveLimitError, SlideAddError
from pptxappend.interchange.raster import EmbeddedRaster
from pptxappend.settings import EditorSettings
from pptxappend.slides.data_types import Image, Slide, TextBox, simple_lines

logger = logging.getLogger(__name__)

tc = unittest.TestCase()


def _write_deck(path: Path, overrides=None) -> Path:
    with zipfile.ZipFile(template_archive(overrides)) as source:
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as target:
            for info in source.infolist():
                target.writestr(info.filename, source.read(info))
    return path


def _settings(**limits) -> EditorSettings:
    return EditorSettings(package_limits=PackageLimits(**limits))


def _text_slide(text: str) -> Slide:
    return Slide(text_boxes=[TextBox(lines=simple_lines(text), title=True)])


def test_default_limits_accept_template(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    with open_container(path) as deck:
        deck.add(_text_slide("ok"))
    tc.assertIs(DEFAULT_PACKAGE_LIMITS, EditorSettings().package_limits)


def test_too_many_entries_on_open(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    with pytest.raises(ArchiveLimitError) as info:
        open_container(path, _settings(max_entries=3))
    tc.assertIn("too many entries", str(info.value))
    tc.assertIn(str(path), str(info.value))


def test_new_container_checks_template(tmp_path):
    with pytest.raises(ArchiveLimitError) as info:
        new_container(tmp_path / "new.pptx", _settings(max_entries=5))
    tc.assertIn("minimal template", str(info.value))


def test_part_names_differing_in_case(tmp_path):
    path = _write_deck(
        tmp_path / "deck.pptx",
        {
            "ppt/slides/slide1.xml": "<p:sld/>",
            "ppt/Slides/Slide1.xml": "<p:sld/>",
        },
    )
    with pytest.raises(ArchiveLimitError) as info:
        open_container(path)
    tc.assertIn("ppt/Slides/Slide1.xml", str(info.value))
    tc.assertIn("collides with ppt/slides/slide1.xml", str(info.value))


def test_xml_parts_have_their_own_bound(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    with pytest.raises(ArchiveLimitError) as info:
        open_container(path, _settings(max_xml_part_bytes=100))
    tc.assertIn("[Content_Types].xml: part too large", str(info.value))

    # media bound does not apply to xml parts
    with open_container(path, _settings(max_part_bytes=100)) as deck:
        deck.abort()


def test_highly_compressed_part_is_rejected(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx", {"ppt/media/blank.bin": b"\0" * 1_000_000})
    with pytest.raises(ArchiveLimitError) as info:
        open_container(path)
    tc.assertIn("ppt/media/blank.bin: compression ratio too high", str(info.value))


def test_media_over_part_bound(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    image = PILImage.new("RGB", (32, 32), (10, 200, 10))
    slide = Slide(images=[Image(raster=EmbeddedRaster(image))])

    with open_container(path, _settings(max_part_bytes=20)) as deck:
        with pytest.raises(SlideAddError) as info:
            deck.add(slide)
        deck.abort()

    tc.assertEqual("media", info.value.step)
    tc.assertIsInstance(info.value.__cause__, ArchiveLimitError)
    tc.assertIn("ppt/media/slide1image1.png", str(info.value))


def test_new_slides_count_against_entries(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    # the template has 11 entries and a text slide adds 2
    limit = len(PARTS) + 2

    with open_container(path, _settings(max_entries=limit)) as deck:
        deck.add(_text_slide("fits"))
        with pytest.raises(SlideAddError) as info:
            deck.add(_text_slide("one too many"))
        deck.abort()

    tc.assertEqual("slide-part", info.value.step)
    tc.assertEqual(2, info.value.slide_number)
    tc.assertIsInstance(info.value.__cause__, ArchiveLimitError)


def test_commit_checks_serialized_parts(tmp_path):
    path = _write_deck(tmp_path / "deck.pptx")
    original = path.read_bytes()
    largest = max(len(content.encode("utf-8")) for content in PARTS.values())
    settings = _settings(max_xml_part_bytes=largest + 1000)

    deck = open_container(path, settings)
    deck.add(_text_slide("x" * (largest + 5000)))
    with pytest.raises(ArchiveLimitError) as info:
        deck.close()

    tc.assertIn("ppt/slides/slide1.xml: part too large", str(info.value))
    tc.assertTrue(deck.closed)
    tc.assertEqual(original, path.read_bytes())
