"""
Slide Text Protocol
===================

A flat, line oriented text description of slides to be appended to a
presentation. It is not a decoder for the pptx format itself.

Grammar
-------
    Slide
     Master <int>
     TextBox
      Position [<x>, <y>]
      Line <RRGGBB> "<text>" <RRGGBB> "<text>" ...
      Title <true|false>
      Font <null|{"name": ..., "size": ...}>
     ItemBox
      Position [<x>, <y>, <width>, <height>]
      Item {"level": ..., "text": ...}
     Image
      Position [<x>, <y>]
      <Magic> <codec payload>

Every record starts with a keyword, the first whitespace separated token of
the line. Indentation is cosmetic. Structured values (positions, title, font,
items) and the text of line elements are JSON literals, so any text
round-trips, including quotes, backslashes and non-ASCII characters.
Positions are signed EMU coordinates; shapes may start left of or above the
slide. A line element without a colour is written as ``000000`` and reads
back with an explicit black colour, so an uncoloured run does not compare
equal to itself after a round trip.

A slide ends at the next ``Slide`` line, at any line whose keyword is not a
slide element, or at the end of input. End of input between slides ends
decoding; end of input inside a record is an error.
"""

from __future__ import annotations

import io
import json
import logging
import re
import typing
from typing import Any, List

from pptxappend.exceptions import RasterCodecError, SlideProtocolError
from pptxappend.interchange.line_reader import LineReader, keyword
from pptxappend.interchange.raster import RasterCodecRegistry, default_registry
from pptxappend.slides.data_types import (
    BLACK,
    Color,
    Font,
    Image,
    Item,
    ItemBox,
    Line,
    LineElement,
    Slide,
    TextBox,
)

logger = logging.getLogger(__name__)

_COLOR_TOKEN = re.compile(r"\s*([0-9A-Fa-f]{6})\s+")
_JSON = json.JSONDecoder()


# =============================================================================
# Encoding
# =============================================================================


def _value(name: str, value: Any) -> str:
    return f"{name} {json.dumps(value, ensure_ascii=True)}\n"


def _encode_line(line: Line) -> str:
    parts = ["Line"]
    for element in line:
        color = element.color or BLACK
        parts.append(f"{color.hex} {json.dumps(element.text, ensure_ascii=True)}")
    return " ".join(parts)


def _encode_text_box(box: TextBox, writer: typing.TextIO) -> None:
    writer.write(" TextBox\n")
    writer.write(f"  Position [{box.x}, {box.y}]\n")
    for line in box.lines:
        writer.write(f"  {_encode_line(line)}\n")
    writer.write("  " + _value("Title", box.title))
    writer.write("  " + _value("Font", box.font.to_dict() if box.font else None))


def _encode_item_box(box: ItemBox, writer: typing.TextIO) -> None:
    writer.write(" ItemBox\n")
    writer.write(f"  Position [{box.x}, {box.y}, {box.width}, {box.height}]\n")
    for item in box.items:
        writer.write("  " + _value("Item", item.to_dict()))


def _encode_image(image: Image, writer: typing.TextIO) -> None:
    writer.write(" Image\n")
    writer.write(f"  Position [{image.x}, {image.y}]\n")
    payload = io.StringIO()
    image.raster.encode(payload)
    for line in payload.getvalue().splitlines():
        writer.write(f"  {line}\n")


def encode_slides(slides: typing.Iterable[Slide], writer: typing.TextIO) -> None:
    """Write slides in the text protocol."""
    for slide in slides:
        writer.write("Slide\n")
        writer.write(f" Master {slide.master}\n")
        for box in slide.text_boxes:
            _encode_text_box(box, writer)
        for box in slide.item_boxes:
            _encode_item_box(box, writer)
        for image in slide.images:
            _encode_image(image, writer)


def dumps_slides(slides: typing.Iterable[Slide]) -> str:
    """Return the text protocol form of slides as a string."""
    buffer = io.StringIO()
    encode_slides(slides, buffer)
    return buffer.getvalue()


# =============================================================================
# Decoding
# =============================================================================


def _expect(reader: LineReader, name: str) -> None:
    line = reader.read_line(name)
    if line != name:
        raise SlideProtocolError(reader.line_number, name, line)


def _read_value(reader: LineReader, name: str) -> Any:
    """Read a ``<name> <json>`` line and return the parsed value."""
    line = reader.read_line(name)
    if keyword(line) != name:
        raise SlideProtocolError(reader.line_number, name, line)
    try:
        return json.loads(line[len(name) :])
    except ValueError as exc:
        raise SlideProtocolError(reader.line_number, name, line, cause=exc) from exc


def _read_position(reader: LineReader, count: int) -> List[int]:
    position = _read_value(reader, "Position")
    if (
        not isinstance(position, list)
        or len(position) != count
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in position)
    ):
        raise SlideProtocolError(
            reader.line_number,
            f"Position with {count} integers",
            json.dumps(position),
        )
    return position


def _decode_line(reader: LineReader) -> Line:
    text = reader.read_line("Line")
    rest = text[len("Line") :]
    elements: Line = []
    pos = 0
    while pos < len(rest):
        if not rest[pos:].strip():
            break
        match = _COLOR_TOKEN.match(rest, pos)
        if match is None:
            raise SlideProtocolError(
                reader.line_number, "Line element: RRGGBB \"text\"", text
            )
        try:
            value, pos = _JSON.raw_decode(rest, match.end())
        except ValueError as exc:
            raise SlideProtocolError(
                reader.line_number, "Line element text literal", text, cause=exc
            ) from exc
        if not isinstance(value, str):
            raise SlideProtocolError(
                reader.line_number, "Line element text literal", text
            )
        elements.append(LineElement(text=value, color=Color.from_hex(match.group(1))))
    return elements


def _decode_text_box(reader: LineReader) -> TextBox:
    _expect(reader, "TextBox")
    x, y = _read_position(reader, 2)
    box = TextBox(x=x, y=y)
    while keyword(reader.peek()) == "Line":
        box.lines.append(_decode_line(reader))
    if keyword(reader.peek()) == "Title":
        title = _read_value(reader, "Title")
        if not isinstance(title, bool):
            raise SlideProtocolError(
                reader.line_number, "Title true|false", json.dumps(title)
            )
        box.title = title
    if keyword(reader.peek()) == "Font":
        font = _read_value(reader, "Font")
        if font is not None:
            try:
                box.font = Font(**font)
            except TypeError as exc:
                raise SlideProtocolError(
                    reader.line_number, "Font object", json.dumps(font), cause=exc
                ) from exc
        if box.font is not None and not (
            isinstance(box.font.name, str)
            and isinstance(box.font.size, (int, float))
            and not isinstance(box.font.size, bool)
        ):
            raise SlideProtocolError(
                reader.line_number, "Font with string name and numeric size", json.dumps(font)
            )
    return box


def _decode_item_box(reader: LineReader) -> ItemBox:
    _expect(reader, "ItemBox")
    x, y, width, height = _read_position(reader, 4)
    box = ItemBox(x=x, y=y, width=width, height=height)
    while keyword(reader.peek()) == "Item":
        item = _read_value(reader, "Item")
        try:
            parsed = Item(**item)
        except TypeError as exc:
            raise SlideProtocolError(
                reader.line_number, "Item object", json.dumps(item), cause=exc
            ) from exc
        if (
            not isinstance(parsed.level, int)
            or isinstance(parsed.level, bool)
            or not isinstance(parsed.text, str)
        ):
            raise SlideProtocolError(
                reader.line_number, "Item with integer level and text", json.dumps(item)
            )
        box.items.append(parsed)
    return box


def _decode_image(reader: LineReader, registry: RasterCodecRegistry) -> Image:
    _expect(reader, "Image")
    x, y = _read_position(reader, 2)
    line = reader.peek()
    if line is None:
        raise SlideProtocolError(reader.line_number, "image payload")
    codec = registry.find(line, reader.line_number)
    line_number = reader.line_number
    try:
        raster = codec.decode(reader)
    except RasterCodecError as exc:
        if exc.line_number is not None:
            raise
        raise RasterCodecError(str(exc), line_number=line_number, cause=exc) from exc
    except (ValueError, OSError) as exc:
        raise RasterCodecError(str(exc), line_number=line_number, cause=exc) from exc
    return Image(x=x, y=y, raster=raster)


def _decode_master(reader: LineReader) -> int:
    line = reader.read_line("Master")
    try:
        _, value = line.split(None, 1)
        return int(value)
    except ValueError as exc:
        raise SlideProtocolError(
            reader.line_number, "Master <int>", line, cause=exc
        ) from exc


def _decode_slide(reader: LineReader, registry: RasterCodecRegistry) -> Slide:
    _expect(reader, "Slide")
    slide = Slide()
    while True:
        name = keyword(reader.peek())
        if name == "TextBox":
            slide.text_boxes.append(_decode_text_box(reader))
        elif name == "ItemBox":
            slide.item_boxes.append(_decode_item_box(reader))
        elif name == "Image":
            slide.images.append(_decode_image(reader, registry))
        elif name == "Master":
            slide.master = _decode_master(reader)
        else:
            return slide


def decode_slides(
    source: str | typing.TextIO | typing.Iterable[str],
    registry: RasterCodecRegistry | None = None,
) -> List[Slide]:
    """
    Decode the text protocol into slides.

    ``registry`` selects the raster codecs for Image records; when omitted
    the built-in codecs are used.
    """
    if registry is None:
        registry = default_registry()
    reader = LineReader(source)
    slides = []
    while not reader.at_end():
        slides.append(_decode_slide(reader, registry))
    logger.debug(f"Decoded {len(slides)} slides from {reader.line_number} lines")
    return slides


def loads_slides(
    text: str, registry: RasterCodecRegistry | None = None
) -> List[Slide]:
    return decode_slides(text, registry)
