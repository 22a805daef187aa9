from __future__ import annotations

import string
import typing
from dataclasses import asdict, dataclass, field
from typing import List, Optional

if typing.TYPE_CHECKING:
    from pptxappend.interchange.raster import Raster


@dataclass(frozen=True)
class Color:
    """An sRGB text color. Alpha is not part of the format."""

    red: int = 0
    green: int = 0
    blue: int = 0

    def __post_init__(self):
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel out of range: {channel}")

    @property
    def hex(self) -> str:
        """The color as ``RRGGBB``, as used by ``a:srgbClr``."""
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        if len(value) != 6 or not all(c in string.hexdigits for c in value):
            raise ValueError(f"expected 6 hex digits: {value!r}")
        number = int(value, 16)
        return cls(number >> 16 & 0xFF, number >> 8 & 0xFF, number & 0xFF)


BLACK = Color(0, 0, 0)


@dataclass
class LineElement:
    # A run of text. Without a color the run inherits the theme default.
    text: str = ""
    color: Color | None = None


# A Line is one paragraph of a text box: a sequence of colored runs.
Line = List[LineElement]


@dataclass
class Font:
    name: str = ""  # e.g. "Courier New", empty inherits
    size: float = 0.0  # points, 0 inherits

    @property
    def is_default(self) -> bool:
        return not self.name and self.size <= 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TextBox:
    x: int = 0
    y: int = 0
    lines: List[Line] = field(default_factory=list)
    title: bool = False  # marks the box as the slide's title placeholder
    font: Optional[Font] = None


@dataclass
class Item:
    level: int = 0
    text: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ItemBox:
    """A body placeholder with one paragraph per (indented) item."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    items: List[Item] = field(default_factory=list)


@dataclass
class Image:
    x: int = 0
    y: int = 0
    raster: Raster | None = None


@dataclass
class Slide:
    """
    Content of one slide to be appended to a presentation.

    ``master`` is the number of the slide layout the slide is based on
    (``ppt/slideLayouts/slideLayout<master>.xml``); 0 means layout 1.

    The remaining fields are assigned by ``Container.add`` and are not part
    of equality. A slide is owned by the add call that assigns them.
    """

    text_boxes: List[TextBox] = field(default_factory=list)
    item_boxes: List[ItemBox] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    master: int = 1

    number: int | None = field(default=None, compare=False, repr=False)
    part_name: str | None = field(default=None, compare=False, repr=False)
    rel_id: str | None = field(default=None, compare=False, repr=False)
    slide_id: int | None = field(default=None, compare=False, repr=False)

    @property
    def layout(self) -> int:
        return self.master if self.master > 0 else 1


def simple_lines(text: str) -> List[Line]:
    """Split text at newlines into uncolored lines."""
    return [[LineElement(text=part)] for part in text.split("\n")]


def simple_items(text: str) -> List[Item]:
    """
    Split text at newlines into items.

    The indentation level of an item is the number of leading dashes:

        >>> simple_items("top\\n-nested")
        [Item(level=0, text='top'), Item(level=1, text='nested')]
    """
    items = []
    for part in text.split("\n"):
        stripped = part.lstrip("-")
        items.append(Item(level=len(part) - len(stripped), text=stripped))
    return items
