"""
pptxappend: Append slides to existing PowerPoint presentations.

Slides are described with small dataclasses (text boxes, bulleted item boxes
and raster images) or read from a line oriented text format, then added to a
``.pptx`` package without regenerating the parts that are already there.
"""

from pptxappend.container.editor import Container, new_container, open_container
from pptxappend.container.package_limits import PackageLimits
from pptxappend.exceptions import (
    ArchiveLimitError,
    CommitError,
    ContainerClosedError,
    ContainerError,
    ContainerOpenError,
    IdentifierExhaustedError,
    NoRasterCodecsError,
    PartConflictError,
    PartStructureError,
    PptxAppendError,
    RasterCodecError,
    RasterNotSerializableError,
    SlideAddError,
    SlideProtocolError,
    UnknownRasterCodecError,
)
from pptxappend.interchange.protocol import (
    decode_slides,
    dumps_slides,
    encode_slides,
    loads_slides,
)
from pptxappend.interchange.raster import (
    EmbeddedRaster,
    FileRaster,
    Raster,
    RasterCodecRegistry,
    default_registry,
)
from pptxappend.settings import DEFAULT_SETTINGS, EditorSettings
from pptxappend.slides.data_types import (
    BLACK,
    Color,
    Font,
    Image,
    Item,
    ItemBox,
    LineElement,
    Slide,
    TextBox,
    simple_items,
    simple_lines,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Container
    "Container",
    "open_container",
    "new_container",
    "EditorSettings",
    "DEFAULT_SETTINGS",
    "PackageLimits",
    # Slide model
    "Slide",
    "TextBox",
    "ItemBox",
    "Item",
    "Image",
    "LineElement",
    "Font",
    "Color",
    "BLACK",
    "simple_lines",
    "simple_items",
    # Text protocol
    "encode_slides",
    "dumps_slides",
    "decode_slides",
    "loads_slides",
    "Raster",
    "EmbeddedRaster",
    "FileRaster",
    "RasterCodecRegistry",
    "default_registry",
    # Errors
    "PptxAppendError",
    "ContainerError",
    "ContainerOpenError",
    "ArchiveLimitError",
    "ContainerClosedError",
    "CommitError",
    "PartStructureError",
    "PartConflictError",
    "IdentifierExhaustedError",
    "SlideAddError",
    "SlideProtocolError",
    "RasterCodecError",
    "NoRasterCodecsError",
    "UnknownRasterCodecError",
    "RasterNotSerializableError",
]
