"""
Raster Images and Their Text Codecs
===================================

An Image on a slide carries a ``Raster``: anything that can produce a decoded
Pillow image. The container editor only ever calls ``raster()`` and writes
the result to the package as PNG.

Rasters may additionally take part in the slide text protocol. A serializable
raster type is its own codec: it has a unique magic prefix, writes a single
self-contained payload line beginning with that prefix and reads it back from
a ``LineReader``. Raster types without a text form inherit the base class
implementations, which raise ``RasterNotSerializableError``.

Built-in codecs
---------------
    PngBase64 <base64 of a PNG file>    -> EmbeddedRaster
    File <path>                         -> FileRaster

Codecs are looked up through an explicit ``RasterCodecRegistry`` handed to the
decoder. ``default_registry()`` returns a registry holding the built-ins;
applications register their own raster types on top of it.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import typing
from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image as PILImage

from pptxappend.exceptions import (
    NoRasterCodecsError,
    RasterCodecError,
    RasterNotSerializableError,
    UnknownRasterCodecError,
)
from pptxappend.interchange.line_reader import LineReader, keyword

logger = logging.getLogger(__name__)

# Pillow modes PNG stores and reads back unchanged
_PNG_MODES = frozenset({"1", "L", "LA", "I;16", "P", "RGB", "RGBA"})
# Single channel modes kept as 16-bit grayscale
_GRAY_16_MODES = frozenset({"I", "I;16B", "I;16L", "F"})


def png_ready(image: PILImage.Image) -> PILImage.Image:
    """
    Return ``image`` in a mode that survives a PNG round trip.

    Wide and floating point grayscale become ``I;16``, every other mode PNG
    cannot store becomes RGBA.
    """
    if image.mode in _PNG_MODES:
        return image
    if image.mode in _GRAY_16_MODES:
        if image.mode != "I":
            image = image.convert("I")
        return image.convert("I;16")
    return image.convert("RGBA")


def png_bytes(image: PILImage.Image) -> bytes:
    """Encode a Pillow image as PNG, converting modes PNG cannot store."""
    image = png_ready(image)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _same_pixels(a: PILImage.Image, b: PILImage.Image) -> bool:
    return a.mode == b.mode and a.size == b.size and a.tobytes() == b.tobytes()


class Raster(ABC):
    """A raster image that can be placed on a slide."""

    serializable = False

    @abstractmethod
    def raster(self) -> PILImage.Image:
        """Return the decoded image."""

    def encode(self, writer: typing.TextIO) -> None:
        """Write the text form of the raster, starting with ``magic()``."""
        raise RasterNotSerializableError(type(self).__name__)

    @classmethod
    def magic(cls) -> str:
        """The line prefix that selects this codec during decoding."""
        raise RasterNotSerializableError(cls.__name__)

    @classmethod
    def decode(cls, reader: LineReader) -> "Raster":
        """Consume exactly the payload lines of one raster from the reader."""
        raise RasterNotSerializableError(cls.__name__)


def _payload(reader: LineReader, magic: str) -> str:
    line = reader.read_line(magic)
    if keyword(line) != magic:
        raise RasterCodecError(f"expected {magic!r} payload, got {line[:40]!r}")
    return line[len(magic) :].strip()


class EmbeddedRaster(Raster):
    """An in-memory image, serialized as a base64 encoded PNG."""

    MAGIC = "PngBase64"
    serializable = True

    def __init__(self, image: PILImage.Image):
        self.image = png_ready(image)

    def raster(self) -> PILImage.Image:
        return self.image

    def encode(self, writer: typing.TextIO) -> None:
        payload = base64.b64encode(png_bytes(self.image)).decode("ascii")
        writer.write(f"{self.MAGIC} {payload}\n")

    @classmethod
    def magic(cls) -> str:
        return cls.MAGIC

    @classmethod
    def decode(cls, reader: LineReader) -> "EmbeddedRaster":
        payload = _payload(reader, cls.MAGIC)
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise RasterCodecError("invalid base64 image payload", cause=exc) from exc
        try:
            image = PILImage.open(io.BytesIO(data))
            image.load()
        except (OSError, PILImage.DecompressionBombError) as exc:
            raise RasterCodecError("cannot decode embedded image", cause=exc) from exc
        return cls(image)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmbeddedRaster):
            return NotImplemented
        return _same_pixels(self.image, other.image)

    def __repr__(self) -> str:
        return f"EmbeddedRaster(mode={self.image.mode!r}, size={self.image.size!r})"


class FileRaster(Raster):
    """
    A reference to an image file on disk.

    The file is read on first use and the decoded image is cached; the text
    form only records the path.
    """

    MAGIC = "File"
    serializable = True

    def __init__(self, path: str | Path):
        self.path = str(path)
        self._image: PILImage.Image | None = None

    def raster(self) -> PILImage.Image:
        if self._image is None:
            logger.debug(f"Loading image file [{self.path}]")
            try:
                with open(self.path, "rb") as handle:
                    image = PILImage.open(handle)
                    image.load()
            except PILImage.DecompressionBombError as exc:
                raise RasterCodecError(
                    f"image file too large to decode {self.path}", cause=exc
                ) from exc
            self._image = image
        return self._image

    def encode(self, writer: typing.TextIO) -> None:
        writer.write(f"{self.MAGIC} {self.path}\n")

    @classmethod
    def magic(cls) -> str:
        return cls.MAGIC

    @classmethod
    def decode(cls, reader: LineReader) -> "FileRaster":
        path = _payload(reader, cls.MAGIC)
        if not path:
            raise RasterCodecError("expected: File path/to/file")
        raster = cls(path)
        try:
            raster.raster()
        except OSError as exc:
            raise RasterCodecError(f"cannot load image file {path}", cause=exc) from exc
        return raster

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileRaster):
            return NotImplemented
        return self.path == other.path

    def __repr__(self) -> str:
        return f"FileRaster({self.path!r})"


class RasterCodecRegistry:
    """
    Ordered set of raster codecs, matched by magic prefix.

    Registration is additive. When prefixes could overlap, the codec that was
    registered first wins.
    """

    def __init__(self, codecs: typing.Iterable[type[Raster]] = ()):
        self._codecs: list[type[Raster]] = []
        for codec in codecs:
            self.register(codec)

    def register(self, codec: type[Raster]) -> None:
        magic = codec.magic()
        if not magic:
            raise RasterCodecError(f"image decoder {codec.__name__} has no magic")
        if any(existing.magic() == magic for existing in self._codecs):
            raise RasterCodecError(f"image decoder magic already registered: {magic}")
        self._codecs.append(codec)
        logger.debug(f"Registered image decoder {codec.__name__} [{magic}]")

    def find(self, line: str, line_number: int | None = None) -> type[Raster]:
        """Return the first codec whose magic prefixes ``line``."""
        if not self._codecs:
            raise NoRasterCodecsError(line_number)
        for codec in self._codecs:
            if line.startswith(codec.magic()):
                return codec
        raise UnknownRasterCodecError(keyword(line) or line, line_number)

    def __len__(self) -> int:
        return len(self._codecs)

    def __iter__(self) -> typing.Iterator[type[Raster]]:
        return iter(self._codecs)


def default_registry() -> RasterCodecRegistry:
    """A new registry holding the built-in codecs."""
    return RasterCodecRegistry([EmbeddedRaster, FileRaster])
