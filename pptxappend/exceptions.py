class PptxAppendError(Exception):
    """Base class for every error raised by pptxappend."""

    def __init__(self, message: str, *, cause: Exception = None):
        super().__init__(message)
        # Optional chaining for debugging
        self.__cause__ = cause


# =============================================================================
# Container / archive I/O
# =============================================================================


class ContainerError(PptxAppendError):
    """Raised for archive level failures of a presentation container."""


class ContainerOpenError(ContainerError):
    """Raised when the presentation archive cannot be opened for reading."""

    def __init__(self, path: str, message: str = None, *, cause: Exception = None):
        self.path = path
        if message is None:
            message = f"Could not open presentation archive: {path}"
            if cause is not None:
                message += f" ({cause})"
        super().__init__(message, cause=cause)


class ArchiveLimitError(ContainerError):
    """Raised when a package exceeds its configured limits."""


class ContainerClosedError(ContainerError):
    """Raised when a container is used after close() or abort()."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Container has already been finalized: {path}")


class CommitError(ContainerError):
    """Raised when the updated archive cannot be written or moved into place.

    The original file is unchanged whenever this is raised.
    """

    def __init__(self, path: str, message: str, *, cause: Exception = None):
        self.path = path
        super().__init__(f"{path}: {message}", cause=cause)


# =============================================================================
# Part structure and identifiers
# =============================================================================


class PartStructureError(PptxAppendError):
    """Raised when an expected element or attribute is missing in a part."""

    def __init__(self, part: str, message: str, *, cause: Exception = None):
        self.part = part
        super().__init__(f"{part}: {message}", cause=cause)


class PartConflictError(PartStructureError):
    """Raised when a new part would replace an entry that already exists."""

    def __init__(self, part: str):
        super().__init__(part, "part already exists in the package")


class IdentifierExhaustedError(PptxAppendError):
    """Raised when no unique identifier is found within the search window."""

    def __init__(self, part: str, message: str):
        self.part = part
        super().__init__(f"{part}: {message}")


class SlideAddError(PptxAppendError):
    """Raised when one step of appending a slide fails.

    ``step`` names the failed step, the original error is the ``__cause__``.
    """

    def __init__(self, slide_number: int, step: str, *, cause: Exception):
        self.slide_number = slide_number
        self.step = step
        super().__init__(f"slide {slide_number}: {step}: {cause}", cause=cause)


# =============================================================================
# Text protocol and raster codecs
# =============================================================================


class SlideProtocolError(PptxAppendError):
    """Raised when a line of the slide text protocol is malformed."""

    def __init__(
        self,
        line_number: int,
        expected: str,
        actual: str | None = None,
        *,
        cause: Exception = None,
    ):
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        got = "end of input" if actual is None else repr(actual)
        message = f"line {line_number}: expected {expected!r}, got {got}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message, cause=cause)


class RasterCodecError(PptxAppendError):
    """Raised when a raster image cannot be encoded or decoded."""

    def __init__(
        self, message: str, *, line_number: int = None, cause: Exception = None
    ):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message, cause=cause)


class NoRasterCodecsError(RasterCodecError):
    """Raised when an image is decoded while no codec is registered."""

    def __init__(self, line_number: int = None):
        super().__init__("no image decoders registered", line_number=line_number)


class UnknownRasterCodecError(RasterCodecError):
    """Raised when no registered codec matches an image payload prefix."""

    def __init__(self, prefix: str, line_number: int = None):
        self.prefix = prefix
        super().__init__(f"unknown image decoder: {prefix}", line_number=line_number)


class RasterNotSerializableError(RasterCodecError):
    """Raised by raster types that do not support text serialization."""

    def __init__(self, raster_type: str = "raster"):
        super().__init__(f"this image type is not serializable: {raster_type}")
