from __future__ import annotations

import io
import typing

from pptxappend.exceptions import SlideProtocolError


class LineReader:
    """
    Line-by-line reader with one line of lookahead.

    Lines are trimmed of surrounding whitespace and line terminators. Blank
    lines are skipped but still counted, so ``line_number`` always matches
    the physical line of the input that was read (or peeked) last.
    """

    def __init__(self, source: str | typing.TextIO | typing.Iterable[str]):
        if isinstance(source, str):
            source = io.StringIO(source)
        self._lines = iter(source)
        self._peeked: str | None = None
        self._lineno = 0
        self._exhausted = False

    @property
    def line_number(self) -> int:
        """1-based number of the line returned by the last read or peek."""
        return self._lineno

    def _next(self) -> str | None:
        if self._exhausted:
            return None
        for raw in self._lines:
            self._lineno += 1
            line = raw.strip()
            if line:
                return line
        self._exhausted = True
        return None

    def peek(self) -> str | None:
        """Return the next line without consuming it, None at end of input."""
        if self._peeked is None:
            self._peeked = self._next()
        return self._peeked

    def read_line(self, expected: str = "a line") -> str:
        """
        Consume and return the next line.

        Raises SlideProtocolError naming ``expected`` at end of input.
        """
        line = self.peek()
        if line is None:
            raise SlideProtocolError(self._lineno, expected)
        self._peeked = None
        return line

    def at_end(self) -> bool:
        return self.peek() is None


def keyword(line: str | None) -> str | None:
    """The first whitespace separated token of a line."""
    if not line:
        return None
    return line.split(None, 1)[0]
