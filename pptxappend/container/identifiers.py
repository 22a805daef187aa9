"""
Identifier allocation for new package entries.

Relationship ids (``rIdN``) must be unique within their ``.rels`` part and
slide-list ids must be unique and increasing within ``p:sldIdLst``. Both are
chosen by scanning the identifiers the part already uses.
"""

from __future__ import annotations

import logging
import re
import typing

from pptxappend.exceptions import IdentifierExhaustedError

logger = logging.getLogger(__name__)

# Upper bound (exclusive) of p:sldId/@id in ECMA-376
MAX_SLIDE_ID = 2147483648

_SLIDE_PART_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


def allocate_relationship_id(
    used: typing.Iterable[str],
    start: int,
    *,
    prefix: str = "rId",
    window: int = 10000,
    part: str = "relationships",
) -> str:
    """
    Return the lowest ``prefix + N`` with ``N >= start`` not in ``used``.

    Starting the search at the slide number keeps ids stable and easy to
    trace across repeated runs.
    """
    taken = set(used)
    for n in range(start, start + window):
        candidate = f"{prefix}{n}"
        if candidate not in taken:
            return candidate
    raise IdentifierExhaustedError(
        part, f"no free id between {prefix}{start} and {prefix}{start + window - 1}"
    )


def allocate_slide_id(
    existing: typing.Iterable[int],
    *,
    base: int = 256,
    part: str = "slide list",
) -> int:
    """Return an id strictly greater than every existing one, at least ``base``."""
    slide_id = base
    for value in existing:
        if value >= slide_id:
            slide_id = value + 1
    if slide_id >= MAX_SLIDE_ID:
        raise IdentifierExhaustedError(
            part, f"slide id {slide_id} exceeds the maximum of {MAX_SLIDE_ID - 1}"
        )
    return slide_id


def count_slide_parts(names: typing.Iterable[str]) -> int:
    """Number of ``ppt/slides/slideN.xml`` entries among archive names."""
    return sum(1 for name in names if _SLIDE_PART_RE.match(name))
