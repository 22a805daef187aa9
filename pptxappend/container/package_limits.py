"""
Package Limits
==============

A presentation package is a ZIP archive whose XML parts the editor parses
into memory whole, and whose remaining entries it streams through on commit.
``PackageLimits`` bounds both, so a hostile or corrupt package is rejected
before any part is parsed and a committed package stays within the limits it
was opened under.

Checked when a package is opened:
    number of entries
    uncompressed size of each part (XML and relationship parts have their
        own, lower bound because they are parsed, not streamed)
    total uncompressed size
    compression ratio of each part and of the whole archive
    part names that differ only in case; OPC compares part names
        case-insensitively, and the copy-through commit would keep both

Checked while editing:
    media parts as they are staged, and the entry count a new slide adds
    every regenerated or new part as it is serialized on commit
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path

from pptxappend.exceptions import ArchiveLimitError

MiB = 1024 * 1024


@dataclass(frozen=True)
class PackageLimits:
    """
    Upper bounds for a presentation package.

    The defaults are far above what real decks with embedded media reach and
    still catch ZIP bombs.
    """

    max_entries: int = 50_000
    max_part_bytes: int = 1024 * MiB
    max_xml_part_bytes: int = 256 * MiB
    max_total_bytes: int = 4096 * MiB
    max_part_ratio: float = 500.0
    max_total_ratio: float = 200.0

    def check_entries(self, count: int, *, source: str | None = None) -> None:
        if count > self.max_entries:
            raise ArchiveLimitError(
                f"package has too many entries ({count} > {self.max_entries})"
                + _where(source)
            )

    def check_part(self, name: str, size: int, *, source: str | None = None) -> None:
        """Reject a part whose uncompressed size exceeds its bound."""
        limit = self.max_xml_part_bytes if is_xml_part(name) else self.max_part_bytes
        if size > limit:
            raise ArchiveLimitError(
                f"{name}: part too large ({size} bytes > {limit})" + _where(source)
            )


DEFAULT_PACKAGE_LIMITS = PackageLimits()


def is_xml_part(name: str) -> bool:
    return name.endswith((".xml", ".rels"))


def _where(source: str | None) -> str:
    return f" [{source}]" if source else ""


def validate_package(
    zf: zipfile.ZipFile,
    *,
    limits: PackageLimits = DEFAULT_PACKAGE_LIMITS,
    source: str | None = None,
) -> None:
    infos = zf.infolist()
    limits.check_entries(len(infos), source=source)

    seen: dict[str, str] = {}
    total = 0
    total_compressed = 0
    for info in infos:
        folded = info.filename.lower()
        if folded in seen:
            raise ArchiveLimitError(
                f"{info.filename}: part name collides with {seen[folded]}"
                + _where(source)
            )
        seen[folded] = info.filename
        if info.is_dir():
            continue

        limits.check_part(info.filename, info.file_size, source=source)
        if info.file_size > 0:
            if info.compress_size <= 0:
                raise ArchiveLimitError(
                    f"{info.filename}: empty compressed data for {info.file_size} bytes"
                    + _where(source)
                )
            ratio = info.file_size / info.compress_size
            if ratio > limits.max_part_ratio:
                raise ArchiveLimitError(
                    f"{info.filename}: compression ratio too high "
                    f"({ratio:.1f} > {limits.max_part_ratio})" + _where(source)
                )

        total += info.file_size
        total_compressed += info.compress_size
        if total > limits.max_total_bytes:
            raise ArchiveLimitError(
                f"package too large ({total} bytes > {limits.max_total_bytes})"
                + _where(source)
            )

    if total > 0 and total / total_compressed > limits.max_total_ratio:
        raise ArchiveLimitError(
            f"package compression ratio too high "
            f"({total / total_compressed:.1f} > {limits.max_total_ratio})"
            + _where(source)
        )


def open_package(
    source: str | Path | io.BytesIO,
    *,
    limits: PackageLimits = DEFAULT_PACKAGE_LIMITS,
    label: str | None = None,
) -> zipfile.ZipFile:
    """
    Open a package for reading and validate it against ``limits``.

    The caller owns the returned ZipFile.
    """
    if isinstance(source, io.BytesIO):
        source.seek(0)
    zf = zipfile.ZipFile(source, "r")
    try:
        validate_package(zf, limits=limits, source=label)
    except ArchiveLimitError:
        zf.close()
        raise
    return zf
