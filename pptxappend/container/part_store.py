from __future__ import annotations

import logging
import typing
import zipfile

from lxml import etree

from pptxappend.exceptions import PartConflictError, PartStructureError

logger = logging.getLogger(__name__)

# Parts are never allowed to pull in external entities or DTDs.
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def serialize_xml(root: etree._Element) -> bytes:
    return etree.tostring(
        root, xml_declaration=True, encoding="UTF-8", standalone=True
    )


class PartStore:
    """
    In-memory overlay of changed and new package parts.

    Maps an archive entry path to its pending content: a parsed XML tree
    (lxml root element) or a byte blob. Lookups fall back to the original
    archive, which is never written to.

    Each path holds at most one in-memory state. Existing XML parts are
    obtained for mutation through ``xml_for_update``, which loads the part
    from the archive on first access and returns the same tree afterwards.
    New parts are staged with ``add_xml``/``add_bytes`` and may not replace
    anything that already exists.

    Not thread safe; one container owns one store.
    """

    def __init__(self, source: zipfile.ZipFile):
        self._source = source
        self._source_names = set(source.namelist())
        self._parts: dict[str, etree._Element | bytes] = {}

    @property
    def source_names(self) -> set[str]:
        return self._source_names

    def __contains__(self, path: str) -> bool:
        return path in self._parts

    def __len__(self) -> int:
        return len(self._parts)

    def exists(self, path: str) -> bool:
        """True when the path is staged or present in the original archive."""
        return path in self._parts or path in self._source_names

    def xml_for_update(self, path: str) -> etree._Element:
        """Return the staged tree of ``path``, loading it from the archive once."""
        staged = self._parts.get(path)
        if staged is not None:
            if not isinstance(staged, etree._Element):
                raise PartStructureError(path, "part is binary, expected XML")
            return staged
        if path not in self._source_names:
            raise PartStructureError(path, "part does not exist in the package")
        try:
            root = etree.fromstring(self._source.read(path), _PARSER)
        except etree.XMLSyntaxError as exc:
            raise PartStructureError(path, f"malformed XML: {exc}", cause=exc) from exc
        self._parts[path] = root
        logger.debug(f"Loaded part [{path}] for update")
        return root

    def _check_new(self, path: str) -> None:
        if self.exists(path):
            raise PartConflictError(path)

    def add_xml(self, path: str, root: etree._Element) -> None:
        self._check_new(path)
        self._parts[path] = root
        logger.debug(f"Staged new XML part [{path}]")

    def add_bytes(self, path: str, data: bytes) -> None:
        self._check_new(path)
        self._parts[path] = bytes(data)
        logger.debug(f"Staged new binary part [{path}] ({len(data)} bytes)")

    def paths(self) -> list[str]:
        return list(self._parts)

    def serialize(self, path: str) -> bytes:
        """Return the bytes to be written to the archive for a staged part."""
        content = self._parts[path]
        if isinstance(content, bytes):
            return content
        return serialize_xml(content)

    def items(self) -> typing.Iterator[tuple[str, bytes]]:
        for path in self._parts:
            yield path, self.serialize(path)
