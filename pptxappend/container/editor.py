"""
Incremental PPTX Container Editor
=================================

Appends slides to an existing presentation package without touching the rest
of it. The package is a ZIP archive of XML parts (Office Open XML):

    [Content_Types].xml                  content type of every part
    ppt/presentation.xml                 p:sldIdLst, the ordered slide list
    ppt/_rels/presentation.xml.rels      relationships to slides, masters, ...
    ppt/slides/slideN.xml                one part per slide
    ppt/slides/_rels/slideN.xml.rels     slide layout and image relationships
    ppt/slideLayouts/slideLayoutM.xml    layouts a slide is based on
    ppt/media/                           images

Adding a slide
--------------
``Container.add`` stages, in order:

    1. content-types      Override for the new slide part (and a png Default)
    2. presentation-rels  relationship rIdK -> slides/slideN.xml
    3. slide-part         ppt/slides/slideN.xml with one shape per element
    4. media              ppt/media/slideNimageI.png per image
    5. slide-rels         rId1 -> layout, rId(I+1) -> image I
    6. slide-list         p:sldId with an id above every existing one

All changes live in a ``PartStore`` overlay until ``close``. A failing step
raises ``SlideAddError`` naming the step. Parts staged by earlier steps stay
staged, so a failed container should be aborted rather than committed.

Committing
----------
``close`` writes a new archive next to the original: every original entry
that was not touched is copied with its content unchanged, touched and new
entries are serialized from the overlay. Only after the new archive has been
written and closed does it replace the original (``os.replace``). If anything
fails before that, the original file is left as it was; the temporary file
may remain. Every serialized part is checked against the package limits of
the settings, so a commit that would exceed them raises ``ArchiveLimitError``
and leaves the original in place.

Usage
-----
    >>> from pptxappend import open_container, Slide, TextBox, simple_lines
    >>> with open_container("deck.pptx") as deck:
    ...     deck.add(Slide(text_boxes=[TextBox(x=0, y=0, lines=simple_lines("Hi"))]))

Concurrency
-----------
A container is owned by a single caller. ``add`` mutates shared overlay state
and the running slide count without locking; concurrent calls on one
container are not supported. Use independent containers or serialize calls.
"""

from __future__ import annotations

import itertools
import logging
import os
import shutil
import tempfile
import time
import zipfile
from pathlib import Path

from lxml import etree

from pptxappend.container.fragments import (
    item_box_fragment,
    minimal_slide,
    picture_fragment,
    text_box_fragment,
)
from pptxappend.container.identifiers import (
    allocate_relationship_id,
    allocate_slide_id,
    count_slide_parts,
)
from pptxappend.container.minimal_template import template_archive
from pptxappend.container.namespaces import (
    CONTENT_TYPES_PART,
    CT_DEFAULT,
    CT_OVERRIDE,
    CT_PNG,
    CT_SLIDE,
    CT_TYPES,
    P_CSLD,
    P_PRESENTATION,
    P_SLDID,
    P_SLDIDLST,
    P_SPTREE,
    PRESENTATION_PART,
    PRESENTATION_RELS_PART,
    R_ID,
    REL_NS,
    REL_RELATIONSHIP,
    REL_RELATIONSHIPS,
    RT_IMAGE,
    RT_SLIDE,
    RT_SLIDE_LAYOUT,
    media_part,
    slide_layout_part,
    slide_part,
    slide_rels_part,
)
from pptxappend.container.part_store import PartStore
from pptxappend.container.package_limits import open_package
from pptxappend.exceptions import (
    CommitError,
    ContainerClosedError,
    ContainerOpenError,
    PartStructureError,
    PptxAppendError,
    SlideAddError,
)
from pptxappend.interchange.raster import png_bytes
from pptxappend.settings import DEFAULT_SETTINGS, EditorSettings
from pptxappend.slides.data_types import Slide

logger = logging.getLogger(__name__)


def _image_rel_id(index: int) -> str:
    # rId1 is the slide layout
    return f"rId{index + 2}"


class Container:
    """An open presentation package that slides can be appended to."""

    def __init__(
        self,
        source: zipfile.ZipFile,
        path: str | Path,
        settings: EditorSettings = DEFAULT_SETTINGS,
    ):
        self.path = Path(path)
        self.settings = settings
        self._source = source
        self._store = PartStore(source)
        self._slide_count: int | None = None
        self._finalized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._finalized

    @property
    def slide_count(self) -> int:
        """Slides in the original package plus slides added so far."""
        if self._slide_count is None:
            return count_slide_parts(self._store.source_names)
        return self._slide_count

    def _check_open(self) -> None:
        if self._finalized:
            raise ContainerClosedError(str(self.path))

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            if not self._finalized:
                self.close()
        elif not self._finalized:
            self.abort()
        return False

    def abort(self) -> None:
        """Release the original archive without writing anything."""
        self._check_open()
        self._finalized = True
        self._source.close()
        logger.debug(f"Aborted changes to [{self.path}]")

    # ------------------------------------------------------------------
    # Adding slides
    # ------------------------------------------------------------------

    def add(self, slide: Slide) -> None:
        """Stage all parts of a new slide at the end of the presentation."""
        self._check_open()
        if self._slide_count is None:
            # Counted once, on the first add.
            self._slide_count = count_slide_parts(self._store.source_names)
        self._slide_count += 1
        slide.number = self._slide_count
        slide.part_name = f"slide{slide.number}.xml"
        logger.debug(f"Adding slide {slide.number} to [{self.path}]")

        steps = (
            ("content-types", self._add_to_content_types),
            ("presentation-rels", self._add_to_presentation_rels),
            ("slide-part", self._add_slide_part),
            ("media", self._add_media),
            ("slide-rels", self._add_slide_rels),
            ("slide-list", self._add_to_slide_list),
        )
        for step, action in steps:
            try:
                action(slide)
            except (PptxAppendError, OSError, TypeError, ValueError) as exc:
                raise SlideAddError(slide.number, step, cause=exc) from exc

    def _add_to_content_types(self, slide: Slide) -> None:
        root = self._store.xml_for_update(CONTENT_TYPES_PART)
        if root.tag != CT_TYPES:
            raise PartStructureError(CONTENT_TYPES_PART, "missing <Types> root element")

        part_name = "/" + slide_part(slide.number)
        if not any(o.get("PartName") == part_name for o in root.iter(CT_OVERRIDE)):
            etree.SubElement(root, CT_OVERRIDE, PartName=part_name, ContentType=CT_SLIDE)

        if slide.images and not any(
            d.get("Extension", "").lower() == "png" for d in root.iter(CT_DEFAULT)
        ):
            default = etree.Element(CT_DEFAULT, Extension="png", ContentType=CT_PNG)
            root.insert(0, default)

    def _add_to_presentation_rels(self, slide: Slide) -> None:
        root = self._store.xml_for_update(PRESENTATION_RELS_PART)
        if root.tag != REL_RELATIONSHIPS:
            raise PartStructureError(
                PRESENTATION_RELS_PART, "missing <Relationships> root element"
            )
        used = []
        for relationship in root.iter(REL_RELATIONSHIP):
            rel_id = relationship.get("Id")
            if not rel_id:
                raise PartStructureError(
                    PRESENTATION_RELS_PART, "relationship entry without Id"
                )
            used.append(rel_id)

        slide.rel_id = allocate_relationship_id(
            used,
            slide.number,
            window=self.settings.id_search_window,
            part=PRESENTATION_RELS_PART,
        )
        etree.SubElement(
            root,
            REL_RELATIONSHIP,
            Id=slide.rel_id,
            Type=RT_SLIDE,
            Target=f"slides/{slide.part_name}",
        )
        logger.debug(f"Slide {slide.number} has relationship id {slide.rel_id}")

    def _add_slide_part(self, slide: Slide) -> None:
        # slide part, slide rels and one media part per image
        entries = len(self._store.source_names | set(self._store.paths()))
        self.settings.package_limits.check_entries(
            entries + 2 + len(slide.images), source=str(self.path)
        )

        root = minimal_slide()
        shape_tree = root.find(f"{P_CSLD}/{P_SPTREE}")
        # id 1 belongs to the shape tree group itself
        shape_ids = itertools.count(2)

        for index, box in enumerate(slide.text_boxes):
            shape_tree.append(
                text_box_fragment(
                    box, next(shape_ids), index, self.settings.text_box_extent
                )
            )
        for index, box in enumerate(slide.item_boxes):
            shape_tree.append(item_box_fragment(box, next(shape_ids), index))
        for index, image in enumerate(slide.images):
            if image.raster is None:
                raise ValueError(f"image {index + 1} has no raster")
            size = image.raster.raster().size
            shape_tree.append(
                picture_fragment(
                    image,
                    size,
                    _image_rel_id(index),
                    next(shape_ids),
                    index,
                    self.settings.dpi,
                )
            )

        self._store.add_xml(slide_part(slide.number), root)

    def _add_media(self, slide: Slide) -> None:
        for index, image in enumerate(slide.images, start=1):
            path = media_part(slide.number, index)
            data = png_bytes(image.raster.raster())
            self.settings.package_limits.check_part(path, len(data), source=str(self.path))
            self._store.add_bytes(path, data)

    def _add_slide_rels(self, slide: Slide) -> None:
        layout = slide_layout_part(slide.layout)
        if not self._store.exists(layout):
            raise PartStructureError(layout, "slide layout does not exist")

        root = etree.Element(REL_RELATIONSHIPS, nsmap={None: REL_NS})
        etree.SubElement(
            root,
            REL_RELATIONSHIP,
            Id="rId1",
            Type=RT_SLIDE_LAYOUT,
            Target=f"../slideLayouts/slideLayout{slide.layout}.xml",
        )
        for index in range(len(slide.images)):
            etree.SubElement(
                root,
                REL_RELATIONSHIP,
                Id=_image_rel_id(index),
                Type=RT_IMAGE,
                Target=f"../media/slide{slide.number}image{index + 1}.png",
            )
        self._store.add_xml(slide_rels_part(slide.number), root)

    def _add_to_slide_list(self, slide: Slide) -> None:
        if not slide.rel_id:
            raise PartStructureError(
                PRESENTATION_PART, "new slide has no relationship id"
            )
        root = self._store.xml_for_update(PRESENTATION_PART)
        if root.tag != P_PRESENTATION:
            raise PartStructureError(
                PRESENTATION_PART, "missing <p:presentation> root element"
            )
        slide_list = root.find(P_SLDIDLST)
        if slide_list is None:
            raise PartStructureError(PRESENTATION_PART, "missing <p:sldIdLst> element")

        existing = []
        for entry in slide_list.findall(P_SLDID):
            value = entry.get("id")
            try:
                existing.append(int(value))
            except (TypeError, ValueError) as exc:
                raise PartStructureError(
                    PRESENTATION_PART,
                    f"slide list entry without numeric id: {value!r}",
                    cause=exc,
                ) from exc

        slide.slide_id = allocate_slide_id(
            existing, base=self.settings.slide_id_base, part=PRESENTATION_PART
        )
        entry = etree.SubElement(slide_list, P_SLDID)
        entry.set("id", str(slide.slide_id))
        entry.set(R_ID, slide.rel_id)
        logger.debug(f"Slide {slide.number} has slide list id {slide.slide_id}")

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Write the updated package and move it over the original.

        The original is replaced only after the new archive has been written
        completely; on any error before that it is left unchanged.
        """
        self._check_open()
        self._finalized = True
        target = str(self.path)
        try:
            try:
                fd, temp_name = tempfile.mkstemp(
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                    dir=self.path.parent,
                )
            except OSError as exc:
                raise CommitError(
                    target, "could not create temporary file", cause=exc
                ) from exc
            try:
                with os.fdopen(fd, "wb") as handle:
                    self._write_archive(handle)
                self._apply_mode(temp_name)
            except (OSError, zipfile.BadZipFile) as exc:
                raise CommitError(
                    target, f"could not write updated archive {temp_name}", cause=exc
                ) from exc
        finally:
            self._source.close()

        try:
            os.replace(temp_name, self.path)
        except OSError as exc:
            raise CommitError(
                target,
                "could not overwrite original file with updated content",
                cause=exc,
            ) from exc
        logger.debug(f"Committed {len(self._store)} changed parts to [{self.path}]")

    def _apply_mode(self, temp_name: str) -> None:
        # mkstemp creates the file readable by its owner only
        if self.path.exists():
            shutil.copymode(self.path, temp_name)
        else:
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(temp_name, 0o666 & ~umask)

    def _write_archive(self, handle) -> None:
        staged = set(self._store.paths())
        compression = self.settings.compression
        with zipfile.ZipFile(handle, "w", compression=compression) as out:
            for info in self._source.infolist():
                if info.filename in staged:
                    replacement = zipfile.ZipInfo(info.filename, date_time=info.date_time)
                    replacement.compress_type = compression
                    replacement.external_attr = info.external_attr
                    out.writestr(replacement, self._staged_bytes(info.filename))
                    logger.debug(f"Rewrote [{info.filename}]")
                else:
                    self._copy_entry(out, info)

            for path in self._store.paths():
                if path in self._store.source_names:
                    continue
                entry = zipfile.ZipInfo(path, date_time=time.localtime()[:6])
                entry.compress_type = compression
                entry.external_attr = 0o644 << 16
                out.writestr(entry, self._staged_bytes(path))
                logger.debug(f"Wrote new part [{path}]")

    def _staged_bytes(self, path: str) -> bytes:
        data = self._store.serialize(path)
        self.settings.package_limits.check_part(path, len(data), source=str(self.path))
        return data

    def _copy_entry(self, out: zipfile.ZipFile, info: zipfile.ZipInfo) -> None:
        """Copy an untouched entry, keeping name, method, timestamp and content."""
        copy = zipfile.ZipInfo(info.filename, date_time=info.date_time)
        copy.compress_type = info.compress_type
        copy.external_attr = info.external_attr
        copy.create_system = info.create_system
        copy.comment = info.comment
        if info.is_dir():
            out.writestr(copy, b"")
            return
        copy.file_size = info.file_size
        with self._source.open(info) as src, out.open(copy, "w") as dst:
            shutil.copyfileobj(src, dst)


def open_container(
    path: str | Path, settings: EditorSettings | None = None
) -> Container:
    """Open an existing presentation for appending slides."""
    settings = settings or DEFAULT_SETTINGS
    path = Path(path)
    try:
        source = open_package(path, limits=settings.package_limits, label=str(path))
    except (OSError, zipfile.BadZipFile) as exc:
        raise ContainerOpenError(str(path), cause=exc) from exc
    logger.debug(f"Opened [{path}]")
    return Container(source, path, settings)


def new_container(
    path: str | Path, settings: EditorSettings | None = None
) -> Container:
    """
    Start a new presentation from the bundled minimal template.

    Nothing is written until ``close``; ``path`` must not exist yet.
    """
    settings = settings or DEFAULT_SETTINGS
    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Refusing to overwrite existing file: {path}")
    source = open_package(
        template_archive(), limits=settings.package_limits, label="minimal template"
    )
    logger.debug(f"Created [{path}] from the minimal template")
    return Container(source, path, settings)
