"""
Shape Fragments for New Slides
==============================

Builds the XML of a new slide part and of the shapes spliced into its shape
tree (``p:sld/p:cSld/p:spTree``). Every fragment follows a fixed template; the
only variable parts are the shape id and name, the position and extent, and
for text the paragraphs and runs. Elements are created through lxml's
ElementMaker, so user text only ever becomes a text node and is escaped by
the serializer.

Text box (``p:sp`` with ``txBox="1"``):
    one ``a:p`` per Line, one ``a:r`` per LineElement. ``a:rPr`` is written
    only when the box has a font or the element has a color:
        sz          font size in hundredths of a point
        solidFill   the element color
        latin, cs   the font typeface
    Title boxes carry ``<p:ph type="title"/>``. The extent is a fixed nominal
    size; PowerPoint auto-fits the box when it is displayed.

Item box (``p:sp`` body placeholder ``<p:ph idx="1"/>``):
    one ``a:p`` per Item with ``<a:pPr lvl="..."/>``.

Picture (``p:pic``):
    ``a:blip/@r:embed`` points at the media relationship; the extent is the
    pixel size scaled by the configured dpi.

A text body needs at least one paragraph, so empty boxes get an empty ``a:p``.
"""

from __future__ import annotations

from lxml import etree
from lxml.builder import ElementMaker

from pptxappend.container.namespaces import A_NS, P_NS, R_NS, SLIDE_NSMAP
from pptxappend.settings import EMU_PER_INCH
from pptxappend.slides.data_types import Color, Font, Image, Item, ItemBox, Line, TextBox

P = ElementMaker(namespace=P_NS, nsmap=SLIDE_NSMAP)
A = ElementMaker(namespace=A_NS, nsmap=SLIDE_NSMAP)

R_EMBED = f"{{{R_NS}}}embed"

# Valid range of a:pPr/@lvl
MAX_ITEM_LEVEL = 8


def _xfrm(x: int, y: int, cx: int, cy: int) -> etree._Element:
    return A.xfrm(A.off(x=str(x), y=str(y)), A.ext(cx=str(cx), cy=str(cy)))


def minimal_slide() -> etree._Element:
    """A slide with an empty shape tree."""
    return P.sld(
        P.cSld(
            P.spTree(
                P.nvGrpSpPr(P.cNvPr(id="1", name=""), P.cNvGrpSpPr(), P.nvPr()),
                P.grpSpPr(
                    A.xfrm(
                        A.off(x="0", y="0"),
                        A.ext(cx="0", cy="0"),
                        A.chOff(x="0", y="0"),
                        A.chExt(cx="0", cy="0"),
                    )
                ),
            )
        ),
        P.clrMapOvr(A.masterClrMapping()),
    )


def _run_properties(font: Font | None, color: Color | None) -> etree._Element | None:
    attributes = {}
    children = []
    if font is not None and font.size > 0:
        attributes["sz"] = str(int(round(font.size * 100)))
    if color is not None:
        children.append(A.solidFill(A.srgbClr(val=color.hex)))
    if font is not None and font.name:
        children.append(A.latin(typeface=font.name))
        children.append(A.cs(typeface=font.name))
    if not attributes and not children:
        return None
    return A.rPr(*children, **attributes)


def _text_paragraph(line: Line, font: Font | None) -> etree._Element:
    paragraph = A.p()
    for element in line:
        run = A.r()
        properties = _run_properties(font, element.color)
        if properties is not None:
            run.append(properties)
        run.append(A.t(element.text))
        paragraph.append(run)
    return paragraph


def text_box_fragment(
    box: TextBox, shape_id: int, index: int, extent: int
) -> etree._Element:
    non_visual = P.nvPr()
    if box.title:
        non_visual.append(P.ph(type="title"))
    paragraphs = [_text_paragraph(line, box.font) for line in box.lines]
    return P.sp(
        P.nvSpPr(
            P.cNvPr(id=str(shape_id), name=f"TextBox {index + 1}"),
            P.cNvSpPr(txBox="1"),
            non_visual,
        ),
        P.spPr(_xfrm(box.x, box.y, extent, extent)),
        P.txBody(
            A.bodyPr(wrap="none", rtlCol="0"),
            A.lstStyle(),
            *(paragraphs or [A.p()]),
        ),
    )


def _item_paragraph(item: Item) -> etree._Element:
    if not 0 <= item.level <= MAX_ITEM_LEVEL:
        raise ValueError(
            f"item level must be between 0 and {MAX_ITEM_LEVEL}: {item.level}"
        )
    return A.p(A.pPr(lvl=str(item.level)), A.r(A.t(item.text)))


def item_box_fragment(box: ItemBox, shape_id: int, index: int) -> etree._Element:
    paragraphs = [_item_paragraph(item) for item in box.items]
    return P.sp(
        P.nvSpPr(
            P.cNvPr(id=str(shape_id), name=f"ItemBox {index + 1}"),
            P.cNvSpPr(),
            P.nvPr(P.ph(idx="1")),
        ),
        P.spPr(_xfrm(box.x, box.y, box.width, box.height)),
        P.txBody(A.bodyPr(), A.lstStyle(), *(paragraphs or [A.p()])),
    )


def pixels_to_emu(pixels: int, dpi: int) -> int:
    return pixels * EMU_PER_INCH // dpi


def picture_fragment(
    image: Image,
    pixel_size: tuple[int, int],
    rel_id: str,
    shape_id: int,
    index: int,
    dpi: int,
) -> etree._Element:
    width, height = pixel_size
    return P.pic(
        P.nvPicPr(
            P.cNvPr(id=str(shape_id), name=f"Picture {index + 1}"),
            P.cNvPicPr(A.picLocks(noChangeAspect="1")),
            P.nvPr(),
        ),
        P.blipFill(
            A.blip({R_EMBED: rel_id}),
            A.srcRect(),
            A.stretch(A.fillRect()),
        ),
        P.spPr(
            _xfrm(image.x, image.y, pixels_to_emu(width, dpi), pixels_to_emu(height, dpi)),
            A.prstGeom(A.avLst(), prst="rect"),
            A.noFill(),
            bwMode="auto",
        ),
    )
