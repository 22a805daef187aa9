"""
Minimal presentation package used by ``new_container``.

One slide master, two slide layouts (1: title and content, 2: blank), one
theme and an empty slide list. The parts are kept as text and zipped in
memory on demand.
"""

from __future__ import annotations

import io
import zipfile

_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_NS = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)

_RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

CONTENT_TYPES = (
    _DECL
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Override PartName="/ppt/presentation.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"/>'
    '<Override PartName="/ppt/slideMasters/slideMaster1.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"/>'
    '<Override PartName="/ppt/slideLayouts/slideLayout1.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"/>'
    '<Override PartName="/ppt/slideLayouts/slideLayout2.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"/>'
    '<Override PartName="/ppt/theme/theme1.xml" ContentType="application/vnd.openxmlformats-officedocument.theme+xml"/>'
    "</Types>"
)

PACKAGE_RELS = (
    _DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    f'<Relationship Id="rId1" Type="{_RT}/officeDocument" Target="ppt/presentation.xml"/>'
    "</Relationships>"
)

PRESENTATION = (
    _DECL
    + f"<p:presentation {_NS} saveSubsetFonts=\"1\">"
    '<p:sldMasterIdLst><p:sldMasterId id="2147483648" r:id="rId1"/></p:sldMasterIdLst>'
    "<p:sldIdLst/>"
    '<p:sldSz cx="12192000" cy="6858000"/>'
    '<p:notesSz cx="6858000" cy="9144000"/>'
    "</p:presentation>"
)

PRESENTATION_RELS = (
    _DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    f'<Relationship Id="rId1" Type="{_RT}/slideMaster" Target="slideMasters/slideMaster1.xml"/>'
    f'<Relationship Id="rId2" Type="{_RT}/theme" Target="theme/theme1.xml"/>'
    "</Relationships>"
)

_GROUP_PROPERTIES = (
    '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
    '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
)


def _placeholder(shape_id: int, name: str, ph: str, x: int, y: int, cx: int, cy: int) -> str:
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/>'
        '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
        f"<p:nvPr>{ph}</p:nvPr></p:nvSpPr>"
        f'<p:spPr><a:xfrm><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'
        '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr>'
        '<p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:endParaRPr lang="en-US"/></a:p></p:txBody>'
        "</p:sp>"
    )


_TITLE = _placeholder(2, "Title 1", '<p:ph type="title"/>', 838200, 365125, 10515600, 1325563)
_BODY = _placeholder(3, "Content Placeholder 2", '<p:ph idx="1"/>', 838200, 1825625, 10515600, 4351338)

SLIDE_MASTER = (
    _DECL
    + f"<p:sldMaster {_NS}>"
    '<p:cSld><p:bg><p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef></p:bg>'
    f"<p:spTree>{_GROUP_PROPERTIES}"
    + _TITLE
    + _BODY.replace('<p:ph idx="1"/>', '<p:ph type="body" idx="1"/>', 1)
    + "</p:spTree></p:cSld>"
    '<p:clrMap bg1="lt1" tx1="dk1" bg2="lt2" tx2="dk2" accent1="accent1" accent2="accent2" '
    'accent3="accent3" accent4="accent4" accent5="accent5" accent6="accent6" '
    'hlink="hlink" folHlink="folHlink"/>'
    "<p:sldLayoutIdLst>"
    '<p:sldLayoutId id="2147483649" r:id="rId1"/>'
    '<p:sldLayoutId id="2147483650" r:id="rId2"/>'
    "</p:sldLayoutIdLst>"
    "<p:txStyles>"
    '<p:titleStyle><a:lvl1pPr><a:defRPr sz="4400"/></a:lvl1pPr></p:titleStyle>'
    '<p:bodyStyle><a:lvl1pPr><a:defRPr sz="2800"/></a:lvl1pPr></p:bodyStyle>'
    '<p:otherStyle><a:lvl1pPr><a:defRPr sz="1800"/></a:lvl1pPr></p:otherStyle>'
    "</p:txStyles>"
    "</p:sldMaster>"
)

SLIDE_MASTER_RELS = (
    _DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    f'<Relationship Id="rId1" Type="{_RT}/slideLayout" Target="../slideLayouts/slideLayout1.xml"/>'
    f'<Relationship Id="rId2" Type="{_RT}/slideLayout" Target="../slideLayouts/slideLayout2.xml"/>'
    f'<Relationship Id="rId3" Type="{_RT}/theme" Target="../theme/theme1.xml"/>'
    "</Relationships>"
)


def _slide_layout(layout_type: str, name: str, shapes: str) -> str:
    return (
        _DECL
        + f'<p:sldLayout {_NS} type="{layout_type}" preserve="1">'
        f'<p:cSld name="{name}"><p:spTree>{_GROUP_PROPERTIES}{shapes}</p:spTree></p:cSld>'
        "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
        "</p:sldLayout>"
    )


SLIDE_LAYOUT_1 = _slide_layout("obj", "Title and Content", _TITLE + _BODY)
SLIDE_LAYOUT_2 = _slide_layout("blank", "Blank", "")

SLIDE_LAYOUT_RELS = (
    _DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    f'<Relationship Id="rId1" Type="{_RT}/slideMaster" Target="../slideMasters/slideMaster1.xml"/>'
    "</Relationships>"
)


def _srgb(name: str, value: str) -> str:
    return f'<a:{name}><a:srgbClr val="{value}"/></a:{name}>'


def _solid_fill() -> str:
    return '<a:solidFill><a:schemeClr val="phClr"/></a:solidFill>'


def _line(width: int) -> str:
    return f'<a:ln w="{width}"><a:solidFill><a:schemeClr val="phClr"/></a:solidFill></a:ln>'


THEME = (
    _DECL
    + '<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Office Theme">'
    "<a:themeElements>"
    '<a:clrScheme name="Office">'
    '<a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>'
    '<a:lt1><a:sysClr val="window" lastClr="FFFFFF"/></a:lt1>'
    + _srgb("dk2", "44546A")
    + _srgb("lt2", "E7E6E6")
    + _srgb("accent1", "4472C4")
    + _srgb("accent2", "ED7D31")
    + _srgb("accent3", "A5A5A5")
    + _srgb("accent4", "FFC000")
    + _srgb("accent5", "5B9BD5")
    + _srgb("accent6", "70AD47")
    + _srgb("hlink", "0563C1")
    + _srgb("folHlink", "954F72")
    + "</a:clrScheme>"
    '<a:fontScheme name="Office">'
    '<a:majorFont><a:latin typeface="Calibri Light"/><a:ea typeface=""/><a:cs typeface=""/></a:majorFont>'
    '<a:minorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:minorFont>'
    "</a:fontScheme>"
    '<a:fmtScheme name="Office">'
    "<a:fillStyleLst>" + _solid_fill() * 3 + "</a:fillStyleLst>"
    "<a:lnStyleLst>" + _line(6350) + _line(12700) + _line(19050) + "</a:lnStyleLst>"
    "<a:effectStyleLst>"
    + "<a:effectStyle><a:effectLst/></a:effectStyle>" * 3
    + "</a:effectStyleLst>"
    "<a:bgFillStyleLst>" + _solid_fill() * 3 + "</a:bgFillStyleLst>"
    "</a:fmtScheme>"
    "</a:themeElements>"
    "</a:theme>"
)

PARTS: dict[str, str] = {
    "[Content_Types].xml": CONTENT_TYPES,
    "_rels/.rels": PACKAGE_RELS,
    "ppt/presentation.xml": PRESENTATION,
    "ppt/_rels/presentation.xml.rels": PRESENTATION_RELS,
    "ppt/slideMasters/slideMaster1.xml": SLIDE_MASTER,
    "ppt/slideMasters/_rels/slideMaster1.xml.rels": SLIDE_MASTER_RELS,
    "ppt/slideLayouts/slideLayout1.xml": SLIDE_LAYOUT_1,
    "ppt/slideLayouts/_rels/slideLayout1.xml.rels": SLIDE_LAYOUT_RELS,
    "ppt/slideLayouts/slideLayout2.xml": SLIDE_LAYOUT_2,
    "ppt/slideLayouts/_rels/slideLayout2.xml.rels": SLIDE_LAYOUT_RELS,
    "ppt/theme/theme1.xml": THEME,
}


def template_archive(overrides: dict[str, str | bytes | None] | None = None) -> io.BytesIO:
    """
    Zip the template parts into an in-memory archive.

    ``overrides`` replaces (or, with None, drops) individual parts.
    """
    parts: dict[str, str | bytes | None] = dict(PARTS)
    if overrides:
        parts.update(overrides)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in parts.items():
            if content is None:
                continue
            zf.writestr(name, content)
    buffer.seek(0)
    return buffer
