# XML namespaces used in the parts of a presentation package
P_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"

# Prefix map for new slide parts
SLIDE_NSMAP = {"a": A_NS, "p": P_NS, "r": R_NS}

# Pre-computed tag names (Clark notation)
CT_TYPES = f"{{{CT_NS}}}Types"
CT_DEFAULT = f"{{{CT_NS}}}Default"
CT_OVERRIDE = f"{{{CT_NS}}}Override"

REL_RELATIONSHIPS = f"{{{REL_NS}}}Relationships"
REL_RELATIONSHIP = f"{{{REL_NS}}}Relationship"

P_PRESENTATION = f"{{{P_NS}}}presentation"
P_SLDIDLST = f"{{{P_NS}}}sldIdLst"
P_SLDID = f"{{{P_NS}}}sldId"
P_CSLD = f"{{{P_NS}}}cSld"
P_SPTREE = f"{{{P_NS}}}spTree"

R_ID = f"{{{R_NS}}}id"

# Well known part paths
CONTENT_TYPES_PART = "[Content_Types].xml"
PRESENTATION_PART = "ppt/presentation.xml"
PRESENTATION_RELS_PART = "ppt/_rels/presentation.xml.rels"

# Relationship types
RT_SLIDE = f"{R_NS}/slide"
RT_SLIDE_LAYOUT = f"{R_NS}/slideLayout"
RT_IMAGE = f"{R_NS}/image"

# Content types
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_PNG = "image/png"


def slide_part(number: int) -> str:
    return f"ppt/slides/slide{number}.xml"


def slide_rels_part(number: int) -> str:
    return f"ppt/slides/_rels/slide{number}.xml.rels"


def slide_layout_part(number: int) -> str:
    return f"ppt/slideLayouts/slideLayout{number}.xml"


def media_part(slide_number: int, image_number: int) -> str:
    return f"ppt/media/slide{slide_number}image{image_number}.png"
