"""Editor configuration with canonical defaults."""

from __future__ import annotations

import zipfile
from dataclasses import dataclass, field

from pptxappend.container.package_limits import DEFAULT_PACKAGE_LIMITS, PackageLimits

EMU_PER_INCH = 914400
EMU_PER_MM = 36000
DEFAULT_DPI = 96


@dataclass(frozen=True)
class EditorSettings:
    """
    Tunables of the container editor.

    dpi: resolution used to turn raster pixels into EMU extents.
    text_box_extent: nominal width and height of a text box. PowerPoint
        auto-fits text boxes on display, so no font metrics are involved.
    id_search_window: number of ``rIdN`` candidates tried before giving up.
    slide_id_base: smallest id of the presentation slide list.
    compression: ZIP compression used for regenerated and new entries.
    package_limits: bounds checked on open, while adding and on commit.
    """

    dpi: int = DEFAULT_DPI
    text_box_extent: int = 360000
    id_search_window: int = 10000
    slide_id_base: int = 256
    compression: int = zipfile.ZIP_DEFLATED
    package_limits: PackageLimits = field(default=DEFAULT_PACKAGE_LIMITS)


DEFAULT_SETTINGS = EditorSettings()
