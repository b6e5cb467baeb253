"""
Annotated report image generation.

Builds the final evidence image: the source page, a black footer band with
the analysis report, and the matched name overlaid on the redaction box.
"""

import logging
from typing import Optional

from .models import PixelBuffer, Rect, Profile, AnalysisParams
from .surface import PillowSurface, RasterSurface


logger = logging.getLogger(__name__)

# Footer layout, relative to the bottom edge of the source image
TEXT_X = 20
TITLE_OFFSET = 40
MATCH_OFFSET = 75
ROLE_OFFSET = 100
DISCLAIMER_OFFSET = 135
DIVIDER_THICKNESS = 4

TITLE_FONT_SIZE = 20
BODY_FONT_SIZE = 16
DISCLAIMER_FONT_SIZE = 12
OVERLAY_FONT_RATIO = 0.7

BLACK = (0, 0, 0, 255)
ACCENT = (0, 255, 65, 255)  # #00ff41
PLATE = (0, 255, 65, 90)  # translucent accent under the overlaid name
WHITE = (255, 255, 255, 255)
GREY = (102, 102, 102, 255)  # #666666

REPORT_TITLE = "UNDACTED ANALYSIS REPORT"
DISCLAIMER = (
    "DISCLAIMER: Hypothetical determination created by AI. "
    "Not an official legal document. Educational purposes only."
)


def draw_footer(
    surface: RasterSurface,
    top: int,
    height: int,
    match: Profile
) -> None:
    """
    Draw the report band starting at row top.

    Args:
        surface: Surface to draw on
        top: First row of the band (the source image height)
        height: Band height in rows
        match: Best matching profile
    """
    surface.put_rect(Rect(0, top, surface.width, height), BLACK)
    surface.put_rect(Rect(0, top, surface.width, DIVIDER_THICKNESS), ACCENT)

    surface.put_text(
        REPORT_TITLE, (TEXT_X, top + TITLE_OFFSET), ACCENT, TITLE_FONT_SIZE, bold=True
    )
    surface.put_text(
        f"SUBJECT MATCH: {match.name.upper()}",
        (TEXT_X, top + MATCH_OFFSET), WHITE, BODY_FONT_SIZE,
    )
    surface.put_text(
        f"ROLE: {match.role} | CLEARANCE: {match.clearance}",
        (TEXT_X, top + ROLE_OFFSET), WHITE, BODY_FONT_SIZE,
    )
    surface.put_text(
        DISCLAIMER, (TEXT_X, top + DISCLAIMER_OFFSET), GREY, DISCLAIMER_FONT_SIZE
    )


def overlay_name(surface: RasterSurface, rect: Rect, name: str) -> None:
    """
    Draw name centered in rect on a translucent plate, sized from the rect
    height and clipped to it. The plate always covers the rect center.
    """
    font_size = max(1, round(rect.h * OVERLAY_FONT_RATIO))
    surface.put_text(
        name, rect.center, ACCENT, font_size, anchor="mm", bold=True,
        clip=rect, backing=PLATE,
    )


def compose_report(
    buffer: PixelBuffer,
    redaction_rect: Rect,
    match: Profile,
    params: Optional[AnalysisParams] = None
) -> PixelBuffer:
    """
    Composite the annotated report image.

    The output is footer_height rows taller than the source. Its top rows
    equal the source byte-for-byte everywhere outside redaction_rect.

    Args:
        buffer: Source pixels (not modified)
        redaction_rect: Redaction box to overlay the name on
        match: Best matching profile
        params: Analysis parameters (footer_height)

    Returns:
        A new, independently owned PixelBuffer
    """
    params = params or AnalysisParams()

    surface = PillowSurface(buffer.width, buffer.height + params.footer_height)
    surface.paste(buffer, 0, 0)

    draw_footer(surface, buffer.height, params.footer_height, match)
    overlay_name(surface, redaction_rect, match.name)

    logger.debug(
        "Composed %dx%d report for %r", surface.width, surface.height, match.name
    )
    return surface.snapshot()
