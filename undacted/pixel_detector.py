"""
Scanline detection of dark redaction blocks from a single probe point.

Redaction blocks are solid, axis-aligned rectangles, so instead of a flood
fill the detector runs a cross expansion that reads only three pixel lines:
1. Expand left/right along the probe row
2. Expand up/down along the column through the horizontal midpoint
3. Re-expand left/right along the row through the vertical midpoint

The third pass corrects for a probe near the block's edge. Blocks that are
rotated or partially occluded are not recovered exactly.
"""

import logging
from typing import Optional

import numpy as np

from .models import PixelBuffer, Rect, AnalysisParams


logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def compute_luminance(rgb: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel luminance from RGB(A) samples.

    Args:
        rgb: Array whose last axis holds at least R, G, B; alpha is ignored

    Returns:
        float64 array of luminance values in [0, 255]
    """
    rgb = rgb.astype(np.float64)
    return (
        LUMA_WEIGHTS[0] * rgb[..., 0]
        + LUMA_WEIGHTS[1] * rgb[..., 1]
        + LUMA_WEIGHTS[2] * rgb[..., 2]
    )


def dark_mask(pixels: np.ndarray, threshold: float = 60) -> np.ndarray:
    """
    Create a boolean mask of pixels darker than the threshold.

    Args:
        pixels: RGBA pixels of any leading shape
        threshold: Luminance below this is considered dark

    Returns:
        Boolean array with the leading shape of pixels
    """
    return compute_luminance(pixels) < threshold


def expand_run(line: np.ndarray, start: int) -> tuple[int, int]:
    """
    Find the contiguous run of True values containing start.

    Args:
        line: 1-D boolean array
        start: Index inside the run (line[start] must be True)

    Returns:
        (first, last) inclusive indices of the run
    """
    before = np.flatnonzero(~line[:start])
    first = int(before[-1]) + 1 if before.size else 0

    after = np.flatnonzero(~line[start + 1:])
    last = start + int(after[0]) if after.size else len(line) - 1

    return (first, last)


def detect_redaction_at_point(
    buffer: PixelBuffer,
    x: int,
    y: int,
    params: Optional[AnalysisParams] = None
) -> Optional[Rect]:
    """
    Find the dark rectangle containing a probe point.

    Args:
        buffer: Source pixels
        x: Probe column
        y: Probe row
        params: Analysis parameters (dark_threshold, min_region_size)

    Returns:
        The detected Rect, or None if the probe is outside the buffer, is not
        dark, or the block found is smaller than min_region_size on either axis
    """
    params = params or AnalysisParams()
    threshold = params.dark_threshold
    pixels = buffer.pixels

    if not buffer.contains(x, y):
        logger.debug("Probe (%s, %s) outside %dx%d buffer", x, y, buffer.width, buffer.height)
        return None

    x = int(x)
    y = int(y)

    row = dark_mask(pixels[y], threshold)
    if not row[x]:
        logger.debug("Probe (%d, %d) is not dark", x, y)
        return None

    # Horizontal pass along the probe row
    min_x, max_x = expand_run(row, x)

    # Vertical pass through the horizontal midpoint
    center_x = (min_x + max_x) // 2
    column = dark_mask(pixels[:, center_x], threshold)
    min_y, max_y = expand_run(column, y)

    # Refinement pass through the vertical midpoint
    center_y = (min_y + max_y) // 2
    refined_row = dark_mask(pixels[center_y], threshold)
    min_x, max_x = expand_run(refined_row, center_x)

    rect = Rect(
        x=min_x,
        y=min_y,
        w=max_x - min_x + 1,
        h=max_y - min_y + 1,
    )

    if rect.is_degenerate(params.min_region_size):
        logger.debug("Discarding degenerate detection %s", rect)
        return None

    return rect
