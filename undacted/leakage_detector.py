"""
Lazy redaction detection for user-drawn redaction boxes.

A properly burned-in redaction is a uniform near-black fill. Boxes whose
interior contains pixels that are neither near-black (the fill) nor
near-white (background or antialiasing halo) suggest content that was only
partially obscured. This is a density threshold, not a pattern classifier:
any sufficiently noisy fill trips it, including compression artifacts.
"""

import logging
from typing import Optional

import numpy as np

from .models import PixelBuffer, Rect, AnalysisParams, ArtifactResult
from .pixel_detector import compute_luminance


logger = logging.getLogger(__name__)


def count_artifact_pixels(
    region: np.ndarray,
    lower: float = 30,
    upper: float = 250
) -> int:
    """
    Count pixels whose luminance lies strictly between lower and upper.

    Args:
        region: RGBA pixels
        lower: Luminance at or below this is redaction fill
        upper: Luminance at or above this is background

    Returns:
        Number of suspicious pixels
    """
    if region.size == 0:
        return 0

    luminance = compute_luminance(region)
    mask = (luminance > lower) & (luminance < upper)
    return int(np.count_nonzero(mask))


def analyze_artifacts(
    buffer: PixelBuffer,
    rect: Rect,
    params: Optional[AnalysisParams] = None
) -> ArtifactResult:
    """
    Score the fill uniformity of a redaction box.

    Pixels of the rect that fall outside the buffer count towards the total
    but never as artifacts.

    Args:
        buffer: Source pixels
        rect: Redaction box as drawn by the user
        params: Analysis parameters (artifact thresholds and ratio)

    Returns:
        ArtifactResult with counts, ratio and the lazy redaction flag
    """
    params = params or AnalysisParams()

    total = rect.w * rect.h if rect.w > 0 and rect.h > 0 else 0
    if total == 0:
        logger.debug("Zero-area rect %s cannot be a lazy redaction", rect)
        return ArtifactResult(
            artifact_pixels=0,
            total_pixels=0,
            artifact_ratio=0.0,
            mean_luminance=0.0,
            is_lazy=False,
        )

    region = buffer.region(rect)
    artifacts = count_artifact_pixels(
        region,
        lower=params.artifact_threshold,
        upper=params.artifact_ceiling,
    )

    # Off-buffer area contributes luminance 0
    luminance_sum = float(compute_luminance(region).sum()) if region.size else 0.0

    ratio = artifacts / total

    return ArtifactResult(
        artifact_pixels=artifacts,
        total_pixels=total,
        artifact_ratio=ratio,
        mean_luminance=luminance_sum / total,
        is_lazy=ratio > params.artifact_ratio,
    )


def is_lazy_redaction(
    buffer: PixelBuffer,
    rect: Rect,
    params: Optional[AnalysisParams] = None
) -> bool:
    """
    Check whether a redaction box shows lazy redaction artifacts.

    Returns True iff the share of suspicious pixels strictly exceeds
    params.artifact_ratio. A zero-area rect returns False.
    """
    result = analyze_artifacts(buffer, rect, params)
    if result.is_lazy:
        logger.info(
            "Lazy redaction in %s: %d/%d suspicious pixels (%.1f%%)",
            rect, result.artifact_pixels, result.total_pixels,
            result.artifact_ratio * 100,
        )
    return result.is_lazy
