"""
Analysis orchestration.

Turns analyst gestures into redaction boxes and runs artifact
classification and length estimation for a redaction/reference pair.
"""

import logging
from typing import Optional

from .models import PixelBuffer, Rect, AnalysisParams, AnalysisSummary
from .pixel_detector import detect_redaction_at_point
from .leakage_detector import analyze_artifacts
from .character_estimator import average_char_width, estimate_hidden_length


logger = logging.getLogger(__name__)

# A gesture larger than this on both axes is a drag, otherwise a tap
DRAG_THRESHOLD = 5


def resolve_redaction_selection(
    buffer: PixelBuffer,
    start: tuple[int, int],
    end: tuple[int, int],
    params: Optional[AnalysisParams] = None
) -> Optional[Rect]:
    """
    Convert a pointer gesture into a redaction box.

    A drag is used as drawn; a tap runs auto-detection at the start point.

    Args:
        buffer: Source pixels
        start: (x, y) where the gesture began
        end: (x, y) where the gesture ended
        params: Analysis parameters

    Returns:
        Rect of the selected redaction, or None if a tap found nothing
    """
    drawn = Rect.from_corners(start[0], start[1], end[0], end[1])

    if drawn.w > DRAG_THRESHOLD and drawn.h > DRAG_THRESHOLD:
        return drawn

    detected = detect_redaction_at_point(buffer, start[0], start[1], params)
    if detected is None:
        logger.info("No redaction block at (%s, %s)", start[0], start[1])
    return detected


def analyze_redaction(
    buffer: PixelBuffer,
    redaction_rect: Rect,
    reference_rect: Rect,
    reference_text: str,
    params: Optional[AnalysisParams] = None
) -> AnalysisSummary:
    """
    Run artifact classification and length estimation for one redaction.

    Args:
        buffer: Source pixels
        redaction_rect: Redaction box
        reference_rect: Box around a visible word in a similar font
        reference_text: The word inside the reference box, as typed

    Returns:
        AnalysisSummary with all metrics
    """
    artifacts = analyze_artifacts(buffer, redaction_rect, params)

    estimated = estimate_hidden_length(
        redaction_rect.w, reference_rect.w, len(reference_text)
    )

    summary = AnalysisSummary(
        redaction_rect=redaction_rect,
        reference_rect=reference_rect,
        reference_text=reference_text,
        estimated_hidden_chars=estimated,
        reference_density=average_char_width(reference_rect.w, len(reference_text)),
        lazy_redaction_detected=artifacts.is_lazy,
        artifact_ratio=artifacts.artifact_ratio,
    )

    logger.info(
        "Estimated %d hidden characters (lazy redaction: %s)",
        estimated, artifacts.is_lazy,
    )
    return summary
