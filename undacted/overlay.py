"""
Selection preview rendering.

Draws the analyst's redaction and reference boxes onto a copy of the page,
with a dashed warning frame when the redaction shows artifacts. This is a
pure rendering module and performs no I/O.
"""

from typing import Optional

import cv2
import numpy as np

from .models import PixelBuffer, Rect


# RGBA, matching PixelBuffer channel order
REDACTION_COLOR = (255, 51, 51, 255)  # #ff3333
REFERENCE_COLOR = (0, 255, 65, 255)  # #00ff41
WARNING_COLOR = (255, 255, 0, 255)  # #ffff00

_FONT = cv2.FONT_HERSHEY_SIMPLEX
_FONT_SCALE = 0.4
_FONT_THICKNESS = 1
_BOX_THICKNESS = 2
_FILL_ALPHA = 0.3
_LABEL_OFFSET = 5
_WARNING_MARGIN = 4
_DASH = 5


def blend_fill(image: np.ndarray, rect: Rect, color: tuple, alpha: float) -> None:
    """Blend a translucent fill over rect, in place."""
    height, width = image.shape[:2]
    x0, y0 = max(0, rect.x), max(0, rect.y)
    x1, y1 = min(width, rect.x1), min(height, rect.y1)
    if x1 <= x0 or y1 <= y0:
        return

    roi = image[y0:y1, x0:x1]
    tint = np.full_like(roi, color)
    image[y0:y1, x0:x1] = cv2.addWeighted(roi, 1.0 - alpha, tint, alpha, 0)


def draw_dashed_rect(
    image: np.ndarray,
    rect: Rect,
    color: tuple,
    dash: int = _DASH,
    thickness: int = 1
) -> None:
    """Draw a dashed rectangle outline, in place. Far edges are exclusive."""
    x0, y0, x1, y1 = rect.x, rect.y, rect.x1 - 1, rect.y1 - 1

    for x in range(x0, x1 + 1, dash * 2):
        end = min(x + dash - 1, x1)
        cv2.line(image, (x, y0), (end, y0), color, thickness)
        cv2.line(image, (x, y1), (end, y1), color, thickness)

    for y in range(y0, y1 + 1, dash * 2):
        end = min(y + dash - 1, y1)
        cv2.line(image, (x0, y), (x0, end), color, thickness)
        cv2.line(image, (x1, y), (x1, end), color, thickness)


def draw_labelled_box(
    image: np.ndarray,
    rect: Rect,
    color: tuple,
    label: Optional[str] = None
) -> None:
    """Draw a box with translucent fill and an optional label above it, in place."""
    blend_fill(image, rect, color, _FILL_ALPHA)

    cv2.rectangle(
        image,
        (rect.x, rect.y),
        (rect.x1 - 1, rect.y1 - 1),
        color=color,
        thickness=_BOX_THICKNESS,
    )

    if label:
        cv2.putText(
            image,
            label,
            (rect.x, rect.y - _LABEL_OFFSET),
            _FONT,
            _FONT_SCALE,
            color,
            _FONT_THICKNESS,
            cv2.LINE_AA,
        )


def draw_selection_overlay(
    buffer: PixelBuffer,
    redaction_rect: Optional[Rect] = None,
    reference_rect: Optional[Rect] = None,
    lazy_redaction: bool = False
) -> PixelBuffer:
    """
    Render the current selection onto a copy of the page.

    Args:
        buffer: Source pixels (not modified)
        redaction_rect: Target redaction box, drawn in red
        reference_rect: Reference word box, drawn in green
        lazy_redaction: Add a dashed warning frame around the redaction box

    Returns:
        A new PixelBuffer with the overlay drawn
    """
    annotated = np.array(buffer.pixels)

    if redaction_rect is not None:
        draw_labelled_box(annotated, redaction_rect, REDACTION_COLOR, "TARGET (REDACTION)")

        if lazy_redaction:
            frame = Rect(
                redaction_rect.x - _WARNING_MARGIN,
                redaction_rect.y - _WARNING_MARGIN,
                redaction_rect.w + 2 * _WARNING_MARGIN,
                redaction_rect.h + 2 * _WARNING_MARGIN,
            )
            draw_dashed_rect(annotated, frame, WARNING_COLOR)
            cv2.putText(
                annotated,
                "ARTIFACTS FOUND",
                (redaction_rect.x, redaction_rect.y1 + 15),
                _FONT,
                _FONT_SCALE,
                WARNING_COLOR,
                _FONT_THICKNESS,
                cv2.LINE_AA,
            )

    if reference_rect is not None:
        draw_labelled_box(annotated, reference_rect, REFERENCE_COLOR, "REFERENCE")

    return PixelBuffer(annotated)
