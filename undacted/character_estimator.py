"""
Hidden character count estimation.

Calibrates an average character width from a reference box around a known
visible word, then divides the redaction width by it.
"""

import math
from typing import Optional


def round_half_away_from_zero(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3).

    Unlike the built-in round(), which rounds ties to even.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def average_char_width(
    reference_width: float,
    reference_text_length: int
) -> Optional[float]:
    """
    Calculate the reference density in pixels per character.

    Args:
        reference_width: Width of the reference box in pixels
        reference_text_length: Number of characters in the reference word

    Returns:
        Average character width, or None if the reference is empty
    """
    if reference_text_length == 0:
        return None
    return reference_width / reference_text_length


def estimate_hidden_length(
    redaction_width: float,
    reference_width: float,
    reference_text_length: int
) -> int:
    """
    Estimate the number of characters covered by a redaction.

    Args:
        redaction_width: Width of the redaction box in pixels
        reference_width: Width of the reference box in pixels
        reference_text_length: Number of characters in the reference word

    Returns:
        Estimated character count. Zero when the reference is empty or has
        no width; zero or negative redaction widths are passed through.
    """
    char_width = average_char_width(reference_width, reference_text_length)
    if not char_width:
        return 0

    return round_half_away_from_zero(redaction_width / char_width)
