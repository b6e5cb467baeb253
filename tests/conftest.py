"""
Shared fixtures: synthetic RGBA pages with painted blocks.
"""

import numpy as np
import pytest

from undacted.models import PixelBuffer, Rect


def _paint(arr: np.ndarray, rect: Rect, value: int) -> np.ndarray:
    arr[rect.y:rect.y1, rect.x:rect.x1, :3] = value
    return arr


@pytest.fixture
def blank_page():
    """Factory for an opaque grey-level page (white by default)."""
    def make(width: int = 100, height: int = 100, value: int = 255) -> np.ndarray:
        arr = np.full((height, width, 4), value, dtype=np.uint8)
        arr[..., 3] = 255
        return arr
    return make


@pytest.fixture
def paint():
    """Paint a grey-level rect into a page array, in place."""
    return _paint


@pytest.fixture
def black_box():
    return Rect(10, 10, 40, 20)


@pytest.fixture
def redacted_page(blank_page, black_box) -> PixelBuffer:
    """100x100 white page with a solid black block at (10, 10, 40, 20)."""
    return PixelBuffer(_paint(blank_page(), black_box, 0))
