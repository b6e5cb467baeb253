"""
Tests for lazy redaction classification.
"""

import numpy as np
import pytest

from undacted.models import PixelBuffer, Rect, AnalysisParams
from undacted.leakage_detector import (
    analyze_artifacts,
    count_artifact_pixels,
    is_lazy_redaction,
)


def _noisy_box(blank_page, rect: Rect, noisy: int, value: int = 128, seed: int = 7):
    """Black box with `noisy` randomly placed grey pixels inside it."""
    page = blank_page()
    page[rect.y:rect.y1, rect.x:rect.x1, :3] = 0

    rng = np.random.default_rng(seed)
    for idx in rng.choice(rect.area, size=noisy, replace=False):
        row, col = divmod(int(idx), rect.w)
        page[rect.y + row, rect.x + col, :3] = value
    return PixelBuffer(page)


@pytest.mark.parametrize("size", [(1, 1), (5, 5), (40, 20), (100, 100)])
def test_uniform_black_is_not_lazy(blank_page, paint, size):
    rect = Rect(0, 0, *size)
    buffer = PixelBuffer(paint(blank_page(), rect, 0))
    assert is_lazy_redaction(buffer, rect) is False


def test_random_noise_above_threshold_is_lazy(blank_page):
    rect = Rect(10, 10, 20, 20)
    buffer = _noisy_box(blank_page, rect, noisy=24)  # 6%
    assert is_lazy_redaction(buffer, rect) is True


def test_exactly_five_percent_is_not_lazy(blank_page):
    """The ratio must strictly exceed 5%."""
    rect = Rect(10, 10, 10, 10)

    assert is_lazy_redaction(_noisy_box(blank_page, rect, noisy=5), rect) is False
    assert is_lazy_redaction(_noisy_box(blank_page, rect, noisy=6), rect) is True


@pytest.mark.parametrize("rect", [Rect(10, 10, 0, 10), Rect(10, 10, 10, 0), Rect(0, 0, 0, 0)])
def test_zero_area_is_not_lazy(redacted_page, rect):
    result = analyze_artifacts(redacted_page, rect)

    assert result.is_lazy is False
    assert result.total_pixels == 0
    assert is_lazy_redaction(redacted_page, rect) is False


def test_white_background_is_ignored(blank_page):
    """Near-white halo around a loosely drawn box does not count."""
    buffer = PixelBuffer(blank_page(value=252))
    assert is_lazy_redaction(buffer, Rect(0, 0, 50, 50)) is False


def test_artifact_band_limits():
    region = np.array(
        [[[25, 25, 25, 255], [35, 35, 35, 255], [200, 200, 200, 255], [252, 252, 252, 255]]],
        dtype=np.uint8,
    )
    assert count_artifact_pixels(region) == 2
    assert count_artifact_pixels(region, lower=20, upper=255) == 4
    assert count_artifact_pixels(region[:, :0]) == 0


def test_off_buffer_area_counts_as_fill(blank_page, paint):
    """Pixels of the rect outside the buffer dilute the ratio."""
    page = paint(blank_page(20, 20), Rect(0, 0, 20, 20), 0)
    page[10:11, 10:20, :3] = 128  # 10 grey pixels in the visible quarter
    buffer = PixelBuffer(page)

    visible = Rect(10, 10, 10, 10)
    overhanging = Rect(10, 10, 20, 20)

    assert is_lazy_redaction(buffer, visible) is True
    result = analyze_artifacts(buffer, overhanging)
    assert result.total_pixels == 400
    assert result.artifact_pixels == 10
    assert result.is_lazy is False


def test_analyze_artifacts_details(blank_page):
    rect = Rect(10, 10, 20, 20)
    result = analyze_artifacts(_noisy_box(blank_page, rect, noisy=40), rect)

    assert result.artifact_pixels == 40
    assert result.total_pixels == 400
    assert result.artifact_ratio == pytest.approx(0.1)
    assert result.mean_luminance == pytest.approx(40 * 128 / 400, rel=1e-6)
    assert result.is_lazy is True


def test_artifact_ratio_is_configurable(blank_page):
    rect = Rect(10, 10, 20, 20)
    buffer = _noisy_box(blank_page, rect, noisy=40)

    assert is_lazy_redaction(buffer, rect, AnalysisParams(artifact_ratio=0.2)) is False


def test_classifier_does_not_mutate_buffer(blank_page):
    rect = Rect(10, 10, 20, 20)
    buffer = _noisy_box(blank_page, rect, noisy=40)
    before = buffer.to_bytes()

    assert is_lazy_redaction(buffer, rect) == is_lazy_redaction(buffer, rect)
    assert buffer.to_bytes() == before
