"""
Tests for report image compositing.
"""

import numpy as np
import pytest

from undacted.models import PixelBuffer, Rect, Profile, AnalysisParams
from undacted.report_compositor import ACCENT, BLACK, compose_report


@pytest.fixture
def page(blank_page, paint):
    return PixelBuffer(paint(blank_page(200, 120), Rect(40, 40, 120, 40), 0))


@pytest.fixture
def target():
    return Rect(40, 40, 120, 40)


@pytest.fixture
def match():
    return Profile(
        id="p-001",
        name="Jane Roe",
        role="Analyst",
        clearance="TOP SECRET",
        email="jroe@example.org",
    )


def _outside(rect: Rect, height: int, width: int) -> np.ndarray:
    mask = np.ones((height, width), dtype=bool)
    mask[rect.y:rect.y1, rect.x:rect.x1] = False
    return mask


def test_output_dimensions(page, target, match):
    out = compose_report(page, target, match)

    assert out.width == page.width
    assert out.height == page.height + 150
    assert len(out.to_bytes()) == page.width * (page.height + 150) * 4


def test_source_rows_preserved_outside_redaction(page, target, match):
    out = compose_report(page, target, match)
    top = out.pixels[:page.height]
    mask = _outside(target, page.height, page.width)

    assert np.array_equal(top[mask], page.pixels[mask])


@pytest.mark.parametrize(
    "name",
    ["Jane Roe", "Epstein", "John Smith", "Ann Lee", "J K", "O", "o", ".", "-", "I", "Bill Gates"],
)
def test_name_overlaid_at_redaction_center(page, target, name):
    """The center pixel changes even when it falls in a gap, space or counter."""
    out = compose_report(page, target, Profile(id="p", name=name, role="r", clearance="c"))
    cx, cy = int(target.center[0]), int(target.center[1])
    mask = _outside(target, page.height, page.width)

    assert not np.array_equal(out.pixels[cy, cx], page.pixels[cy, cx])
    assert np.array_equal(out.pixels[:page.height][mask], page.pixels[mask])


@pytest.mark.parametrize("target", [Rect(40, 40, 121, 41), Rect(0, 0, 7, 5), Rect(190, 110, 10, 10)])
def test_center_changes_for_odd_and_edge_rects(page, target):
    out = compose_report(page, target, Profile(id="p", name="Ann Lee", role="r", clearance="c"))
    cx, cy = int(target.center[0]), int(target.center[1])

    assert not np.array_equal(out.pixels[cy, cx], page.pixels[cy, cx])


def test_empty_name_leaves_source_untouched(page, target, match):
    nameless = Profile(id="x", name="", role="r", clearance="c")
    out = compose_report(page, target, nameless)

    assert np.array_equal(out.pixels[:page.height], page.pixels)


def test_footer_band(page, target, match):
    out = compose_report(page, target, match)
    h = page.height

    # Divider spans the top of the band, never the source rows
    assert tuple(out.pixels[h, page.width - 1]) == ACCENT
    assert tuple(out.pixels[h + 3, page.width - 1]) == ACCENT
    # Solid black below the divider, away from the text
    assert tuple(out.pixels[h + 149, page.width - 1]) == BLACK
    assert tuple(out.pixels[h + 10, 5]) == BLACK
    # Some text was rendered in the band
    band = out.pixels[h + 5:]
    assert np.any(band[..., :3] != 0)


def test_input_not_mutated(page, target, match):
    before = page.to_bytes()
    compose_report(page, target, match)
    assert page.to_bytes() == before


def test_compose_is_deterministic(page, target, match):
    assert compose_report(page, target, match).to_bytes() == compose_report(page, target, match).to_bytes()


def test_output_is_independent_of_input(page, target, match):
    out = compose_report(page, target, match)
    assert not np.shares_memory(out.pixels, page.pixels)


def test_footer_height_is_configurable(page, target, match):
    out = compose_report(page, target, match, AnalysisParams(footer_height=200))
    assert out.height == page.height + 200


def test_redaction_rect_outside_page(page, match):
    """An off-page rect only affects the footer."""
    out = compose_report(page, Rect(500, 500, 50, 20), match)
    assert np.array_equal(out.pixels[:page.height], page.pixels)
