import pytest

from printcrop.core.paper import (
    PaperCanvas,
    available_height,
    display_scale_factor,
    resolve_paper_preset,
)
from printcrop.errors import InvalidDimension


def test_display_scale_factor_fills_reference_height():
    factor = display_scale_factor(available_height(1080), 300)
    assert factor == pytest.approx(960 / 1800)


def test_default_4x6_canvas_at_1080p():
    paper = PaperCanvas.for_viewport(4, 6, 300, 1080)
    assert paper.px_per_inch == pytest.approx(160.0)
    assert paper.canvas_size == (640, 960)


def test_canvas_size_does_not_depend_on_dpi():
    paper = PaperCanvas.for_viewport(4, 6, 300, 1080)
    low_dpi = paper.with_dpi(76, 1080)
    assert low_dpi.dpi == 76
    assert low_dpi.canvas_size == paper.canvas_size


def test_a4_canvas_rounds_to_whole_pixels():
    width, height = resolve_paper_preset("A4")
    paper = PaperCanvas.for_viewport(width, height, 300, 1080)
    assert paper.canvas_size == (1323, 1870)


def test_viewport_change_rescales_canvas():
    paper = PaperCanvas.for_viewport(4, 6, 300, 1080).with_viewport(720)
    assert paper.canvas_size == (400, 600)


@pytest.mark.parametrize(
    "width, height, dpi, viewport",
    [
        (0, 6, 300, 1080),
        (4, -6, 300, 1080),
        (4, 6, 0, 1080),
        (4, 6, 300, 100),
        (4, float("nan"), 300, 1080),
    ],
)
def test_invalid_dimensions_are_rejected(width, height, dpi, viewport):
    with pytest.raises(InvalidDimension):
        PaperCanvas.for_viewport(width, height, dpi, viewport)


def test_unknown_paper_preset():
    with pytest.raises(InvalidDimension):
        resolve_paper_preset("letter")
