import math

import pytest

from printcrop.core.transform import (
    FitMode,
    NudgeDirection,
    ViewportTransform,
    initialize,
    nudge,
    pan_by,
    set_scale,
    wheel_zoom_factor,
    zoom_at,
)
from printcrop.config import MAX_SCALE, MIN_SCALE
from printcrop.errors import DegenerateGeometry


def test_fit_square_image_into_portrait_canvas():
    transform = initialize((600, 900), (1000, 1000), FitMode.FIT)
    assert transform.scale == pytest.approx(0.6)
    assert transform.offset_x == pytest.approx(0.0)
    assert transform.offset_y == pytest.approx(150.0)


def test_fill_covers_canvas_and_centres():
    transform = initialize((600, 900), (1000, 1000), "fill")
    assert transform.scale == pytest.approx(0.9)
    assert transform.offset_x == pytest.approx(-150.0)
    assert transform.offset_y == pytest.approx(0.0)


def test_initial_scale_is_clamped():
    transform = initialize((600, 900), (10, 10), FitMode.FIT)
    assert transform.scale == MAX_SCALE
    assert transform.image_to_canvas(5, 5) == pytest.approx((300.0, 450.0))


def test_initialize_rejects_empty_sizes():
    with pytest.raises(DegenerateGeometry):
        initialize((600, 900), (0, 100))
    with pytest.raises(DegenerateGeometry):
        initialize((0, 900), (100, 100))


def test_non_finite_scale_is_rejected():
    with pytest.raises(DegenerateGeometry):
        ViewportTransform(scale=float("inf"))


@pytest.mark.parametrize("factor", [1.7, 0.4, 100.0, 1e-6])
def test_zoom_keeps_anchor_fixed(factor):
    transform = ViewportTransform(0.6, 0.0, 150.0)
    anchor = (123.0, 456.0)
    image_point = transform.canvas_to_image(*anchor)

    zoomed = zoom_at(transform, anchor[0], anchor[1], factor)

    assert MIN_SCALE <= zoomed.scale <= MAX_SCALE
    assert zoomed.image_to_canvas(*image_point) == pytest.approx(anchor)


def test_zoom_with_invalid_factor_is_a_no_op():
    transform = ViewportTransform(0.6, 0.0, 150.0)
    assert zoom_at(transform, 10, 10, 0.0) is transform
    assert zoom_at(transform, 10, 10, math.nan) is transform


def test_set_scale_anchors_on_canvas_centre():
    transform = ViewportTransform(0.6, 0.0, 150.0)
    centre_image = transform.canvas_to_image(300, 450)
    scaled = set_scale(transform, 1.5, (600, 900))
    assert scaled.scale == pytest.approx(1.5)
    assert scaled.image_to_canvas(*centre_image) == pytest.approx((300.0, 450.0))


def test_pan_allows_dragging_off_canvas():
    transform = pan_by(ViewportTransform(1.0, 0.0, 0.0), -5000.0, 20.0)
    assert (transform.offset_x, transform.offset_y) == (-5000.0, 20.0)


def test_nudge_moves_two_pixels():
    transform = ViewportTransform(1.0, 10.0, 10.0)
    assert nudge(transform, NudgeDirection.UP).offset_y == 8.0
    assert nudge(transform, NudgeDirection.RIGHT).offset_x == 12.0


def test_wheel_up_zooms_in():
    assert wheel_zoom_factor(0) == 1.0
    assert wheel_zoom_factor(-100) == pytest.approx(math.exp(0.12))
    assert wheel_zoom_factor(100) < 1.0
