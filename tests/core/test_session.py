import numpy as np
import pytest

from printcrop.core import session
from printcrop.core.crop import CropSize
from printcrop.core.raster import ImageSource
from printcrop.core.session import FilterName, SessionPhase
from printcrop.core.transform import FitMode, NudgeDirection


@pytest.fixture
def image():
    return ImageSource.from_array(np.zeros((1000, 1000, 3), dtype=np.uint8))


def test_new_session_defaults():
    state = session.new_session()
    assert state.phase is SessionPhase.EMPTY
    assert state.canvas_size == (640, 960)
    assert state.crop == CropSize(1.13, 1.37)
    assert state.transform is None
    assert state.filters.is_identity


def test_viewport_operations_without_image_are_no_ops():
    state = session.new_session()
    assert session.pan(state, 10, 10) is state
    assert session.zoom(state, (0, 0), 2.0) is state
    assert session.set_zoom(state, 2.0) is state
    assert session.nudge(state, NudgeDirection.DOWN) is state
    assert session.reset_view(state) is state


def test_load_image_fits_and_centres(image):
    state = session.load_image(session.new_session(), image)
    assert state.phase is SessionPhase.LOADED
    assert state.transform.scale == pytest.approx(0.64)
    assert state.transform.offset_x == pytest.approx(0.0)
    assert state.transform.offset_y == pytest.approx(160.0)


def test_fit_mode_change_reinitialises(image):
    state = session.load_image(session.new_session(), image)
    state = session.pan(state, 30, 30)
    filled = session.set_fit_mode(state, "fill")
    assert filled.fit_mode is FitMode.FILL
    assert filled.transform.scale == pytest.approx(0.96)
    assert session.set_fit_mode(state, "stretch") is state


def test_zoom_preserves_anchor(image):
    state = session.load_image(session.new_session(), image)
    anchor = (200.0, 300.0)
    point = state.transform.canvas_to_image(*anchor)
    zoomed = session.wheel_zoom(state, anchor, -240)
    assert zoomed.transform.scale > state.transform.scale
    assert zoomed.transform.image_to_canvas(*point) == pytest.approx(anchor)


def test_invalid_paper_and_dpi_leave_state_unchanged():
    state = session.new_session()
    assert session.set_paper_size(state, -1, 5) is state
    assert session.set_paper_preset(state, "letter") is state
    assert session.set_dpi(state, 0) is state
    assert session.set_viewport_height(state, 50) is state


def test_paper_change_keeps_transform(image):
    state = session.load_image(session.new_session(), image)
    a4 = session.set_paper_preset(state, "a4")
    assert a4.canvas_size == (1323, 1870)
    assert a4.transform == state.transform


def test_viewport_height_rescales_crop():
    state = session.set_viewport_height(session.new_session(), 720)
    assert state.canvas_size == (400, 600)
    assert state.crop_rect.width == 113


def test_crop_presets():
    state = session.apply_crop_preset(session.new_session(), "35mm", "45mm")
    assert state.crop == CropSize(1.38, 1.77)
    assert session.apply_crop_preset(state, "x", "45mm") is state
    assert session.set_crop_size(state, 0, 1) is state


def test_clarity_only_moves_target():
    state = session.set_filter(session.new_session(), FilterName.CLARITY, 60)
    assert state.clarity_target == 60.0
    assert state.filters.clarity == 0.0
    assert session.snap_clarity(state).filters.clarity == 60.0


def test_brightness_applies_immediately_and_clamps():
    state = session.set_filter(session.new_session(), "brightness", 150)
    assert state.filters.brightness == 100.0
    assert session.set_filter(state, "saturation", 5) is state


def test_non_numeric_filter_value_keeps_state():
    state = session.set_filter(session.new_session(), "brightness", 30)
    assert session.set_filter(state, "brightness", "abc") is state
    assert session.set_filter(state, FilterName.CLARITY, None) is state
    assert state.filters.brightness == 30.0


def test_load_image_keeps_filters_and_crop(image):
    state = session.set_filter(session.new_session(), "contrast", 25)
    state = session.apply_crop_preset(state, "2in", "2in")
    loaded = session.load_image(state, image)
    assert loaded.filters.contrast == 25.0
    assert loaded.crop == CropSize(2.0, 2.0)


def test_reset_filters():
    state = session.set_filter(session.new_session(), "contrast", 25)
    state = session.set_filter(state, "clarity", 25)
    state = session.reset_filters(state)
    assert state.filters.is_identity
    assert state.clarity_target == 0.0


def test_render_phase_transitions(image):
    empty = session.new_session()
    assert session.begin_preview(empty) is empty
    assert session.request_export(empty) is empty

    loaded = session.load_image(empty, image)
    previewing = session.begin_preview(loaded)
    assert previewing.phase is SessionPhase.PREVIEWING
    assert session.request_export(previewing) is previewing
    assert session.finish_render(previewing).phase is SessionPhase.LOADED

    exporting = session.request_export(loaded)
    assert exporting.phase is SessionPhase.EXPORTING
    assert session.finish_render(exporting).phase is SessionPhase.LOADED
