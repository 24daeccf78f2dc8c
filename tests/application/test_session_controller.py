import logging
import threading
from unittest.mock import Mock

import numpy as np
import pytest

from printcrop.application.session_controller import CropSessionController
from printcrop.core import session
from printcrop.core.export import ExportedCrop
from printcrop.core.scheduler import ManualScheduler
from printcrop.core.session import SessionPhase
from printcrop.errors import DecodeFailure
from printcrop.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from printcrop.events import (
    CropExportedEvent,
    EventBus,
    ImageDecodeFailedEvent,
    ImageLoadedEvent,
    PreviewRenderedEvent,
)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def bus():
    bus = EventBus()
    yield bus
    bus.shutdown()


@pytest.fixture
def controller(scheduler, bus):
    ctrl = CropSessionController(
        session.new_session(viewport_height_px=180),
        scheduler=scheduler,
        event_bus=bus,
    )
    yield ctrl
    ctrl.shutdown()


def _collect(bus, event_type):
    received = []
    bus.subscribe(event_type, received.append)
    return received


def test_load_bytes_publishes_image_loaded(controller, bus, png_bytes):
    loaded = _collect(bus, ImageLoadedEvent)

    assert controller.load_bytes(png_bytes(20, 10)) is True

    assert controller.state.phase is SessionPhase.LOADED
    assert [(event.width, event.height) for event in loaded] == [(20, 10)]


def test_decode_failure_keeps_session_and_reports(scheduler, bus):
    handler = ErrorHandler(logging.getLogger("test"), bus)
    ui_callback = Mock()
    handler.register_ui_callback(ui_callback)
    controller = CropSessionController(
        session.new_session(viewport_height_px=180),
        scheduler=scheduler,
        event_bus=bus,
        error_handler=handler,
    )
    errors = _collect(bus, ErrorOccurredEvent)
    failures = _collect(bus, ImageDecodeFailedEvent)
    before = controller.state

    assert controller.load_bytes(b"definitely not an image") is False

    assert controller.state is before
    assert controller.state.phase is SessionPhase.EMPTY
    assert isinstance(errors[0].error, DecodeFailure)
    assert errors[0].severity is ErrorSeverity.ERROR
    assert len(failures) == 1
    ui_callback.assert_called_once()
    controller.shutdown()


def test_load_path_missing_file(controller, tmp_path):
    assert controller.load_path(tmp_path / "missing.png") is False
    assert not controller.state.has_image


def test_clarity_eases_through_scheduler(controller, scheduler):
    controller.set_clarity(50)
    assert controller.state.clarity_target == 50.0
    assert controller.state.filters.clarity == 0.0

    scheduler.tick()
    assert controller.state.filters.clarity == 10.0

    scheduler.run_until_idle()
    assert controller.state.filters.clarity == 50.0


def test_reset_filters_stops_easing(controller, scheduler):
    controller.set_filter("contrast", 30)
    controller.set_clarity(80)
    scheduler.tick()
    controller.reset_filters()

    assert scheduler.active_count == 0
    assert controller.state.filters.is_identity


def test_listeners_only_fire_on_change(controller):
    seen = []
    controller.add_listener(seen.append)

    controller.pan(5, 5)
    assert seen == []

    controller.set_filter("brightness", 10)
    assert len(seen) == 1
    controller.remove_listener(seen.append)
    controller.set_filter("brightness", 20)
    assert len(seen) == 1


def test_export_adds_to_gallery_and_publishes(controller, bus, png_bytes):
    exported = _collect(bus, CropExportedEvent)
    controller.load_bytes(png_bytes(40, 60, (0, 0, 255)))

    crop = controller.export_crop()

    assert isinstance(crop, ExportedCrop)
    assert (crop.width, crop.height) == (11, 14)
    assert np.all(crop.pixels == (0, 0, 255))
    assert controller.gallery.items() == [crop]
    assert exported[0].crop is crop
    assert controller.state.phase is SessionPhase.LOADED


def test_export_without_image_returns_none(controller):
    assert controller.export_crop() is None
    assert len(controller.gallery) == 0


def test_render_preview_returns_to_loaded(controller, png_bytes):
    controller.load_bytes(png_bytes())
    preview = controller.render_preview()
    assert preview.shape == (60, 40, 4)
    assert controller.state.phase is SessionPhase.LOADED


def test_request_preview_delivers_on_worker(controller, bus, png_bytes):
    rendered = _collect(bus, PreviewRenderedEvent)
    done = threading.Event()
    received = []

    def callback(pixels):
        received.append(pixels.shape)
        done.set()

    controller.load_bytes(png_bytes())
    controller.request_preview(callback)

    assert done.wait(timeout=5)
    assert received == [(60, 40, 4)]
    assert rendered[0].generation == 1


def test_viewport_delegation(controller, png_bytes):
    controller.load_bytes(png_bytes(40, 60))
    start = controller.state.transform

    controller.nudge(session.NudgeDirection.LEFT)
    assert controller.state.transform.offset_x == start.offset_x - 2.0

    controller.zoom(20, 30, 2.0)
    assert controller.state.transform.scale == pytest.approx(2.0)

    controller.reset_view()
    assert controller.state.transform == start
