"""Stateful shell that drives the pure session core from user input."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import Any

import numpy as np

from ..core import session as transitions
from ..core.compositor import Compositor
from ..core.easing import ClarityEaser
from ..core.export import ExportedCrop
from ..core.raster import ImageSource
from ..core.scheduler import ManualScheduler, Scheduler
from ..core.session import FilterName, SessionState
from ..core.transform import FitMode, NudgeDirection
from ..errors import DecodeFailure
from ..errors.handler import ErrorHandler, ErrorSeverity
from ..events import (
    CropExportedEvent,
    EventBus,
    ImageDecodeFailedEvent,
    ImageLoadedEvent,
    PreviewRenderedEvent,
)
from ..utils.image_loader import decode_image_bytes, load_image_source
from .filter_runner import FilterPassRunner
from .gallery import CropGallery

_LOGGER = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class CropSessionController:
    """Own the current :class:`SessionState` and apply transitions to it.

    The controller is meant to be driven from one thread (the UI thread).
    Rendering reads immutable snapshots, so background preview passes never
    observe a half-applied transition.
    """

    def __init__(
        self,
        state: SessionState | None = None,
        *,
        scheduler: Scheduler | None = None,
        compositor: Compositor | None = None,
        runner: FilterPassRunner | None = None,
        event_bus: EventBus | None = None,
        error_handler: ErrorHandler | None = None,
        gallery: CropGallery | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._state = state if state is not None else transitions.new_session()
        self._compositor = compositor or Compositor()
        self._runner = runner or FilterPassRunner()
        self._events = event_bus or EventBus()
        self._errors = error_handler or ErrorHandler(_LOGGER, self._events)
        self._gallery = gallery if gallery is not None else CropGallery()
        self._listeners: list[StateListener] = []
        self._easer = ClarityEaser(
            scheduler or ManualScheduler(),
            on_update=self._on_clarity_frame,
            initial=self._state.filters.clarity,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def gallery(self) -> CropGallery:
        return self._gallery

    @property
    def easer(self) -> ClarityEaser:
        return self._easer

    def add_listener(self, listener: StateListener) -> None:
        """Call *listener* with the new state after every change."""

        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _apply(self, transition: Callable[..., SessionState], *args: Any) -> SessionState:
        with self._lock:
            previous = self._state
            self._state = transition(previous, *args)
            current = self._state
        if current is not previous:
            for listener in list(self._listeners):
                listener(current)
        return current

    # ------------------------------------------------------------------
    # Image ingestion
    # ------------------------------------------------------------------
    def load_image(self, image: ImageSource) -> SessionState:
        state = self._apply(transitions.load_image, image)
        self._events.publish(ImageLoadedEvent(width=image.width, height=image.height))
        _LOGGER.info("Loaded %dx%d image", image.width, image.height)
        return state

    def load_bytes(self, data: bytes) -> bool:
        """Decode and load *data*; on failure the session is left untouched."""

        try:
            image = decode_image_bytes(data)
        except DecodeFailure as exc:
            self._report_decode_failure(exc, {"bytes": len(data)})
            return False
        self.load_image(image)
        return True

    def load_path(self, path: Path) -> bool:
        try:
            image = load_image_source(Path(path))
        except DecodeFailure as exc:
            self._report_decode_failure(exc, {"path": str(path)})
            return False
        self.load_image(image)
        return True

    def _report_decode_failure(self, exc: DecodeFailure, context: dict) -> None:
        self._errors.handle(exc, ErrorSeverity.ERROR, context)
        self._events.publish(ImageDecodeFailedEvent(reason=str(exc)))

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------
    def pan(self, dx: float, dy: float) -> SessionState:
        return self._apply(transitions.pan, dx, dy)

    def zoom(self, anchor_x: float, anchor_y: float, factor: float) -> SessionState:
        return self._apply(transitions.zoom, (anchor_x, anchor_y), factor)

    def wheel_zoom(self, anchor_x: float, anchor_y: float, delta_y: float) -> SessionState:
        return self._apply(transitions.wheel_zoom, (anchor_x, anchor_y), delta_y)

    def set_zoom(self, scale: float) -> SessionState:
        return self._apply(transitions.set_zoom, scale)

    def nudge(self, direction: NudgeDirection) -> SessionState:
        return self._apply(transitions.nudge, direction)

    def reset_view(self) -> SessionState:
        return self._apply(transitions.reset_view)

    def set_fit_mode(self, fit_mode: FitMode | str) -> SessionState:
        return self._apply(transitions.set_fit_mode, fit_mode)

    # ------------------------------------------------------------------
    # Paper and crop
    # ------------------------------------------------------------------
    def set_paper_size(self, width_in: float, height_in: float) -> SessionState:
        return self._apply(transitions.set_paper_size, width_in, height_in)

    def set_paper_preset(self, name: str) -> SessionState:
        return self._apply(transitions.set_paper_preset, name)

    def set_dpi(self, dpi: float) -> SessionState:
        return self._apply(transitions.set_dpi, dpi)

    def set_viewport_height(self, viewport_height_px: float) -> SessionState:
        return self._apply(transitions.set_viewport_height, viewport_height_px)

    def set_crop_size(self, width_in: float, height_in: float) -> SessionState:
        return self._apply(transitions.set_crop_size, width_in, height_in)

    def apply_crop_preset(self, width_text: str, height_text: str) -> SessionState:
        return self._apply(transitions.apply_crop_preset, width_text, height_text)

    def apply_crop_input(self, width_text: str, height_text: str) -> SessionState:
        return self._apply(transitions.apply_crop_input, width_text, height_text)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def set_filter(self, name: FilterName | str, value: float) -> SessionState:
        """Update a slider; clarity eases towards *value* over several frames."""

        state = self._apply(transitions.set_filter, name, value)
        if name == FilterName.CLARITY:
            self._easer.set_target(state.clarity_target)
        return state

    def set_clarity(self, target: float) -> SessionState:
        return self.set_filter(FilterName.CLARITY, target)

    def reset_filters(self) -> SessionState:
        self._easer.reset(0.0)
        return self._apply(transitions.reset_filters)

    def _on_clarity_frame(self, value: float) -> None:
        self._apply(transitions.set_clarity_current, value)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_preview(self) -> np.ndarray:
        """Render the preview synchronously from the current snapshot."""

        state = self._apply(transitions.begin_preview)
        try:
            pixels = self._compositor.render_preview(state)
        finally:
            self._apply(transitions.finish_render)
        return pixels

    def request_preview(
        self,
        callback: Callable[[np.ndarray], None] | None = None,
    ) -> Future:
        """Render the preview on the filter runner.

        Only the most recent request delivers its raster; earlier requests
        that finish late are dropped.
        """

        snapshot = self.state

        def _deliver(generation: int, pixels: np.ndarray) -> None:
            height, width = pixels.shape[:2]
            self._events.publish(
                PreviewRenderedEvent(generation=generation, width=width, height=height)
            )
            if callback is not None:
                callback(pixels)

        return self._runner.submit(
            self._compositor.render_preview, snapshot, on_result=_deliver
        )

    def export_crop(self) -> ExportedCrop | None:
        """Render the crop region and add it to the gallery.

        Returns ``None`` when no image is loaded or the crop is empty.
        """

        state = self._apply(transitions.request_export)
        if state.phase is not transitions.SessionPhase.EXPORTING:
            _LOGGER.debug("Export ignored in phase %s", state.phase.value)
            return None
        try:
            pixels = self._compositor.render_export(state)
        finally:
            self._apply(transitions.finish_render)
        if pixels is None:
            return None
        crop = ExportedCrop.from_pixels(pixels)
        self._gallery.add(crop)
        self._events.publish(CropExportedEvent(crop=crop))
        _LOGGER.info("Exported crop %s (%dx%d)", crop.id, crop.width, crop.height)
        return crop

    def shutdown(self) -> None:
        self._easer.cancel()
        self._runner.shutdown(wait=False)
        self._events.shutdown()


__all__ = ["CropSessionController"]
