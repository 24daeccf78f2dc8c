"""Immutable session state and its pure transition functions.

Each user input maps to exactly one transition. Transitions never raise for
bad user input: an invalid dimension or an operation without a loaded image
returns the state unchanged.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace

from ..config import (
    DEFAULT_CROP_SIZE_IN,
    DEFAULT_DPI,
    DEFAULT_PAPER_PRESET,
    DEFAULT_VIEWPORT_HEIGHT_PX,
)
from ..errors import DegenerateGeometry, InvalidDimension
from . import transform as viewport
from .crop import CropRect, CropSize, parse_crop_input, resolve_preset, to_pixels
from .filters.algorithms import FilterParameters, clamp_parameter
from .paper import PaperCanvas, resolve_paper_preset
from .raster import ImageSource
from .transform import FitMode, NudgeDirection, ViewportTransform

_LOGGER = logging.getLogger(__name__)


class SessionPhase(enum.Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    PREVIEWING = "previewing"
    EXPORTING = "exporting"


class FilterName(str, enum.Enum):
    CLARITY = "clarity"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"


@dataclass(frozen=True)
class SessionState:
    paper: PaperCanvas
    viewport_height_px: float
    crop: CropSize
    fit_mode: FitMode = FitMode.FIT
    filters: FilterParameters = field(default_factory=FilterParameters)
    clarity_target: float = 0.0
    image: ImageSource | None = None
    transform: ViewportTransform | None = None
    phase: SessionPhase = SessionPhase.EMPTY

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.paper.canvas_size

    @property
    def crop_rect(self) -> CropRect:
        return to_pixels(self.crop, self.canvas_size, self.paper.px_per_inch)


def new_session(
    *,
    paper_size_in: tuple[float, float] | None = None,
    dpi: float = DEFAULT_DPI,
    viewport_height_px: float = DEFAULT_VIEWPORT_HEIGHT_PX,
    crop_size_in: tuple[float, float] = DEFAULT_CROP_SIZE_IN,
    fit_mode: FitMode = FitMode.FIT,
) -> SessionState:
    """Return an empty session. Invalid defaults raise :class:`InvalidDimension`."""

    width_in, height_in = paper_size_in or resolve_paper_preset(DEFAULT_PAPER_PRESET)
    paper = PaperCanvas.for_viewport(width_in, height_in, dpi, viewport_height_px)
    return SessionState(
        paper=paper,
        viewport_height_px=float(viewport_height_px),
        crop=CropSize(float(crop_size_in[0]), float(crop_size_in[1])),
        fit_mode=FitMode(fit_mode),
    )


def _initial_transform(state: SessionState, image: ImageSource) -> ViewportTransform | None:
    try:
        return viewport.initialize(state.canvas_size, image.size, state.fit_mode)
    except DegenerateGeometry as exc:
        _LOGGER.debug("Transform left unset: %s", exc)
        return None


# ---------------------------------------------------------------------------
# Image lifecycle
# ---------------------------------------------------------------------------

def load_image(state: SessionState, image: ImageSource) -> SessionState:
    """Replace the image wholesale; filters and crop size carry over."""

    return replace(
        state,
        image=image,
        transform=_initial_transform(state, image),
        phase=SessionPhase.LOADED,
    )


def reset_view(state: SessionState) -> SessionState:
    if state.image is None:
        return state
    return replace(state, transform=_initial_transform(state, state.image))


def set_fit_mode(state: SessionState, fit_mode: FitMode | str) -> SessionState:
    try:
        mode = FitMode(fit_mode)
    except ValueError:
        _LOGGER.debug("Ignoring unknown fit mode %r", fit_mode)
        return state
    return reset_view(replace(state, fit_mode=mode))


# ---------------------------------------------------------------------------
# Viewport transform
# ---------------------------------------------------------------------------

def _update_transform(state: SessionState, new_transform: ViewportTransform) -> SessionState:
    if new_transform is state.transform:
        return state
    return replace(state, transform=new_transform)


def pan(state: SessionState, dx: float, dy: float) -> SessionState:
    if state.image is None or state.transform is None:
        return state
    return _update_transform(state, viewport.pan_by(state.transform, dx, dy))


def zoom(state: SessionState, anchor: tuple[float, float], factor: float) -> SessionState:
    if state.image is None or state.transform is None:
        return state
    return _update_transform(
        state, viewport.zoom_at(state.transform, anchor[0], anchor[1], factor)
    )


def wheel_zoom(state: SessionState, anchor: tuple[float, float], delta_y: float) -> SessionState:
    return zoom(state, anchor, viewport.wheel_zoom_factor(delta_y))


def set_zoom(state: SessionState, scale: float) -> SessionState:
    if state.image is None or state.transform is None:
        return state
    return _update_transform(
        state, viewport.set_scale(state.transform, scale, state.canvas_size)
    )


def nudge(state: SessionState, direction: NudgeDirection) -> SessionState:
    if state.image is None or state.transform is None:
        return state
    return _update_transform(state, viewport.nudge(state.transform, direction))


# ---------------------------------------------------------------------------
# Paper and crop
# ---------------------------------------------------------------------------

def set_paper_size(state: SessionState, width_in: float, height_in: float) -> SessionState:
    try:
        paper = state.paper.with_size(width_in, height_in)
    except InvalidDimension as exc:
        _LOGGER.debug("Rejected paper size: %s", exc)
        return state
    return replace(state, paper=paper)


def set_paper_preset(state: SessionState, name: str) -> SessionState:
    try:
        width_in, height_in = resolve_paper_preset(name)
    except InvalidDimension as exc:
        _LOGGER.debug("Rejected paper preset: %s", exc)
        return state
    return set_paper_size(state, width_in, height_in)


def set_dpi(state: SessionState, dpi: float) -> SessionState:
    try:
        paper = state.paper.with_dpi(dpi, state.viewport_height_px)
    except InvalidDimension as exc:
        _LOGGER.debug("Rejected dpi: %s", exc)
        return state
    return replace(state, paper=paper)


def set_viewport_height(state: SessionState, viewport_height_px: float) -> SessionState:
    try:
        paper = state.paper.with_viewport(viewport_height_px)
    except InvalidDimension as exc:
        _LOGGER.debug("Rejected viewport height: %s", exc)
        return state
    return replace(state, paper=paper, viewport_height_px=float(viewport_height_px))


def set_crop_size(state: SessionState, width_in: float, height_in: float) -> SessionState:
    try:
        crop = CropSize(float(width_in), float(height_in))
    except (InvalidDimension, TypeError, ValueError) as exc:
        _LOGGER.debug("Rejected crop size: %s", exc)
        return state
    return replace(state, crop=crop)


def apply_crop_preset(state: SessionState, width_text: str, height_text: str) -> SessionState:
    crop = resolve_preset(width_text, height_text, state.crop)
    return state if crop is state.crop else replace(state, crop=crop)


def apply_crop_input(state: SessionState, width_text: str, height_text: str) -> SessionState:
    crop = parse_crop_input(width_text, height_text, state.crop)
    return state if crop is state.crop else replace(state, crop=crop)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def set_filter(state: SessionState, name: FilterName | str, value: float) -> SessionState:
    """Set a filter slider.

    Brightness and contrast apply immediately. Clarity only moves the target;
    the easing controller advances ``filters.clarity`` through
    :func:`set_clarity_current`.
    """

    try:
        key = FilterName(name)
    except ValueError:
        _LOGGER.debug("Ignoring unknown filter %r", name)
        return state
    try:
        numeric = clamp_parameter(value)
    except (TypeError, ValueError) as exc:
        _LOGGER.debug("Rejected %s value %r: %s", key.value, value, exc)
        return state
    if key is FilterName.CLARITY:
        return replace(state, clarity_target=numeric)
    return replace(state, filters=replace(state.filters, **{key.value: numeric}))


def set_clarity_current(state: SessionState, value: float) -> SessionState:
    return replace(state, filters=replace(state.filters, clarity=value))


def snap_clarity(state: SessionState) -> SessionState:
    return set_clarity_current(state, state.clarity_target)


def reset_filters(state: SessionState) -> SessionState:
    return replace(state, filters=FilterParameters(), clarity_target=0.0)


# ---------------------------------------------------------------------------
# Render phases
# ---------------------------------------------------------------------------

def begin_preview(state: SessionState) -> SessionState:
    if state.phase is not SessionPhase.LOADED:
        return state
    return replace(state, phase=SessionPhase.PREVIEWING)


def request_export(state: SessionState) -> SessionState:
    if state.phase is not SessionPhase.LOADED:
        return state
    return replace(state, phase=SessionPhase.EXPORTING)


def finish_render(state: SessionState) -> SessionState:
    if state.phase in (SessionPhase.PREVIEWING, SessionPhase.EXPORTING):
        return replace(state, phase=SessionPhase.LOADED)
    return state
