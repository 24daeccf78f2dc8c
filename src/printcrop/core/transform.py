"""Viewport transform: maps image space onto canvas space.

``canvas_point = image_point * scale + offset``. Every function returns a new
:class:`ViewportTransform`; the scale clamp lives in the constructor so no
operation can produce an out-of-range scale.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from ..config import MAX_SCALE, MIN_SCALE, NUDGE_STEP_PX, WHEEL_ZOOM_SENSITIVITY
from ..errors import DegenerateGeometry


class FitMode(str, enum.Enum):
    """How the image is sized against the canvas on initialisation."""

    FIT = "fit"
    FILL = "fill"


class NudgeDirection(enum.Enum):
    """Keyboard panning directions as unit offsets."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


def clamp_scale(value: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, float(value)))


@dataclass(frozen=True)
class ViewportTransform:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.scale):
            raise DegenerateGeometry(f"Scale must be finite, got {self.scale!r}")
        object.__setattr__(self, "scale", clamp_scale(self.scale))

    def image_to_canvas(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale + self.offset_x, y * self.scale + self.offset_y

    def canvas_to_image(self, x: float, y: float) -> tuple[float, float]:
        return (x - self.offset_x) / self.scale, (y - self.offset_y) / self.scale

    def translated(self, dx: float, dy: float) -> "ViewportTransform":
        return ViewportTransform(self.scale, self.offset_x + dx, self.offset_y + dy)


def initialize(
    canvas_size: tuple[int, int],
    image_size: tuple[int, int],
    fit_mode: FitMode = FitMode.FIT,
) -> ViewportTransform:
    """Return the transform that fits or fills *canvas_size* and centres the image."""

    canvas_w, canvas_h = canvas_size
    image_w, image_h = image_size
    if canvas_w <= 0 or canvas_h <= 0 or image_w <= 0 or image_h <= 0:
        raise DegenerateGeometry(
            f"Cannot fit a {image_w}x{image_h} image into a {canvas_w}x{canvas_h} canvas"
        )

    ratio_w = canvas_w / image_w
    ratio_h = canvas_h / image_h
    if FitMode(fit_mode) is FitMode.FIT:
        scale = clamp_scale(min(ratio_w, ratio_h))
    else:
        scale = clamp_scale(max(ratio_w, ratio_h))
    return ViewportTransform(
        scale=scale,
        offset_x=(canvas_w - image_w * scale) / 2.0,
        offset_y=(canvas_h - image_h * scale) / 2.0,
    )


def pan_by(transform: ViewportTransform, dx: float, dy: float) -> ViewportTransform:
    """Shift the image; it may be dragged entirely off the canvas."""

    return transform.translated(dx, dy)


def zoom_at(
    transform: ViewportTransform,
    anchor_x: float,
    anchor_y: float,
    factor: float,
) -> ViewportTransform:
    """Zoom by *factor* while keeping the image point under the anchor fixed."""

    if not math.isfinite(factor) or factor <= 0.0:
        return transform
    before_x, before_y = transform.canvas_to_image(anchor_x, anchor_y)
    new_scale = clamp_scale(transform.scale * factor)
    return ViewportTransform(
        scale=new_scale,
        offset_x=anchor_x - before_x * new_scale,
        offset_y=anchor_y - before_y * new_scale,
    )


def set_scale(
    transform: ViewportTransform,
    new_scale: float,
    canvas_size: tuple[int, int],
) -> ViewportTransform:
    """Apply an absolute scale anchored on the canvas centre."""

    if not math.isfinite(new_scale) or new_scale <= 0.0:
        return transform
    anchor_x = canvas_size[0] / 2.0
    anchor_y = canvas_size[1] / 2.0
    before_x, before_y = transform.canvas_to_image(anchor_x, anchor_y)
    scale = clamp_scale(new_scale)
    return ViewportTransform(
        scale=scale,
        offset_x=anchor_x - before_x * scale,
        offset_y=anchor_y - before_y * scale,
    )


def nudge(
    transform: ViewportTransform,
    direction: NudgeDirection,
    step: float = NUDGE_STEP_PX,
) -> ViewportTransform:
    unit_x, unit_y = NudgeDirection(direction).value
    return transform.translated(unit_x * step, unit_y * step)


def wheel_zoom_factor(delta_y: float) -> float:
    """Return the zoom factor for a wheel event; scrolling up zooms in."""

    return math.exp(-float(delta_y) * WHEEL_ZOOM_SENSITIVITY)


__all__ = [
    "FitMode",
    "NudgeDirection",
    "ViewportTransform",
    "clamp_scale",
    "initialize",
    "nudge",
    "pan_by",
    "set_scale",
    "wheel_zoom_factor",
    "zoom_at",
]
