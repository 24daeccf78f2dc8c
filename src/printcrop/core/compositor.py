"""Deterministic compositor for the live preview and the exported crop."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from ..config import (
    BACKGROUND_RGB,
    CROP_BORDER_RGB,
    CROP_BORDER_WIDTH_PX,
    CROP_MASK_OPACITY,
    CROSSHAIR_HALF_LENGTH_PX,
)
from .crop import CropRect
from .filters.facade import apply_filter_parameters
from .renderer import Renderer, SoftwareRenderer
from .session import SessionState

RendererFactory = Callable[[int, int], Renderer]


def _paint(canvas: np.ndarray, left: int, top: int, right: int, bottom: int, rgb) -> None:
    height, width = canvas.shape[:2]
    left, right = max(0, left), min(width, right)
    top, bottom = max(0, top), min(height, bottom)
    if left < right and top < bottom:
        canvas[top:bottom, left:right, :3] = rgb


def draw_crop_overlay(canvas: np.ndarray, rect: CropRect) -> np.ndarray:
    """Darken everything outside *rect* and draw its border and crosshair.

    Returns a new raster; *canvas* is left untouched.
    """

    result = canvas.copy()
    height, width = result.shape[:2]
    box = rect.to_box()

    outside = np.ones((height, width), dtype=bool)
    inner = box.clipped(width, height)
    outside[inner.top:inner.bottom, inner.left:inner.right] = False
    rgb = result[..., :3].astype(np.float64)
    darkened = np.rint(rgb * (1.0 - CROP_MASK_OPACITY)).astype(np.uint8)
    result[..., :3] = np.where(outside[..., None], darkened, result[..., :3])

    if rect.is_empty:
        return result

    band = CROP_BORDER_WIDTH_PX
    _paint(result, box.left, box.top, box.right, box.top + band, CROP_BORDER_RGB)
    _paint(result, box.left, box.bottom - band, box.right, box.bottom, CROP_BORDER_RGB)
    _paint(result, box.left, box.top, box.left + band, box.bottom, CROP_BORDER_RGB)
    _paint(result, box.right - band, box.top, box.right, box.bottom, CROP_BORDER_RGB)

    centre_x = box.left + box.width // 2
    centre_y = box.top + box.height // 2
    reach = CROSSHAIR_HALF_LENGTH_PX
    half_band = band // 2
    _paint(
        result,
        centre_x - reach, centre_y - half_band,
        centre_x + reach, centre_y - half_band + band,
        CROP_BORDER_RGB,
    )
    _paint(
        result,
        centre_x - half_band, centre_y - reach,
        centre_x - half_band + band, centre_y + reach,
        CROP_BORDER_RGB,
    )
    return result


class Compositor:
    """Render session snapshots through a :class:`Renderer`.

    The preview filters the whole canvas; the export filters a crop-sized
    raster on its own. Border pixels of the two can therefore differ because
    the convolution sees different neighbours at the crop edge.
    """

    def __init__(self, renderer_factory: RendererFactory = SoftwareRenderer) -> None:
        self._renderer_factory = renderer_factory

    def render_canvas(self, state: SessionState) -> np.ndarray:
        """Return the filtered canvas without overlays."""

        width, height = state.canvas_size
        renderer = self._renderer_factory(width, height)
        renderer.fill(BACKGROUND_RGB)
        if state.image is not None and state.transform is not None:
            renderer.draw_image(state.image, state.transform)
        pixels = renderer.get_pixels()
        if state.image is not None and not state.filters.is_identity:
            pixels = apply_filter_parameters(pixels, state.filters)
        return pixels

    def render_preview(self, state: SessionState) -> np.ndarray:
        return draw_crop_overlay(self.render_canvas(state), state.crop_rect)

    def render_export(self, state: SessionState) -> np.ndarray | None:
        """Return the crop as an opaque ``(h, w, 3)`` RGB raster.

        The crop origin is rounded the same way as the preview overlay so the
        exported pixels line up with the canvas pixel grid.

        Returns ``None`` when there is nothing to export.
        """

        rect = state.crop_rect
        if state.image is None or state.transform is None or rect.is_empty:
            return None
        box = rect.to_box()
        renderer = self._renderer_factory(box.width, box.height)
        renderer.fill(BACKGROUND_RGB)
        renderer.draw_image(state.image, state.transform.translated(-box.left, -box.top))
        pixels = renderer.get_pixels()
        if not state.filters.is_identity:
            pixels = apply_filter_parameters(pixels, state.filters)
        return np.ascontiguousarray(pixels[..., :3])


__all__ = ["Compositor", "RendererFactory", "draw_crop_overlay"]
