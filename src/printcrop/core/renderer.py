"""Renderer capability and the NumPy/Pillow software raster implementation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image

from ..config import BACKGROUND_RGB
from .raster import ImageSource, PixelBox, blank_canvas
from .transform import ViewportTransform


@runtime_checkable
class Renderer(Protocol):
    """Drawing surface used by the compositor.

    Platforms supply their own implementation (software buffer, Qt raster,
    GPU canvas) without touching the geometry or filter code.
    """

    @property
    def size(self) -> tuple[int, int]:
        ...

    def fill(self, rgb: tuple[int, int, int]) -> None:
        ...

    def draw_image(self, source: ImageSource, transform: ViewportTransform) -> None:
        ...

    def get_pixels(self, box: PixelBox | None = None) -> np.ndarray:
        ...

    def put_pixels(self, left: int, top: int, data: np.ndarray) -> None:
        ...


def _inverse_affine(transform: ViewportTransform) -> tuple[float, ...]:
    """Return Pillow's output->input affine coefficients for *transform*."""

    inv = 1.0 / transform.scale
    return (
        inv, 0.0, -transform.offset_x * inv,
        0.0, inv, -transform.offset_y * inv,
    )


class SoftwareRenderer:
    """CPU renderer backed by an RGBA ``uint8`` NumPy array.

    Images are resampled with Pillow's bilinear affine transform and
    alpha-composited over the current contents.
    """

    def __init__(self, width: int, height: int, background: tuple[int, int, int] = BACKGROUND_RGB) -> None:
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self._pixels = blank_canvas(self._width, self._height, background)

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def fill(self, rgb: tuple[int, int, int]) -> None:
        self._pixels = blank_canvas(self._width, self._height, rgb)

    def draw_image(self, source: ImageSource, transform: ViewportTransform) -> None:
        if self._width == 0 or self._height == 0:
            return
        src = Image.fromarray(np.ascontiguousarray(source.pixels))
        warped = src.transform(
            (self._width, self._height),
            Image.Transform.AFFINE,
            _inverse_affine(transform),
            resample=Image.Resampling.BILINEAR,
            fillcolor=(0, 0, 0, 0),
        )
        base = Image.fromarray(self._pixels)
        self._pixels = np.array(Image.alpha_composite(base, warped), dtype=np.uint8)

    def get_pixels(self, box: PixelBox | None = None) -> np.ndarray:
        if box is None:
            return self._pixels.copy()
        clipped = box.clipped(self._width, self._height)
        return self._pixels[clipped.top:clipped.bottom, clipped.left:clipped.right].copy()

    def put_pixels(self, left: int, top: int, data: np.ndarray) -> None:
        data = np.asarray(data, dtype=np.uint8)
        target = PixelBox(int(left), int(top), data.shape[1], data.shape[0]).clipped(
            self._width, self._height
        )
        if target.width == 0 or target.height == 0:
            return
        src_left = target.left - int(left)
        src_top = target.top - int(top)
        self._pixels[target.top:target.bottom, target.left:target.right] = data[
            src_top:src_top + target.height, src_left:src_left + target.width
        ]


__all__ = ["Renderer", "SoftwareRenderer"]
