"""Immutable raster primitives shared by the compositor and the filters."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..errors import DecodeFailure


def round_half_away_from_zero(value: float) -> int:
    """Round *value* to the nearest integer, sending ``.5`` away from zero.

    Python's :func:`round` uses banker's rounding, which would make a crop of
    ``x.5`` pixels alternate between neighbours depending on parity.
    """

    magnitude = math.floor(abs(value) + 0.5)
    return int(magnitude if value >= 0 else -magnitude)


@dataclass(frozen=True, eq=False)
class ImageSource:
    """Decoded RGBA raster with a top-left origin.

    The pixel buffer has shape ``(height, width, 4)`` and is flagged read-only
    so the pristine source can be re-filtered from parameters alone.
    """

    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_array(cls, array: np.ndarray) -> "ImageSource":
        """Return an :class:`ImageSource` wrapping a private copy of *array*.

        Grayscale ``(h, w)``, RGB ``(h, w, 3)`` and RGBA ``(h, w, 4)`` arrays are
        accepted; missing alpha is filled with 255.
        """

        data = np.asarray(array)
        if data.ndim == 2:
            data = np.repeat(data[:, :, None], 3, axis=2)
        if data.ndim != 3 or data.shape[2] not in (3, 4):
            raise DecodeFailure(f"Unsupported pixel layout {data.shape!r}")
        height, width = int(data.shape[0]), int(data.shape[1])
        if width <= 0 or height <= 0:
            raise DecodeFailure(f"Decoded image has no pixels ({width}x{height})")

        rgba = np.empty((height, width, 4), dtype=np.uint8)
        rgba[..., :3] = np.clip(data[..., :3], 0, 255)
        if data.shape[2] == 4:
            rgba[..., 3] = np.clip(data[..., 3], 0, 255)
        else:
            rgba[..., 3] = 255
        rgba.setflags(write=False)
        return cls(width=width, height=height, pixels=rgba)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class PixelBox:
    """Integer pixel rectangle used for renderer read-back and write-back."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def clipped(self, width: int, height: int) -> "PixelBox":
        """Return the intersection of this box with a ``width`` x ``height`` area."""

        left = max(0, min(self.left, width))
        top = max(0, min(self.top, height))
        right = max(left, min(self.right, width))
        bottom = max(top, min(self.bottom, height))
        return PixelBox(left, top, right - left, bottom - top)


def blank_canvas(width: int, height: int, rgb: tuple[int, int, int]) -> np.ndarray:
    """Return an opaque ``(height, width, 4)`` raster filled with *rgb*."""

    canvas = np.empty((max(0, height), max(0, width), 4), dtype=np.uint8)
    canvas[..., 0] = rgb[0]
    canvas[..., 1] = rgb[1]
    canvas[..., 2] = rgb[2]
    canvas[..., 3] = 255
    return canvas


__all__ = ["ImageSource", "PixelBox", "blank_canvas", "round_half_away_from_zero"]
