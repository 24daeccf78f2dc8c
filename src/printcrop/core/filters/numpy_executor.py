"""NumPy vectorized executor for the pixel filters.

Each function takes an RGBA ``uint8`` raster of shape ``(h, w, 4)`` and returns
a new one. Intermediate results are stored back to 8 bits after every stage,
clamped and rounded half-to-even, so the output matches an 8-bit clamped
pixel store.
"""

from __future__ import annotations

import numpy as np

from .algorithms import contrast_factor


def _to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp *values* to ``[0, 255]`` and round to the nearest 8-bit level."""

    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def convolve3x3(raster: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Convolve the RGB channels of *raster* with a 3x3 *kernel*.

    Taps that fall outside the raster contribute nothing, so border pixels see
    a partial kernel. Alpha is forced to 255 in the result.
    """

    height, width = raster.shape[:2]
    result = np.empty((height, width, 4), dtype=np.uint8)
    result[..., 3] = 255
    if height == 0 or width == 0:
        return result

    rgb = raster[..., :3].astype(np.float64)
    padded = np.pad(rgb, ((1, 1), (1, 1), (0, 0)), mode="constant", constant_values=0.0)
    acc = np.zeros_like(rgb)
    for ky in range(3):
        for kx in range(3):
            weight = float(kernel[ky, kx])
            if weight == 0.0:
                continue
            acc += weight * padded[ky:ky + height, kx:kx + width]

    result[..., :3] = _to_uint8(acc)
    return result


def apply_contrast(raster: np.ndarray, contrast: float) -> np.ndarray:
    """Stretch (or flatten) the RGB channels around mid-grey 128."""

    factor = contrast_factor(contrast)
    result = raster.copy()
    rgb = raster[..., :3].astype(np.float64)
    result[..., :3] = _to_uint8(factor * (rgb - 128.0) + 128.0)
    return result


def apply_brightness(raster: np.ndarray, brightness: float) -> np.ndarray:
    """Add *brightness* to every RGB channel, clamped to ``[0, 255]``."""

    result = raster.copy()
    rgb = raster[..., :3].astype(np.float64)
    result[..., :3] = _to_uint8(rgb + float(brightness))
    return result


__all__ = ["apply_brightness", "apply_contrast", "convolve3x3"]
