"""Public entry point of the pixel filter pipeline."""

from __future__ import annotations

import numpy as np

from .algorithms import FilterParameters, clarity_kernel
from .numpy_executor import apply_brightness, apply_contrast, convolve3x3


def apply_filters(
    raster: np.ndarray,
    clarity: float = 0.0,
    brightness: float = 0.0,
    contrast: float = 0.0,
) -> np.ndarray:
    """Return a filtered copy of the RGBA *raster*.

    The stages always run in the same order: clarity convolution, contrast
    remap, brightness remap. A stage whose parameter is zero is skipped, so
    ``apply_filters(raster)`` is a byte-for-byte copy. The clarity pass makes
    the result fully opaque; contrast and brightness leave alpha untouched.

    The input is never modified, which keeps the decoded source pristine and
    lets any preview be recomputed from the parameters alone.
    """

    params = FilterParameters(clarity, brightness, contrast)
    result = np.array(raster, dtype=np.uint8, copy=True)
    if result.ndim != 3 or result.shape[2] != 4:
        raise ValueError(f"Expected an RGBA raster, got shape {result.shape!r}")

    if params.clarity != 0.0:
        result = convolve3x3(result, clarity_kernel(params.clarity))
    if params.contrast != 0.0:
        result = apply_contrast(result, params.contrast)
    if params.brightness != 0.0:
        result = apply_brightness(result, params.brightness)
    return result


def apply_filter_parameters(raster: np.ndarray, params: FilterParameters) -> np.ndarray:
    return apply_filters(raster, params.clarity, params.brightness, params.contrast)


__all__ = ["apply_filter_parameters", "apply_filters"]
