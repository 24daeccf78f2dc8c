"""Scalar maths behind the clarity, contrast and brightness filters.

Nothing in here touches pixel buffers; the executors turn these coefficients
into array operations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ...config import FILTER_MAX, FILTER_MIN


def clamp_parameter(value: float) -> float:
    """Clamp a slider value to ``[-100, 100]``; NaN collapses to ``0``."""

    numeric = float(value)
    if math.isnan(numeric):
        return 0.0
    return max(FILTER_MIN, min(FILTER_MAX, numeric))


def sharpen_kernel(clarity: float) -> np.ndarray:
    """Return the 3x3 sharpen kernel for ``clarity >= 0``."""

    centre = 5.0 + clarity / 20.0
    return np.array(
        [
            [0.0, -1.0, 0.0],
            [-1.0, centre, -1.0],
            [0.0, -1.0, 0.0],
        ],
        dtype=np.float64,
    )


def soften_kernel(clarity: float) -> np.ndarray:
    """Return the 3x3 soften kernel for ``clarity < 0``."""

    centre = 3.0 + clarity / 50.0
    return np.array(
        [
            [0.0, 1.0, 0.0],
            [1.0, centre, 1.0],
            [0.0, 1.0, 0.0],
        ],
        dtype=np.float64,
    )


def clarity_kernel(clarity: float) -> np.ndarray:
    clarity = clamp_parameter(clarity)
    if clarity >= 0.0:
        return sharpen_kernel(clarity)
    return soften_kernel(clarity)


def contrast_factor(contrast: float) -> float:
    """Return the classic ``259(c + 255) / (255(259 - c))`` contrast gain."""

    contrast = clamp_parameter(contrast)
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


@dataclass(frozen=True)
class FilterParameters:
    """Clarity, brightness and contrast, each pre-clamped to ``[-100, 100]``."""

    clarity: float = 0.0
    brightness: float = 0.0
    contrast: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "clarity", clamp_parameter(self.clarity))
        object.__setattr__(self, "brightness", clamp_parameter(self.brightness))
        object.__setattr__(self, "contrast", clamp_parameter(self.contrast))

    @property
    def is_identity(self) -> bool:
        return self.clarity == 0.0 and self.brightness == 0.0 and self.contrast == 0.0


__all__ = [
    "FilterParameters",
    "clamp_parameter",
    "clarity_kernel",
    "contrast_factor",
    "sharpen_kernel",
    "soften_kernel",
]
