from .algorithms import (
    FilterParameters,
    clamp_parameter,
    clarity_kernel,
    contrast_factor,
    sharpen_kernel,
    soften_kernel,
)
from .facade import apply_filter_parameters, apply_filters

__all__ = [
    "FilterParameters",
    "apply_filter_parameters",
    "apply_filters",
    "clamp_parameter",
    "clarity_kernel",
    "contrast_factor",
    "sharpen_kernel",
    "soften_kernel",
]
