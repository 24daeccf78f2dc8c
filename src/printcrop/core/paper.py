"""Paper/canvas sizing: physical paper size, DPI and display scale to pixels."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from ..config import (
    PAPER_PRESETS,
    REFERENCE_PAPER_HEIGHT_IN,
    VIEWPORT_CHROME_PX,
)
from ..errors import InvalidDimension
from .raster import round_half_away_from_zero


def _require_positive(name: str, value: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDimension(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(numeric) or numeric <= 0.0:
        raise InvalidDimension(f"{name} must be positive, got {value!r}")
    return numeric


def available_height(viewport_height_px: float, chrome_px: float = VIEWPORT_CHROME_PX) -> float:
    """Return the screen height left for the canvas once window chrome is removed."""

    return float(viewport_height_px) - float(chrome_px)


def display_scale_factor(
    available_height_px: float,
    dpi: float,
    reference_height_in: float = REFERENCE_PAPER_HEIGHT_IN,
) -> float:
    """Return the factor that makes *reference_height_in* fill the available height."""

    height = _require_positive("available height", available_height_px)
    dots = _require_positive("dpi", dpi)
    return height / (reference_height_in * dots)


@dataclass(frozen=True)
class PaperCanvas:
    """Physical paper description and the pixel canvas derived from it."""

    width_in: float
    height_in: float
    dpi: float
    display_scale_factor: float

    def __post_init__(self) -> None:
        _require_positive("paper width", self.width_in)
        _require_positive("paper height", self.height_in)
        _require_positive("dpi", self.dpi)
        _require_positive("display scale factor", self.display_scale_factor)

    @classmethod
    def for_viewport(
        cls,
        width_in: float,
        height_in: float,
        dpi: float,
        viewport_height_px: float,
    ) -> "PaperCanvas":
        factor = display_scale_factor(available_height(viewport_height_px), dpi)
        return cls(float(width_in), float(height_in), float(dpi), factor)

    @property
    def px_per_inch(self) -> float:
        return self.dpi * self.display_scale_factor

    def inches_to_px(self, inches: float) -> int:
        return round_half_away_from_zero(inches * self.px_per_inch)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.inches_to_px(self.width_in), self.inches_to_px(self.height_in)

    def with_size(self, width_in: float, height_in: float) -> "PaperCanvas":
        return replace(
            self,
            width_in=_require_positive("paper width", width_in),
            height_in=_require_positive("paper height", height_in),
        )

    def with_dpi(self, dpi: float, viewport_height_px: float) -> "PaperCanvas":
        factor = display_scale_factor(available_height(viewport_height_px), dpi)
        return replace(self, dpi=float(dpi), display_scale_factor=factor)

    def with_viewport(self, viewport_height_px: float) -> "PaperCanvas":
        return self.with_dpi(self.dpi, viewport_height_px)


def resolve_paper_preset(name: str) -> tuple[float, float]:
    """Return ``(width_in, height_in)`` for a named paper preset."""

    key = (name or "").strip().lower()
    try:
        return PAPER_PRESETS[key]
    except KeyError:
        raise InvalidDimension(f"Unknown paper preset {name!r}") from None


__all__ = [
    "PaperCanvas",
    "available_height",
    "display_scale_factor",
    "resolve_paper_preset",
]
