"""Crop region geometry and the unit-aware preset resolver."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..config import MM_PER_INCH
from ..errors import InvalidDimension
from .raster import PixelBox, round_half_away_from_zero

_LOGGER = logging.getLogger(__name__)

_LENGTH_PATTERN = re.compile(
    r"^\s*(?P<value>[+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*(?P<unit>mm|in)?\s*$",
    re.IGNORECASE,
)


def mm_to_in(mm: float) -> float:
    return mm / MM_PER_INCH


def parse_length_in(text: str | float) -> float | None:
    """Return *text* converted to inches, or ``None`` when it is not a valid length.

    ``"35mm"`` and ``"1.2in"`` carry an explicit unit; bare numbers are inches.
    Non-positive results are rejected as well.
    """

    if isinstance(text, (int, float)):
        value = float(text)
    else:
        match = _LENGTH_PATTERN.match(str(text))
        if match is None:
            return None
        value = float(match.group("value"))
        if (match.group("unit") or "in").lower() == "mm":
            value = mm_to_in(value)
    if not math.isfinite(value) or value <= 0.0:
        return None
    return value


def round_to_hundredths(value: float) -> float:
    """Round to two decimals with ties away from zero (``1.375`` -> ``1.38``)."""

    quantised = Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(quantised)


@dataclass(frozen=True)
class CropSize:
    """Physical crop size in inches."""

    width_in: float
    height_in: float

    def __post_init__(self) -> None:
        for name, value in (("crop width", self.width_in), ("crop height", self.height_in)):
            if not math.isfinite(value) or value <= 0.0:
                raise InvalidDimension(f"{name} must be positive, got {value!r}")


@dataclass(frozen=True)
class CropRect:
    """Crop rectangle in canvas pixels.

    ``width``/``height`` are whole pixels. ``x``/``y`` may land on a half pixel
    so that ``canvas_w - 2 * x == width`` holds exactly.
    """

    x: float
    y: float
    width: int
    height: int

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_box(self) -> PixelBox:
        """Return the integer box used when rasterising overlays."""

        return PixelBox(
            round_half_away_from_zero(self.x),
            round_half_away_from_zero(self.y),
            self.width,
            self.height,
        )


def to_pixels(crop: CropSize, canvas_size: tuple[int, int], px_per_inch: float) -> CropRect:
    """Return the crop rectangle centred on a canvas of *canvas_size*."""

    canvas_w, canvas_h = canvas_size
    width = round_half_away_from_zero(crop.width_in * px_per_inch)
    height = round_half_away_from_zero(crop.height_in * px_per_inch)
    return CropRect(
        x=(canvas_w - width) / 2.0,
        y=(canvas_h - height) / 2.0,
        width=width,
        height=height,
    )


def resolve_preset(width_text: str, height_text: str, previous: CropSize) -> CropSize:
    """Resolve a unit-suffixed preset pair to inches, keeping *previous* on failure."""

    width = parse_length_in(width_text)
    height = parse_length_in(height_text)
    if width is None or height is None:
        _LOGGER.debug("Rejected crop preset %r x %r", width_text, height_text)
        return previous
    width = round_to_hundredths(width)
    height = round_to_hundredths(height)
    if width <= 0.0 or height <= 0.0:
        _LOGGER.debug("Crop preset %r x %r rounds to zero", width_text, height_text)
        return previous
    return CropSize(width, height)


def parse_crop_input(width_text: str, height_text: str, previous: CropSize) -> CropSize:
    """Parse free-form crop input without preset rounding."""

    width = parse_length_in(width_text)
    height = parse_length_in(height_text)
    if width is None or height is None:
        _LOGGER.debug("Rejected crop input %r x %r", width_text, height_text)
        return previous
    return CropSize(width, height)


__all__ = [
    "CropRect",
    "CropSize",
    "mm_to_in",
    "parse_crop_input",
    "parse_length_in",
    "resolve_preset",
    "round_to_hundredths",
    "to_pixels",
]
