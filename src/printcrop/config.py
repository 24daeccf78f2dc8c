"""Default configuration values for printcrop."""

from __future__ import annotations

from typing import Final

MM_PER_INCH: Final[float] = 25.4

# ---------------------------------------------------------------------------
# Viewport transform
# ---------------------------------------------------------------------------

MIN_SCALE: Final[float] = 0.05
MAX_SCALE: Final[float] = 5.0

# Arrow keys move the image by this many canvas pixels per press.
NUDGE_STEP_PX: Final[float] = 2.0

# A wheel delta of ``d`` zooms by ``exp(-d * WHEEL_ZOOM_SENSITIVITY)`` so the
# zoom speed stays proportional regardless of the current scale.
WHEEL_ZOOM_SENSITIVITY: Final[float] = 0.0012

# ---------------------------------------------------------------------------
# Paper / canvas sizing
# ---------------------------------------------------------------------------

# The display scale factor maps the height of this reference paper onto the
# available screen height, so a 4x6 sheet always fills the viewport.
REFERENCE_PAPER_HEIGHT_IN: Final[float] = 6.0

# Vertical space reserved for window chrome when deriving the available height.
VIEWPORT_CHROME_PX: Final[int] = 120
DEFAULT_VIEWPORT_HEIGHT_PX: Final[int] = 1080

DEFAULT_DPI: Final[int] = 300
DPI_CHOICES: Final[tuple[int, ...]] = (300, 76)

PAPER_PRESETS: Final[dict[str, tuple[float, float]]] = {
    "4x6": (4.0, 6.0),
    "a4": (8.27, 11.69),
}
DEFAULT_PAPER_PRESET: Final[str] = "4x6"

# ---------------------------------------------------------------------------
# Crop region
# ---------------------------------------------------------------------------

DEFAULT_CROP_SIZE_IN: Final[tuple[float, float]] = (1.13, 1.37)
CROP_PRESETS: Final[tuple[tuple[str, str], ...]] = (
    ("35mm", "45mm"),
    ("30mm", "40mm"),
    ("32mm", "40mm"),
    ("1.13in", "1.37in"),
    ("2in", "2in"),
)

# ---------------------------------------------------------------------------
# Filters and easing
# ---------------------------------------------------------------------------

FILTER_MIN: Final[float] = -100.0
FILTER_MAX: Final[float] = 100.0

CLARITY_EASING_FACTOR: Final[float] = 0.2
CLARITY_SNAP_THRESHOLD: Final[float] = 0.5
# One animation frame at roughly 60 Hz.
EASING_FRAME_INTERVAL_MS: Final[int] = 16

# ---------------------------------------------------------------------------
# Compositing
# ---------------------------------------------------------------------------

BACKGROUND_RGB: Final[tuple[int, int, int]] = (255, 255, 255)
CROP_MASK_OPACITY: Final[float] = 0.5
# hsl(174 62% 47%)
CROP_BORDER_RGB: Final[tuple[int, int, int]] = (46, 194, 179)
CROP_BORDER_WIDTH_PX: Final[int] = 2
CROSSHAIR_HALF_LENGTH_PX: Final[int] = 12

EXPORT_FILENAME_TEMPLATE: Final[str] = "crop_{width}x{height}_px.{ext}"
DEFAULT_EXPORT_FORMAT: Final[str] = "png"
