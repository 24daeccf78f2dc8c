"""Custom exception hierarchy for printcrop."""

from __future__ import annotations


class PrintCropError(Exception):
    """Base class for all custom errors raised by printcrop."""


# --- 3-layer hierarchy ---

class DomainError(PrintCropError):
    """Base class for geometry and pixel-pipeline errors."""


class InfrastructureError(PrintCropError):
    """Base class for errors raised by external collaborators."""


class ApplicationError(PrintCropError):
    """Base class for application-level errors."""


# --- Domain errors ---

class InvalidDimension(DomainError):
    """Raised when a paper, crop or DPI value is non-positive or unparsable."""


class DegenerateGeometry(DomainError):
    """Raised when an image or canvas dimension is zero."""


# --- Infrastructure errors ---

class DecodeFailure(InfrastructureError):
    """Raised when image bytes cannot be decoded into a raster."""


# --- Application errors ---

class ExportError(ApplicationError):
    """Raised when an exported crop cannot be encoded or written."""


class SettingsError(PrintCropError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ApplicationError",
    "DecodeFailure",
    "DegenerateGeometry",
    "DomainError",
    "ExportError",
    "InfrastructureError",
    "InvalidDimension",
    "PrintCropError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
