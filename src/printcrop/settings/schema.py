"""Schema helpers for the printcrop settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_CROP_SIZE_IN,
    DEFAULT_DPI,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_PAPER_PRESET,
    DEFAULT_VIEWPORT_HEIGHT_PX,
    PAPER_PRESETS,
)

_POSITIVE_PAIR: dict[str, Any] = {
    "type": "array",
    "items": {"type": "number", "exclusiveMinimum": 0},
    "minItems": 2,
    "maxItems": 2,
}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "printcrop/settings.schema.json",
    "type": "object",
    "required": ["schema", "session", "export"],
    "properties": {
        "schema": {"const": "printcrop/settings@1"},
        "session": {
            "type": "object",
            "properties": {
                "dpi": {"type": "number", "exclusiveMinimum": 0},
                "paper_preset": {"type": "string", "enum": sorted(PAPER_PRESETS)},
                "paper_size": {"oneOf": [_POSITIVE_PAIR, {"type": "null"}]},
                "crop_size": _POSITIVE_PAIR,
                "fit_mode": {"type": "string", "enum": ["fit", "fill"]},
                "viewport_height_px": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": True,
        },
        "export": {
            "type": "object",
            "properties": {
                "format": {"type": "string", "enum": ["png", "jpeg", "webp", "tiff"]},
                "directory": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "printcrop/settings@1",
    "session": {
        "dpi": DEFAULT_DPI,
        "paper_preset": DEFAULT_PAPER_PRESET,
        "paper_size": None,
        "crop_size": list(DEFAULT_CROP_SIZE_IN),
        "fit_mode": "fit",
        "viewport_height_px": DEFAULT_VIEWPORT_HEIGHT_PX,
    },
    "export": {
        "format": DEFAULT_EXPORT_FORMAT,
        "directory": None,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in ("session", "export") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, tuple):
                        sub_value = list(sub_value)
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    directory = merged["export"].get("directory")
    if directory not in (None, ""):
        try:
            merged["export"]["directory"] = os.fspath(directory)
        except TypeError:
            merged["export"]["directory"] = None
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
