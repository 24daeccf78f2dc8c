"""User settings for printcrop."""

from .manager import (
    SettingsManager,
    default_settings_path,
    export_options_from_settings,
    session_from_settings,
)
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA, merge_with_defaults, validate_settings

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "SettingsManager",
    "default_settings_path",
    "export_options_from_settings",
    "merge_with_defaults",
    "session_from_settings",
    "validate_settings",
]
