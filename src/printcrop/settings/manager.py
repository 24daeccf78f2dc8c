"""Settings file management with validation and change notifications."""

from __future__ import annotations

import json
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError
from PySide6.QtCore import QObject, Signal

from ..core.session import SessionState, new_session
from ..core.transform import FitMode
from ..config import PAPER_PRESETS
from ..errors import InvalidDimension, SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "printcrop" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "printcrop" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "printcrop" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "printcrop" / "settings.json"
    return Path.home() / ".config" / "printcrop" / "settings.json"


class SettingsManager(QObject):
    """Load, validate and persist the user's session defaults."""

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    @property
    def data(self) -> dict[str, Any]:
        return deepcopy(self._data)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, json.JSONDecodeError) as exc:
                raise SettingsLoadError(f"Could not read {path}: {exc}") from exc
        else:
            payload = None
        if payload is not None and not isinstance(payload, dict):
            raise SettingsLoadError(f"{path} does not contain a JSON object")
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target: Any = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change.

        The update is rejected and the previous settings kept when the
        result does not validate.
        """

        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, tuple):
            value = list(value)

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()
        self.settingsChanged.emit(key, value)

    def session(self) -> SessionState:
        return session_from_settings(self._data)

    def export_options(self) -> tuple[str, Path | None]:
        return export_options_from_settings(self._data)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        write_json(path, self._data)


def session_from_settings(data: dict[str, Any] | None) -> SessionState:
    """Build an empty :class:`SessionState` from validated settings."""

    try:
        settings = merge_with_defaults(data)
    except ValidationError as exc:
        raise SettingsValidationError(exc.message) from exc
    session = settings["session"]
    paper_size = session.get("paper_size")
    if paper_size is None:
        paper_size = PAPER_PRESETS[session["paper_preset"]]
    try:
        return new_session(
            paper_size_in=(float(paper_size[0]), float(paper_size[1])),
            dpi=float(session["dpi"]),
            viewport_height_px=float(session["viewport_height_px"]),
            crop_size_in=(float(session["crop_size"][0]), float(session["crop_size"][1])),
            fit_mode=FitMode(session["fit_mode"]),
        )
    except InvalidDimension as exc:
        raise SettingsValidationError(str(exc)) from exc


def export_options_from_settings(data: dict[str, Any] | None) -> tuple[str, Path | None]:
    """Return the default export ``(format, directory)`` from settings."""

    try:
        settings = merge_with_defaults(data)
    except ValidationError as exc:
        raise SettingsValidationError(exc.message) from exc
    export = settings["export"]
    directory = export.get("directory")
    return export["format"], Path(directory) if directory else None


__all__ = [
    "SettingsManager",
    "default_settings_path",
    "export_options_from_settings",
    "session_from_settings",
]
