"""Export records for rendered crops and their encoding to image files."""

from __future__ import annotations

import io
import logging
import secrets
import string
import time
from dataclasses import dataclass, field, replace
from pathlib import Path

import numpy as np
from PIL import Image

from ..config import DEFAULT_EXPORT_FORMAT, EXPORT_FILENAME_TEMPLATE
from ..errors import ExportError

_LOGGER = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_PILLOW_FORMATS = {"jpg": "JPEG", "tif": "TIFF"}


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_crop_id(timestamp_ms: int | None = None) -> str:
    """Return an id of the form ``crop-<epoch ms>-<9 base-36 chars>``."""

    stamp = _now_ms() if timestamp_ms is None else int(timestamp_ms)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"crop-{stamp}-{suffix}"


def suggested_filename(width: int, height: int, ext: str = DEFAULT_EXPORT_FORMAT) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(width=width, height=height, ext=ext.lstrip(".").lower())


@dataclass(frozen=True, eq=False)
class ExportedCrop:
    """Opaque record handed to gallery and print-layout collaborators."""

    id: str
    pixels: np.ndarray
    width: int
    height: int
    timestamp: int = field(default_factory=_now_ms)

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, timestamp_ms: int | None = None) -> "ExportedCrop":
        data = np.array(pixels, dtype=np.uint8, copy=True)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ExportError(f"Expected an RGB raster, got shape {data.shape!r}")
        data.setflags(write=False)
        stamp = _now_ms() if timestamp_ms is None else int(timestamp_ms)
        return cls(
            id=new_crop_id(stamp),
            pixels=data,
            width=int(data.shape[1]),
            height=int(data.shape[0]),
            timestamp=stamp,
        )

    def duplicate(self) -> "ExportedCrop":
        """Return a copy sharing the pixels but with a fresh id and timestamp."""

        stamp = _now_ms()
        return replace(self, id=new_crop_id(stamp), timestamp=stamp)

    def suggested_filename(self, ext: str = DEFAULT_EXPORT_FORMAT) -> str:
        return suggested_filename(self.width, self.height, ext)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def encode(self, fmt: str = DEFAULT_EXPORT_FORMAT) -> bytes:
        """Serialise the crop; PNG keeps it lossless."""

        buffer = io.BytesIO()
        try:
            self.to_image().save(buffer, format=_PILLOW_FORMATS.get(fmt.lower(), fmt.upper()))
        except (KeyError, OSError, ValueError) as exc:
            raise ExportError(f"Could not encode crop as {fmt!r}: {exc}") from exc
        return buffer.getvalue()

    def save(self, directory: Path, fmt: str = DEFAULT_EXPORT_FORMAT) -> Path:
        """Write the crop into *directory* without overwriting existing files."""

        payload = self.encode(fmt)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            destination = get_unique_destination(directory / self.suggested_filename(fmt))
            destination.write_bytes(payload)
        except OSError as exc:
            raise ExportError(f"Could not write crop to {directory}: {exc}") from exc
        _LOGGER.info("Exported %dx%d crop to %s", self.width, self.height, destination)
        return destination


def get_unique_destination(destination: Path) -> Path:
    """Return *destination* or a variant with a counter if it exists."""
    if not destination.exists():
        return destination

    parent = destination.parent
    stem = destination.stem
    suffix = destination.suffix
    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


__all__ = ["ExportedCrop", "get_unique_destination", "new_crop_id", "suggested_filename"]
