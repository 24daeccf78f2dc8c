"""Helpers for decoding user images into :class:`ImageSource` rasters."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..core.raster import ImageSource
from ..errors import DecodeFailure

_LOGGER = logging.getLogger(__name__)

_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)


def _image_to_source(image: Image.Image) -> ImageSource:
    # EXIF orientation is baked in so the canvas shows what the camera saw.
    transposed = ImageOps.exif_transpose(image)
    if transposed is not None:
        image = transposed
    rgba = image.convert("RGBA")
    return ImageSource.from_array(np.asarray(rgba))


def decode_image_bytes(data: bytes) -> ImageSource:
    """Decode an encoded image payload (PNG, JPEG, ...) into RGBA pixels."""

    if not data:
        raise DecodeFailure("Image payload is empty")
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            return _image_to_source(image)
    except _DECODE_ERRORS as exc:
        _LOGGER.debug("Pillow could not decode %d bytes: %s", len(data), exc)
        raise DecodeFailure(f"Unsupported or corrupt image: {exc}") from exc


def load_image_source(source: Path) -> ImageSource:
    """Decode the image stored at *source*."""

    try:
        with Image.open(source) as image:
            image.load()
            return _image_to_source(image)
    except FileNotFoundError as exc:
        raise DecodeFailure(f"Image not found: {source}") from exc
    except _DECODE_ERRORS as exc:
        _LOGGER.debug("Pillow failed to load %s: %s", source, exc)
        raise DecodeFailure(f"Unsupported or corrupt image {source}: {exc}") from exc


__all__ = ["decode_image_bytes", "load_image_source"]
