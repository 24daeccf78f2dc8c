"""Renderer backed by a :class:`QImage` raster and :class:`QPainter`."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QImage, QPainter

from ..config import BACKGROUND_RGB
from ..core.raster import ImageSource, PixelBox
from ..core.transform import ViewportTransform

_FORMAT = QImage.Format.Format_RGBA8888


def _array_to_qimage(pixels: np.ndarray) -> QImage:
    data = np.array(pixels, dtype=np.uint8, order="C", copy=True)
    height, width = data.shape[:2]
    # QImage does not own the buffer, so detach a copy before *data* goes away.
    return QImage(data.data, width, height, data.strides[0], _FORMAT).copy()


def _qimage_to_array(image: QImage) -> np.ndarray:
    image = image.convertToFormat(_FORMAT)
    width = image.width()
    height = image.height()
    bytes_per_line = image.bytesPerLine()
    byte_count = bytes_per_line * height
    buffer = image.constBits()
    if hasattr(buffer, "setsize"):
        buffer.setsize(byte_count)
    surface = np.frombuffer(memoryview(buffer), dtype=np.uint8, count=byte_count)
    surface = surface.reshape((height, bytes_per_line))
    return surface[:, : width * 4].reshape((height, width, 4)).copy()


class QtRenderer:
    """Raster renderer that draws with Qt's smooth pixmap transform."""

    def __init__(self, width: int, height: int, background: tuple[int, int, int] = BACKGROUND_RGB) -> None:
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self._image = QImage(max(1, self._width), max(1, self._height), _FORMAT)
        self.fill(background)

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def fill(self, rgb: tuple[int, int, int]) -> None:
        self._image.fill(QColor(int(rgb[0]), int(rgb[1]), int(rgb[2]), 255))

    def draw_image(self, source: ImageSource, transform: ViewportTransform) -> None:
        if self._width == 0 or self._height == 0:
            return
        image = _array_to_qimage(source.pixels)
        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            painter.translate(transform.offset_x, transform.offset_y)
            painter.scale(transform.scale, transform.scale)
            painter.drawImage(QPointF(0.0, 0.0), image)
        finally:
            painter.end()

    def get_pixels(self, box: PixelBox | None = None) -> np.ndarray:
        pixels = _qimage_to_array(self._image)[: self._height, : self._width]
        if box is None:
            return pixels
        clipped = box.clipped(self._width, self._height)
        return pixels[clipped.top:clipped.bottom, clipped.left:clipped.right].copy()

    def put_pixels(self, left: int, top: int, data: np.ndarray) -> None:
        data = np.asarray(data, dtype=np.uint8)
        if data.size == 0:
            return
        patch = _array_to_qimage(data)
        painter = QPainter(self._image)
        try:
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
            painter.drawImage(int(left), int(top), patch)
        finally:
            painter.end()

    def qimage(self) -> QImage:
        return self._image.copy()


__all__ = ["QtRenderer"]
