"""In-memory collection of exported crops."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..core.export import ExportedCrop

_LOGGER = logging.getLogger(__name__)


class CropGallery:
    """Ordered store of :class:`ExportedCrop` records keyed by id.

    Crops keep export order; duplicates are appended after the existing items.
    """

    def __init__(self) -> None:
        self._items: list[ExportedCrop] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def add(self, crop: ExportedCrop) -> None:
        with self._lock:
            self._items.append(crop)

    def get(self, crop_id: str) -> ExportedCrop | None:
        with self._lock:
            for item in self._items:
                if item.id == crop_id:
                    return item
        return None

    def items(self) -> list[ExportedCrop]:
        with self._lock:
            return list(self._items)

    def duplicate(self, crop_ids: Iterable[str]) -> list[ExportedCrop]:
        """Copy the selected crops; copies receive fresh ids and timestamps."""

        wanted = set(crop_ids)
        with self._lock:
            copies = [item.duplicate() for item in self._items if item.id in wanted]
            self._items.extend(copies)
        _LOGGER.debug("Duplicated %d crop(s)", len(copies))
        return copies

    def delete(self, crop_ids: Iterable[str]) -> int:
        """Remove the selected crops and return how many were removed."""

        wanted = set(crop_ids)
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.id not in wanted]
            removed = before - len(self._items)
        _LOGGER.debug("Deleted %d crop(s)", removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


__all__ = ["CropGallery"]
