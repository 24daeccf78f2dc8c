from dataclasses import dataclass
from typing import Any

from .bus import Event


@dataclass(kw_only=True)
class ImageLoadedEvent(Event):
    width: int = 0
    height: int = 0


@dataclass(kw_only=True)
class ImageDecodeFailedEvent(Event):
    reason: str = ""


@dataclass(kw_only=True)
class CropExportedEvent(Event):
    # ``ExportedCrop`` record.
    crop: Any = None


@dataclass(kw_only=True)
class PreviewRenderedEvent(Event):
    generation: int = 0
    width: int = 0
    height: int = 0
