from .bus import Event, EventBus, Subscription
from .session_events import (
    CropExportedEvent,
    ImageDecodeFailedEvent,
    ImageLoadedEvent,
    PreviewRenderedEvent,
)

__all__ = [
    "CropExportedEvent",
    "Event",
    "EventBus",
    "ImageDecodeFailedEvent",
    "ImageLoadedEvent",
    "PreviewRenderedEvent",
    "Subscription",
]
