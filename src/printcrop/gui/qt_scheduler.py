"""Scheduler backed by the Qt event loop."""

from __future__ import annotations

import itertools
from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from ..core.scheduler import TaskHandle


class QtScheduler:
    """Run repeating tasks on :class:`QTimer` instances.

    Callbacks fire on the thread that owns the timers, which must be running
    a Qt event loop.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent
        self._ids = itertools.count(1)
        self._timers: dict[TaskHandle, QTimer] = {}

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> TaskHandle:
        handle = next(self._ids)
        timer = QTimer(self._parent)
        timer.setInterval(max(0, int(interval_ms)))
        timer.timeout.connect(callback)
        self._timers[handle] = timer
        timer.start()
        return handle

    def cancel(self, handle: TaskHandle) -> None:
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()

    @property
    def active_count(self) -> int:
        return len(self._timers)


__all__ = ["QtScheduler"]
