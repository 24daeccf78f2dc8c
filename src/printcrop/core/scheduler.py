"""Scheduler capability used to drive per-frame animations.

Animations only need two operations: start a repeating task and cancel it.
:class:`ManualScheduler` runs tasks when :meth:`ManualScheduler.tick` is
called, which makes easing deterministic in tests and in batch rendering.
The Qt event-loop implementation lives in :mod:`printcrop.gui.qt_scheduler`.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Protocol, runtime_checkable

TaskHandle = int


@runtime_checkable
class Scheduler(Protocol):
    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> TaskHandle:
        ...

    def cancel(self, handle: TaskHandle) -> None:
        ...


class ManualScheduler:
    """Scheduler whose tasks only run when explicitly ticked."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._tasks: dict[TaskHandle, Callable[[], None]] = {}

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> TaskHandle:
        handle = next(self._ids)
        self._tasks[handle] = callback
        return handle

    def cancel(self, handle: TaskHandle) -> None:
        self._tasks.pop(handle, None)

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def tick(self, frames: int = 1) -> None:
        """Run every active task once per frame."""

        for _ in range(frames):
            # Tasks may cancel themselves while running.
            for handle, callback in list(self._tasks.items()):
                if handle in self._tasks:
                    callback()

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Tick until no task remains; return the number of frames run."""

        frames = 0
        while self._tasks and frames < max_frames:
            self.tick()
            frames += 1
        return frames


__all__ = ["ManualScheduler", "Scheduler", "TaskHandle"]
