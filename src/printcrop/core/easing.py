"""
Easing controller for the clarity slider.

The slider sets a target; the value fed to the filter pipeline glides towards
it frame by frame. This module only knows about a :class:`Scheduler`, not
about timers, event loops or widgets.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import (
    CLARITY_EASING_FACTOR,
    CLARITY_SNAP_THRESHOLD,
    EASING_FRAME_INTERVAL_MS,
)
from .filters.algorithms import clamp_parameter
from .scheduler import Scheduler, TaskHandle


class ClarityEaser:
    """Exponential ease of ``current`` towards ``target``.

    Each frame moves ``current`` by ``(target - current) * factor``. Once the
    gap drops below ``threshold`` the value snaps to the target and the frame
    task is cancelled. At most one frame task is scheduled at any time;
    re-targeting mid-animation continues from the current value.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_update: Callable[[float], None] | None = None,
        initial: float = 0.0,
        factor: float = CLARITY_EASING_FACTOR,
        threshold: float = CLARITY_SNAP_THRESHOLD,
        interval_ms: int = EASING_FRAME_INTERVAL_MS,
    ) -> None:
        self._scheduler = scheduler
        self._on_update = on_update
        self._factor = float(factor)
        self._threshold = float(threshold)
        self._interval_ms = int(interval_ms)
        self._current = clamp_parameter(initial)
        self._target = self._current
        self._handle: TaskHandle | None = None

    @property
    def current(self) -> float:
        return self._current

    @property
    def target(self) -> float:
        return self._target

    def is_animating(self) -> bool:
        return self._handle is not None

    def set_target(self, value: float) -> None:
        """Retarget the animation, starting the frame task if needed."""

        self._target = clamp_parameter(value)
        if self._handle is None and self._target != self._current:
            self._handle = self._scheduler.schedule_repeating(self._interval_ms, self.tick)

    def tick(self) -> None:
        """Advance one frame."""

        diff = self._target - self._current
        if abs(diff) < self._threshold:
            self._current = self._target
            self._stop()
        else:
            self._current += diff * self._factor
        if self._on_update is not None:
            self._on_update(self._current)

    def reset(self, value: float = 0.0) -> None:
        """Jump straight to *value* without animating."""

        self._stop()
        self._current = clamp_parameter(value)
        self._target = self._current
        if self._on_update is not None:
            self._on_update(self._current)

    def cancel(self) -> None:
        """Stop the frame task, leaving ``current`` where it is."""

        self._stop()

    def _stop(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
