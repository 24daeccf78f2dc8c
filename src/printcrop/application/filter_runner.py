"""Latest-only background execution of filter passes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Any

_LOGGER = logging.getLogger(__name__)


class FilterPassRunner:
    """Run render jobs off the caller's thread, keeping only the newest result.

    Every :meth:`submit` bumps a generation counter. When a job completes its
    ``on_result`` callback only fires if no newer job has been submitted in the
    meantime, so a slow pass can never overwrite a faster, more recent one.
    Pending jobs that have not started yet are cancelled outright.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="printcrop-filter",
        )
        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Future | None = None

    @property
    def latest_generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_result: Callable[[int, Any], None] | None = None,
    ) -> Future:
        """Schedule ``fn(*args)``; return its future.

        ``on_result(generation, value)`` runs on the worker thread, and only
        while the job is still the latest one.
        """

        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None and not self._pending.done():
                self._pending.cancel()
            future = self._executor.submit(fn, *args)
            self._pending = future

        def _finished(done: Future) -> None:
            try:
                value = done.result()
            except CancelledError:
                _LOGGER.debug("Filter pass %d cancelled before it started", generation)
                return
            except Exception:
                _LOGGER.exception("Filter pass %d failed", generation)
                return
            with self._lock:
                if generation != self._generation:
                    _LOGGER.debug(
                        "Discarding stale filter pass %d (latest is %d)",
                        generation,
                        self._generation,
                    )
                    return
            if on_result is not None:
                on_result(generation, value)

        future.add_done_callback(_finished)
        return future

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def wait(self, timeout: float | None = None) -> None:
        """Block until the most recently submitted job has finished."""

        with self._lock:
            pending = self._pending
        if pending is None:
            return
        try:
            pending.exception(timeout=timeout)
        except CancelledError:
            pass

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)


__all__ = ["FilterPassRunner"]
