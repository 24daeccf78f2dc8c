"""Qt implementations of the scheduler and renderer capabilities."""

from .qt_renderer import QtRenderer
from .qt_scheduler import QtScheduler

__all__ = ["QtRenderer", "QtScheduler"]
