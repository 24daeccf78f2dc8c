"""Position, scale and filter an image inside a physical print frame."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
