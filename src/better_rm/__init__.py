"""Better rm - a guarded replacement for rm with trash support."""

from __future__ import annotations

__version__ = "1.1.0"
__all__ = ["__version__"]
