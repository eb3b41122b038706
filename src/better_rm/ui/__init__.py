"""UI components for console output and prompts."""

from __future__ import annotations

from .console import Reporter, create_console, format_size, print_protected
from .prompts import confirm_removal

__all__ = ["Reporter", "create_console", "format_size", "print_protected", "confirm_removal"]
