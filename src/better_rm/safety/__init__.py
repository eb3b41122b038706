"""Safety mechanisms to prevent accidental deletion of important files."""

from __future__ import annotations

from .protected import (
    DEFAULT_PROTECTED_DIRS,
    MAX_PROTECTED_DIRS,
    ProtectionRegistry,
    is_root_with_preservation,
)

__all__ = [
    "DEFAULT_PROTECTED_DIRS",
    "MAX_PROTECTED_DIRS",
    "ProtectionRegistry",
    "is_root_with_preservation",
]
