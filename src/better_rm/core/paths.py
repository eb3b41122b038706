"""Path canonicalization used for protection checks."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum

_REPEATED_SEPARATORS = re.compile(r"/{2,}")


class Resolution(str, Enum):
    """How a ResolvedPath was obtained.

    Attributes:
        CANONICAL: Resolved through the filesystem (symlinks followed).
        SYNTACTIC: Best-effort guess for a path that could not be resolved.
    """

    CANONICAL = "canonical"
    SYNTACTIC = "syntactic"


@dataclass(frozen=True)
class ResolvedPath:
    """Absolute, normalized path string used only for comparisons."""

    path: str
    kind: Resolution

    @property
    def is_canonical(self) -> bool:
        return self.kind is Resolution.CANONICAL

    def __str__(self) -> str:
        return self.path


def normalize_separators(path: str) -> str:
    """Collapse repeated separators and strip trailing ones, keeping a bare '/'."""
    path = _REPEATED_SEPARATORS.sub("/", path)
    stripped = path.rstrip("/")
    return stripped or ("/" if path.startswith("/") else path)


def lexical_path(path: str) -> str | None:
    """Absolute form of ``path`` without touching the filesystem."""
    if path.startswith("/"):
        return normalize_separators(path)

    try:
        cwd = os.getcwd()
    except OSError:
        return None

    return normalize_separators(f"{cwd}/{path}")


def resolve_path(path: str) -> ResolvedPath | None:
    """
    Resolve a user-supplied path to an absolute form for comparison.

    Tries a strict filesystem canonicalization first. When that fails (the
    path does not exist, a component is unreadable), falls back to the path
    itself if absolute, or the current directory joined with it.

    Args:
        path: Path exactly as the user supplied it

    Returns:
        The resolved path, or None if the current directory is unavailable
    """
    try:
        return ResolvedPath(
            normalize_separators(os.path.realpath(path, strict=True)),
            Resolution.CANONICAL,
        )
    except (OSError, ValueError):
        pass

    fallback = lexical_path(path)
    if fallback is None:
        return None
    return ResolvedPath(fallback, Resolution.SYNTACTIC)
