"""Core removal engine: path resolution, tree walking and trash."""

from __future__ import annotations

from .models import ErrorKind, OutcomeKind, RemovalConfig, RemovalOutcome, WalkResult
from .paths import ResolvedPath, Resolution, resolve_path
from .walker import TreeWalker

__all__ = [
    "ErrorKind",
    "OutcomeKind",
    "RemovalConfig",
    "RemovalOutcome",
    "Resolution",
    "ResolvedPath",
    "TreeWalker",
    "WalkResult",
    "resolve_path",
]
