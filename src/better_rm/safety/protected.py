"""Protected path definitions to prevent accidental deletion."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from better_rm.core.paths import lexical_path, normalize_separators, resolve_path

if TYPE_CHECKING:
    from better_rm.core.models import RemovalConfig

logger = logging.getLogger(__name__)

# Directories that must never be removed
DEFAULT_PROTECTED_DIRS: tuple[str, ...] = (
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/home",
    "/lib",
    "/lib32",
    "/lib64",
    "/proc",
    "/root",
    "/sbin",
    "/sys",
    "/usr",
    "/var",
)

MAX_PROTECTED_DIRS = 100


@dataclass(frozen=True)
class ProtectionRegistry:
    """
    Immutable set of paths that removal must refuse to act on.

    Matching is exact and case-sensitive against the resolved path; children
    of a protected directory are not protected by it.
    """

    entries: tuple[str, ...] = ()
    capacity: int = MAX_PROTECTED_DIRS
    _lookup: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_lookup", frozenset(self.entries))

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[str],
        capacity: int = MAX_PROTECTED_DIRS,
    ) -> ProtectionRegistry:
        """Build a registry by registering each entry in order."""
        registry = cls(capacity=capacity)
        for entry in entries:
            registry = registry.register(entry)
        return registry

    @classmethod
    def with_defaults(cls, extra: Iterable[str] = ()) -> ProtectionRegistry:
        """Built-in protected directories followed by configured ones."""
        return cls.from_entries([*DEFAULT_PROTECTED_DIRS, *extra])

    def register(self, entry: str) -> ProtectionRegistry:
        """
        Return a registry that also protects ``entry``.

        Entries past capacity and duplicates leave the registry unchanged.
        Relative entries cannot be matched reliably and are ignored.
        """
        if not entry.startswith("/"):
            logger.warning("Ignoring relative protected path: %r", entry)
            return self

        normalized = normalize_separators(entry)
        if normalized in self._lookup:
            return self
        if len(self.entries) >= self.capacity:
            logger.debug("Protection list full, dropping %s", normalized)
            return self

        return ProtectionRegistry(entries=(*self.entries, normalized), capacity=self.capacity)

    def contains(self, resolved: str) -> bool:
        """Exact membership test for an already resolved path."""
        return resolved in self._lookup

    def is_protected(self, path: str) -> bool:
        """
        Check if a path is protected and should not be removed.

        Both the resolved form and the literal absolute form are compared,
        so '/bin' stays protected where it is a symlink to '/usr/bin'. A
        path whose absolute form cannot be determined at all is reported as
        protected.
        """
        resolved = resolve_path(path)
        if resolved is None:
            logger.warning("Cannot resolve %s, treating it as protected", path)
            return True
        if resolved.path in self._lookup:
            return True
        return lexical_path(path) in self._lookup

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def is_root_with_preservation(path: str, config: RemovalConfig) -> bool:
    """True when ``path`` resolves to '/' and root preservation is active."""
    if not config.preserve_root:
        return False

    resolved = resolve_path(path)
    if resolved is None:
        return False
    return resolved.path == "/"
