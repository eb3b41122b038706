"""Value objects shared by the removal engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class ErrorKind(str, Enum):
    """Why a path could not be removed."""

    PROTECTED_PATH = "protected_path"
    ROOT_GUARDED = "root_guarded"
    NOT_FOUND = "not_found"
    IS_A_DIRECTORY = "is_a_directory"
    PERMISSION_OR_IO = "permission_or_io"
    CROSS_DEVICE_MOVE = "cross_device_move"
    HOLDING_AREA_INVALID = "holding_area_invalid"


class OutcomeKind(str, Enum):
    """Terminal result of processing one command-line path."""

    REMOVED = "removed"
    TRASHED = "trashed"
    ABSENT = "absent"
    SKIPPED_PROTECTED = "skipped_protected"
    SKIPPED_ROOT_GUARD = "skipped_root_guard"
    SKIPPED_INTERACTIVE_DECLINE = "skipped_interactive_decline"
    SKIPPED_CROSS_FILESYSTEM = "skipped_cross_filesystem"
    FAILED = "failed"


# Outcomes that make the process exit non-zero
UNSUCCESSFUL_KINDS = frozenset(
    {OutcomeKind.SKIPPED_PROTECTED, OutcomeKind.SKIPPED_ROOT_GUARD, OutcomeKind.FAILED}
)


@dataclass(frozen=True)
class RemovalConfig:
    """Resolved options for one invocation.

    ``interactive`` and ``force`` cannot both be set; use ``with_force`` and
    ``with_interactive`` to switch between them. ``dry_run`` implies
    ``verbose`` and a ``trash_dir`` implies ``use_trash``.
    """

    recursive: bool = False
    force: bool = False
    verbose: bool = False
    interactive: bool = False
    dry_run: bool = False
    preserve_root: bool = True
    one_file_system: bool = False
    use_trash: bool = False
    trash_dir: str | None = None

    def __post_init__(self) -> None:
        if self.force and self.interactive:
            raise ValueError("force and interactive are mutually exclusive")
        if self.dry_run and not self.verbose:
            object.__setattr__(self, "verbose", True)
        if self.trash_dir and not self.use_trash:
            object.__setattr__(self, "use_trash", True)

    def with_force(self) -> RemovalConfig:
        """Return a copy with force set and interactive cleared."""
        return replace(self, force=True, interactive=False)

    def with_interactive(self) -> RemovalConfig:
        """Return a copy with interactive set and force cleared."""
        return replace(self, interactive=True, force=False)

    @property
    def trace(self) -> bool:
        """Whether per-entry trace lines are printed."""
        return self.verbose or self.dry_run


@dataclass(frozen=True)
class RemovalOutcome:
    """Result for a single top-level path."""

    path: str
    kind: OutcomeKind
    error: ErrorKind | None = None
    reason: str | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        """True unless the outcome should make the process exit non-zero."""
        return self.kind not in UNSUCCESSFUL_KINDS


@dataclass(frozen=True)
class WalkFailure:
    """An entry the walker could not remove."""

    path: str
    error: ErrorKind
    reason: str


@dataclass
class WalkResult:
    """Aggregated result of walking one directory tree."""

    root: str
    acted: int = 0
    failures: list[WalkFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when every entry, including the root, was handled."""
        return not self.failures and not self.skipped

    def merge(self, other: WalkResult) -> None:
        """Fold a subdirectory's result into this one."""
        self.acted += other.acted
        self.failures.extend(other.failures)
        self.skipped.extend(other.skipped)
