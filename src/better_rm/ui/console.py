"""Rich console utilities for output formatting."""

from __future__ import annotations

import platform
from collections.abc import Iterable

from rich.console import Console

PROGRAM_NAME = "better-rm"
DRY_RUN_PREFIX = "[DRY-RUN] "


def create_console(stderr: bool = False) -> Console:
    """Create a configured Rich console."""
    # Windows-specific console settings
    if platform.system() == "Windows":
        return Console(
            stderr=stderr, legacy_windows=True, emoji=False, highlight=False, soft_wrap=True
        )
    return Console(stderr=stderr, highlight=False, soft_wrap=True)


def format_size(size_bytes: int) -> str:
    """Convert bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def print_success(console: Console, message: str) -> None:
    """Print a success message."""
    console.print(message, style="green", markup=False)


def print_warning(console: Console, message: str) -> None:
    """Print a warning message."""
    console.print(message, style="yellow", markup=False)


def print_error(console: Console, message: str) -> None:
    """Print an error message."""
    console.print(message, style="red", markup=False)


class Reporter:
    """
    User-visible trace and diagnostic lines for a removal run.

    Trace lines go to ``out``; diagnostics go to ``err``. In dry-run mode
    trace lines read "would be ..." and diagnostics carry a [DRY-RUN] prefix
    so simulated output is never mistaken for real rejections.
    """

    def __init__(
        self,
        out: Console | None = None,
        err: Console | None = None,
        dry_run: bool = False,
        verbose: bool = False,
    ) -> None:
        self.out = out or create_console()
        self.err = err or create_console(stderr=True)
        self.dry_run = dry_run
        self.verbose = verbose or dry_run

    def _trace(self, message: str) -> None:
        if self.verbose:
            self.out.print(message, markup=False)

    def action(
        self,
        verb: str,
        path: str,
        *,
        directory: bool = False,
        recursive: bool = False,
    ) -> None:
        """Trace an entry that is about to be removed or trashed."""
        prefix = "[DRY-RUN] would be " if self.dry_run else ""
        kind = "directory " if directory else ""
        suffix = " recursively" if recursive else ""
        self._trace(f"{prefix}{verb} {kind}'{path}'{suffix}")

    def moved(self, path: str, destination: str) -> None:
        self._trace(f"moved '{path}' to trash as '{destination}'")

    def skipped(self, path: str, reason: str) -> None:
        self._trace(f"skipping '{path}': {reason}")

    def error(self, path: str, reason: str, verb: str = "remove") -> None:
        """One diagnostic line naming the path and the underlying error."""
        prefix = DRY_RUN_PREFIX if self.dry_run else ""
        print_error(self.err, f"{prefix}{PROGRAM_NAME}: cannot {verb} '{path}': {reason}")

    def fatal(self, message: str) -> None:
        print_error(self.err, f"{PROGRAM_NAME}: {message}")

    def dry_run_header(self, trash_dir: str | None = None) -> None:
        self.out.print("=== DRY-RUN MODE: No files will be actually deleted ===", markup=False)
        if trash_dir:
            self.out.print(f"=== TRASH MODE: Files would be moved to {trash_dir} ===", markup=False)

    def dry_run_footer(self) -> None:
        self.out.print("=== DRY-RUN COMPLETE: No files were actually deleted ===", markup=False)


def print_protected(console: Console, entries: Iterable[str]) -> None:
    """Print the effective protection list, one path per line."""
    console.print("Protected directories:", style="bold")
    for entry in entries:
        console.print(f"  {entry}", markup=False)
