"""Per-path removal decisions combining protection, prompts and modes."""

from __future__ import annotations

import errno
import logging
import os
import stat
from collections.abc import Callable, Iterable
from dataclasses import replace

from better_rm.audit import AuditLog
from better_rm.core.models import ErrorKind, OutcomeKind, RemovalConfig, RemovalOutcome
from better_rm.core.paths import resolve_path
from better_rm.core.trash import HoldingAreaInvalid, ensure_holding_area, resolve_trash_dir
from better_rm.core.walker import TreeWalker
from better_rm.safety.protected import ProtectionRegistry, is_root_with_preservation
from better_rm.ui.console import Reporter
from better_rm.ui.prompts import confirm_removal

logger = logging.getLogger(__name__)

PROTECTED_REASON = "Protected system directory"
ROOT_GUARD_REASON = "--preserve-root is active"


class RemovalPolicy:
    """
    Decides and performs the removal of each command-line path.

    Every path yields exactly one RemovalOutcome; errors never escape
    ``remove``.
    """

    def __init__(
        self,
        config: RemovalConfig,
        registry: ProtectionRegistry,
        reporter: Reporter | None = None,
        audit: AuditLog | None = None,
        confirm: Callable[[str], bool] = confirm_removal,
    ) -> None:
        if config.use_trash and not config.trash_dir:
            config = replace(config, trash_dir=resolve_trash_dir())

        self.config = config
        self.registry = registry
        self.reporter = reporter or Reporter(dry_run=config.dry_run, verbose=config.verbose)
        self.audit = audit or AuditLog()
        self.confirm = confirm

        guarded = set(registry.entries)
        self.holding_area: str | None = None
        if config.use_trash and config.trash_dir:
            self.holding_area = os.path.realpath(config.trash_dir)
            guarded.add(self.holding_area)

        self.walker = TreeWalker(config, self.reporter, self.audit, guarded)
        self.done_kind = OutcomeKind.TRASHED if config.use_trash else OutcomeKind.REMOVED

    def prepare(self) -> bool:
        """Create the trash directory when it will actually be used."""
        if not self.config.use_trash or self.config.dry_run:
            return True
        try:
            ensure_holding_area(self.config.trash_dir or "")
        except HoldingAreaInvalid as e:
            self.reporter.fatal(str(e))
            return False
        return True

    def run(self, paths: Iterable[str]) -> list[RemovalOutcome]:
        """Process each path to completion, in order."""
        if self.config.dry_run:
            self.reporter.dry_run_header(self.config.trash_dir if self.config.use_trash else None)

        outcomes = [self.remove(path) for path in paths]

        if self.config.dry_run:
            self.reporter.dry_run_footer()
        return outcomes

    def _outcome(
        self,
        path: str,
        kind: OutcomeKind,
        error: ErrorKind | None = None,
        reason: str | None = None,
    ) -> RemovalOutcome:
        return RemovalOutcome(
            path=path, kind=kind, error=error, reason=reason, dry_run=self.config.dry_run
        )

    def _reject(self, path: str, kind: OutcomeKind, error: ErrorKind, reason: str) -> RemovalOutcome:
        self.reporter.error(path, reason)
        return self._outcome(path, kind, error, reason)

    def remove(self, path: str) -> RemovalOutcome:
        """
        Remove a single path according to the configured policy.

        Args:
            path: Path exactly as given on the command line

        Returns:
            The terminal outcome for this path
        """
        config = self.config

        if self.registry.is_protected(path):
            return self._reject(
                path, OutcomeKind.SKIPPED_PROTECTED, ErrorKind.PROTECTED_PATH, PROTECTED_REASON
            )

        if is_root_with_preservation(path, config):
            return self._reject(
                path, OutcomeKind.SKIPPED_ROOT_GUARD, ErrorKind.ROOT_GUARDED, ROOT_GUARD_REASON
            )

        try:
            st = os.lstat(path)
        except OSError as e:
            if config.force:
                return self._outcome(path, OutcomeKind.ABSENT)
            kind = (
                ErrorKind.NOT_FOUND
                if e.errno in (errno.ENOENT, errno.ENOTDIR)
                else ErrorKind.PERMISSION_OR_IO
            )
            return self._reject(path, OutcomeKind.FAILED, kind, e.strerror or str(e))

        resolved = resolve_path(path)
        # a symlink to the trash is a leaf; only the link itself is moved
        if (
            self.holding_area is not None
            and resolved is not None
            and stat.S_ISDIR(st.st_mode)
            and resolved.path == self.holding_area
        ):
            return self._reject(
                path,
                OutcomeKind.FAILED,
                ErrorKind.HOLDING_AREA_INVALID,
                "Refusing to trash the trash directory",
            )

        if config.interactive and not config.dry_run:
            if not self.confirm(path):
                logger.debug("User declined removal of %s", path)
                return self._outcome(path, OutcomeKind.SKIPPED_INTERACTIVE_DECLINE)

        if stat.S_ISDIR(st.st_mode):
            if not config.recursive:
                return self._reject(
                    path, OutcomeKind.FAILED, ErrorKind.IS_A_DIRECTORY, "Is a directory"
                )
            canonical = resolved.path if resolved is not None and resolved.is_canonical else None
            return self._remove_tree(path, canonical)

        return self._remove_leaf(path)

    def _remove_tree(self, path: str, canonical: str | None) -> RemovalOutcome:
        self.reporter.action(self.walker.verb, path, directory=True, recursive=True)
        result = self.walker.walk(path, canonical)

        if result.failures:
            first = result.failures[0]
            count = len(result.failures)
            reason = first.reason if count == 1 else f"{first.reason} (and {count - 1} more)"
            return self._outcome(path, OutcomeKind.FAILED, first.error, reason)

        if result.skipped:
            return self._outcome(
                path,
                OutcomeKind.SKIPPED_CROSS_FILESYSTEM,
                reason=f"{len(result.skipped)} entries on another filesystem left in place",
            )

        return self._outcome(path, self.done_kind)

    def _remove_leaf(self, path: str) -> RemovalOutcome:
        self.reporter.action(self.walker.verb, path)
        if self.config.dry_run:
            return self._outcome(path, self.done_kind)

        failure = self.walker.remove_entry(path, directory=False)
        if failure is None:
            return self._outcome(path, self.done_kind)

        if not self.config.force:
            self.reporter.error(
                path, failure.reason, verb="trash" if self.config.use_trash else "remove"
            )
            return self._outcome(path, OutcomeKind.FAILED, failure.error, failure.reason)

        # force: swallowed, but the outcome still records what went wrong
        return self._outcome(path, self.done_kind, failure.error, failure.reason)


def exit_status(outcomes: Iterable[RemovalOutcome]) -> int:
    """0 when every outcome succeeded, else 1."""
    return 0 if all(outcome.success for outcome in outcomes) else 1
