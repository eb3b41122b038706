"""Depth-first directory removal honoring force and filesystem boundaries."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Collection

from better_rm.audit import AuditAction, AuditLog
from better_rm.core.models import ErrorKind, RemovalConfig, WalkFailure, WalkResult
from better_rm.core.trash import CrossDeviceMoveFailed, TrashMoveError, relocate
from better_rm.ui.console import Reporter

logger = logging.getLogger(__name__)


def _entry_stat(entry: os.DirEntry[str]) -> os.stat_result:
    """Entry metadata without following symlinks."""
    return entry.stat(follow_symlinks=False)


class TreeWalker:
    """
    Removes a directory tree entry by entry.

    Symlinks are never followed. Without ``force`` the first failure stops
    the current directory level; with ``force`` siblings are still processed
    but the failure is recorded. A directory is only removed itself once all
    of its entries were handled.
    """

    def __init__(
        self,
        config: RemovalConfig,
        reporter: Reporter,
        audit: AuditLog,
        guarded: Collection[str] = (),
    ) -> None:
        """
        Initialize the walker.

        Args:
            config: Resolved removal options
            reporter: Destination for trace and diagnostic lines
            audit: Receives one record per real mutation
            guarded: Canonical paths that must not be touched inside a tree
        """
        self.config = config
        self.reporter = reporter
        self.audit = audit
        if config.use_trash and not config.trash_dir:
            raise ValueError("trash mode requires a trash directory")
        self.guarded = frozenset(guarded)
        self.trash_dir = config.trash_dir or ""
        self.verb = "trashing" if config.use_trash else "removing"

    def walk(self, directory: str, canonical: str | None = None) -> WalkResult:
        """
        Remove ``directory`` and everything below it.

        Args:
            directory: Directory path as the user gave it (used for I/O)
            canonical: Its resolved form, used to spot guarded entries

        Returns:
            WalkResult describing what was acted on, failed, or skipped
        """
        root_dev: int | None = None
        if self.config.one_file_system:
            try:
                root_dev = os.lstat(directory).st_dev
            except OSError as e:
                logger.debug("Cannot stat walk root %s: %s", directory, e)

        return self._walk_dir(directory, canonical, root_dev)

    def _walk_dir(self, path: str, canonical: str | None, root_dev: int | None) -> WalkResult:
        result = WalkResult(root=path)

        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    child = f"{path.rstrip('/')}/{entry.name}"
                    child_canonical = (
                        f"{canonical.rstrip('/')}/{entry.name}" if canonical else None
                    )

                    try:
                        st = _entry_stat(entry)
                    except OSError as e:
                        logger.debug("Skipping %s, cannot stat: %s", child, e)
                        continue

                    if root_dev is not None and st.st_dev != root_dev:
                        self.reporter.skipped(child, "different filesystem")
                        result.skipped.append(child)
                        continue

                    if child_canonical is not None and child_canonical in self.guarded:
                        failure = WalkFailure(
                            child, ErrorKind.PROTECTED_PATH, "Protected system directory"
                        )
                        self.reporter.error(child, failure.reason)
                        result.failures.append(failure)
                        ok = False
                    elif stat.S_ISDIR(st.st_mode):
                        sub = self._walk_dir(child, child_canonical, root_dev)
                        result.merge(sub)
                        ok = not sub.failures
                    else:
                        ok = self._act(child, False, result)

                    if not ok and not self.config.force:
                        break
        except OSError as e:
            reason = e.strerror or str(e)
            self.reporter.error(path, reason)
            result.failures.append(WalkFailure(path, ErrorKind.PERMISSION_OR_IO, reason))
            return result

        if result.complete:
            self._act(path, True, result)
        return result

    def _act(self, path: str, directory: bool, result: WalkResult) -> bool:
        self.reporter.action(self.verb, path, directory=directory)
        if self.config.dry_run:
            result.acted += 1
            return True

        failure = self.remove_entry(path, directory)
        if failure is not None:
            self.reporter.error(
                path, failure.reason, verb="trash" if self.config.use_trash else "remove"
            )
            result.failures.append(failure)
            return False

        result.acted += 1
        return True

    def remove_entry(self, path: str, directory: bool) -> WalkFailure | None:
        """
        Apply the removal primitive to a single entry and audit it.

        Directories must already be empty unless they are being trashed.

        Returns:
            None on success, otherwise the failure
        """
        action = AuditAction.for_entry(self.config.use_trash, directory)
        failure: WalkFailure | None = None

        try:
            if self.config.use_trash:
                destination = relocate(path, self.trash_dir)
                self.reporter.moved(path, destination)
            elif directory:
                os.rmdir(path)
            else:
                os.unlink(path)
        except CrossDeviceMoveFailed as e:
            failure = WalkFailure(path, ErrorKind.CROSS_DEVICE_MOVE, e.strerror)
        except TrashMoveError as e:
            failure = WalkFailure(path, ErrorKind.PERMISSION_OR_IO, e.strerror)
        except OSError as e:
            failure = WalkFailure(path, ErrorKind.PERMISSION_OR_IO, e.strerror or str(e))

        self.audit.record(action, path, failure is None, failure.reason if failure else None)
        return failure
