"""Expiry of old entries in the trash directory."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

from better_rm.core.trash import parse_trash_name

logger = logging.getLogger(__name__)

TRASH_DAYS_ENV = "BETTER_RM_TRASH_DAYS"
DEFAULT_TRASH_DAYS = 30


@dataclass
class PurgeStats:
    """Totals from one purge run."""

    files: int = 0
    dirs: int = 0
    bytes_freed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def removed(self) -> int:
        return self.files + self.dirs


def _tree_size(path: str) -> tuple[int, int, int]:
    """
    Size a directory tree without following symlinks.

    Returns:
        Tuple of (total_bytes, file_count, dir_count)
    """
    total_size = 0
    file_count = 0
    dir_count = 0

    try:
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        sub_size, sub_files, sub_dirs = _tree_size(entry.path)
                        total_size += sub_size
                        file_count += sub_files
                        dir_count += sub_dirs + 1
                    else:
                        total_size += entry.stat(follow_symlinks=False).st_size
                        file_count += 1
                except OSError:
                    continue
    except OSError:
        pass

    return total_size, file_count, dir_count


def trashed_at(entry: os.DirEntry[str]) -> datetime:
    """When an entry was trashed: from its trash name, else its mtime."""
    parsed = parse_trash_name(entry.name)
    if parsed is not None:
        return parsed[1]
    return datetime.fromtimestamp(entry.stat(follow_symlinks=False).st_mtime)


def purge_trash(
    trash_dir: Path,
    days: int = DEFAULT_TRASH_DAYS,
    now: datetime | None = None,
    dry_run: bool = False,
) -> PurgeStats:
    """
    Permanently delete trash entries older than ``days``.

    Args:
        trash_dir: Trash directory to clean
        days: Entries trashed more than this many days ago are removed
        now: Reference time (defaults to the current time)
        dry_run: Count what would be removed without removing it

    Returns:
        PurgeStats with counts, bytes freed and per-entry errors
    """
    stats = PurgeStats()
    if days < 0:
        raise ValueError(f"days cannot be negative: {days}")

    if not trash_dir.is_dir():
        logger.info("Trash directory does not exist: %s (skipping)", trash_dir)
        return stats

    cutoff = (now or datetime.now()) - timedelta(days=days)

    try:
        with os.scandir(trash_dir) as entries:
            for entry in entries:
                try:
                    if trashed_at(entry) >= cutoff:
                        continue

                    if entry.is_dir(follow_symlinks=False):
                        size, files, dirs = _tree_size(entry.path)
                        if not dry_run:
                            shutil.rmtree(entry.path)
                        stats.files += files
                        stats.dirs += dirs + 1
                    else:
                        size = entry.stat(follow_symlinks=False).st_size
                        if not dry_run:
                            os.unlink(entry.path)
                        stats.files += 1
                    stats.bytes_freed += size
                except OSError as e:
                    logger.warning("Failed to remove %s: %s", entry.path, e)
                    stats.errors.append(f"{entry.path}: {e.strerror or e}")
    except OSError as e:
        logger.warning("Cannot list trash directory %s: %s", trash_dir, e)
        stats.errors.append(f"{trash_dir}: {e.strerror or e}")

    return stats
