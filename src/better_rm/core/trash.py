"""Relocation of removed entries into a holding area (trash)."""

from __future__ import annotations

import errno
import logging
import os
import re
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

TRASH_DIR_ENV = "BETTER_RM_TRASH"
DEFAULT_TRASH_DIR = ".Trash"
FALLBACK_TRASH_DIR = "/tmp/.Trash"

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# <basename>.<YYYYMMDD_HHMMSS>.<pid>[.<n>]
TRASH_NAME_PATTERN = re.compile(
    r"^(?P<base>.+)\.(?P<stamp>\d{8}_\d{6})\.(?P<pid>\d+)(?:\.(?P<seq>\d+))?$"
)


class TrashError(Exception):
    """Error while moving an entry to the trash."""

    pass


class HoldingAreaInvalid(TrashError):
    """The trash directory exists but is not a directory, or cannot be created."""

    pass


class TrashMoveError(TrashError):
    """The rename into the trash failed."""

    def __init__(self, path: str, destination: str, error: OSError):
        self.path = path
        self.destination = destination
        self.errno = error.errno
        self.strerror = error.strerror or str(error)
        super().__init__(self.strerror)


class CrossDeviceMoveFailed(TrashMoveError):
    """Source and trash live on different filesystems; no copy fallback is tried."""

    pass


def resolve_trash_dir(flag: str | None = None, config_dir: str | None = None) -> str:
    """
    Pick the trash directory.

    Priority (highest to lowest):
    1. --trash-dir flag
    2. $BETTER_RM_TRASH
    3. trash_dir= from the configuration files
    4. $HOME/.Trash
    5. /tmp/.Trash
    """
    if flag:
        return flag

    env_trash = os.environ.get(TRASH_DIR_ENV)
    if env_trash:
        return env_trash

    if config_dir:
        return config_dir

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, DEFAULT_TRASH_DIR)

    return FALLBACK_TRASH_DIR


def ensure_holding_area(path: str) -> None:
    """
    Make sure the trash directory exists.

    Creates it owner-only (0700) when missing; an existing directory is
    left untouched.

    Raises:
        HoldingAreaInvalid: If the path is not a directory or cannot be created
    """
    target = Path(path)
    if target.exists():
        if not target.is_dir():
            raise HoldingAreaInvalid(f"trash path exists but is not directory: {path}")
        return

    try:
        target.mkdir(mode=0o700, parents=True)
    except FileExistsError:
        if not target.is_dir():
            raise HoldingAreaInvalid(f"trash path exists but is not directory: {path}") from None
    except OSError as e:
        raise HoldingAreaInvalid(
            f"cannot create trash directory: {e.strerror or e}"
        ) from e

    logger.debug("Created trash directory %s", path)


def trash_name(
    path: str,
    holding_area: str,
    now: datetime | None = None,
    pid: int | None = None,
) -> str:
    """
    Build a destination inside the trash for ``path``.

    The name is ``<basename>.<YYYYMMDD_HHMMSS>.<pid>``. If that name is
    already taken a numeric suffix is added so an earlier entry is never
    overwritten.
    """
    base = os.path.basename(path.rstrip("/")) or path
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    candidate = os.path.join(holding_area, f"{base}.{stamp}.{pid or os.getpid()}")

    destination = candidate
    seq = 1
    while os.path.lexists(destination):
        destination = f"{candidate}.{seq}"
        seq += 1
    return destination


def parse_trash_name(name: str) -> tuple[str, datetime] | None:
    """Return (original basename, trashed-at time) for a trash entry name."""
    match = TRASH_NAME_PATTERN.match(name)
    if not match:
        return None
    try:
        stamp = datetime.strptime(match.group("stamp"), TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return match.group("base"), stamp


def relocate(path: str, holding_area: str, now: datetime | None = None) -> str:
    """
    Move ``path`` into the trash with an atomic rename.

    Args:
        path: Entry to move, as given by the user
        holding_area: Existing trash directory
        now: Timestamp used for the trash name (defaults to the current time)

    Returns:
        The destination path

    Raises:
        CrossDeviceMoveFailed: If the trash is on another filesystem
        TrashMoveError: If the rename fails for any other reason
    """
    destination = trash_name(path, holding_area, now=now)
    try:
        os.rename(path, destination)
    except OSError as e:
        if e.errno == errno.EXDEV:
            raise CrossDeviceMoveFailed(path, destination, e) from e
        raise TrashMoveError(path, destination, e) from e
    return destination
