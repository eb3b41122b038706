"""Configuration file loading for better-rm."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

SYSTEM_CONFIG_FILE = Path("/etc/better-rm.conf")

PROTECT_DIRECTIVE = "protect="
TRASH_DIR_DIRECTIVE = "trash_dir="


@dataclass(frozen=True)
class FileConfig:
    """Settings collected from configuration files."""

    protect: tuple[str, ...] = ()
    trash_dir: str | None = None

    # Metadata (files that were actually read)
    sources: tuple[Path, ...] = field(default=(), repr=False)

    def merge(self, other: FileConfig) -> FileConfig:
        """Combine with a later file: protections accumulate, trash_dir overrides."""
        return FileConfig(
            protect=(*self.protect, *other.protect),
            trash_dir=other.trash_dir or self.trash_dir,
            sources=(*self.sources, *other.sources),
        )


def get_xdg_config_home() -> Path:
    """Get XDG config home, respecting environment variable."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def get_config_paths() -> tuple[Path, Path]:
    """
    Get config file paths in load order.

    Returns:
        (system_path, user_path) - system is read first, user adds to it
    """
    user_path = get_xdg_config_home() / "better-rm" / "config"
    return SYSTEM_CONFIG_FILE, user_path


def parse_config(text: str, source: Path | None = None) -> FileConfig:
    """
    Parse configuration directives.

    Recognized lines are ``protect=<absolute-path>`` and
    ``trash_dir=<path>``. Comments, blank lines and anything else are
    ignored. No whitespace is allowed around ``=``.
    """
    protect: list[str] = []
    trash_dir: str | None = None

    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue

        if line.startswith(PROTECT_DIRECTIVE):
            value = line[len(PROTECT_DIRECTIVE):]
            if value:
                protect.append(value)
        elif line.startswith(TRASH_DIR_DIRECTIVE):
            value = line[len(TRASH_DIR_DIRECTIVE):]
            if value:
                trash_dir = value
        else:
            logger.debug("Ignoring config line in %s: %r", source, line)

    sources = (source,) if source is not None else ()
    return FileConfig(protect=tuple(protect), trash_dir=trash_dir, sources=sources)


def load_config_from_file(path: Path) -> FileConfig:
    """
    Load configuration from a specific file.

    Raises:
        OSError: If the file cannot be read
    """
    return parse_config(path.read_text(encoding="utf-8", errors="replace"), source=path)


def load_config(extra: Path | None = None) -> FileConfig:
    """
    Load configuration from the system file, the user file and ``extra``.

    Load order (later files add protections and override trash_dir):
    1. /etc/better-rm.conf
    2. $XDG_CONFIG_HOME/better-rm/config (~/.config/better-rm/config)
    3. An explicitly requested file

    Missing or unreadable default files are skipped.
    """
    merged = FileConfig()

    for path in get_config_paths():
        if not path.is_file():
            continue
        try:
            merged = merged.merge(load_config_from_file(path))
        except OSError as e:
            logger.warning("Cannot read config %s: %s", path, e)

    if extra is not None:
        merged = merged.merge(load_config_from_file(extra))

    return merged

