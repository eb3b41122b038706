"""Pytest configuration and fixtures."""

from __future__ import annotations

import io
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from better_rm.ui.console import Reporter


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_tree(temp_dir: Path):
    """Create a tree with 4 files and 3 subdirectories below the root."""
    tree = temp_dir / "tree"
    tree.mkdir()

    (tree / "a.txt").write_text("a")
    (tree / "b.txt").write_text("b")

    sub = tree / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")

    deeper = sub / "deeper"
    deeper.mkdir()
    (deeper / "d.txt").write_text("d")

    (tree / "empty").mkdir()

    yield tree


@pytest.fixture
def trash_dir(temp_dir: Path):
    """An existing trash directory outside the sample tree."""
    trash = temp_dir / ".Trash"
    trash.mkdir(mode=0o700)
    yield trash


class CapturedReporter(Reporter):
    """Reporter writing to in-memory buffers."""

    def __init__(self, dry_run: bool = False, verbose: bool = False) -> None:
        self.out_buffer = io.StringIO()
        self.err_buffer = io.StringIO()
        super().__init__(
            out=Console(file=self.out_buffer, highlight=False, soft_wrap=True, width=200),
            err=Console(file=self.err_buffer, highlight=False, soft_wrap=True, width=200),
            dry_run=dry_run,
            verbose=verbose,
        )

    @property
    def stdout(self) -> str:
        return self.out_buffer.getvalue()

    @property
    def stderr(self) -> str:
        return self.err_buffer.getvalue()


@pytest.fixture
def make_reporter():
    """Factory for reporters that capture their output."""

    def _make(dry_run: bool = False, verbose: bool = False) -> CapturedReporter:
        return CapturedReporter(dry_run=dry_run, verbose=verbose)

    return _make
