"""Tests for the command line interface."""

from __future__ import annotations

import errno
import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from better_rm import __version__
from better_rm import cli
from better_rm import config as config_module
from better_rm.cli import app, purge_app
from better_rm.core import purge as purge_module

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(temp_dir: Path, monkeypatch):
    """Keep config, trash and syslog away from the real system."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("BETTER_RM_TRASH", raising=False)
    monkeypatch.delenv("BETTER_RM_TRASH_DAYS", raising=False)
    monkeypatch.setattr(config_module, "SYSTEM_CONFIG_FILE", temp_dir / "no-system.conf")
    monkeypatch.setattr(cli, "configure_audit_logging", lambda: None)
    yield home


@pytest.fixture
def victim(temp_dir: Path):
    target = temp_dir / "victim.txt"
    target.write_text("bye")
    yield target


class TestMain:
    """Tests for the better-rm command."""

    def test_missing_operand(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "better-rm: missing operand" in result.output
        assert "Try 'better-rm --help'" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"better-rm {__version__}" in result.output

    def test_help(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "--preserve-root" in result.output

    def test_removes_file(self, victim: Path):
        result = runner.invoke(app, [str(victim)])
        assert result.exit_code == 0
        assert not victim.exists()

    def test_directory_needs_recursive(self, sample_tree: Path):
        result = runner.invoke(app, [str(sample_tree)])
        assert result.exit_code == 1
        assert "Is a directory" in result.output
        assert sample_tree.exists()

    def test_recursive(self, sample_tree: Path):
        result = runner.invoke(app, ["-r", str(sample_tree)])
        assert result.exit_code == 0
        assert not sample_tree.exists()

    def test_capital_r(self, sample_tree: Path):
        result = runner.invoke(app, ["-R", str(sample_tree)])
        assert result.exit_code == 0
        assert not sample_tree.exists()

    def test_verbose(self, victim: Path):
        result = runner.invoke(app, ["-v", str(victim)])
        assert f"removing '{victim}'" in result.output

    def test_dry_run(self, sample_tree: Path):
        result = runner.invoke(app, ["-rn", str(sample_tree)])

        assert result.exit_code == 0
        assert sample_tree.exists()
        assert "=== DRY-RUN MODE: No files will be actually deleted ===" in result.output
        assert f"[DRY-RUN] would be removing directory '{sample_tree}' recursively" in result.output
        assert "=== DRY-RUN COMPLETE: No files were actually deleted ===" in result.output

    def test_protected_path(self):
        result = runner.invoke(app, ["-rn", "/etc"])
        assert result.exit_code == 1
        assert "cannot remove '/etc': Protected system directory" in result.output

    def test_remaining_paths_still_processed(self, victim: Path):
        result = runner.invoke(app, ["-n", "/usr", str(victim)])
        assert result.exit_code == 1
        assert f"would be removing '{victim}'" in result.output

    def test_missing_file(self, temp_dir: Path):
        result = runner.invoke(app, [str(temp_dir / "nope")])
        assert result.exit_code == 1
        assert "No such file or directory" in result.output

    def test_missing_file_forced(self, temp_dir: Path):
        result = runner.invoke(app, ["-f", str(temp_dir / "nope")])
        assert result.exit_code == 0
        assert result.output == ""


class TestPromptMode:
    """Tests for -f/-i, where the last one given wins."""

    def test_interactive_decline(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="n\n")
        assert result.exit_code == 0
        assert f"remove '{victim}'?" in result.output
        assert victim.exists()

    def test_interactive_accept(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="y\n")
        assert result.exit_code == 0
        assert not victim.exists()

    def test_interactive_end_of_input(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="")
        assert result.exit_code == 0
        assert victim.exists()

    def test_interactive_after_force(self, victim: Path):
        result = runner.invoke(app, ["-f", "-i", str(victim)], input="n\n")
        assert "remove '" in result.output
        assert victim.exists()

    def test_force_after_interactive(self, victim: Path):
        result = runner.invoke(app, ["-i", "-f", str(victim)])
        assert result.exit_code == 0
        assert "remove '" not in result.output
        assert not victim.exists()

    def test_unrecognized_answer_declines(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="x\ny\n")

        assert result.exit_code == 0
        assert result.output.count("remove '") == 1
        assert "invalid input" not in result.output
        assert victim.exists()

    def test_only_first_letter_counts(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="yes please\n")
        assert result.exit_code == 0
        assert not victim.exists()

    def test_empty_answer_declines(self, victim: Path):
        result = runner.invoke(app, ["-i", str(victim)], input="\n")
        assert result.exit_code == 0
        assert victim.exists()


class TestTrashOptions:
    """Tests for --trash and --trash-dir."""

    def test_trash_dir(self, victim: Path, temp_dir: Path):
        trash = temp_dir / "bin"

        result = runner.invoke(app, ["--trash-dir", str(trash), str(victim)])

        assert result.exit_code == 0
        assert not victim.exists()
        assert [p.read_text() for p in trash.iterdir()] == ["bye"]

    def test_trash_uses_home(self, victim: Path, isolated_env: Path):
        result = runner.invoke(app, ["-t", str(victim)])

        assert result.exit_code == 0
        assert len(list((isolated_env / ".Trash").iterdir())) == 1

    def test_trash_from_environment(self, victim: Path, temp_dir: Path, monkeypatch):
        monkeypatch.setenv("BETTER_RM_TRASH", str(temp_dir / "env-trash"))

        result = runner.invoke(app, ["-t", str(victim)])

        assert result.exit_code == 0
        assert (temp_dir / "env-trash").is_dir()

    def test_invalid_trash_dir(self, victim: Path, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("x")

        result = runner.invoke(app, ["--trash-dir", str(blocker), str(victim)])

        assert result.exit_code == 1
        assert "trash path exists but is not directory" in result.output
        assert victim.exists()

    def test_dry_run_banner(self, victim: Path, temp_dir: Path):
        trash = temp_dir / "bin"
        result = runner.invoke(app, ["-n", "--trash-dir", str(trash), str(victim)])

        assert f"=== TRASH MODE: Files would be moved to {trash} ===" in result.output
        assert not trash.exists()


class TestConfigOptions:
    """Tests for configuration handling on the command line."""

    def test_list_protected(self):
        result = runner.invoke(app, ["--list-protected"])
        assert result.exit_code == 0
        assert "Protected directories:" in result.output
        assert "  /etc" in result.output

    def test_config_adds_protection(self, sample_tree: Path, temp_dir: Path):
        conf = temp_dir / "extra.conf"
        conf.write_text(f"protect={sample_tree}\n")

        result = runner.invoke(app, ["-c", str(conf), "-rf", str(sample_tree)])

        assert result.exit_code == 1
        assert "Protected system directory" in result.output
        assert sample_tree.exists()

    def test_user_config_listed(self, isolated_env: Path):
        user_conf = isolated_env / ".config" / "better-rm" / "config"
        user_conf.parent.mkdir(parents=True)
        user_conf.write_text("protect=/srv/important\n")

        result = runner.invoke(app, ["--list-protected"])

        assert "  /srv/important" in result.output

    def test_config_trash_dir(self, victim: Path, temp_dir: Path):
        conf = temp_dir / "extra.conf"
        conf.write_text(f"trash_dir={temp_dir / 'conf-trash'}\n")

        result = runner.invoke(app, ["-c", str(conf), "-t", str(victim)])

        assert result.exit_code == 0
        assert len(list((temp_dir / "conf-trash").iterdir())) == 1

    def test_missing_config_file(self, victim: Path, temp_dir: Path):
        result = runner.invoke(app, ["-c", str(temp_dir / "missing.conf"), str(victim)])
        assert result.exit_code == 2
        assert victim.exists()


class TestPurge:
    """Tests for the better-rm-purge command."""

    def test_purges_old_entries(self, temp_dir: Path):
        trash = temp_dir / "trash"
        trash.mkdir()
        old = trash / "old.txt.20200101_000000.1"
        old.write_text("old")
        stamp = (datetime.now() - timedelta(days=1)).strftime("%Y%m%d_%H%M%S")
        recent = trash / f"recent.txt.{stamp}.1"
        recent.write_text("recent")

        result = runner.invoke(purge_app, ["--trash-dir", str(trash), "--days", "30"])

        assert result.exit_code == 0
        assert not old.exists()
        assert recent.exists()
        assert "Removed 1 files and 0 directories" in result.output

    def test_dry_run(self, temp_dir: Path):
        trash = temp_dir / "trash"
        trash.mkdir()
        old = trash / "old.txt"
        old.write_text("old")
        os.utime(old, (0, 0))

        result = runner.invoke(purge_app, ["--trash-dir", str(trash), "-n"])

        assert result.exit_code == 0
        assert old.exists()
        assert "Would remove 1 files" in result.output

    def test_days_from_environment(self, temp_dir: Path, monkeypatch):
        trash = temp_dir / "trash"
        trash.mkdir()
        stamp = (datetime.now() - timedelta(days=3)).strftime("%Y%m%d_%H%M%S")
        entry = trash / f"a.{stamp}.1"
        entry.write_text("a")
        monkeypatch.setenv("BETTER_RM_TRASH_DAYS", "1")

        result = runner.invoke(purge_app, ["--trash-dir", str(trash)])

        assert result.exit_code == 0
        assert not entry.exists()

    def test_nothing_to_purge(self, temp_dir: Path):
        result = runner.invoke(purge_app, ["--trash-dir", str(temp_dir / "absent")])
        assert result.exit_code == 0
        assert "Nothing to purge." in result.output

    def test_negative_days_rejected(self, temp_dir: Path):
        result = runner.invoke(purge_app, ["--trash-dir", str(temp_dir), "--days", "-1"])
        assert result.exit_code == 2

    def test_unlistable_trash_dir(self, temp_dir: Path, monkeypatch):
        def denied(path="."):
            raise PermissionError(errno.EACCES, "Permission denied", str(path))

        monkeypatch.setattr(purge_module.os, "scandir", denied)

        result = runner.invoke(purge_app, ["--trash-dir", str(temp_dir)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert f"{temp_dir}: Permission denied" in result.output
