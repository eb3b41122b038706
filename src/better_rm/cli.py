"""better-rm CLI - Main entry points."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from better_rm import __version__
from better_rm.audit import AuditLog, configure_audit_logging
from better_rm.config import load_config
from better_rm.core.models import RemovalConfig
from better_rm.core.policy import RemovalPolicy, exit_status
from better_rm.core.purge import DEFAULT_TRASH_DAYS, TRASH_DAYS_ENV, purge_trash
from better_rm.core.trash import TRASH_DIR_ENV, resolve_trash_dir
from better_rm.safety.protected import ProtectionRegistry
from better_rm.ui.console import (
    PROGRAM_NAME,
    Reporter,
    create_console,
    format_size,
    print_error,
    print_protected,
    print_success,
    print_warning,
)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    name=PROGRAM_NAME,
    help="Better replacement for rm with protection against deleting system directories.",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)
purge_app = typer.Typer(
    name="better-rm-purge",
    help="Permanently delete old entries from the better-rm trash.",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)
console = create_console()
err_console = create_console(stderr=True)

PROMPT_MODE_KEY = "prompt_mode"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{PROGRAM_NAME} {__version__}", markup=False)
        raise typer.Exit(0)


def _prompt_mode_callback(ctx: typer.Context, param: typer.CallbackParam, value: bool) -> bool:
    """Remember whichever of -f/-i came last on the command line."""
    # click processes parameters in the order they were given
    if value:
        ctx.meta[PROMPT_MODE_KEY] = param.name
    return value


def _missing_operand() -> None:
    print_error(err_console, f"{PROGRAM_NAME}: missing operand")
    err_console.print(f"Try '{PROGRAM_NAME} --help' for more information.", markup=False)
    raise typer.Exit(1)


TRASH_DIR_OPTION = typer.Option(
    None,
    "--trash-dir",
    metavar="DIR",
    help=f"Trash directory (implies --trash; default: ${TRASH_DIR_ENV} or ~/.Trash)",
)


@app.command()
def main(
    ctx: typer.Context,
    paths: list[str] | None = typer.Argument(
        None,
        metavar="FILE...",
        help="Files or directories to remove",
        show_default=False,
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        "-R",
        help="Remove directories and their contents recursively",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Ignore nonexistent files, never prompt",
        callback=_prompt_mode_callback,
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Prompt before every removal",
        callback=_prompt_mode_callback,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Explain what is being done"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be deleted without removing anything (implies -v)",
    ),
    trash: bool = typer.Option(
        False,
        "--trash",
        "-t",
        help="Move files to the trash instead of deleting them",
    ),
    trash_dir: str | None = TRASH_DIR_OPTION,
    preserve_root: bool = typer.Option(
        True,
        "--preserve-root/--no-preserve-root",
        help="Do not remove '/' (default: preserve)",
    ),
    one_file_system: bool = typer.Option(
        False,
        "--one-file-system",
        help="Skip entries on a different filesystem than the argument",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Extra config file with protect=/trash_dir= directives",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    list_protected: bool = typer.Option(
        False,
        "--list-protected",
        help="Show the protected directories and exit",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        is_eager=True,
        callback=_version_callback,
    ),
) -> None:
    """Remove files, refusing to touch protected system directories."""
    configure_audit_logging()

    try:
        file_config = load_config(config_file)
    except OSError as e:
        print_error(err_console, f"{PROGRAM_NAME}: cannot read config: {e}")
        raise typer.Exit(1) from e

    registry = ProtectionRegistry.with_defaults(file_config.protect)

    if list_protected:
        print_protected(console, registry)
        raise typer.Exit(0)

    if not paths:
        _missing_operand()
        return

    use_trash = trash or bool(trash_dir)
    config = RemovalConfig(
        recursive=recursive,
        verbose=verbose,
        dry_run=dry_run,
        preserve_root=preserve_root,
        one_file_system=one_file_system,
        use_trash=use_trash,
        trash_dir=resolve_trash_dir(trash_dir, file_config.trash_dir) if use_trash else None,
    )

    mode = ctx.meta.get(PROMPT_MODE_KEY)
    if mode == "force":
        config = config.with_force()
    elif mode == "interactive":
        config = config.with_interactive()

    reporter = Reporter(out=console, err=err_console, dry_run=config.dry_run, verbose=config.verbose)
    policy = RemovalPolicy(config, registry, reporter=reporter, audit=AuditLog())

    if not policy.prepare():
        raise typer.Exit(1)

    outcomes = policy.run(paths)
    raise typer.Exit(exit_status(outcomes))


@purge_app.command()
def purge(
    days: int = typer.Option(
        DEFAULT_TRASH_DAYS,
        "--days",
        "-d",
        min=0,
        envvar=TRASH_DAYS_ENV,
        help="Remove entries trashed more than this many days ago",
    ),
    trash_dir: str | None = typer.Option(
        None,
        "--trash-dir",
        metavar="DIR",
        help=f"Trash directory to clean (default: ${TRASH_DIR_ENV} or ~/.Trash)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Report what would be removed without removing it",
    ),
) -> None:
    """Permanently delete trash entries older than --days."""
    file_config = load_config()
    target = Path(resolve_trash_dir(trash_dir, file_config.trash_dir))

    console.print(
        f"[dim]Cleaning {escape(str(target))} "
        f"(keeping entries newer than {days} days)[/dim]"
    )
    stats = purge_trash(target, days=days, dry_run=dry_run)

    verb = "Would remove" if dry_run else "Removed"
    if stats.removed:
        print_success(
            console,
            f"{verb} {stats.files} files and {stats.dirs} directories, "
            f"freeing {format_size(stats.bytes_freed)}",
        )
    else:
        console.print("[green]Nothing to purge.[/green]")

    if stats.errors:
        print_warning(console, f"Encountered {len(stats.errors)} errors during cleanup")
        for error in stats.errors:
            print_error(err_console, f"  {error}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
