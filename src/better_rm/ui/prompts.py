"""Interactive prompts for user input."""

from __future__ import annotations

import typer


def confirm_removal(path: str) -> bool:
    """
    Ask whether a path should be removed.

    Only an answer starting with 'y' or 'Y' confirms. Anything else,
    including an unrecognized answer, declines without asking again.

    Args:
        path: Path as given on the command line

    Returns:
        True only for an affirmative answer; end of input counts as no
    """
    try:
        answer = typer.prompt(
            f"remove '{path}'?",
            default="",
            show_default=False,
            prompt_suffix=" ",
        )
    except typer.Abort:
        typer.echo()
        return False
    return answer.strip()[:1] in ("y", "Y")
