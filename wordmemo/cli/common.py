"""Shared helpers for the CLI commands."""

from __future__ import annotations

import sys

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console

from wordmemo.config import get_settings
from wordmemo.core.exceptions import EntityNotFoundError
from wordmemo.core.models import WordList

console = Console()


def configure_logging(level: str | None = None) -> None:
    """Route loguru to stderr at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or get_settings().log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def get_editor():
    """Lazy load the editor so database setup only happens when a command runs."""
    from wordmemo.db.database import init_db
    from wordmemo.db.store import WordStore
    from wordmemo.library.editor import WordListEditor

    init_db()
    return WordListEditor(WordStore())


def load_list(editor, name: str) -> WordList:
    """Find a list by name or exit with an error."""
    try:
        return editor.store.find_list(name)
    except EntityNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def format_progress_bar(score: float, width: int = 10) -> str:
    """Format a progress bar."""
    filled = int(score / 100 * width)
    empty = width - filled
    return "#" * filled + "-" * empty
