"""
Typer CLI for WordMemo.

Commands:
    wordmemo lists                    - Show all word lists (most recently used first)
    wordmemo new-list NAME            - Create a word list
    wordmemo rename-list OLD NEW      - Rename a word list
    wordmemo delete-list NAME         - Delete a list and all its words
    wordmemo use NAME                 - Mark a list as most recently used
    wordmemo words LIST --sort KEY    - Show the words of a list
    wordmemo add LIST TERM ...        - Add or update a word
    wordmemo remove LIST TERM         - Delete a word
    wordmemo study run LIST           - Start a study session
    wordmemo study today LIST         - Show today's remaining/due count

Usage:
    wordmemo --help
    wordmemo add "Default list" serendipitous --definition "occurring by chance" --lemma serendipity
    wordmemo words "Default list" --sort reviewed
    wordmemo study run "Default list" --seed 7
"""

from __future__ import annotations

from typing import Optional

import typer
from rich import print as rprint
from rich.table import Table

from wordmemo.cli import common
from wordmemo.cli.common import console, format_progress_bar, load_list
from wordmemo.cli.study_commands import study_app
from wordmemo.config import get_settings
from wordmemo.core.exceptions import ValidationError
from wordmemo.core.sorting import SortKey, sorted_entries
from wordmemo.library.editor import EntryDraft, make_draft

app = typer.Typer(
    help="WordMemo: vocabulary lists and adaptive study sessions",
    no_args_is_help=True,
)
app.add_typer(study_app, name="study")


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    common.configure_logging("DEBUG" if verbose else None)
    editor = common.get_editor()
    editor.bootstrap(seed=get_settings().seed_sample_data)
    ctx.obj = editor


# ========================================
# Lists
# ========================================


@app.command("lists")
def show_lists(ctx: typer.Context) -> None:
    """Show all word lists, most recently used first."""
    editor = ctx.obj
    lists = editor.bootstrap(seed=False)
    if not lists:
        rprint("[yellow]No word lists yet.[/yellow] Create one with [cyan]wordmemo new-list[/cyan]")
        return

    table = Table(title="Word Lists")
    table.add_column("Name", style="bold")
    table.add_column("Words", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("Last used")
    for word_list in lists:
        table.add_row(
            word_list.name,
            str(len(word_list)),
            str(len(word_list.due_entries(get_settings().due_threshold))),
            word_list.last_used_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command("new-list")
def new_list(ctx: typer.Context, name: str = typer.Argument("", help="List name")) -> None:
    """Create a word list."""
    word_list = ctx.obj.create_list(name)
    rprint(f"[green]Created[/green] {word_list.name}")


@app.command("rename-list")
def rename_list(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Current list name"),
    new_name: str = typer.Argument(..., help="New list name"),
) -> None:
    """Rename a word list."""
    editor = ctx.obj
    word_list = load_list(editor, name)
    try:
        editor.rename_list(word_list, new_name)
    except ValidationError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    rprint(f"[green]Renamed[/green] {name} -> {word_list.name}")


@app.command("delete-list")
def delete_list(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="List name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a list together with all of its words."""
    editor = ctx.obj
    word_list = load_list(editor, name)
    if not yes and not typer.confirm(f"Delete {word_list.name} and its {len(word_list)} words?"):
        raise typer.Exit(0)
    editor.delete_list(word_list)
    rprint(f"[green]Deleted[/green] {word_list.name}")


@app.command("use")
def use_list(ctx: typer.Context, name: str = typer.Argument(..., help="List name")) -> None:
    """Mark a list as the most recently used one."""
    editor = ctx.obj
    word_list = editor.select_list(load_list(editor, name))
    rprint(f"Using [bold]{word_list.name}[/bold]")


# ========================================
# Words
# ========================================


@app.command("words")
def show_words(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="List name"),
    sort: SortKey = typer.Option(SortKey.ALPHABETICAL, "--sort", "-s", help="Sort order"),
) -> None:
    """Show the words of a list."""
    word_list = load_list(ctx.obj, name)
    entries = sorted_entries(word_list, sort)
    if not entries:
        rprint(f"[yellow]{word_list.name} has no words yet.[/yellow]")
        return

    table = Table(title=f"{word_list.name} ({len(entries)} words)")
    table.add_column("Term", style="bold")
    table.add_column("POS")
    table.add_column("Definition")
    table.add_column("Proficiency")
    table.add_column("Lemma")
    table.add_column("Derivatives")
    for entry in entries:
        lemma = entry.lemma
        table.add_row(
            entry.term,
            entry.part_of_speech,
            entry.definition,
            f"{format_progress_bar(entry.proficiency)} {entry.proficiency:.0f}%",
            lemma.term if lemma else "",
            ", ".join(d.term for d in entry.derivatives),
        )
    console.print(table)


@app.command("add")
def add_word(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="List name"),
    term: str = typer.Argument(..., help="Word or phrase"),
    pronunciation: Optional[str] = typer.Option(None, "--pronunciation", "-p"),
    part_of_speech: Optional[str] = typer.Option(None, "--pos"),
    definition: Optional[str] = typer.Option(None, "--definition", "-d"),
    proficiency: Optional[float] = typer.Option(None, "--proficiency"),
    lemma: Optional[str] = typer.Option(None, "--lemma", "-l", help="Term of the base form"),
    no_lemma: bool = typer.Option(False, "--no-lemma", help="Clear the lemma"),
    derivatives: Optional[list[str]] = typer.Option(
        None, "--derivative", help="Term of a derived word (repeatable; replaces the set)"
    ),
) -> None:
    """Add a word, or update it if the term already exists in the list."""
    editor = ctx.obj
    word_list = load_list(editor, name)
    existing = word_list.find_by_term(term)
    base = EntryDraft.from_entry(existing).model_dump() if existing else {"term": term}

    fields = {
        "pronunciation": pronunciation,
        "part_of_speech": part_of_speech,
        "definition": definition,
        "proficiency": proficiency,
    }
    base.update({k: v for k, v in fields.items() if v is not None})
    base["term"] = term

    if no_lemma:
        base["lemma_id"] = None
    elif lemma is not None:
        base["lemma_id"] = _term_to_id(word_list, lemma)
    if derivatives is not None:
        base["derivative_ids"] = [_term_to_id(word_list, t) for t in derivatives]

    try:
        entry = editor.save_entry(word_list, make_draft(**base), existing)
    except ValidationError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    verb = "Updated" if existing else "Added"
    rprint(f"[green]{verb}[/green] {entry.term} in {word_list.name}")


@app.command("remove")
def remove_word(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="List name"),
    term: str = typer.Argument(..., help="Word to delete"),
) -> None:
    """Delete a word from a list."""
    editor = ctx.obj
    word_list = load_list(editor, name)
    entry = word_list.find_by_term(term)
    if entry is None:
        rprint(f"[red]Error:[/red] {term!r} is not in {word_list.name}")
        raise typer.Exit(1)
    editor.delete_entry(word_list, entry)
    rprint(f"[green]Removed[/green] {entry.term}")


def _term_to_id(word_list, term: str):
    entry = word_list.find_by_term(term)
    if entry is None:
        rprint(f"[red]Error:[/red] {term!r} is not in {word_list.name}")
        raise typer.Exit(1)
    return entry.id


def run() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    run()
