"""
CLI Study Commands.

Commands:
    wordmemo study run LIST    - Interactive study session over due words
    wordmemo study today LIST  - Remaining/due count for today

During a session every prompt also accepts:
    :p  previous word
    :s  skip (or next, once answered)
    :q  quit (scores so far are kept)
"""
from __future__ import annotations

import random
from typing import Optional

import typer
from rich import print as rprint
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from wordmemo.cli.common import console, load_list
from wordmemo.config import get_settings
from wordmemo.core.scoring import QuestionKind
from wordmemo.study import engine
from wordmemo.study.engine import (
    ChoiceAnswer,
    RecognitionAnswer,
    SessionState,
    SpellingAnswer,
)
from wordmemo.study.progress import daily_progress

study_app = typer.Typer(
    name="study",
    help="Study sessions and daily progress",
    no_args_is_help=True,
)

PREVIOUS, SKIP, QUIT = ":p", ":s", ":q"

TITLES = {
    QuestionKind.RECOGNITION: "[bold cyan]DO YOU KNOW THIS?[/bold cyan]",
    QuestionKind.FILL_IN: "[bold cyan]SPELL THE WORD[/bold cyan]",
    QuestionKind.MULTIPLE_CHOICE: "[bold cyan]MULTIPLE CHOICE[/bold cyan]",
}


@study_app.command("today")
def study_today(ctx: typer.Context, name: str = typer.Argument(..., help="List name")) -> None:
    """Show how many due words are still waiting today."""
    word_list = load_list(ctx.obj, name)
    progress = daily_progress(word_list, threshold=get_settings().due_threshold)

    content = Text()
    content.append(f"{progress}\n", style="bold")
    content.append("remaining today / due in list")
    console.print(Panel(content, title=f"[bold]{word_list.name}[/bold]", border_style="blue"))
    if not progress.can_start:
        rprint("[green][OK][/green] Every word is at the mastery threshold")


@study_app.command("run")
def study_run(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="List name"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the shuffle and question rolls"),
) -> None:
    """Start a study session over the due words of a list."""
    editor = ctx.obj
    word_list = editor.select_list(load_list(editor, name))
    rng = random.Random(seed) if seed is not None else random.Random()

    state = engine.prepare_queue(
        word_list, rng=rng, clock=editor.clock, threshold=get_settings().due_threshold
    )
    if state.is_complete:
        rprint("[green]Every word in this list is at the mastery threshold.[/green]")
        return

    while state.is_active:
        result = _ask_question(state)
        if result is None:
            break
        if result.reviewed != state.reviewed:
            editor.store.insert(word_list)
        state = result

        if state.is_active and state.scored:
            _show_outcome(state)
            result = _wait_for_next(state)
            if result is None:
                break
            state = result

    editor.store.insert(word_list)
    _show_summary(state)


def _ask_question(state: SessionState) -> SessionState | None:
    """Render the current question and apply one user action. None means quit."""
    question = engine.current_question(state)
    if question is None:
        return None

    rprint(f"\n[dim]Remaining {engine.remaining(state)} / {len(state.queue)}[/dim]")
    console.print(Panel(engine.prompt_text(question), title=TITLES[question.kind], border_style="cyan"))

    if question.kind is QuestionKind.MULTIPLE_CHOICE:
        for number, option in enumerate(question.options, start=1):
            rprint(f"  [cyan]{number}[/cyan]) {option.term}")
        hint = "number"
    elif question.kind is QuestionKind.RECOGNITION:
        hint = "y/n"
    else:
        hint = "spelling"

    raw = Prompt.ask(f"[bold]>[/bold] ({hint}, :p :s :q)", default="", show_default=False)
    command = raw.strip().lower()
    if command == QUIT:
        return None
    if command == PREVIOUS:
        return engine.go_previous(state)
    if command == SKIP:
        return engine.advance(state)

    if question.kind is QuestionKind.RECOGNITION:
        if command not in ("y", "n"):
            return state
        return engine.submit_answer(state, RecognitionAnswer(knows=command == "y"))
    if question.kind is QuestionKind.FILL_IN:
        return engine.submit_answer(state, SpellingAnswer(raw))

    if not command.isdigit() or not 1 <= int(command) <= len(question.options):
        rprint("[yellow]Pick one of the listed numbers[/yellow]")
        return state
    option = question.options[int(command) - 1]
    return engine.submit_answer(state, ChoiceAnswer(option.id))


def _show_outcome(state: SessionState) -> None:
    outcome = state.outcome
    if outcome is None:
        return
    if outcome.correct:
        rprint(f"[green]Correct![/green] {outcome.expected}  [dim]+{outcome.delta:.0f}[/dim]")
    else:
        rprint(f"[red]{outcome.given or '(blank)'}[/red]  ->  [green]{outcome.expected}[/green]")


def _wait_for_next(state: SessionState) -> SessionState | None:
    raw = Prompt.ask("[dim]Enter for next (:p previous, :q quit)[/dim]", default="", show_default=False)
    command = raw.strip().lower()
    if command == QUIT:
        return None
    if command == PREVIOUS:
        return engine.go_previous(state)
    return engine.advance(state)


def _show_summary(state: SessionState) -> None:
    content = Text()
    content.append(f"Reviewed: {state.reviewed}\n")
    content.append(f"Correct:  {state.correct}\n", style="green")
    status = "complete" if state.is_complete else "stopped early"
    console.print(Panel(content, title=f"[bold]Session {status}[/bold]", border_style="blue"))
