"""
Study Queue Engine.

Drives one pass over the due entries of a word list:

    IDLE -> ACTIVE(index, question, scored) -> COMPLETE

The session is an immutable ``SessionState`` value. Every operation takes a
state and returns a new one; nothing is kept in module globals, so the state
machine can be tested without any front end. Scoring mutates the entries
themselves through ``wordmemo.core.scoring`` and is not rolled back when a
session is abandoned.

Question selection (per word, re-rolled whenever the word comes into view):
- roll < 34: recognition against term, definition or pronunciation
- roll < 67: fill-in (spell the term from its definition)
- otherwise: multiple choice on definition (95%) or pronunciation (5%)

All randomness goes through a ``RandomSource`` so tests can pin outcomes.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, Union
from uuid import UUID

from loguru import logger

from wordmemo.core.models import DUE_THRESHOLD, WordEntry, WordList
from wordmemo.core.scoring import (
    QuestionKind,
    record_review,
    score_delta,
    spelling_matches,
)

RECOGNITION_CUTOFF = 34
FILL_IN_CUTOFF = 67
DEFINITION_TARGET_PERCENT = 95
DISTRACTOR_COUNT = 3


class RandomSource(Protocol):
    """The subset of ``random.Random`` the engine relies on."""

    def randrange(self, start: int, stop: int | None = ..., step: int = ...) -> int:
        ...

    def choice(self, seq: Sequence[Any]) -> Any:
        ...

    def shuffle(self, x: list[Any]) -> None:
        ...

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        ...


class SessionStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETE = "complete"


class RecognitionPrompt(str, Enum):
    """Which side of the word a recognition question shows."""

    TERM = "term"
    DEFINITION = "definition"
    PRONUNCIATION = "pronunciation"


class ChoiceTarget(str, Enum):
    """What a multiple-choice question shows as its stem."""

    DEFINITION = "definition"
    PRONUNCIATION = "pronunciation"


@dataclass(frozen=True)
class Question:
    """One question instance for the word in view."""

    kind: QuestionKind
    word: WordEntry
    prompt: RecognitionPrompt | None = None
    target: ChoiceTarget | None = None
    options: tuple[WordEntry, ...] = ()


@dataclass(frozen=True)
class RecognitionAnswer:
    knows: bool


@dataclass(frozen=True)
class SpellingAnswer:
    text: str


@dataclass(frozen=True)
class ChoiceAnswer:
    option_id: UUID


Answer = Union[RecognitionAnswer, SpellingAnswer, ChoiceAnswer]


@dataclass(frozen=True)
class AnswerOutcome:
    """Feedback for the question just scored."""

    correct: bool
    delta: float
    expected: str
    given: str
    skipped: bool = False


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a study session."""

    status: SessionStatus = SessionStatus.IDLE
    word_list: WordList | None = None
    queue: tuple[WordEntry, ...] = ()
    index: int = 0
    question: Question | None = None
    scored: bool = False
    outcome: AnswerOutcome | None = None
    reviewed: int = 0
    correct: int = 0
    rng: RandomSource = field(default_factory=random.Random, repr=False, compare=False)
    clock: Callable[[], datetime] = field(default=datetime.now, repr=False, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def is_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETE


def idle_session() -> SessionState:
    return SessionState()


# ----------------------------------------------------------------------
# Queue construction
# ----------------------------------------------------------------------


def prepare_queue(
    word_list: WordList,
    rng: RandomSource | None = None,
    clock: Callable[[], datetime] | None = None,
    threshold: float = DUE_THRESHOLD,
) -> SessionState:
    """Start a session over the due entries of ``word_list``.

    A list with nothing due yields a COMPLETE session with an empty queue.
    """
    rng = rng or random.Random()
    queue = [e for e in word_list.entries if e.proficiency < threshold]
    rng.shuffle(queue)

    state = SessionState(
        status=SessionStatus.ACTIVE,
        word_list=word_list,
        queue=tuple(queue),
        rng=rng,
        clock=clock or datetime.now,
    )
    if not queue:
        logger.info(f"No due entries in {word_list.name!r}; session complete")
        return replace(state, status=SessionStatus.COMPLETE)

    logger.debug(f"Prepared queue of {len(queue)} for {word_list.name!r}")
    return _show(state, 0)


def build_question(state: SessionState, word: WordEntry) -> Question:
    """Roll a question type for ``word`` at the state's current index."""
    rng = state.rng
    roll = rng.randrange(100)
    if roll < RECOGNITION_CUTOFF:
        question = Question(
            kind=QuestionKind.RECOGNITION,
            word=word,
            prompt=pick_recognition_prompt(word, rng),
        )
    elif roll < FILL_IN_CUTOFF:
        question = Question(kind=QuestionKind.FILL_IN, word=word)
    else:
        question = Question(
            kind=QuestionKind.MULTIPLE_CHOICE,
            word=word,
            target=pick_choice_target(rng),
            options=tuple(
                choice_options(word, state.queue, state.index, state.word_list, rng)
            ),
        )
    logger.debug(f"Question for {word.term!r}: {question.kind.value} (roll={roll})")
    return question


def pick_recognition_prompt(word: WordEntry, rng: RandomSource) -> RecognitionPrompt:
    pool = [RecognitionPrompt.TERM]
    if word.definition:
        pool.append(RecognitionPrompt.DEFINITION)
    if word.pronunciation:
        pool.append(RecognitionPrompt.PRONUNCIATION)
    return rng.choice(pool)


def pick_choice_target(rng: RandomSource) -> ChoiceTarget:
    if rng.randrange(100) < DEFINITION_TARGET_PERCENT:
        return ChoiceTarget.DEFINITION
    return ChoiceTarget.PRONUNCIATION


def choice_options(
    word: WordEntry,
    queue: Sequence[WordEntry],
    index: int,
    word_list: WordList | None,
    rng: RandomSource,
) -> list[WordEntry]:
    """Up to three distractors plus the answer, shuffled.

    Distractors come from words later in the queue first, which keeps
    upcoming words from being spoiled less often than already-seen ones.
    The rest of the list tops the pool up when fewer than three remain.
    """
    pool = [e for i, e in enumerate(queue) if i > index and e.id != word.id]
    if len(pool) < DISTRACTOR_COUNT and word_list is not None:
        seen = {e.id for e in pool}
        pool.extend(
            e for e in word_list.entries if e.id != word.id and e.id not in seen
        )

    options = rng.sample(pool, min(DISTRACTOR_COUNT, len(pool)))
    options.append(word)
    rng.shuffle(options)
    return options


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------


def current_word(state: SessionState) -> WordEntry | None:
    if state.status is not SessionStatus.ACTIVE:
        return None
    if 0 <= state.index < len(state.queue):
        return state.queue[state.index]
    return None


def current_question(state: SessionState) -> Question | None:
    return state.question if state.status is SessionStatus.ACTIVE else None


def remaining(state: SessionState) -> int:
    """Words left including the one in view."""
    if state.status is not SessionStatus.ACTIVE:
        return 0
    return len(state.queue) - state.index


def prompt_text(question: Question) -> str:
    """Text shown as the question stem."""
    word = question.word
    if question.kind is QuestionKind.RECOGNITION:
        if question.prompt is RecognitionPrompt.DEFINITION:
            return word.definition or word.term
        if question.prompt is RecognitionPrompt.PRONUNCIATION:
            return word.pronunciation or word.term
        return word.term
    if question.kind is QuestionKind.FILL_IN:
        return word.definition or "Type the spelling"
    if question.target is ChoiceTarget.PRONUNCIATION:
        return word.pronunciation or "Pick the word with this pronunciation"
    return word.definition or "Pick the word with this definition"


# ----------------------------------------------------------------------
# Transitions
# ----------------------------------------------------------------------


def submit_answer(state: SessionState, answer: Answer) -> SessionState:
    """Score the question in view.

    A question is scored at most once: answering an already scored question
    returns ``state`` unchanged. Recognition answers advance immediately;
    fill-in and multiple choice stay in view until ``advance``.
    """
    question = current_question(state)
    if question is None:
        return state
    if state.scored:
        logger.debug(f"Question for {question.word.term!r} already scored")
        return state

    correct, given = _evaluate(question, answer)
    delta = score_delta(question.kind, correct)
    scored = _score(state, delta, correct, given)

    if question.kind is QuestionKind.RECOGNITION:
        return _next(scored)
    return scored


def advance(state: SessionState) -> SessionState:
    """Move to the next word; an unscored question counts as a skip (delta 0)."""
    if state.status is not SessionStatus.ACTIVE:
        return state
    if not state.scored:
        state = _score(state, 0.0, False, "", skipped=True)
    return _next(state)


def go_previous(state: SessionState) -> SessionState:
    """Step back one word with a freshly rolled question. No-op at the start."""
    if state.status is not SessionStatus.ACTIVE or state.index == 0:
        return state
    return _show(state, state.index - 1)


def _evaluate(question: Question, answer: Answer) -> tuple[bool, str]:
    word = question.word
    if question.kind is QuestionKind.RECOGNITION:
        if not isinstance(answer, RecognitionAnswer):
            raise TypeError(f"Recognition question expects RecognitionAnswer, got {answer!r}")
        return answer.knows, "know" if answer.knows else "don't know"

    if question.kind is QuestionKind.FILL_IN:
        if not isinstance(answer, SpellingAnswer):
            raise TypeError(f"Fill-in question expects SpellingAnswer, got {answer!r}")
        return spelling_matches(answer.text, word.term), answer.text

    if not isinstance(answer, ChoiceAnswer):
        raise TypeError(f"Multiple-choice question expects ChoiceAnswer, got {answer!r}")
    chosen = next((o for o in question.options if o.id == answer.option_id), None)
    if chosen is None:
        raise ValueError(f"Option {answer.option_id} is not offered for {word.term!r}")
    return chosen.id == word.id, chosen.term


def _score(
    state: SessionState,
    delta: float,
    correct: bool,
    given: str,
    skipped: bool = False,
) -> SessionState:
    word = current_word(state)
    if word is None:
        logger.warning(f"No word in view at index {state.index}; nothing to score")
        return state
    record_review(word, delta, state.clock())
    return replace(
        state,
        scored=True,
        outcome=AnswerOutcome(
            correct=correct,
            delta=delta,
            expected=word.term,
            given=given,
            skipped=skipped,
        ),
        reviewed=state.reviewed + 1,
        correct=state.correct + (1 if correct else 0),
    )


def _next(state: SessionState) -> SessionState:
    if state.index + 1 >= len(state.queue):
        logger.info(
            f"Session complete: {state.correct}/{state.reviewed} correct"
        )
        return replace(
            state,
            status=SessionStatus.COMPLETE,
            index=len(state.queue),
            question=None,
            scored=False,
        )
    return _show(state, state.index + 1)


def _show(state: SessionState, index: int) -> SessionState:
    moved = replace(state, index=index, scored=False, outcome=None, question=None)
    return replace(moved, question=build_question(moved, moved.queue[index]))
