"""
Scoring policy: quiz outcome -> proficiency delta.

Proficiency is a bounded 0-100 score, not an interval schedule. Each question
kind rewards a correct answer with a fixed delta; wrong answers cost nothing.

| Kind            | Correct | Incorrect |
|-----------------|---------|-----------|
| Recognition     | +5      | 0         |
| Fill-in         | +30     | 0         |
| Multiple choice | +15     | 0         |
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from wordmemo.core.models import WordEntry

MIN_PROFICIENCY = 0.0
MAX_PROFICIENCY = 100.0


class QuestionKind(str, Enum):
    """Question kinds the study engine can ask."""

    RECOGNITION = "recognition"
    FILL_IN = "fill_in"
    MULTIPLE_CHOICE = "multiple_choice"


REWARDS: dict[QuestionKind, float] = {
    QuestionKind.RECOGNITION: 5.0,
    QuestionKind.FILL_IN: 30.0,
    QuestionKind.MULTIPLE_CHOICE: 15.0,
}


def clamp_proficiency(value: float) -> float:
    """Clamp to [0, 100]. Out-of-range input is never an error; NaN counts as 0."""
    value = float(value)
    if math.isnan(value):
        return MIN_PROFICIENCY
    return max(MIN_PROFICIENCY, min(MAX_PROFICIENCY, value))


def score_delta(kind: QuestionKind, correct: bool) -> float:
    """Delta earned by one answer."""
    return REWARDS[kind] if correct else 0.0


def normalize_spelling(text: str) -> str:
    return text.strip().casefold()


def spelling_matches(answer: str, term: str) -> bool:
    """Case- and surrounding-whitespace-insensitive exact match."""
    return normalize_spelling(answer) == normalize_spelling(term)


def apply_proficiency_delta(
    entry: WordEntry, delta: float, now: datetime | None = None
) -> float:
    """Add ``delta`` to the entry's proficiency (clamped) and stamp it modified.

    Returns the new proficiency.
    """
    entry.proficiency = clamp_proficiency(entry.proficiency + delta)
    entry.touch(now or datetime.now())
    return entry.proficiency


def record_review(
    entry: WordEntry, delta: float, now: datetime | None = None
) -> float:
    """Score one question attempt: stamp ``last_reviewed_at`` and apply ``delta``."""
    when = now or datetime.now()
    before = entry.proficiency
    entry.last_reviewed_at = when
    after = apply_proficiency_delta(entry, delta, when)
    logger.debug(f"Scored {entry.term!r}: {before:.0f} -> {after:.0f} ({delta:+.0f})")
    return after
