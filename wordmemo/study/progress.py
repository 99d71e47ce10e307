"""Daily study summary for a word list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from wordmemo.core.models import DUE_THRESHOLD, WordList


@dataclass
class DailyProgress:
    """Due words still waiting today vs. all due words."""

    remaining: int
    total: int

    @property
    def can_start(self) -> bool:
        return self.total > 0

    def __str__(self) -> str:
        return f"{self.remaining}/{self.total}"


def daily_progress(
    word_list: WordList,
    today: date | None = None,
    threshold: float = DUE_THRESHOLD,
) -> DailyProgress:
    today = today or date.today()
    due = word_list.due_entries(threshold)
    remaining = sum(
        1
        for e in due
        if e.last_reviewed_at is None or e.last_reviewed_at.date() != today
    )
    return DailyProgress(remaining=remaining, total=len(due))
