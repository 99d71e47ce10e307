"""
Study session module.

Provides:
- Queue construction over due entries
- Adaptive question selection (recognition, fill-in, multiple choice)
- Session navigation and scoring
- Daily progress summary
"""

from wordmemo.study.engine import (
    AnswerOutcome,
    ChoiceAnswer,
    ChoiceTarget,
    Question,
    RecognitionAnswer,
    RecognitionPrompt,
    SessionState,
    SessionStatus,
    SpellingAnswer,
    advance,
    current_question,
    current_word,
    go_previous,
    prepare_queue,
    submit_answer,
)
from wordmemo.study.progress import DailyProgress, daily_progress

__all__ = [
    "AnswerOutcome",
    "ChoiceAnswer",
    "ChoiceTarget",
    "DailyProgress",
    "Question",
    "RecognitionAnswer",
    "RecognitionPrompt",
    "SessionState",
    "SessionStatus",
    "SpellingAnswer",
    "advance",
    "current_question",
    "current_word",
    "daily_progress",
    "go_previous",
    "prepare_queue",
    "submit_answer",
]
