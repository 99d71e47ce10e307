"""Core domain: entities, relationship graph, scoring and sorting."""

from wordmemo.core.exceptions import (
    DanglingReferenceError,
    EntityNotFoundError,
    ValidationError,
    WordMemoError,
)
from wordmemo.core.models import WordEntry, WordList, build_sample_list
from wordmemo.core.relations import RelationshipGraph
from wordmemo.core.scoring import QuestionKind, apply_proficiency_delta, score_delta
from wordmemo.core.sorting import SortKey, sorted_entries, sorted_lists

__all__ = [
    "DanglingReferenceError",
    "EntityNotFoundError",
    "QuestionKind",
    "RelationshipGraph",
    "SortKey",
    "ValidationError",
    "WordEntry",
    "WordList",
    "WordMemoError",
    "apply_proficiency_delta",
    "build_sample_list",
    "score_delta",
    "sorted_entries",
    "sorted_lists",
]
