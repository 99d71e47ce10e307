"""
Ordered views over word lists and their entries.

All sorts are stable (Python's ``sorted``), so entries that compare equal keep
their insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from wordmemo.core.models import WordEntry, WordList

# Sentinel for entries that were never reviewed: sorts after every real date
# under descending order.
NEVER_REVIEWED = datetime.min


class SortKey(str, Enum):
    """Entry sort orders offered by the list view."""

    ALPHABETICAL = "alphabetical"
    PROFICIENCY = "proficiency"
    MODIFIED_AT = "modified"
    LAST_REVIEWED = "reviewed"


def sorted_entries(word_list: WordList | Iterable[WordEntry], sort_key: SortKey) -> list[WordEntry]:
    """Return the entries ordered by ``sort_key``.

    - ALPHABETICAL: case-insensitive term, ascending
    - PROFICIENCY: descending
    - MODIFIED_AT: most recently modified first
    - LAST_REVIEWED: most recently reviewed first, never-reviewed last
    """
    entries = list(word_list.entries if isinstance(word_list, WordList) else word_list)
    sort_key = SortKey(sort_key)

    if sort_key is SortKey.ALPHABETICAL:
        return sorted(entries, key=lambda e: e.term.casefold())
    if sort_key is SortKey.PROFICIENCY:
        return sorted(entries, key=lambda e: e.proficiency, reverse=True)
    if sort_key is SortKey.MODIFIED_AT:
        return sorted(entries, key=lambda e: e.modified_at, reverse=True)
    return sorted(
        entries,
        key=lambda e: e.last_reviewed_at or NEVER_REVIEWED,
        reverse=True,
    )


def sorted_lists(lists: Iterable[WordList]) -> list[WordList]:
    """Most recently used first, then most recently created."""
    return sorted(lists, key=lambda wl: (wl.last_used_at, wl.created_at), reverse=True)
