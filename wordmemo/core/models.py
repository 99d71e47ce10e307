"""
Entity model: word lists and their entries.

A ``WordList`` exclusively owns its entries and the relationship graph that
links them. ``WordEntry.lemma`` and ``WordEntry.derivatives`` are read-only
views over that graph; use ``wordmemo.core.relations`` to change them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from wordmemo.core.exceptions import DanglingReferenceError, ValidationError
from wordmemo.core.relations import RelationshipGraph
from wordmemo.core.scoring import clamp_proficiency

SCHEMA_VERSION = 1
DUE_THRESHOLD = 90.0

# Fields that stamp modified_at when changed through WordEntry.update()
EDITABLE_FIELDS = frozenset(
    {"term", "pronunciation", "part_of_speech", "definition", "proficiency"}
)


@dataclass(eq=False)
class WordEntry:
    """A single vocabulary item."""

    term: str
    pronunciation: str = ""
    part_of_speech: str = ""
    definition: str = ""
    proficiency: float = 0.0
    id: UUID = field(default_factory=uuid4)
    modified_at: datetime = field(default_factory=datetime.now)
    last_reviewed_at: datetime | None = None
    word_list: WordList | None = field(default=None, repr=False)

    def __setattr__(self, name: str, value: object) -> None:
        if name == "proficiency":
            value = clamp_proficiency(value)  # type: ignore[arg-type]
            # Stamp edits after construction; __init__ sets modified_at itself
            if "modified_at" in self.__dict__ and value != self.__dict__.get(name):
                super().__setattr__("modified_at", datetime.now())
        super().__setattr__(name, value)

    @property
    def is_due(self) -> bool:
        return self.proficiency < DUE_THRESHOLD

    @property
    def lemma(self) -> WordEntry | None:
        if self.word_list is None:
            return None
        lemma_id = self.word_list.graph.lemma_of(self.id)
        return self.word_list.find_entry(lemma_id) if lemma_id else None

    @property
    def derivatives(self) -> list[WordEntry]:
        if self.word_list is None:
            return []
        found = (
            self.word_list.find_entry(i)
            for i in self.word_list.graph.derivatives_of(self.id)
        )
        return [e for e in found if e is not None]

    def touch(self, at: datetime) -> None:
        self.modified_at = at

    def update(self, at: datetime, **changes: object) -> bool:
        """Apply field edits; stamps ``modified_at`` only if something changed."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise TypeError(f"Not editable: {', '.join(sorted(unknown))}")

        dirty = False
        for name, value in changes.items():
            if name == "proficiency":
                value = clamp_proficiency(value)  # type: ignore[arg-type]
            if getattr(self, name) != value:
                setattr(self, name, value)
                dirty = True
        if dirty:
            self.touch(at)
        return dirty


@dataclass(eq=False)
class WordList:
    """A named collection of entries."""

    name: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime | None = None
    last_used_at: datetime | None = None
    schema_version: int = SCHEMA_VERSION
    graph: RelationshipGraph = field(default_factory=RelationshipGraph, repr=False)
    _entries: dict[UUID, WordEntry] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at
        if self.last_used_at is None:
            self.last_used_at = self.created_at

    # ------------------------------------------------------------------
    # Timestamps
    # ------------------------------------------------------------------

    def touch_usage(self, at: datetime | None = None) -> None:
        when = at or datetime.now()
        self.last_used_at = max(when, self.created_at)
        self.mark_updated(when)

    def mark_updated(self, at: datetime | None = None) -> None:
        when = at or datetime.now()
        if self.updated_at is None or when > self.updated_at:
            self.updated_at = when

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[WordEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WordEntry]:
        return iter(list(self._entries.values()))

    def __contains__(self, entry: object) -> bool:
        return isinstance(entry, WordEntry) and self._entries.get(entry.id) is entry

    def find_entry(self, entry_id: UUID | None) -> WordEntry | None:
        if entry_id is None:
            return None
        return self._entries.get(entry_id)

    def get_entry(self, entry_id: UUID) -> WordEntry:
        entry = self._entries.get(entry_id)
        if entry is None:
            raise DanglingReferenceError(entry_id, self.name)
        return entry

    def find_by_term(self, term: str) -> WordEntry | None:
        wanted = term.strip().casefold()
        for entry in self._entries.values():
            if entry.term.casefold() == wanted:
                return entry
        return None

    def add_entry(self, entry: WordEntry) -> WordEntry:
        if entry.word_list is not None and entry.word_list is not self:
            raise ValidationError(
                f"Entry {entry.term!r} already belongs to list {entry.word_list.name!r}"
            )
        entry.word_list = self
        self._entries[entry.id] = entry
        return entry

    def remove_entry(self, entry: WordEntry, at: datetime | None = None) -> None:
        """Remove an entry; derivatives pointing at it lose their lemma."""
        if entry not in self:
            raise DanglingReferenceError(entry.id, self.name)
        when = at or datetime.now()
        changed = self.graph.detach(entry.id)
        del self._entries[entry.id]
        entry.word_list = None
        for entry_id in changed:
            other = self._entries.get(entry_id)
            if other is not None:
                other.touch(when)

    def due_entries(self, threshold: float = DUE_THRESHOLD) -> list[WordEntry]:
        return [e for e in self._entries.values() if e.proficiency < threshold]


SAMPLE_ENTRIES: tuple[tuple[str, str, str, str], ...] = (
    ("serendipity", "[ˌserənˈdɪpəti]", "n.", "the occurrence of fortunate discoveries by chance"),
    ("contemplate", "[ˈkɒntəmpleɪt]", "v.", "to think deeply about something"),
    ("ubiquitous", "[juːˈbɪkwɪtəs]", "adj.", "present or found everywhere"),
    ("synergy", "[ˈsɪnərdʒi]", "n.", "combined effect greater than the sum of parts"),
)


def build_sample_list(name: str = "Default list", now: datetime | None = None) -> WordList:
    """First-run list seeded with four sample entries."""
    when = now or datetime.now()
    word_list = WordList(name=name, created_at=when)
    for term, pronunciation, pos, definition in SAMPLE_ENTRIES:
        word_list.add_entry(
            WordEntry(
                term=term,
                pronunciation=pronunciation,
                part_of_speech=pos,
                definition=definition,
                proficiency=0.0,
                modified_at=when,
            )
        )
    return word_list
