"""
Editor service for word lists and entries.

This is the validation boundary for edits: drafts are checked before any
entity is touched, so a rejected save leaves the list exactly as it was.
Relationship changes go through ``wordmemo.core.relations`` only.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from uuid import UUID, uuid4

import pydantic
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wordmemo.core import relations
from wordmemo.core.exceptions import DanglingReferenceError, ValidationError
from wordmemo.core.models import WordEntry, WordList, build_sample_list
from wordmemo.core.scoring import clamp_proficiency
from wordmemo.core.sorting import SortKey, sorted_entries, sorted_lists
from wordmemo.db.store import WordStore

DEFAULT_LIST_NAME = "Default list"
UNTITLED_LIST_NAME = "New list"


class EntryDraft(BaseModel):
    """Editable fields of an entry, as submitted by a front end."""

    model_config = ConfigDict(str_strip_whitespace=False)

    term: str
    pronunciation: str = ""
    part_of_speech: str = ""
    definition: str = ""
    proficiency: float = 0.0
    lemma_id: UUID | None = None
    derivative_ids: list[UUID] = Field(default_factory=list)

    @field_validator("term")
    @classmethod
    def term_not_blank(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("term must not be blank")
        return trimmed

    @field_validator("proficiency")
    @classmethod
    def clamp(cls, value: float) -> float:
        return clamp_proficiency(value)

    @classmethod
    def from_entry(cls, entry: WordEntry) -> EntryDraft:
        lemma = entry.lemma
        return cls(
            term=entry.term,
            pronunciation=entry.pronunciation,
            part_of_speech=entry.part_of_speech,
            definition=entry.definition,
            proficiency=entry.proficiency,
            lemma_id=lemma.id if lemma else None,
            derivative_ids=[d.id for d in entry.derivatives],
        )


def make_draft(**fields: object) -> EntryDraft:
    """Build a draft, turning pydantic failures into ``ValidationError``."""
    try:
        return EntryDraft(**fields)  # type: ignore[arg-type]
    except pydantic.ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise ValidationError(messages) from e


class WordListEditor:
    """List and entry editing on top of a ``WordStore``."""

    def __init__(
        self,
        store: WordStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.clock = clock

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def bootstrap(self, seed: bool = True) -> list[WordList]:
        """Return lists in home order, creating the sample list on first run."""
        lists = self.store.query(WordList)
        if not lists and seed:
            sample = build_sample_list(DEFAULT_LIST_NAME, now=self.clock())
            self.store.insert(sample)
            logger.info(f"Created sample list {sample.name!r}")
            lists = [sample]
        return sorted_lists(lists)

    def create_list(self, name: str) -> WordList:
        word_list = WordList(name=name.strip() or UNTITLED_LIST_NAME, created_at=self.clock())
        self.store.insert(word_list)
        logger.info(f"Created list {word_list.name!r}")
        return word_list

    def rename_list(self, word_list: WordList, name: str) -> WordList:
        trimmed = name.strip()
        if not trimmed:
            raise ValidationError("list name must not be blank")
        word_list.name = trimmed
        word_list.mark_updated(self.clock())
        self.store.insert(word_list)
        return word_list

    def select_list(self, word_list: WordList) -> WordList:
        word_list.touch_usage(self.clock())
        self.store.insert(word_list)
        return word_list

    def delete_list(self, word_list: WordList) -> None:
        self.store.delete(word_list)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def lemma_candidates(
        self, word_list: WordList, entry: WordEntry | None = None
    ) -> list[WordEntry]:
        others = [e for e in word_list.entries if entry is None or e.id != entry.id]
        return sorted_entries(others, SortKey.ALPHABETICAL)

    def save_entry(
        self,
        word_list: WordList,
        draft: EntryDraft,
        entry: WordEntry | None = None,
    ) -> WordEntry:
        """Create a new entry or update ``entry`` from ``draft``.

        Raises ValidationError for self links or links that would form a
        cycle; nothing is modified in that case. Related ids that are not in
        the list are skipped.

        ``draft.derivative_ids`` is the complete derivative set: current
        derivatives missing from it are detached. Cycles are judged on the
        resulting graph, so pointing at a derivative that the same draft
        drops is accepted.
        """
        if entry is not None and entry not in word_list:
            raise ValidationError(
                f"Entry {entry.term!r} does not belong to list {word_list.name!r}"
            )

        entry_id = entry.id if entry is not None else None
        lemma = self._resolve(word_list, draft.lemma_id)
        derivatives = [
            d for d in (self._resolve(word_list, i) for i in draft.derivative_ids) if d
        ]
        self._check_links(word_list, entry_id, lemma, derivatives)

        now = self.clock()
        if entry is None:
            entry = word_list.add_entry(
                WordEntry(
                    term=draft.term,
                    pronunciation=draft.pronunciation,
                    part_of_speech=draft.part_of_speech,
                    definition=draft.definition,
                    proficiency=draft.proficiency,
                    modified_at=now,
                )
            )
            logger.debug(f"Added {entry.term!r} to {word_list.name!r}")
        else:
            entry.update(
                now,
                term=draft.term,
                pronunciation=draft.pronunciation,
                part_of_speech=draft.part_of_speech,
                definition=draft.definition,
                proficiency=draft.proficiency,
            )

        relations.set_lemma(entry, lemma, now)
        relations.apply_desired_derivative_set(entry, [d.id for d in derivatives], now)

        word_list.mark_updated(now)
        self.store.insert(word_list)
        return entry

    def delete_entry(self, word_list: WordList, entry: WordEntry) -> None:
        now = self.clock()
        word_list.remove_entry(entry, now)
        word_list.mark_updated(now)
        self.store.insert(word_list)
        logger.debug(f"Removed {entry.term!r} from {word_list.name!r}")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve(word_list: WordList, entry_id: UUID | None) -> WordEntry | None:
        if entry_id is None:
            return None
        try:
            return word_list.get_entry(entry_id)
        except DanglingReferenceError as e:
            logger.warning(f"Skipping related entry: {e}")
            return None

    @staticmethod
    def _check_links(
        word_list: WordList,
        entry_id: UUID | None,
        lemma: WordEntry | None,
        derivatives: list[WordEntry],
    ) -> None:
        if entry_id is not None:
            if lemma is not None and lemma.id == entry_id:
                raise ValidationError("An entry cannot be its own lemma")
            if any(d.id == entry_id for d in derivatives):
                raise ValidationError("An entry cannot be its own derivative")

        # Dry run on a scratch copy; a new entry gets a placeholder id.
        scratch = word_list.graph.copy()
        subject = entry_id or uuid4()
        scratch.set_lemma(subject, lemma.id if lemma else None)
        scratch.apply_desired_derivative_set(subject, [d.id for d in derivatives])
        cycle = scratch.find_cycle()
        if cycle:
            terms = [getattr(word_list.find_entry(i), "term", "(new entry)") for i in cycle]
            raise ValidationError(f"Links would create a cycle: {' -> '.join(terms)}")
