"""
Object store for word lists.

Exposes the three operations the core needs from persistence (insert, delete,
query) over SQLAlchemy. Lists are saved and loaded as whole aggregates: a list,
its entries and their lemma links travel together.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar
from uuid import UUID

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload, sessionmaker

from wordmemo.core.exceptions import EntityNotFoundError, ValidationError
from wordmemo.core.models import WordEntry, WordList
from wordmemo.db.database import get_session_factory, session_scope
from wordmemo.db.models import WordEntryRow, WordListRow

Record = TypeVar("Record", WordList, WordEntry)

# A sort key is an attribute name (ascending) or an (attribute, descending) pair
SortSpec = str | tuple[str, bool]


class WordStore:
    """SQLAlchemy-backed store with insert/delete/query semantics."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory or get_session_factory()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, record: WordList | WordEntry) -> None:
        """Insert or update a list, or the list owning an entry."""
        word_list = self._owning_list(record)
        with session_scope(self._session_factory) as session:
            self._save_list(session, word_list)
        logger.debug(f"Saved list {word_list.name!r} ({len(word_list)} entries)")

    def delete(self, record: WordList | WordEntry) -> None:
        """Delete a list with all its entries, or a single entry.

        Entries whose lemma was the deleted entry keep existing with no lemma.
        """
        with session_scope(self._session_factory) as session:
            if isinstance(record, WordList):
                row = session.get(WordListRow, record.id)
                if row is None:
                    raise EntityNotFoundError(f"List not found: {record.name!r}")
                session.execute(
                    update(WordEntryRow)
                    .where(WordEntryRow.list_id == record.id)
                    .values(lemma_id=None)
                )
                session.delete(row)
                logger.info(f"Deleted list {record.name!r}")
                return

            row = session.get(WordEntryRow, record.id)
            if row is None:
                raise EntityNotFoundError(f"Entry not found: {record.term!r}")
            session.execute(
                update(WordEntryRow)
                .where(WordEntryRow.lemma_id == record.id)
                .values(lemma_id=None)
            )
            session.delete(row)
            logger.debug(f"Deleted entry {record.term!r}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def query(
        self,
        record_type: type[Record] = WordList,
        predicate: Callable[[Record], bool] | None = None,
        sort_keys: Iterable[SortSpec] = (),
    ) -> list[Record]:
        """Load records of ``record_type`` matching ``predicate``, sorted by ``sort_keys``.

        Sorting is stable and applied key by key, so the first key wins and
        ties fall through to the next. ``None`` values sort first ascending
        and last descending.
        """
        lists = self._load_all()
        records: list[Any]
        if record_type is WordList:
            records = lists
        elif record_type is WordEntry:
            records = [e for wl in lists for e in wl.entries]
        else:
            raise TypeError(f"Unsupported record type: {record_type!r}")

        if predicate is not None:
            records = [r for r in records if predicate(r)]

        for attr, descending in reversed([_normalize(k) for k in sort_keys]):
            records.sort(key=_sort_value(attr), reverse=descending)
        return records

    def get_list(self, list_id: UUID) -> WordList | None:
        with session_scope(self._session_factory) as session:
            row = session.scalars(
                select(WordListRow)
                .where(WordListRow.id == list_id)
                .options(selectinload(WordListRow.entries))
            ).first()
            return _to_domain(row) if row is not None else None

    def find_list(self, name: str) -> WordList:
        """Look up a list by (case-insensitive) name."""
        wanted = name.strip().casefold()
        matches = self.query(WordList, lambda wl: wl.name.casefold() == wanted)
        if not matches:
            raise EntityNotFoundError(f"List not found: {name!r}")
        return matches[0]

    def count(self) -> int:
        with session_scope(self._session_factory) as session:
            return len(session.scalars(select(WordListRow.id)).all())

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _owning_list(record: WordList | WordEntry) -> WordList:
        if isinstance(record, WordList):
            return record
        if record.word_list is None:
            raise ValidationError(f"Entry {record.term!r} does not belong to a list")
        return record.word_list

    def _load_all(self) -> list[WordList]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(WordListRow).options(selectinload(WordListRow.entries))
            ).all()
            return [_to_domain(row) for row in rows]

    @staticmethod
    def _save_list(session: Session, word_list: WordList) -> None:
        row = session.get(WordListRow, word_list.id)
        if row is None:
            row = WordListRow(id=word_list.id)
            session.add(row)
        row.name = word_list.name
        row.created_at = word_list.created_at
        row.updated_at = word_list.updated_at
        row.last_used_at = word_list.last_used_at
        row.schema_version = word_list.schema_version

        existing = {e.id: e for e in row.entries}
        wanted = set()
        rows_by_id: dict[UUID, WordEntryRow] = {}
        for position, entry in enumerate(word_list.entries):
            entry_row = existing.get(entry.id)
            if entry_row is None:
                entry_row = WordEntryRow(id=entry.id)
                row.entries.append(entry_row)
            entry_row.position = position
            entry_row.term = entry.term
            entry_row.pronunciation = entry.pronunciation
            entry_row.part_of_speech = entry.part_of_speech
            entry_row.definition = entry.definition
            entry_row.proficiency = entry.proficiency
            entry_row.modified_at = entry.modified_at
            entry_row.last_reviewed_at = entry.last_reviewed_at
            wanted.add(entry.id)
            rows_by_id[entry.id] = entry_row

        for entry_id, entry_row in existing.items():
            if entry_id not in wanted:
                row.entries.remove(entry_row)

        # Links point at rows of this list, which must exist before they are referenced
        session.flush()
        for entry_id, entry_row in rows_by_id.items():
            entry_row.lemma_id = word_list.graph.lemma_of(entry_id)


def _to_domain(row: WordListRow) -> WordList:
    word_list = WordList(
        name=row.name,
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        last_used_at=row.last_used_at,
        schema_version=row.schema_version,
    )
    for entry_row in row.entries:
        word_list.add_entry(
            WordEntry(
                term=entry_row.term,
                pronunciation=entry_row.pronunciation or "",
                part_of_speech=entry_row.part_of_speech or "",
                definition=entry_row.definition or "",
                proficiency=entry_row.proficiency,
                id=entry_row.id,
                modified_at=entry_row.modified_at,
                last_reviewed_at=entry_row.last_reviewed_at,
            )
        )
    for entry_row in row.entries:
        if entry_row.lemma_id is None:
            continue
        if word_list.find_entry(entry_row.lemma_id) is None:
            logger.warning(
                f"Skipping lemma link of {entry_row.term!r}: target not in list {row.name!r}"
            )
            continue
        word_list.graph.set_lemma(entry_row.id, entry_row.lemma_id)
    return word_list


def _normalize(key: SortSpec) -> tuple[str, bool]:
    if isinstance(key, str):
        return key, False
    attr, descending = key
    return attr, bool(descending)


def _sort_value(attr: str) -> Callable[[Any], tuple[bool, Any]]:
    def key(record: Any) -> tuple[bool, Any]:
        value = getattr(record, attr)
        if isinstance(value, str):
            value = value.casefold()
        return (value is not None, value if value is not None else 0)

    return key
