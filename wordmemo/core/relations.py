"""
Lemma/derivative relationship graph for the entries of one word list.

The graph is keyed by entry id and keeps two indices in step:

- forward: entry id -> lemma id (at most one)
- reverse: lemma id -> derivative ids (insertion ordered)

Symmetry (``A in derivatives_of(B)`` iff ``lemma_of(A) == B``) holds after
every mutating call. Nothing else may touch the indices.

The primitives trust their ids: they assume every id belongs to the same
list and that self links and cycles were rejected upstream by the editor.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from loguru import logger

if TYPE_CHECKING:
    from wordmemo.core.models import WordEntry


class RelationshipGraph:
    """Bidirectional lemma <-> derivatives index."""

    def __init__(self) -> None:
        self._lemma: dict[UUID, UUID] = {}
        self._derivatives: dict[UUID, list[UUID]] = {}

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def lemma_of(self, entry_id: UUID) -> UUID | None:
        return self._lemma.get(entry_id)

    def derivatives_of(self, entry_id: UUID) -> list[UUID]:
        return list(self._derivatives.get(entry_id, ()))

    def ancestors_of(self, entry_id: UUID) -> list[UUID]:
        """Walk the lemma chain upwards, nearest first."""
        chain: list[UUID] = []
        seen = {entry_id}
        current = self._lemma.get(entry_id)
        while current is not None and current not in seen:
            chain.append(current)
            seen.add(current)
            current = self._lemma.get(current)
        return chain

    def would_cycle(self, entry_id: UUID, lemma_id: UUID) -> bool:
        """True if making ``lemma_id`` the lemma of ``entry_id`` closes a loop."""
        return lemma_id == entry_id or entry_id in self.ancestors_of(lemma_id)

    def find_cycle(self) -> list[UUID]:
        """Return the ids of one lemma cycle, or an empty list."""
        cleared: set[UUID] = set()
        for start in self._lemma:
            path: list[UUID] = []
            on_path: set[UUID] = set()
            current: UUID | None = start
            while current is not None and current not in cleared:
                if current in on_path:
                    return path[path.index(current):]
                path.append(current)
                on_path.add(current)
                current = self._lemma.get(current)
            cleared |= on_path
        return []

    def copy(self) -> RelationshipGraph:
        clone = RelationshipGraph()
        clone._lemma = dict(self._lemma)
        clone._derivatives = {k: list(v) for k, v in self._derivatives.items()}
        return clone

    def edges(self) -> Iterator[tuple[UUID, UUID]]:
        """Yield ``(derivative_id, lemma_id)`` pairs."""
        yield from self._lemma.items()

    def is_consistent(self) -> bool:
        """Check the symmetry invariant in both directions."""
        for child, parent in self._lemma.items():
            if child == parent or child not in self._derivatives.get(parent, ()):
                return False
        for parent, children in self._derivatives.items():
            if len(children) != len(set(children)):
                return False
            if any(self._lemma.get(child) != parent for child in children):
                return False
        return True

    def __len__(self) -> int:
        return len(self._lemma)

    # ------------------------------------------------------------------
    # Mutations (each returns the ids whose relationships changed)
    # ------------------------------------------------------------------

    def set_lemma(self, entry_id: UUID, new_lemma_id: UUID | None) -> set[UUID]:
        changed: set[UUID] = set()
        old = self._lemma.get(entry_id)

        if old is not None and old != new_lemma_id:
            self._unlink(entry_id, old)
            changed |= {entry_id, old}

        if new_lemma_id is None:
            return changed

        self._lemma[entry_id] = new_lemma_id
        children = self._derivatives.setdefault(new_lemma_id, [])
        if entry_id not in children:
            children.append(entry_id)
            changed |= {entry_id, new_lemma_id}
        return changed

    def add_derivative(self, entry_id: UUID, candidate_id: UUID) -> set[UUID]:
        # Forcing the candidate's lemma drops it from any former lemma's set.
        return self.set_lemma(candidate_id, entry_id)

    def apply_desired_derivative_set(
        self, entry_id: UUID, desired_ids: Iterable[UUID]
    ) -> set[UUID]:
        """Reconcile the derivatives of ``entry_id`` with ``desired_ids``.

        Current derivatives missing from the target are detached (their lemma
        is cleared, the entries are kept). Every target id is then attached.
        Repeating the call with the same target leaves the graph unchanged.
        """
        desired = list(dict.fromkeys(desired_ids))
        wanted = set(desired)
        changed: set[UUID] = set()

        for derivative_id in self.derivatives_of(entry_id):
            if derivative_id not in wanted:
                changed |= self.set_lemma(derivative_id, None)

        for candidate_id in desired:
            changed |= self.add_derivative(entry_id, candidate_id)
        return changed

    def detach(self, entry_id: UUID) -> set[UUID]:
        """Drop every link touching ``entry_id`` (nullify on delete)."""
        changed = self.set_lemma(entry_id, None)
        for derivative_id in self.derivatives_of(entry_id):
            changed |= self.set_lemma(derivative_id, None)
        return changed

    def _unlink(self, entry_id: UUID, lemma_id: UUID) -> None:
        children = self._derivatives.get(lemma_id, [])
        if entry_id in children:
            children.remove(entry_id)
        if not children:
            self._derivatives.pop(lemma_id, None)
        self._lemma.pop(entry_id, None)


# ----------------------------------------------------------------------
# Entry-level operations
# ----------------------------------------------------------------------


def _stamp(entry: WordEntry, changed: set[UUID], now: datetime | None) -> None:
    word_list = entry.word_list
    if word_list is None or not changed:
        return
    when = now or datetime.now()
    for entry_id in changed:
        other = word_list.find_entry(entry_id)
        if other is not None:
            other.touch(when)
    logger.debug(f"Relations changed in {word_list.name!r}: {len(changed)} entries")


def _graph_for(entry: WordEntry) -> RelationshipGraph:
    if entry.word_list is None:
        raise ValueError(f"Entry {entry.term!r} does not belong to a list")
    return entry.word_list.graph


def set_lemma(
    entry: WordEntry, new_lemma: WordEntry | None, now: datetime | None = None
) -> None:
    """Point ``entry`` at ``new_lemma`` (or clear it with None)."""
    changed = _graph_for(entry).set_lemma(
        entry.id, new_lemma.id if new_lemma is not None else None
    )
    _stamp(entry, changed, now)


def add_derivative(
    entry: WordEntry, candidate: WordEntry, now: datetime | None = None
) -> None:
    """Make ``candidate`` a derivative of ``entry``."""
    changed = _graph_for(entry).add_derivative(entry.id, candidate.id)
    _stamp(entry, changed, now)


def apply_desired_derivative_set(
    entry: WordEntry, desired_ids: Iterable[UUID], now: datetime | None = None
) -> None:
    """Reconcile the derivative set of ``entry`` with ``desired_ids``."""
    changed = _graph_for(entry).apply_desired_derivative_set(entry.id, desired_ids)
    _stamp(entry, changed, now)
