"""
Tests for the SQLAlchemy word store (in-memory SQLite).
"""

from datetime import datetime, timedelta

import pytest

from wordmemo.core import relations
from wordmemo.core.exceptions import EntityNotFoundError, ValidationError
from wordmemo.core.models import WordEntry, WordList

T0 = datetime(2026, 1, 1, 8, 0)


def _by_term(word_list):
    return {e.term: e for e in word_list.entries}


class TestInsert:
    def test_round_trip(self, store, family_list):
        e = _by_term(family_list)
        relations.set_lemma(e["runner"], e["run"], T0)
        relations.set_lemma(e["running"], e["run"], T0)
        e["walk"].proficiency = 42
        e["walk"].last_reviewed_at = T0 + timedelta(hours=1)

        store.insert(family_list)
        loaded = store.get_list(family_list.id)

        assert loaded is not family_list
        assert loaded.name == "Family"
        assert loaded.created_at == family_list.created_at
        assert loaded.last_used_at == family_list.last_used_at
        assert loaded.schema_version == 1
        assert [x.term for x in loaded.entries] == ["run", "runner", "running", "rerun", "walk"]

        got = _by_term(loaded)
        assert [d.term for d in got["run"].derivatives] == ["runner", "running"]
        assert got["runner"].lemma is got["run"]
        assert got["walk"].proficiency == 42.0
        assert got["walk"].last_reviewed_at == T0 + timedelta(hours=1)
        assert got["walk"].pronunciation == "/walk/"
        assert loaded.graph.is_consistent()

    def test_get_unknown_list(self, store):
        assert store.get_list(WordList(name="ghost").id) is None

    def test_insert_is_an_upsert(self, store, sample_list):
        store.insert(sample_list)
        sample_list.name = "Renamed"
        sample_list.remove_entry(sample_list.find_by_term("cherry"), T0)
        sample_list.find_by_term("apple").proficiency = 60

        store.insert(sample_list)
        loaded = store.get_list(sample_list.id)

        assert store.count() == 1
        assert loaded.name == "Renamed"
        assert [x.term for x in loaded.entries] == ["apple", "banana", "damson"]
        assert loaded.find_by_term("apple").proficiency == 60.0

    def test_insert_entry_saves_owning_list(self, store, sample_list):
        store.insert(sample_list)
        apple = sample_list.find_by_term("apple")
        apple.proficiency = 25

        store.insert(apple)

        assert store.get_list(sample_list.id).find_by_term("apple").proficiency == 25.0

    def test_insert_orphan_entry_rejected(self, store):
        with pytest.raises(ValidationError):
            store.insert(WordEntry(term="orphan"))


class TestDelete:
    def test_delete_list_cascades(self, store, sample_list, family_list):
        store.insert(sample_list)
        store.insert(family_list)

        store.delete(sample_list)

        assert store.get_list(sample_list.id) is None
        remaining = store.query(WordEntry)
        assert {e.term for e in remaining} == {"run", "runner", "running", "rerun", "walk"}

    def test_delete_entry_nullifies_lemma_links(self, store, family_list):
        e = _by_term(family_list)
        relations.set_lemma(e["runner"], e["run"], T0)
        store.insert(family_list)

        store.delete(e["run"])

        loaded = store.get_list(family_list.id)
        assert loaded.find_by_term("run") is None
        assert loaded.find_by_term("runner").lemma is None

    def test_delete_missing(self, store, sample_list):
        with pytest.raises(EntityNotFoundError):
            store.delete(sample_list)
        with pytest.raises(EntityNotFoundError):
            store.delete(sample_list.entries[0])


class TestQuery:
    @pytest.fixture
    def filled(self, store, sample_list, family_list):
        store.insert(sample_list)
        store.insert(family_list)
        return store

    def test_lists(self, filled):
        assert {wl.name for wl in filled.query(WordList)} == {"Sample", "Family"}

    def test_predicate_and_sort_keys(self, filled):
        due = filled.query(
            WordEntry,
            predicate=lambda e: e.word_list.name == "Sample",
            sort_keys=[("proficiency", True), "term"],
        )
        assert [e.term for e in due] == ["cherry", "damson", "banana", "apple"]

    def test_ties_fall_through_to_next_key(self, filled):
        family = filled.query(
            WordEntry,
            predicate=lambda e: e.proficiency == 0,
            sort_keys=[("proficiency", False), ("term", True)],
        )
        assert [e.term for e in family][:3] == ["walk", "running", "runner"]

    def test_none_sorts_first_ascending(self, store, sample_list):
        sample_list.find_by_term("banana").last_reviewed_at = T0
        store.insert(sample_list)

        ordered = store.query(WordEntry, sort_keys=["last_reviewed_at"])
        assert ordered[-1].term == "banana"

        ordered = store.query(WordEntry, sort_keys=[("last_reviewed_at", True)])
        assert ordered[0].term == "banana"

    def test_unsupported_type(self, store):
        with pytest.raises(TypeError):
            store.query(dict)

    def test_find_list_by_name(self, filled):
        assert filled.find_list("  sample ").name == "Sample"
        with pytest.raises(EntityNotFoundError):
            filled.find_list("nope")
