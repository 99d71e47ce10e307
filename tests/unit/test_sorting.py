"""
Tests for the sort service.
"""

from datetime import datetime, timedelta

from wordmemo.core.models import WordList
from wordmemo.core.sorting import SortKey, sorted_entries, sorted_lists

T0 = datetime(2026, 1, 1, 8, 0)


def _terms(entries):
    return [e.term for e in entries]


def test_alphabetical_is_case_insensitive(list_factory):
    word_list = list_factory(words=[("banana", 0), ("Apple", 0), ("cherry", 0)])
    assert _terms(sorted_entries(word_list, SortKey.ALPHABETICAL)) == ["Apple", "banana", "cherry"]


def test_proficiency_descending(sample_list):
    assert _terms(sorted_entries(sample_list, SortKey.PROFICIENCY)) == [
        "cherry",
        "damson",
        "banana",
        "apple",
    ]


def test_modified_most_recent_first(sample_list):
    apple, banana, cherry, damson = sample_list.entries
    banana.touch(T0 + timedelta(days=3))
    damson.touch(T0 + timedelta(days=1))

    ordered = _terms(sorted_entries(sample_list, SortKey.MODIFIED_AT))
    assert ordered == ["banana", "damson", "apple", "cherry"]


def test_last_reviewed_puts_never_reviewed_last_and_stable(sample_list):
    apple, banana, cherry, damson = sample_list.entries
    banana.last_reviewed_at = T0 + timedelta(days=1)
    cherry.last_reviewed_at = T0 + timedelta(days=2)

    ordered = _terms(sorted_entries(sample_list, SortKey.LAST_REVIEWED))
    assert ordered == ["cherry", "banana", "apple", "damson"]


def test_accepts_plain_iterables_and_string_keys(sample_list):
    ordered = sorted_entries(reversed(sample_list.entries), "alphabetical")
    assert _terms(ordered) == ["apple", "banana", "cherry", "damson"]


def test_equal_keys_keep_insertion_order(list_factory):
    word_list = list_factory(words=[("b", 50), ("a", 50), ("c", 50)])
    assert _terms(sorted_entries(word_list, SortKey.PROFICIENCY)) == ["b", "a", "c"]


def test_sorted_lists_most_recently_used_first():
    old = WordList(name="old", created_at=T0)
    new = WordList(name="new", created_at=T0 + timedelta(days=1))
    used = WordList(name="used", created_at=T0)
    used.touch_usage(T0 + timedelta(days=5))

    assert [wl.name for wl in sorted_lists([old, new, used])] == ["used", "new", "old"]


def test_sorted_lists_ties_broken_by_creation():
    first = WordList(name="first", created_at=T0)
    second = WordList(name="second", created_at=T0 + timedelta(hours=1))
    first.touch_usage(T0 + timedelta(days=1))
    second.touch_usage(T0 + timedelta(days=1))

    assert [wl.name for wl in sorted_lists([first, second])] == ["second", "first"]
