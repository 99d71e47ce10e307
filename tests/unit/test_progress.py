"""
Tests for the daily progress summary.
"""

from datetime import date, datetime

from wordmemo.study.progress import daily_progress

TODAY = date(2026, 1, 5)


def test_counts_due_words_not_reviewed_today(sample_list):
    apple, banana, cherry, damson = sample_list.entries
    apple.last_reviewed_at = datetime(2026, 1, 5, 7, 30)
    banana.last_reviewed_at = datetime(2026, 1, 4, 22, 0)

    progress = daily_progress(sample_list, today=TODAY)

    assert progress.total == 3
    assert progress.remaining == 2
    assert str(progress) == "2/3"
    assert progress.can_start


def test_mastered_list_cannot_start(list_factory):
    word_list = list_factory(words=[("done", 95), ("also done", 100)])
    progress = daily_progress(word_list, today=TODAY)

    assert (progress.remaining, progress.total) == (0, 0)
    assert not progress.can_start


def test_threshold_override(sample_list):
    assert daily_progress(sample_list, today=TODAY, threshold=100).total == 4
