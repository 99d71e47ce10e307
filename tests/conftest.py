"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordmemo.core.models import WordEntry, WordList  # noqa: E402
from wordmemo.db.database import create_db_engine, init_db, make_session_factory  # noqa: E402
from wordmemo.db.store import WordStore  # noqa: E402
from wordmemo.library.editor import WordListEditor  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ============================================================================
# Deterministic collaborators
# ============================================================================


class ScriptedRandom(random.Random):
    """Random source with scripted rolls and choices; shuffles are no-ops.

    ``rolls`` feed ``randrange`` in order (0 once exhausted), ``choices`` are
    indices fed to ``choice`` (0 once exhausted). ``sample`` takes the first k.
    """

    def __init__(self, rolls=(), choices=()):
        super().__init__(0)
        self.rolls = list(rolls)
        self.choices = list(choices)

    def randrange(self, start, stop=None, step=1):
        return self.rolls.pop(0) if self.rolls else 0

    def choice(self, seq):
        return seq[self.choices.pop(0) if self.choices else 0]

    def shuffle(self, x, *args, **kwargs):
        return None

    def sample(self, population, k, **kwargs):
        return list(population)[:k]


class FakeClock:
    """Clock that moves forward one minute per call."""

    def __init__(self, start=datetime(2026, 1, 5, 9, 0)):
        self.current = start

    def __call__(self):
        self.current += timedelta(minutes=1)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scripted_random():
    return ScriptedRandom


def make_list(name="Test list", words=(), created_at=datetime(2026, 1, 1, 8, 0)):
    """Build a list from (term, proficiency) pairs or full dicts."""
    word_list = WordList(name=name, created_at=created_at)
    for item in words:
        if isinstance(item, dict):
            entry = WordEntry(modified_at=created_at, **item)
        else:
            term, proficiency = item
            entry = WordEntry(
                term=term,
                definition=f"definition of {term}",
                pronunciation=f"/{term}/",
                proficiency=proficiency,
                modified_at=created_at,
            )
        word_list.add_entry(entry)
    return word_list


@pytest.fixture
def list_factory():
    return make_list


@pytest.fixture
def sample_list():
    """Four words, one of them already mastered."""
    return make_list(
        "Sample",
        [("apple", 0), ("banana", 40), ("cherry", 95), ("damson", 89)],
    )


@pytest.fixture
def family_list():
    """Entries used by relationship tests: run, runner, running, rerun, walk."""
    return make_list(
        "Family",
        [("run", 0), ("runner", 0), ("running", 0), ("rerun", 0), ("walk", 0)],
    )


# ============================================================================
# Persistence
# ============================================================================


@pytest.fixture
def store():
    """WordStore over a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield WordStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def editor(store, clock):
    return WordListEditor(store, clock=clock)
