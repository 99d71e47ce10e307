"""Exception hierarchy for WordMemo."""


class WordMemoError(Exception):
    """Base exception for all WordMemo errors."""


class ValidationError(WordMemoError):
    """Invalid edit (blank term, self link, cyclic lemma chain)."""


class DanglingReferenceError(WordMemoError):
    """A related entry id is no longer present in the list."""

    def __init__(self, entry_id, list_name: str | None = None):
        self.entry_id = entry_id
        self.list_name = list_name
        where = f" in list {list_name!r}" if list_name else ""
        super().__init__(f"Entry not found{where}: {entry_id}")


class EntityNotFoundError(WordMemoError):
    """List or entry doesn't exist in the store."""
