"""List and entry editing."""

from wordmemo.library.editor import EntryDraft, WordListEditor, make_draft

__all__ = ["EntryDraft", "WordListEditor", "make_draft"]
