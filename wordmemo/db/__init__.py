# SQLAlchemy persistence
from .database import create_db_engine, init_db, make_session_factory, session_scope
from .models import Base, WordEntryRow, WordListRow
from .store import WordStore

__all__ = [
    "Base",
    "WordEntryRow",
    "WordListRow",
    "WordStore",
    "create_db_engine",
    "init_db",
    "make_session_factory",
    "session_scope",
]
