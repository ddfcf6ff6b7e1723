"""Database layer — SQLite connection, schema, and the history store."""

from app.database.db_manager import DatabaseManager
from app.database.history_store import HistoryStore

__all__ = [
    "DatabaseManager",
    "HistoryStore",
]
