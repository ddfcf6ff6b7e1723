"""SQLite database manager — connection, schema creation, and initialization.

The calculator keeps its durable state in one key-value table,
``app_settings``. The saved-calculation history lives there as a single
JSON record.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from app.constants import DB_FILENAME

_SCHEMA_SQL = """
-- Application settings / durable key-value records
CREATE TABLE IF NOT EXISTS app_settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

EXPECTED_TABLES = [
    "app_settings",
]


class DatabaseManager:
    """Manages SQLite database connection and schema lifecycle."""

    def __init__(self, db_path: Path | str | None = None):
        if db_path is None:
            db_path = Path.cwd() / DB_FILENAME
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._in_transaction = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def initialize_database(self) -> None:
        """Create all tables if they don't exist."""
        conn = self.connect()
        conn.executescript(_SCHEMA_SQL)
        conn.commit()

    def get_tables(self) -> list[str]:
        """Return list of table names in the database."""
        conn = self.connect()
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        )
        return [row[0] for row in cursor.fetchall()]

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self):
        """Run a read-modify-write sequence under one write lock.

        ``BEGIN IMMEDIATE`` takes the database write lock up front, so a
        second connection (another app instance on the same file) waits
        until this block commits or rolls back. Setting writes inside the
        block are committed together on exit. Nested use joins the outer
        transaction.
        """
        conn = self.connect()
        if self._in_transaction:
            yield conn
            return

        conn.execute("BEGIN IMMEDIATE")
        self._in_transaction = True
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()
        finally:
            self._in_transaction = False

    def _commit(self) -> None:
        if not self._in_transaction:
            self.connect().commit()

    # ------------------------------------------------------------------
    # Key-value records
    # ------------------------------------------------------------------

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        """Get a stored value, or *default* when the key is absent."""
        conn = self.connect()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else default

    def set_setting(self, key: str, value: str) -> None:
        """Store a value (upsert) and commit."""
        conn = self.connect()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._commit()

    def delete_setting(self, key: str) -> None:
        """Remove a stored record entirely and commit."""
        conn = self.connect()
        conn.execute("DELETE FROM app_settings WHERE key = ?", (key,))
        self._commit()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
