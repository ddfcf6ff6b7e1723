"""History store — saved calculations, newest first, persisted as one record.

The whole list is serialized to JSON and written to the ``app_settings``
table under ``HISTORY_SETTING_KEY``. Every mutation is a read-modify-write
of that record inside one database transaction: the persisted list is
re-read, changed, written back and committed before the call returns. Two
app instances sharing the database file therefore never overwrite each
other's entries, and a caller that resets its form right after saving
cannot lose the entry.
"""

from __future__ import annotations

import copy
import json
import logging
import sqlite3
import uuid
from datetime import datetime
from typing import Callable

from app.constants import HISTORY_SETTING_KEY, MAX_HISTORY_ENTRIES
from app.core.serializers import dict_to_history_entry, history_to_list
from app.database.db_manager import DatabaseManager
from app.models.calculation import (
    CalculationResult,
    CustomerInfo,
    DriverConfig,
    HistoryEntry,
    LengthValue,
)

logger = logging.getLogger(__name__)


class HistoryStore:
    """Owner of the saved-calculation list.

    Entries handed out are copies; changing one does not change the store.

    Usage::

        store = HistoryStore(db)
        store.load()
        entry = store.add_entry(customer, length, driver, result)
        store.update_entry(entry.id, customer, length, driver, new_result)
        store.search("kitchen")
    """

    def __init__(
        self,
        db: DatabaseManager,
        max_entries: int = MAX_HISTORY_ENTRIES,
    ) -> None:
        self._db = db
        self._max_entries = max_entries
        self._entries: list[HistoryEntry] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[HistoryEntry]:
        """Copy of the history, newest first."""
        return copy.deepcopy(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, entry_id: str) -> HistoryEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return copy.deepcopy(entry)
        return None

    def search(self, term: str | None) -> list[HistoryEntry]:
        """Filter by customer name or area (case-insensitive substring).

        The term is matched as typed. An empty term returns the full list
        in stored order.
        """
        if not term:
            return self.entries
        return copy.deepcopy([e for e in self._entries if e.matches(term)])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> list[HistoryEntry]:
        """Read the persisted history.

        A missing record is an empty history. An unreadable record is
        logged and treated as empty; individual malformed entries are
        logged and skipped.
        """
        try:
            self._entries = self._read_record()
        except sqlite3.Error:
            logger.exception("Failed to read history from %s", self._db.db_path)
            self._entries = []
            return self.entries

        logger.info("Loaded %d history entries", len(self._entries))
        return self.entries

    def _read_record(self) -> list[HistoryEntry]:
        raw = self._db.get_setting(HISTORY_SETTING_KEY)
        if raw is None:
            return []
        return self._decode(raw)

    def _decode(self, raw: str) -> list[HistoryEntry]:
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable history record", exc_info=True)
            return []
        if not isinstance(data, list):
            logger.warning(
                "Discarding history record of type %s", type(data).__name__,
            )
            return []

        entries: list[HistoryEntry] = []
        for index, item in enumerate(data):
            try:
                entries.append(dict_to_history_entry(item))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping unreadable history entry #%d", index, exc_info=True)
        return entries[: self._max_entries]

    def _apply(
        self, change: Callable[[list[HistoryEntry]], list[HistoryEntry]],
    ) -> bool:
        """Apply *change* to the persisted list and store the result.

        *change* must be a pure function of the list it receives. If the
        database cannot be read or written, the change is applied to the
        in-memory list only.

        Returns:
            True if the change was committed to the database.
        """
        try:
            with self._db.transaction():
                entries = change(self._read_record())
                payload = json.dumps(history_to_list(entries), ensure_ascii=False)
                self._db.set_setting(HISTORY_SETTING_KEY, payload)
        except (sqlite3.Error, TypeError, ValueError):
            logger.exception("Failed to save history")
            self._entries = change(self._entries)
            return False
        self._entries = entries
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_entry(
        self,
        customer: CustomerInfo,
        length: LengthValue,
        driver: DriverConfig,
        result: CalculationResult | None,
    ) -> HistoryEntry | None:
        """Create a new entry at the top of the list and persist it.

        Returns:
            The new entry, or None when there is no result to save.
        """
        if result is None:
            return None

        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            timestamp=datetime.now().isoformat(),
            customer_name=customer.customer_name,
            area=customer.area,
            length=copy.deepcopy(length),
            driver=copy.deepcopy(driver),
            result=copy.deepcopy(result),
        )
        self._apply(lambda entries: [entry, *entries][: self._max_entries])
        return copy.deepcopy(entry)

    def update_entry(
        self,
        entry_id: str,
        customer: CustomerInfo,
        length: LengthValue,
        driver: DriverConfig,
        result: CalculationResult | None,
    ) -> HistoryEntry | None:
        """Replace an entry's content in place, keeping id, timestamp and position.

        Returns:
            The updated entry, or None if there is no result or no entry
            with *entry_id*.
        """
        if result is None:
            return None

        modified = datetime.now().isoformat()
        updated: HistoryEntry | None = None

        def replace(entries: list[HistoryEntry]) -> list[HistoryEntry]:
            nonlocal updated
            updated = None
            out = []
            for original in entries:
                if original.id == entry_id:
                    original = updated = HistoryEntry(
                        id=original.id,
                        timestamp=original.timestamp,
                        last_modified=modified,
                        customer_name=customer.customer_name,
                        area=customer.area,
                        length=copy.deepcopy(length),
                        driver=copy.deepcopy(driver),
                        result=copy.deepcopy(result),
                    )
                out.append(original)
            return out

        self._apply(replace)
        if updated is None:
            logger.warning("Cannot update missing history entry %s", entry_id)
            return None
        return copy.deepcopy(updated)

    def delete_entry(self, entry_id: str) -> bool:
        """Remove an entry. Unknown ids are ignored.

        Returns:
            True if an entry was removed.
        """
        removed = False

        def remove(entries: list[HistoryEntry]) -> list[HistoryEntry]:
            nonlocal removed
            remaining = [e for e in entries if e.id != entry_id]
            removed = len(remaining) != len(entries)
            return remaining

        self._apply(remove)
        return removed

    def clear(self) -> None:
        """Empty the history and delete the persisted record."""
        self._entries = []
        try:
            self._db.delete_setting(HISTORY_SETTING_KEY)
        except sqlite3.Error:
            logger.exception("Failed to remove history record")
            return
        logger.info("History cleared")
