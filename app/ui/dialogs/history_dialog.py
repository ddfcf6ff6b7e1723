"""History dialog — browse, search, load, edit, share and delete saved calculations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import (
    QDialog, QHBoxLayout, QHeaderView, QLabel, QLineEdit, QMessageBox,
    QPushButton, QTableWidget, QTableWidgetItem, QVBoxLayout,
)

from app.core.share import build_share_url, format_share_text
from app.database.history_store import HistoryStore
from app.models.calculation import HistoryEntry


class HistoryAction(Enum):
    LOAD = "load"
    EDIT = "edit"


def _format_timestamp(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return iso


class HistoryDialog(QDialog):
    """Saved calculation browser.

    After ``exec()`` returns Accepted, ``selected_entry`` and ``action`` tell
    the caller whether to load the entry for viewing or start editing it.
    """

    def __init__(self, store: HistoryStore, parent=None):
        super().__init__(parent)
        self._store = store
        self._entries: list[HistoryEntry] = []
        self.selected_entry: HistoryEntry | None = None
        self.action: HistoryAction | None = None

        self.setWindowTitle("Calculation History")
        self.setMinimumSize(680, 420)

        layout = QVBoxLayout(self)

        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Search by customer name or area...")
        self._search_edit.textChanged.connect(self._refresh)
        layout.addWidget(self._search_edit)

        self._table = QTableWidget()
        self._table.setColumnCount(5)
        self._table.setHorizontalHeaderLabels(
            ["Customer", "Area", "Length (m)", "Drivers", "Saved"]
        )
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.horizontalHeader().setSectionResizeMode(
            0, QHeaderView.ResizeMode.Stretch
        )
        self._table.doubleClicked.connect(self._on_load)
        layout.addWidget(self._table)

        self._empty_label = QLabel("")
        layout.addWidget(self._empty_label)

        btn_layout = QHBoxLayout()

        self._btn_clear = QPushButton("Clear All")
        self._btn_clear.clicked.connect(self._on_clear_all)
        btn_layout.addWidget(self._btn_clear)
        btn_layout.addStretch()

        self._btn_delete = QPushButton("Delete")
        self._btn_delete.clicked.connect(self._on_delete)
        btn_layout.addWidget(self._btn_delete)

        self._btn_share = QPushButton("Share")
        self._btn_share.clicked.connect(self._on_share)
        btn_layout.addWidget(self._btn_share)

        self._btn_edit = QPushButton("Edit")
        self._btn_edit.clicked.connect(self._on_edit)
        btn_layout.addWidget(self._btn_edit)

        self._btn_load = QPushButton("Load")
        self._btn_load.setDefault(True)
        self._btn_load.clicked.connect(self._on_load)
        btn_layout.addWidget(self._btn_load)

        self._btn_close = QPushButton("Close")
        self._btn_close.clicked.connect(self.reject)
        btn_layout.addWidget(self._btn_close)

        layout.addLayout(btn_layout)

        self._refresh()

    @property
    def visible_entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def set_search_text(self, text: str) -> None:
        self._search_edit.setText(text)

    def _refresh(self) -> None:
        """Reload the table with the current search term."""
        self._entries = self._store.search(self._search_edit.text())

        self._table.setRowCount(len(self._entries))
        for row, entry in enumerate(self._entries):
            result = entry.result
            self._table.setItem(row, 0, QTableWidgetItem(entry.customer_name or "—"))
            self._table.setItem(row, 1, QTableWidgetItem(entry.area))
            self._table.setItem(row, 2, QTableWidgetItem(result.display_length()))
            self._table.setItem(row, 3, QTableWidgetItem(
                f"{result.driver_count} x {result.display_driver_power()}W"
            ))
            saved = _format_timestamp(entry.timestamp)
            if entry.last_modified:
                saved += " (edited)"
            self._table.setItem(row, 4, QTableWidgetItem(saved))

        if self._entries:
            self._empty_label.setText("")
        elif len(self._store):
            self._empty_label.setText("No matching calculations.")
        else:
            self._empty_label.setText("No saved calculations yet.")
        self._btn_clear.setEnabled(len(self._store) > 0)

    def _selected(self) -> HistoryEntry | None:
        rows = self._table.selectionModel().selectedRows()
        return self._entries[rows[0].row()] if rows else None

    def _finish(self, action: HistoryAction) -> None:
        entry = self._selected()
        if entry is not None:
            self.selected_entry = entry
            self.action = action
            self.accept()

    def _on_load(self) -> None:
        self._finish(HistoryAction.LOAD)

    def _on_edit(self) -> None:
        self._finish(HistoryAction.EDIT)

    def _on_share(self) -> None:
        entry = self._selected()
        if entry is None:
            return
        url = build_share_url(format_share_text(entry.snapshot()))
        if url:
            QDesktopServices.openUrl(QUrl(url))

    def _on_delete(self) -> None:
        entry = self._selected()
        if entry is None:
            return
        name = entry.customer_name or "this calculation"
        answer = QMessageBox.question(
            self, "Delete Entry",
            f"Delete the saved calculation for {name}?",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self._store.delete_entry(entry.id)
            self._refresh()

    def _on_clear_all(self) -> None:
        answer = QMessageBox.question(
            self, "Clear History",
            "Delete all saved calculations? This cannot be undone.",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self._store.clear()
            self._refresh()
