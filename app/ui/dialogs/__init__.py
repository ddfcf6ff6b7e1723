"""Dialogs — modal dialog windows (history browser)."""

from app.ui.dialogs.history_dialog import HistoryAction, HistoryDialog

__all__ = [
    "HistoryAction",
    "HistoryDialog",
]
