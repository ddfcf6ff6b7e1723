"""JSON history export/import.

Writes the saved-calculation list as formatted JSON with a schema version,
in the same entry layout the history store persists.
"""

from __future__ import annotations

import json

from app.constants import HISTORY_SCHEMA_VERSION
from app.core.serializers import history_to_list, list_to_history
from app.models.calculation import HistoryEntry


class JsonExporter:
    """JSON history file operations."""

    def export_history(
        self, entries: list[HistoryEntry], output_path: str,
    ) -> None:
        """Write history as a formatted JSON file.

        Args:
            entries: Entries to export, newest first.
            output_path: Destination file path (.json).
        """
        data = {
            "schema_version": HISTORY_SCHEMA_VERSION,
            "entries": history_to_list(entries),
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def import_history(self, input_path: str) -> list[HistoryEntry]:
        """Read history entries from a JSON export.

        Accepts both the exported object and a bare entry array.

        Args:
            input_path: Source file path (.json).

        Returns:
            Reconstructed entries in file order.

        Raises:
            ValueError: If the file does not hold history data.
        """
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("entries")
        try:
            return list_to_history(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Not a history export: {input_path}") from exc
