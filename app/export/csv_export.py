"""CSV export — saved calculation history as a spreadsheet.

BOM UTF-8 encoding for Excel compatibility.
"""

from __future__ import annotations

import csv

from app.models.calculation import HistoryEntry, LengthUnit

_HEADERS = [
    "Saved", "Last Modified", "Customer", "Area",
    "Length (ft)", "Length (in)", "Length (cm)", "Length (m)",
    "Power (W/m)", "Safety Margin (%)", "Driver (W)", "Voltage",
    "Total Power (W)", "Recommended Power (W)", "Driver Count",
    "Efficiency (%)",
]


class CsvExporter:
    """CSV file export operations."""

    def export_history(
        self, entries: list[HistoryEntry], output_path: str,
    ) -> None:
        """Export history entries as CSV, one row per entry, newest first.

        Args:
            entries: Entries to write (typically ``HistoryStore.entries``).
            output_path: Destination file path (.csv).
        """
        with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow(_HEADERS)
            for entry in entries:
                result = entry.result
                driver = entry.driver
                writer.writerow([
                    entry.timestamp,
                    entry.last_modified or "",
                    entry.customer_name,
                    entry.area,
                    *(entry.length.get(unit) for unit in LengthUnit),
                    driver.power_per_meter,
                    driver.safety_margin,
                    driver.driver_wattage,
                    driver.voltage.value,
                    result.display_total_power(),
                    result.display_recommended_power(),
                    result.driver_count,
                    result.display_efficiency(),
                ])
