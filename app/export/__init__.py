"""Export — PDF calculation sheet and history data export (CSV, JSON)."""

from app.export.csv_export import CsvExporter
from app.export.json_export import JsonExporter
from app.export.pdf_report import PdfReportExporter

__all__ = [
    "CsvExporter",
    "JsonExporter",
    "PdfReportExporter",
]
