"""Tests for export modules — CSV, JSON, PDF."""

import csv
import json

import pytest

from app.constants import HISTORY_SCHEMA_VERSION
from app.core.driver_calculator import compute_driver_plan
from app.core.units import convert
from app.export.csv_export import CsvExporter
from app.export.json_export import JsonExporter
from app.export.pdf_report import PdfReportExporter
from app.models.calculation import (
    CalculationSnapshot,
    DriverConfig,
    HistoryEntry,
    LengthUnit,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _make_entry(entry_id: str = "e1", name: str = "Dana", meters: str = "2") -> HistoryEntry:
    return HistoryEntry(
        id=entry_id,
        timestamp="2024-03-01T10:00:00",
        customer_name=name,
        area="Office",
        length=convert(LengthUnit.METERS, meters),
        driver=DriverConfig(),
        result=compute_driver_plan(float(meters), 14.4, 20, 100),
    )


# ── CSV ──────────────────────────────────────────────────────────────

class TestCsvExport:
    def test_rows(self, tmp_path):
        path = tmp_path / "history.csv"
        CsvExporter().export_history(
            [_make_entry("a", "Dana"), _make_entry("b", "Eli", "0")], str(path),
        )
        with open(path, newline="", encoding="utf-8-sig") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 3
        header, first, second = rows
        assert header[2] == "Customer"
        assert first[2] == "Dana"
        assert first[4:8] == ["6.56168", "78.740157", "200", "2"]
        assert first[12:] == ["28.8", "34.6", "1", "34.6"]
        assert second[-2:] == ["0", "n/a"]

    def test_bom_written(self, tmp_path):
        path = tmp_path / "history.csv"
        CsvExporter().export_history([_make_entry()], str(path))
        assert path.read_bytes().startswith(b"\xef\xbb\xbf")

    def test_empty_history_writes_header(self, tmp_path):
        path = tmp_path / "empty.csv"
        CsvExporter().export_history([], str(path))
        with open(path, newline="", encoding="utf-8-sig") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 1


# ── JSON ─────────────────────────────────────────────────────────────

class TestJsonExport:
    def test_export_layout(self, tmp_path):
        path = tmp_path / "history.json"
        JsonExporter().export_history([_make_entry()], str(path))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["schema_version"] == HISTORY_SCHEMA_VERSION
        assert data["entries"][0]["id"] == "e1"
        assert data["entries"][0]["length"]["m"] == "2"

    def test_export_import_roundtrip(self, tmp_path):
        path = tmp_path / "history.json"
        entries = [_make_entry("a", "Dana"), _make_entry("b", "Zoë", "7.5")]
        exporter = JsonExporter()
        exporter.export_history(entries, str(path))
        assert exporter.import_history(str(path)) == entries

    def test_import_bare_array(self, tmp_path):
        path = tmp_path / "bare.json"
        JsonExporter().export_history([_make_entry()], str(path))
        entries = json.loads(path.read_text(encoding="utf-8"))["entries"]
        path.write_text(json.dumps(entries), encoding="utf-8")
        assert JsonExporter().import_history(str(path))[0].id == "e1"

    @pytest.mark.parametrize("content", ['{"foo": 1}', '42', '[{"id": "x"}]'])
    def test_import_rejects_other_files(self, tmp_path, content):
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ValueError):
            JsonExporter().import_history(str(path))


# ── PDF ──────────────────────────────────────────────────────────────

class TestPdfReport:
    def test_report_written(self, tmp_path):
        path = tmp_path / "sheet.pdf"
        PdfReportExporter().generate_report(_make_entry().snapshot(), str(path))
        assert path.read_bytes().startswith(b"%PDF")

    def test_zero_length_report(self, tmp_path):
        path = tmp_path / "zero.pdf"
        PdfReportExporter().generate_report(_make_entry(meters="0").snapshot(), str(path))
        assert path.stat().st_size > 0

    def test_no_result_raises(self, tmp_path):
        path = tmp_path / "none.pdf"
        with pytest.raises(ValueError):
            PdfReportExporter().generate_report(CalculationSnapshot(), str(path))
        assert not path.exists()
