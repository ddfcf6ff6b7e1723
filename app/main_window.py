"""Main window — customer fields, converter, driver form, results, history.

Layout (top to bottom):
  Header:  title + History button
  Groups:  Customer / Strip Length / Driver / Results
  Footer:  Reset, Save, Save & Share (or Cancel Edit / Save Changes)
  Status:  QStatusBar feedback

All arithmetic and persistence lives in CalculatorSession / HistoryStore;
this window only forwards edits and redraws.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QSettings, QUrl
from PyQt6.QtGui import QAction, QDesktopServices, QKeySequence
from PyQt6.QtWidgets import (
    QFileDialog, QFormLayout, QGroupBox, QHBoxLayout, QLabel, QLineEdit,
    QMainWindow, QMessageBox, QPushButton, QScrollArea, QVBoxLayout, QWidget,
)

from app.constants import APP_NAME, APP_VERSION, MIN_WINDOW_HEIGHT, MIN_WINDOW_WIDTH
from app.core.session import CalculatorSession
from app.core.share import build_share_url
from app.database.db_manager import DatabaseManager
from app.database.history_store import HistoryStore
from app.export.csv_export import CsvExporter
from app.export.json_export import JsonExporter
from app.export.pdf_report import PdfReportExporter
from app.models.calculation import LengthUnit
from app.ui.dialogs.history_dialog import HistoryAction, HistoryDialog
from app.ui.panels.converter_panel import ConverterPanel
from app.ui.panels.driver_panel import DriverPanel
from app.ui.panels.results_panel import ResultsPanel

logger = logging.getLogger(__name__)

_STATUS_TIMEOUT_MS = 3000


class MainWindow(QMainWindow):
    """Calculator main window."""

    def __init__(self, db_path: Path | str | None = None):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)

        # Core services
        self._db_manager = DatabaseManager(db_path)
        self._db_manager.initialize_database()
        self._history = HistoryStore(self._db_manager)
        self._history.load()
        self._session = CalculatorSession()

        self._build_ui()
        self._build_menu()
        self._connect_signals()
        self._restore_state()
        self._refresh()

    @property
    def session(self) -> CalculatorSession:
        return self._session

    @property
    def history(self) -> HistoryStore:
        return self._history

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        # Header
        header = QHBoxLayout()
        self._title_label = QLabel(APP_NAME)
        self._title_label.setStyleSheet("font-size: 16pt; font-weight: bold;")
        header.addWidget(self._title_label)
        header.addStretch()
        self._btn_history = QPushButton("History")
        header.addWidget(self._btn_history)
        layout.addLayout(header)

        # Customer
        customer_group = QGroupBox("Customer")
        customer_form = QFormLayout(customer_group)
        self._customer_edit = QLineEdit()
        self._customer_edit.setPlaceholderText("Customer name")
        customer_form.addRow("Customer Name", self._customer_edit)
        self._area_edit = QLineEdit()
        self._area_edit.setPlaceholderText("Room / installation area")
        customer_form.addRow("Area", self._area_edit)
        layout.addWidget(customer_group)

        # Converter + driver side by side
        inputs = QHBoxLayout()
        self._converter_panel = ConverterPanel()
        inputs.addWidget(self._group("Strip Length", self._converter_panel))
        self._driver_panel = DriverPanel()
        inputs.addWidget(self._group("Driver", self._driver_panel))
        layout.addLayout(inputs)

        # Results
        self._results_panel = ResultsPanel()
        layout.addWidget(self._group("Driver Requirements", self._results_panel))

        # Actions
        actions = QHBoxLayout()
        self._btn_reset = QPushButton("Reset")
        actions.addWidget(self._btn_reset)
        actions.addStretch()
        self._btn_cancel_edit = QPushButton("Cancel Edit")
        actions.addWidget(self._btn_cancel_edit)
        self._btn_save_share = QPushButton("Save && Share")
        actions.addWidget(self._btn_save_share)
        self._btn_save = QPushButton("Save")
        self._btn_save.setProperty("cssClass", "primary")
        actions.addWidget(self._btn_save)
        layout.addLayout(actions)
        layout.addStretch()

        scroll.setWidget(content)
        self.setCentralWidget(scroll)
        self.statusBar()

    @staticmethod
    def _group(title: str, widget: QWidget) -> QGroupBox:
        group = QGroupBox(title)
        group_layout = QVBoxLayout(group)
        group_layout.setContentsMargins(4, 8, 4, 4)
        group_layout.addWidget(widget)
        return group

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        history_action = QAction("&History...", self)
        history_action.setShortcut(QKeySequence("Ctrl+H"))
        history_action.triggered.connect(self._on_open_history)
        file_menu.addAction(history_action)
        file_menu.addSeparator()

        self._pdf_action = QAction("Export Calculation as &PDF...", self)
        self._pdf_action.triggered.connect(self._on_export_pdf)
        file_menu.addAction(self._pdf_action)

        csv_action = QAction("Export History as &CSV...", self)
        csv_action.triggered.connect(self._on_export_csv)
        file_menu.addAction(csv_action)

        json_action = QAction("Export History as &JSON...", self)
        json_action.triggered.connect(self._on_export_json)
        file_menu.addAction(json_action)
        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _connect_signals(self) -> None:
        self._customer_edit.textEdited.connect(self._session.set_customer_name)
        self._area_edit.textEdited.connect(self._session.set_area)

        self._converter_panel.length_edited.connect(self._on_length_edited)
        self._driver_panel.driver_field_edited.connect(self._on_driver_field_edited)
        self._driver_panel.power_preset_selected.connect(self._on_power_preset)
        self._driver_panel.driver_wattage_preset_selected.connect(self._on_wattage_preset)
        self._driver_panel.voltage_selected.connect(self._on_voltage)

        self._btn_history.clicked.connect(self._on_open_history)
        self._btn_reset.clicked.connect(self._on_reset)
        self._btn_save.clicked.connect(self._on_save)
        self._btn_save_share.clicked.connect(self._on_save_and_share)
        self._btn_cancel_edit.clicked.connect(self._on_cancel_edit)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _refresh(self, keep_text_of: LengthUnit | None = None) -> None:
        """Redraw every control from the session."""
        session = self._session
        customer = session.customer
        if self._customer_edit.text() != customer.customer_name:
            self._customer_edit.setText(customer.customer_name)
        if self._area_edit.text() != customer.area:
            self._area_edit.setText(customer.area)

        self._converter_panel.set_values(
            session.length, session.last_edited_unit, keep_text_of,
        )
        self._driver_panel.set_config(session.driver)

        result = session.result
        self._results_panel.update_result(result)

        editing = session.is_editing
        self._btn_save.setText("Save Changes" if editing else "Save")
        self._btn_save.setEnabled(result is not None)
        self._btn_save_share.setVisible(not editing)
        self._btn_save_share.setEnabled(result is not None)
        self._btn_cancel_edit.setVisible(editing)
        self._pdf_action.setEnabled(result is not None)
        self._title_label.setText(f"{APP_NAME} — Editing" if editing else APP_NAME)

    # ------------------------------------------------------------------
    # Field handlers
    # ------------------------------------------------------------------

    def _on_length_edited(self, unit: LengthUnit, text: str) -> None:
        if self._session.edit_length(unit, text):
            self._refresh(keep_text_of=unit)

    def _on_driver_field_edited(self, field_name: str, text: str) -> None:
        if self._session.edit_driver_field(field_name, text):
            self._refresh()

    def _on_power_preset(self, preset: str) -> None:
        self._session.select_power_preset(preset)
        self._refresh()

    def _on_wattage_preset(self, preset: str) -> None:
        self._session.select_driver_wattage_preset(preset)
        self._refresh()

    def _on_voltage(self, voltage: str) -> None:
        self._session.set_voltage(voltage)
        self._refresh()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_reset(self) -> None:
        self._session.reset()
        self._refresh()

    def _on_save(self) -> None:
        if self._session.is_editing:
            entry = self._session.save_changes(self._history)
            message = "Updated!" if entry else "Entry no longer exists"
        else:
            entry = self._session.save_to_history(self._history)
            message = "Saved!" if entry else ""
        if message:
            self.statusBar().showMessage(message, _STATUS_TIMEOUT_MS)
        self._refresh()

    def _on_save_and_share(self) -> None:
        text = self._session.share_text()
        entry = self._session.save_to_history(self._history)
        if entry is None:
            return
        self.statusBar().showMessage("Saved!", _STATUS_TIMEOUT_MS)
        self._refresh()
        url = build_share_url(text)
        if url:
            QDesktopServices.openUrl(QUrl(url))

    def _on_cancel_edit(self) -> None:
        self._session.cancel_edit()
        self._refresh()

    def _on_open_history(self) -> None:
        self._history.load()
        dialog = HistoryDialog(self._history, self)
        if not dialog.exec():
            self._refresh()
            return
        entry = dialog.selected_entry
        if entry is None:
            return
        if dialog.action is HistoryAction.EDIT:
            self._session.start_edit(entry)
        else:
            if self._session.is_editing:
                self._session.cancel_edit()
            self._session.load_entry(entry)
        self._refresh()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _on_export_pdf(self) -> None:
        snapshot = self._session.snapshot()
        if snapshot.result is None:
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Export PDF", "calculation.pdf", "PDF (*.pdf)",
        )
        if not path:
            return
        try:
            PdfReportExporter().generate_report(snapshot, path)
        except OSError as exc:
            logger.exception("PDF export failed")
            QMessageBox.warning(self, "Export Failed", str(exc))
            return
        self.statusBar().showMessage(f"Exported {path}", _STATUS_TIMEOUT_MS)

    def _on_export_csv(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export History", "history.csv", "CSV (*.csv)",
        )
        if path:
            self._export_history(CsvExporter().export_history, path)

    def _on_export_json(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export History", "history.json", "JSON (*.json)",
        )
        if path:
            self._export_history(JsonExporter().export_history, path)

    def _export_history(self, export, path: str) -> None:
        try:
            export(self._history.entries, path)
        except OSError as exc:
            logger.exception("History export failed")
            QMessageBox.warning(self, "Export Failed", str(exc))
            return
        self.statusBar().showMessage(f"Exported {path}", _STATUS_TIMEOUT_MS)

    def _on_about(self) -> None:
        QMessageBox.about(
            self, f"About {APP_NAME}",
            f"<b>{APP_NAME}</b> v{APP_VERSION}<br>"
            "LED strip length conversion and driver sizing.",
        )

    # ------------------------------------------------------------------
    # Window state
    # ------------------------------------------------------------------

    def _save_state(self) -> None:
        settings = QSettings()
        settings.setValue("mainwindow/geometry", self.saveGeometry())

    def _restore_state(self) -> None:
        settings = QSettings()
        geometry = settings.value("mainwindow/geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def closeEvent(self, event) -> None:
        self._save_state()
        self._db_manager.close()
        super().closeEvent(event)
