"""Driver panel — power density, voltage, safety margin, driver rating.

Preset combos and numeric fields both report to the session; the panel is
redrawn from the session's DriverConfig afterward.
"""

from __future__ import annotations

from PyQt6.QtCore import QRegularExpression, pyqtSignal
from PyQt6.QtGui import QRegularExpressionValidator
from PyQt6.QtWidgets import QComboBox, QFormLayout, QLineEdit, QWidget

from app.constants import DRIVER_WATTAGE_PRESETS, POWER_PRESETS
from app.models.calculation import DriverConfig, Voltage


class DriverPanel(QWidget):
    """Driver configuration form."""

    # (field name, raw text)
    driver_field_edited = pyqtSignal(str, str)
    power_preset_selected = pyqtSignal(str)
    driver_wattage_preset_selected = pyqtSignal(str)
    voltage_selected = pyqtSignal(str)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QFormLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(6)

        validator = QRegularExpressionValidator(
            QRegularExpression(r"[0-9]*\.?[0-9]*"), self,
        )

        self._power_preset_combo = QComboBox()
        for key, label in POWER_PRESETS.items():
            self._power_preset_combo.addItem(label, key)
        self._power_preset_combo.activated.connect(
            lambda _: self.power_preset_selected.emit(self._power_preset_combo.currentData())
        )
        layout.addRow("LED Strip Type", self._power_preset_combo)

        self._power_edit = self._numeric_edit("power_per_meter", validator, "W/m")
        layout.addRow("Power Consumption (W/m)", self._power_edit)

        self._voltage_combo = QComboBox()
        for voltage in Voltage:
            self._voltage_combo.addItem(voltage.value, voltage.value)
        self._voltage_combo.activated.connect(
            lambda _: self.voltage_selected.emit(self._voltage_combo.currentData())
        )
        layout.addRow("Voltage", self._voltage_combo)

        self._margin_edit = self._numeric_edit("safety_margin", validator, "%")
        layout.addRow("Safety Margin (%)", self._margin_edit)

        self._wattage_preset_combo = QComboBox()
        for key, label in DRIVER_WATTAGE_PRESETS.items():
            self._wattage_preset_combo.addItem(label, key)
        self._wattage_preset_combo.activated.connect(
            lambda _: self.driver_wattage_preset_selected.emit(
                self._wattage_preset_combo.currentData()
            )
        )
        layout.addRow("Driver Wattage", self._wattage_preset_combo)

        self._wattage_edit = self._numeric_edit("driver_wattage", validator, "W")
        layout.addRow("Driver Wattage (W)", self._wattage_edit)

    def _numeric_edit(
        self, field_name: str, validator: QRegularExpressionValidator, unit: str,
    ) -> QLineEdit:
        edit = QLineEdit()
        edit.setValidator(validator)
        edit.setPlaceholderText(unit)
        edit.textEdited.connect(
            lambda text: self.driver_field_edited.emit(field_name, text)
        )
        return edit

    def set_config(self, config: DriverConfig) -> None:
        """Redraw every control from *config* without re-emitting signals."""
        for edit, text in (
            (self._power_edit, config.power_per_meter),
            (self._margin_edit, config.safety_margin),
            (self._wattage_edit, config.driver_wattage),
        ):
            if edit.text() != text:
                edit.setText(text)

        for combo, key in (
            (self._power_preset_combo, config.power_preset),
            (self._wattage_preset_combo, config.driver_wattage_preset),
            (self._voltage_combo, config.voltage.value),
        ):
            index = combo.findData(key)
            if index >= 0 and index != combo.currentIndex():
                combo.blockSignals(True)
                combo.setCurrentIndex(index)
                combo.blockSignals(False)
