"""Results panel — driver requirement score card.

Displays, for the current inputs:
  - Strip length in meters
  - Total and recommended (margined) power
  - Driver count × rating at the chosen voltage
  - Efficiency with a status dot (green/yellow/red)
"""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame,
)

from app.models.calculation import CalculationResult
from app.ui.styles.colors import (
    EFFICIENCY_HIGH_PCT,
    EFFICIENCY_LOW_PCT,
    ERROR,
    SUCCESS,
    TEXT_DISABLED,
    WARNING,
)

_WAITING_TEXT = "Enter a length and driver details to see results."


def efficiency_color(efficiency: float | None) -> str:
    """Status dot color for an efficiency value."""
    if efficiency is None:
        return TEXT_DISABLED
    if efficiency >= EFFICIENCY_HIGH_PCT:
        return WARNING  # little headroom left
    if efficiency >= EFFICIENCY_LOW_PCT:
        return SUCCESS
    return ERROR


class ResultsPanel(QWidget):
    """Score card showing the driver plan, or a waiting line when no result."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._value_labels: dict[str, QLabel] = {}
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)

        self._waiting_label = QLabel(_WAITING_TEXT)
        self._waiting_label.setWordWrap(True)
        layout.addWidget(self._waiting_label)

        self._metrics_frame = QFrame()
        metrics_layout = QVBoxLayout(self._metrics_frame)
        metrics_layout.setContentsMargins(6, 4, 6, 4)
        metrics_layout.setSpacing(2)

        for key, name in (
            ("length", "Length"),
            ("total_power", "Total Power"),
            ("recommended_power", "Recommended Power"),
            ("drivers", "Drivers Required"),
            ("efficiency", "Efficiency"),
        ):
            row = QHBoxLayout()
            row.setSpacing(6)
            if key == "efficiency":
                self._efficiency_dot = QLabel("⬤")
                self._efficiency_dot.setFixedWidth(14)
                row.addWidget(self._efficiency_dot)
            name_label = QLabel(f"{name}:")
            row.addWidget(name_label)
            value_label = QLabel("")
            value_label.setStyleSheet("font-weight: bold;")
            row.addWidget(value_label)
            row.addStretch()
            metrics_layout.addLayout(row)
            self._value_labels[key] = value_label

        layout.addWidget(self._metrics_frame)
        self._metrics_frame.setVisible(False)

    def value_text(self, key: str) -> str:
        return self._value_labels[key].text()

    @property
    def has_result(self) -> bool:
        return not self._metrics_frame.isHidden()

    def update_result(self, result: CalculationResult | None) -> None:
        """Show *result*, or the waiting text when there is none."""
        if result is None:
            self._metrics_frame.setVisible(False)
            self._waiting_label.setVisible(True)
            return

        self._waiting_label.setVisible(False)
        self._metrics_frame.setVisible(True)

        labels = self._value_labels
        labels["length"].setText(f"{result.display_length()} m")
        labels["total_power"].setText(f"{result.display_total_power()} W")
        labels["recommended_power"].setText(f"{result.display_recommended_power()} W")
        labels["drivers"].setText(
            f"{result.driver_count} x {result.display_driver_power()} W "
            f"({result.voltage.value})"
        )
        if result.efficiency is None:
            labels["efficiency"].setText("n/a (no load)")
        else:
            labels["efficiency"].setText(f"{result.display_efficiency()} %")
        color = efficiency_color(result.efficiency)
        self._efficiency_dot.setStyleSheet(f"color: {color}; font-size: 8pt;")
