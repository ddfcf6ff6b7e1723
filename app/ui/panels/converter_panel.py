"""Converter panel — four synchronized strip length fields (ft, in, cm, m).

The panel only forwards raw keystrokes; conversion happens in the session.
The field being typed in keeps its raw text; the other three are redrawn
from the converted values.
"""

from __future__ import annotations

from PyQt6.QtCore import QRegularExpression, pyqtSignal
from PyQt6.QtGui import QRegularExpressionValidator
from PyQt6.QtWidgets import QFormLayout, QLineEdit, QWidget

from app.models.calculation import LengthUnit, LengthValue

_HELPER_TEXT: dict[LengthUnit, str] = {
    LengthUnit.FEET: "Enter value in feet",
    LengthUnit.INCHES: "Enter value in inches",
    LengthUnit.CENTIMETERS: "Enter value in centimeters",
    LengthUnit.METERS: "Enter value in meters",
}


class ConverterPanel(QWidget):
    """Length entry in all four units."""

    # (LengthUnit, raw text) — emitted on user edits only
    length_edited = pyqtSignal(object, str)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._edits: dict[LengthUnit, QLineEdit] = {}
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QFormLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(6)

        validator = QRegularExpressionValidator(
            QRegularExpression(r"[0-9]*\.?[0-9]*"), self,
        )
        for unit in LengthUnit:
            edit = QLineEdit()
            edit.setValidator(validator)
            edit.setPlaceholderText(_HELPER_TEXT[unit])
            edit.setProperty("lastEdited", False)
            edit.textEdited.connect(
                lambda text, u=unit: self.length_edited.emit(u, text)
            )
            layout.addRow(unit.label, edit)
            self._edits[unit] = edit

    def edit_for(self, unit: LengthUnit) -> QLineEdit:
        return self._edits[unit]

    def set_values(
        self,
        length: LengthValue,
        last_edited: LengthUnit | None = None,
        keep_text_of: LengthUnit | None = None,
    ) -> None:
        """Show a LengthValue.

        Args:
            length: Values to display.
            last_edited: Field to emphasize.
            keep_text_of: Field whose raw text is left as typed.
        """
        for unit, edit in self._edits.items():
            if unit is not keep_text_of:
                edit.setText(length.get(unit))
            emphasized = unit is last_edited
            if edit.property("lastEdited") != emphasized:
                edit.setProperty("lastEdited", emphasized)
                edit.style().unpolish(edit)
                edit.style().polish(edit)
