"""Calculator session — the active form state and its edit-mode machine.

Owns the fields the user is working on (customer, length, driver config)
and the mode:

    IDLE ──start_edit(entry)──▶ EDITING(entry.id)
      ▲                               │
      └──── save_changes / cancel_edit ┘

Pure Python class (no Qt dependency). The window forwards raw field edits
here and re-renders from the session's properties.
"""

from __future__ import annotations

import copy
import logging
from enum import Enum

from app.constants import CUSTOM_PRESET, DRIVER_WATTAGE_PRESETS, POWER_PRESETS
from app.core.driver_calculator import compute_for_config
from app.core.share import format_share_text
from app.core.units import convert, is_valid_decimal, length_in_meters
from app.database.history_store import HistoryStore
from app.models.calculation import (
    CalculationResult,
    CalculationSnapshot,
    CustomerInfo,
    DriverConfig,
    HistoryEntry,
    LengthUnit,
    LengthValue,
    Voltage,
)

logger = logging.getLogger(__name__)

# Driver fields that take free numeric input
NUMERIC_DRIVER_FIELDS = ("power_per_meter", "safety_margin", "driver_wattage")


class SessionMode(Enum):
    IDLE = "idle"
    EDITING = "editing"


class CalculatorSession:
    """Active calculation plus the IDLE / EDITING state machine."""

    def __init__(self) -> None:
        self._customer = CustomerInfo()
        self._length = LengthValue()
        self._driver = DriverConfig()
        self._last_edited: LengthUnit | None = None
        self._mode = SessionMode.IDLE
        self._editing_entry_id: str | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def customer(self) -> CustomerInfo:
        return copy.copy(self._customer)

    @property
    def length(self) -> LengthValue:
        return copy.copy(self._length)

    @property
    def driver(self) -> DriverConfig:
        return copy.copy(self._driver)

    @property
    def last_edited_unit(self) -> LengthUnit | None:
        """Unit the user typed in last (display emphasis only)."""
        return self._last_edited

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def is_editing(self) -> bool:
        return self._mode is SessionMode.EDITING

    @property
    def editing_entry_id(self) -> str | None:
        return self._editing_entry_id

    @property
    def result(self) -> CalculationResult | None:
        """Driver plan for the current fields (recomputed on each access)."""
        return compute_for_config(length_in_meters(self._length), self._driver)

    def snapshot(self) -> CalculationSnapshot:
        return CalculationSnapshot(
            customer=self.customer,
            length=self.length,
            driver=self.driver,
            result=self.result,
        )

    def share_text(self) -> str:
        return format_share_text(self.snapshot())

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------

    def set_customer_name(self, name: str) -> None:
        self._customer.customer_name = name

    def set_area(self, area: str) -> None:
        self._customer.area = area

    def edit_length(self, unit: LengthUnit, raw: str) -> bool:
        """Apply an edit to one length field.

        Returns:
            False if the edit was rejected (fields unchanged).
        """
        converted = convert(unit, raw)
        if converted is None:
            return False
        self._length = converted
        self._last_edited = None if converted.is_empty else unit
        return True

    def edit_driver_field(self, field_name: str, raw: str) -> bool:
        """Apply an edit to a numeric driver field.

        Returns:
            False if the text is not a non-negative decimal (field unchanged).

        Raises:
            ValueError: If *field_name* is not a numeric driver field.
        """
        if field_name not in NUMERIC_DRIVER_FIELDS:
            raise ValueError(f"Unknown driver field: {field_name}")
        if not is_valid_decimal(raw):
            return False
        setattr(self._driver, field_name, raw)
        return True

    def select_power_preset(self, preset: str) -> None:
        """Select a W/m preset; "custom" keeps the typed value."""
        if preset not in POWER_PRESETS:
            raise ValueError(f"Unknown power preset: {preset}")
        self._driver.power_preset = preset
        if preset != CUSTOM_PRESET:
            self._driver.power_per_meter = preset

    def select_driver_wattage_preset(self, preset: str) -> None:
        """Select a driver rating preset; "custom" keeps the typed value."""
        if preset not in DRIVER_WATTAGE_PRESETS:
            raise ValueError(f"Unknown driver wattage preset: {preset}")
        self._driver.driver_wattage_preset = preset
        if preset != CUSTOM_PRESET:
            self._driver.driver_wattage = preset

    def set_voltage(self, voltage: Voltage | str) -> None:
        self._driver.voltage = Voltage(voltage)

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return every field to its initial value (mode unchanged)."""
        self._customer = CustomerInfo()
        self._length = LengthValue()
        self._driver = DriverConfig()
        self._last_edited = None

    def load_entry(self, entry: HistoryEntry) -> None:
        """Copy a saved entry into the form for viewing or sharing.

        The stored entry is not touched; later edits work on copies.
        """
        self._customer = CustomerInfo(entry.customer_name, entry.area)
        self._length = copy.copy(entry.length)
        self._driver = copy.copy(entry.driver)
        self._last_edited = None

    def start_edit(self, entry: HistoryEntry) -> None:
        self.load_entry(entry)
        self._mode = SessionMode.EDITING
        self._editing_entry_id = entry.id

    def _exit_edit(self) -> None:
        self._mode = SessionMode.IDLE
        self._editing_entry_id = None

    def cancel_edit(self) -> None:
        self._exit_edit()
        self.reset()

    def save_to_history(self, store: HistoryStore) -> HistoryEntry | None:
        """Create a history entry from the form, then reset the form.

        Returns:
            The saved entry, or None if there is no result (nothing changes).

        Raises:
            RuntimeError: If called while editing an existing entry.
        """
        if self.is_editing:
            raise RuntimeError("Use save_changes() while editing an entry")
        entry = store.add_entry(self.customer, self.length, self.driver, self.result)
        if entry is None:
            return None
        self.reset()
        return entry

    def save_changes(self, store: HistoryStore) -> HistoryEntry | None:
        """Write the form back to the entry being edited, then leave edit mode.

        Returns:
            The updated entry, or None if there is no result (still editing)
            or the entry no longer exists (edit mode is left).

        Raises:
            RuntimeError: If no entry is being edited.
        """
        if not self.is_editing:
            raise RuntimeError("No history entry is being edited")
        result = self.result
        if result is None:
            return None
        updated = store.update_entry(
            self._editing_entry_id, self.customer, self.length, self.driver, result,
        )
        if updated is None:
            logger.warning("Edited entry %s no longer exists", self._editing_entry_id)
        self._exit_edit()
        self.reset()
        return updated
