"""Serialization utilities — dataclass ↔ JSON-safe dict conversion.

Handles Enum fields and nested dataclasses. Used by HistoryStore and the
export modules. Lengths are stored under their unit symbols (``ft``, ``in``,
``cm``, ``m``) rather than the Python field names.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from app.models.calculation import (
    CalculationResult,
    DriverConfig,
    HistoryEntry,
    LengthValue,
    Voltage,
)


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if isinstance(val, LengthValue):
        return val.as_dict()
    if dataclasses.is_dataclass(val) and not isinstance(val, type):
        return _dataclass_to_dict(val)
    if isinstance(val, list):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


def _dataclass_to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a JSON-safe dict."""
    result = {}
    for f in dataclasses.fields(obj):
        val = getattr(obj, f.name)
        result[f.name] = _serialize_value(val)
    return result


# =====================================================================
# Result / config
# =====================================================================


def driver_config_to_dict(config: DriverConfig) -> dict:
    return _dataclass_to_dict(config)


def dict_to_driver_config(data: dict) -> DriverConfig:
    """Deserialize a driver config; missing keys fall back to form defaults."""
    defaults = DriverConfig()
    return DriverConfig(
        power_per_meter=str(data.get("power_per_meter", defaults.power_per_meter)),
        safety_margin=str(data.get("safety_margin", defaults.safety_margin)),
        driver_wattage=str(data.get("driver_wattage", defaults.driver_wattage)),
        voltage=Voltage(data.get("voltage", defaults.voltage.value)),
        power_preset=str(data.get("power_preset", defaults.power_preset)),
        driver_wattage_preset=str(
            data.get("driver_wattage_preset", defaults.driver_wattage_preset)
        ),
    )


def calculation_result_to_dict(result: CalculationResult) -> dict:
    return _dataclass_to_dict(result)


def dict_to_calculation_result(data: dict) -> CalculationResult:
    efficiency = data.get("efficiency")
    return CalculationResult(
        total_power=float(data["total_power"]),
        recommended_power=float(data["recommended_power"]),
        driver_count=int(data["driver_count"]),
        driver_power=float(data["driver_power"]),
        voltage=Voltage(data.get("voltage", Voltage.V24.value)),
        length_in_meters=float(data.get("length_in_meters", 0.0)),
        efficiency=float(efficiency) if efficiency is not None else None,
    )


# =====================================================================
# History entries
# =====================================================================


def history_entry_to_dict(entry: HistoryEntry) -> dict:
    """Serialize a HistoryEntry to a JSON-safe dict."""
    return _dataclass_to_dict(entry)


def dict_to_history_entry(data: dict) -> HistoryEntry:
    """Deserialize a HistoryEntry.

    Raises:
        KeyError, TypeError, ValueError: If required keys are missing or
            hold values of the wrong shape.
    """
    if not data.get("id"):
        raise ValueError("History entry without id")
    return HistoryEntry(
        id=str(data["id"]),
        timestamp=str(data.get("timestamp", "")),
        last_modified=data.get("last_modified"),
        customer_name=data.get("customer_name") or "",
        area=data.get("area") or "",
        length=LengthValue.from_dict(data.get("length") or {}),
        driver=dict_to_driver_config(data.get("driver") or {}),
        result=dict_to_calculation_result(data["result"]),
    )


def history_to_list(entries: list[HistoryEntry]) -> list[dict]:
    return [history_entry_to_dict(e) for e in entries]


def list_to_history(data: list) -> list[HistoryEntry]:
    """Deserialize a persisted history array.

    Raises:
        TypeError: If *data* is not a list.
        KeyError, ValueError: For malformed entries.
    """
    if not isinstance(data, list):
        raise TypeError(f"Expected history list, got {type(data).__name__}")
    return [dict_to_history_entry(d) for d in data]
