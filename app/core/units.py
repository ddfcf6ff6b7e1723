"""Unit conversion module — strip length conversions between ft, in, cm, m.

CRITICAL: All length conversions MUST go through this module.

Internal (core) unit:
    Length : m

UI units:
    Length : ft, in, cm, m (all four shown side by side)
"""

from __future__ import annotations

import re

from app.constants import LENGTH_DISPLAY_DECIMALS
from app.models.calculation import LengthUnit, LengthValue

# Non-negative decimal: digits with at most one decimal point (or empty)
_DECIMAL_PATTERN = re.compile(r"[0-9]*\.?[0-9]*")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def is_valid_decimal(raw: str) -> bool:
    """True if *raw* is empty or a non-negative decimal literal.

    Partial input such as ``"12."`` or ``"."`` is accepted here so the user
    can keep typing; parsing decides whether it is a usable number.
    """
    return _DECIMAL_PATTERN.fullmatch(raw) is not None


def parse_length(raw: str) -> float | None:
    """Parse a form value into a non-negative float.

    Returns:
        The parsed value, or None if *raw* is empty, fails the decimal
        pattern, or does not parse (e.g. a lone ``"."``).
    """
    if not raw or not is_valid_decimal(raw):
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value < 0:
        return None
    return value


# ---------------------------------------------------------------------------
# Length conversions
# ---------------------------------------------------------------------------

def to_meters(value: float, unit: LengthUnit) -> float:
    """UI unit → Core (m)."""
    return value * unit.to_meters_factor


def from_meters(meters: float, unit: LengthUnit) -> float:
    """Core (m) → UI unit."""
    return meters / unit.to_meters_factor


def format_length(value: float) -> str:
    """Round to 6 decimals, then drop trailing zeros and a bare point.

    ``1.0`` → ``"1"``, ``1.2345`` → ``"1.2345"``, ``6.5616798`` → ``"6.56168"``.
    """
    text = f"{value:.{LENGTH_DISPLAY_DECIMALS}f}"
    text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


def convert(edited_unit: LengthUnit, raw_value: str) -> LengthValue | None:
    """Recompute all four length fields from one edited field.

    Args:
        edited_unit: The unit whose field the user edited.
        raw_value: Raw text of that field.

    Returns:
        An all-empty LengthValue for empty input, the synchronized
        LengthValue for a valid number, or None when the edit must be
        rejected (caller keeps its previous state).
    """
    if raw_value == "":
        return LengthValue()
    value = parse_length(raw_value)
    if value is None:
        return None
    meters = to_meters(value, edited_unit)
    return LengthValue.from_dict({
        unit.value: format_length(from_meters(meters, unit))
        for unit in LengthUnit
    })


def length_in_meters(length: LengthValue) -> float | None:
    """Canonical meters value of a LengthValue (None when empty)."""
    return parse_length(length.m)
