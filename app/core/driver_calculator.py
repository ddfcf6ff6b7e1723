"""Driver sizing calculator — total load, safety margin, driver count.

Pure functions: identical inputs always give identical results, and every
call starts from the raw inputs (never from previously rounded output).
"""

from __future__ import annotations

import math

from app.models.calculation import CalculationResult, DriverConfig, Voltage

Number = float | int | str | None


def _parse_number(value: Number) -> float | None:
    """Coerce a form value or number to a finite float (None if unusable)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def compute_driver_plan(
    length_meters: Number,
    power_per_meter: Number,
    safety_margin_percent: Number,
    driver_wattage: Number,
    voltage: Voltage | str = Voltage.V24,
) -> CalculationResult | None:
    """Size the drivers for a strip run.

    Args:
        length_meters: Strip length [m].
        power_per_meter: Power density [W/m].
        safety_margin_percent: Over-provisioning [%].
        driver_wattage: Rating of a single driver [W].
        voltage: Supply voltage, reported back unchanged.

    Returns:
        CalculationResult, or None when any numeric input is missing,
        unparsable, non-finite or negative, or the driver wattage is not
        positive. Zero length yields driver_count 0 and efficiency None.
    """
    length = _parse_number(length_meters)
    density = _parse_number(power_per_meter)
    margin = _parse_number(safety_margin_percent)
    wattage = _parse_number(driver_wattage)
    if length is None or density is None or margin is None or wattage is None:
        return None
    if length < 0 or density < 0 or margin < 0 or wattage <= 0:
        return None

    total_power = length * density
    recommended_power = total_power * (1 + margin / 100)
    driver_count = math.ceil(recommended_power / wattage)

    efficiency: float | None = None
    if driver_count > 0:
        efficiency = recommended_power / (driver_count * wattage) * 100

    return CalculationResult(
        total_power=total_power,
        recommended_power=recommended_power,
        driver_count=driver_count,
        driver_power=wattage,
        voltage=Voltage(voltage),
        length_in_meters=length,
        efficiency=efficiency,
    )


def compute_for_config(
    length_meters: Number, config: DriverConfig,
) -> CalculationResult | None:
    """Convenience wrapper taking the driver form state as one object."""
    return compute_driver_plan(
        length_meters,
        config.power_per_meter,
        config.safety_margin,
        config.driver_wattage,
        config.voltage,
    )
