"""Calculation data models — length, driver configuration, results, history.

Form-facing values (lengths, driver fields) are kept as the raw decimal
strings the user typed; results are held at full float precision and only
rounded when formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from app.constants import (
    CUSTOM_PRESET,
    DEFAULT_DRIVER_WATTAGE,
    DEFAULT_POWER_PER_METER,
    DEFAULT_SAFETY_MARGIN,
    DEFAULT_VOLTAGE,
    DRIVER_WATTAGE_PRESETS,
    POWER_PRESETS,
)


class LengthUnit(Enum):
    FEET = "ft"
    INCHES = "in"
    CENTIMETERS = "cm"
    METERS = "m"

    @property
    def to_meters_factor(self) -> float:
        """Multiplier converting one unit of this length to meters."""
        return _METERS_PER_UNIT[self]

    @property
    def label(self) -> str:
        return _UNIT_LABELS[self]


_METERS_PER_UNIT: dict[LengthUnit, float] = {
    LengthUnit.FEET: 0.3048,
    LengthUnit.INCHES: 0.0254,
    LengthUnit.CENTIMETERS: 0.01,
    LengthUnit.METERS: 1.0,
}

_UNIT_LABELS: dict[LengthUnit, str] = {
    LengthUnit.FEET: "Feet (ft)",
    LengthUnit.INCHES: "Inches (in)",
    LengthUnit.CENTIMETERS: "Centimeters (cm)",
    LengthUnit.METERS: "Meters (m)",
}


class Voltage(Enum):
    V12 = "12V"
    V24 = "24V"


@dataclass
class LengthValue:
    """One physical length shown in all four units.

    All fields hold formatted decimal strings for the same length, or are
    all empty.
    """
    ft: str = ""
    inches: str = ""
    cm: str = ""
    m: str = ""

    def get(self, unit: LengthUnit) -> str:
        return getattr(self, _FIELD_BY_UNIT[unit])

    def as_dict(self) -> dict[str, str]:
        """Unit symbol → value, in display order (ft, in, cm, m)."""
        return {unit.value: self.get(unit) for unit in LengthUnit}

    @property
    def is_empty(self) -> bool:
        return not any((self.ft, self.inches, self.cm, self.m))

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> LengthValue:
        """Build from a unit-symbol mapping (missing units → empty)."""
        return cls(
            ft=str(data.get("ft") or ""),
            inches=str(data.get("in") or ""),
            cm=str(data.get("cm") or ""),
            m=str(data.get("m") or ""),
        )


_FIELD_BY_UNIT: dict[LengthUnit, str] = {
    LengthUnit.FEET: "ft",
    LengthUnit.INCHES: "inches",
    LengthUnit.CENTIMETERS: "cm",
    LengthUnit.METERS: "m",
}


@dataclass
class DriverConfig:
    """Driver form state.

    Attributes:
        power_per_meter: Strip power density [W/m], raw decimal text.
        safety_margin: Over-provisioning [%], raw decimal text.
        driver_wattage: Single driver rating [W], raw decimal text.
        voltage: Strip supply voltage.
        power_preset: Selected key of POWER_PRESETS (or "custom").
        driver_wattage_preset: Selected key of DRIVER_WATTAGE_PRESETS.
    """
    power_per_meter: str = DEFAULT_POWER_PER_METER
    safety_margin: str = DEFAULT_SAFETY_MARGIN
    driver_wattage: str = DEFAULT_DRIVER_WATTAGE
    voltage: Voltage = Voltage(DEFAULT_VOLTAGE)
    power_preset: str = DEFAULT_POWER_PER_METER
    driver_wattage_preset: str = DEFAULT_DRIVER_WATTAGE

    def __post_init__(self) -> None:
        if self.power_preset not in POWER_PRESETS:
            self.power_preset = CUSTOM_PRESET
        if self.driver_wattage_preset not in DRIVER_WATTAGE_PRESETS:
            self.driver_wattage_preset = CUSTOM_PRESET


@dataclass
class CalculationResult:
    """Driver sizing result at full precision.

    Attributes:
        total_power: Strip load [W].
        recommended_power: Load including safety margin [W].
        driver_count: Number of drivers required (0 for zero load).
        driver_power: Rating of each driver [W].
        voltage: Supply voltage carried through from the inputs.
        length_in_meters: Strip length [m].
        efficiency: Load / provisioned capacity [%]; None when no driver
            is required and the ratio is undefined.
    """
    total_power: float = 0.0
    recommended_power: float = 0.0
    driver_count: int = 0
    driver_power: float = 0.0
    voltage: Voltage = Voltage.V24
    length_in_meters: float = 0.0
    efficiency: float | None = None

    @property
    def total_capacity(self) -> float:
        """Provisioned driver capacity [W]."""
        return self.driver_count * self.driver_power

    def display_total_power(self) -> str:
        return f"{self.total_power:.1f}"

    def display_recommended_power(self) -> str:
        return f"{self.recommended_power:.1f}"

    def display_driver_power(self) -> str:
        return f"{self.driver_power:.0f}"

    def display_length(self) -> str:
        return f"{self.length_in_meters:.2f}"

    def display_efficiency(self) -> str:
        """One-decimal efficiency, or "n/a" when indeterminate."""
        if self.efficiency is None:
            return "n/a"
        return f"{self.efficiency:.1f}"


@dataclass
class CustomerInfo:
    customer_name: str = ""
    area: str = ""


@dataclass
class CalculationSnapshot:
    """Read-only view of one calculation (history entry or active form)."""
    customer: CustomerInfo = field(default_factory=CustomerInfo)
    length: LengthValue = field(default_factory=LengthValue)
    driver: DriverConfig = field(default_factory=DriverConfig)
    result: CalculationResult | None = None


@dataclass
class HistoryEntry:
    """Saved calculation.

    ``id`` and ``timestamp`` never change after creation; edits only
    replace the content and set ``last_modified``.
    """
    id: str = ""
    timestamp: str = ""
    last_modified: str | None = None
    customer_name: str = ""
    area: str = ""
    length: LengthValue = field(default_factory=LengthValue)
    driver: DriverConfig = field(default_factory=DriverConfig)
    result: CalculationResult = field(default_factory=CalculationResult)

    @property
    def customer(self) -> CustomerInfo:
        return CustomerInfo(customer_name=self.customer_name, area=self.area)

    def snapshot(self) -> CalculationSnapshot:
        return CalculationSnapshot(
            customer=self.customer,
            length=self.length,
            driver=self.driver,
            result=self.result,
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on customer name or area."""
        needle = term.lower()
        return needle in self.customer_name.lower() or needle in self.area.lower()
