"""Share text formatting — plain-text summary of one calculation.

The text uses WhatsApp ``*bold*`` markup and is handed to the desktop's
URL opener through a wa.me link.
"""

from __future__ import annotations

from urllib.parse import quote

from app.constants import SHARE_BASE_URL
from app.models.calculation import CalculationSnapshot, LengthUnit

# encodeURIComponent leaves these unescaped (plus alphanumerics and "-_.~")
_URI_COMPONENT_SAFE = "!*'()"


def format_share_text(snapshot: CalculationSnapshot) -> str:
    """Build the share message for a calculation.

    Returns:
        The multi-line message, or an empty string if the snapshot has no
        result.
    """
    result = snapshot.result
    if result is None:
        return ""

    customer = snapshot.customer
    driver = snapshot.driver
    lines: list[str] = []
    if customer.customer_name:
        lines.append(f"*Customer:* {customer.customer_name}")
    if customer.area:
        lines.append(f"*Area:* {customer.area}")
    lines.append("")

    lines.append("*Strip Length:*")
    for unit in LengthUnit:
        value = snapshot.length.get(unit)
        if value:
            lines.append(f"- {unit.label}: {value} {unit.value}")
    lines.append("")

    lines.append(f"*Power Consumption:* {driver.power_per_meter} W/m")
    lines.append(f"*Driver Wattage:* {driver.driver_wattage} W")
    lines.append(f"*Voltage:* {driver.voltage.value}")
    lines.append(f"*Safety Margin:* {driver.safety_margin}%")
    lines.append("")

    lines.append("*Calculation Results:*")
    lines.append(f"- Total Power: {result.display_total_power()} W")
    lines.append(f"- Recommended Power: {result.display_recommended_power()} W")
    lines.append(
        f"- Driver Count: {result.driver_count} x "
        f"{result.display_driver_power()}W ({result.voltage.value})"
    )
    efficiency = result.display_efficiency()
    lines.append(
        f"- Efficiency: {efficiency}%" if result.efficiency is not None
        else f"- Efficiency: {efficiency}"
    )
    return "\n".join(lines)


def build_share_url(text: str) -> str | None:
    """Percent-encode *text* into a wa.me share link (None for empty text)."""
    if not text:
        return None
    return SHARE_BASE_URL + quote(text, safe=_URI_COMPONENT_SAFE)
