"""PDF calculation sheet — ReportLab single-page summary.

Sections: header, customer, strip length, driver configuration, results.
"""

from __future__ import annotations

from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.constants import APP_NAME, APP_VERSION
from app.models.calculation import CalculationSnapshot, LengthUnit


# Colors
_ACCENT = colors.HexColor("#F59E0B")
_HEADER_BG = colors.HexColor("#334155")
_GRID = colors.HexColor("#94A3B8")
_ROW_ALT = colors.HexColor("#F1F5F9")


class PdfReportExporter:
    """Calculation sheet generator."""

    def __init__(self):
        self._styles = getSampleStyleSheet()
        self._add_custom_styles()

    def _add_custom_styles(self) -> None:
        """Add custom paragraph styles."""
        self._styles.add(ParagraphStyle(
            name="SheetTitle",
            fontSize=20, leading=26,
            textColor=_ACCENT, spaceAfter=6,
        ))
        self._styles.add(ParagraphStyle(
            name="SheetSubtitle",
            fontSize=10, leading=14,
            textColor=colors.gray, spaceAfter=10,
        ))
        self._styles.add(ParagraphStyle(
            name="SectionTitle",
            fontSize=13, leading=17,
            textColor=_HEADER_BG, spaceAfter=6, spaceBefore=10,
        ))

    def generate_report(
        self,
        snapshot: CalculationSnapshot,
        output_path: str = "calculation.pdf",
    ) -> None:
        """Build and save the calculation sheet.

        Args:
            snapshot: Calculation to print (history entry or active form).
            output_path: File path for output PDF.

        Raises:
            ValueError: If the snapshot has no result.
        """
        if snapshot.result is None:
            raise ValueError("Nothing to report: calculation has no result")

        doc = SimpleDocTemplate(
            output_path,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"{APP_NAME} — Calculation",
        )

        story: list = [
            Paragraph(APP_NAME, self._styles["SheetTitle"]),
            Paragraph(
                f"Driver sizing sheet — {datetime.now().strftime('%Y-%m-%d %H:%M')}",
                self._styles["SheetSubtitle"],
            ),
        ]
        story.extend(self._build_customer(snapshot))
        story.extend(self._build_length(snapshot))
        story.extend(self._build_driver(snapshot))
        story.extend(self._build_results(snapshot))

        doc.build(story, onFirstPage=self._add_footer, onLaterPages=self._add_footer)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _build_customer(self, snapshot: CalculationSnapshot) -> list:
        customer = snapshot.customer
        if not customer.customer_name and not customer.area:
            return []
        data = [["Customer", "Area"],
                [customer.customer_name, customer.area]]
        return self._section("Customer", data, [80 * mm, 90 * mm])

    def _build_length(self, snapshot: CalculationSnapshot) -> list:
        data = [["Unit", "Length"]]
        for unit in LengthUnit:
            value = snapshot.length.get(unit)
            if value:
                data.append([unit.label, f"{value} {unit.value}"])
        return self._section("Strip Length", data, [80 * mm, 90 * mm])

    def _build_driver(self, snapshot: CalculationSnapshot) -> list:
        driver = snapshot.driver
        data = [
            ["Parameter", "Value"],
            ["Power Consumption", f"{driver.power_per_meter} W/m"],
            ["Driver Wattage", f"{driver.driver_wattage} W"],
            ["Voltage", driver.voltage.value],
            ["Safety Margin", f"{driver.safety_margin} %"],
        ]
        return self._section("Driver Configuration", data, [80 * mm, 90 * mm])

    def _build_results(self, snapshot: CalculationSnapshot) -> list:
        result = snapshot.result
        efficiency = result.display_efficiency()
        if result.efficiency is not None:
            efficiency += " %"
        data = [
            ["Result", "Value"],
            ["Length", f"{result.display_length()} m"],
            ["Total Power", f"{result.display_total_power()} W"],
            ["Recommended Power", f"{result.display_recommended_power()} W"],
            ["Drivers", f"{result.driver_count} x {result.display_driver_power()} W "
                        f"({result.voltage.value})"],
            ["Efficiency", efficiency],
        ]
        return self._section("Calculation Results", data, [80 * mm, 90 * mm])

    def _section(self, title: str, data: list[list[str]], widths: list) -> list:
        table = Table(data, colWidths=widths)
        table.setStyle(self._table_style())
        return [
            Paragraph(title, self._styles["SectionTitle"]),
            table,
            Spacer(1, 4 * mm),
        ]

    # ------------------------------------------------------------------
    # Styling
    # ------------------------------------------------------------------

    def _table_style(self) -> TableStyle:
        """Standard table style for the sheet."""
        return TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTSIZE", (0, 0), (-1, 0), 10),
            ("FONTSIZE", (0, 1), (-1, -1), 9),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, _GRID),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, _ROW_ALT]),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ])

    @staticmethod
    def _add_footer(canvas, doc) -> None:
        """Add footer with page number and app info."""
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.gray)
        canvas.drawRightString(A4[0] - 20 * mm, 10 * mm, f"Page {doc.page}")
        canvas.drawString(20 * mm, 10 * mm, f"{APP_NAME} v{APP_VERSION}")
        canvas.restoreState()
