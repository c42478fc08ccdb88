"""PDF rendering of pay statements with ReportLab."""

from __future__ import annotations

import io
import logging
from decimal import Decimal
from html import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from pay_statements.calculators.line_builder import SummaryLineBuilder
from pay_statements.calculators.pay_periods import PayPeriodCalendar
from pay_statements.errors import CollaboratorError
from pay_statements.providers.base import LayoutPreset
from pay_statements.services.types import Address, PayStatementRecord

logger = logging.getLogger(__name__)

TEXT_COLOR = colors.HexColor("#474D53")
RULE_COLOR = colors.HexColor("#cccccc")
HEADER_FILL = colors.HexColor("#f2f2f2")


def format_usd(amount: Decimal) -> str:
    """Format as US dollars, e.g. ``$1,234.50`` or ``-$12.00``."""
    rounded = SummaryLineBuilder.round_to_cents(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_quantity(quantity: Decimal, suffix: str | None = None) -> str:
    text = f"{quantity.normalize():f}" if quantity != 0 else "0"
    return f"{text} {suffix}" if suffix else text


def _address_lines(address: Address) -> list[str]:
    street = ", ".join(part for part in (address.street, address.suite) if part)
    region = " ".join(part for part in (address.state, address.zip_code) if part)
    locality = ", ".join(part for part in (address.city, region) if part)
    return [line for line in (street, locality) if line]


class ReportLabStatementRenderer:
    """Draws a statement on a single Letter page.

    Presets:
    - current: payment details table followed by the summary
    - bpv1: summary by building (sorted by name), then itemized rates
    """

    media_type = "application/pdf"

    def __init__(self, calendar: PayPeriodCalendar):
        self.calendar = calendar
        styles = getSampleStyleSheet()
        self.styles = {
            "company": ParagraphStyle(
                "company", parent=styles["Heading1"], fontSize=16, textColor=TEXT_COLOR
            ),
            "title": ParagraphStyle(
                "title", parent=styles["Heading2"], fontSize=13, textColor=TEXT_COLOR
            ),
            "section": ParagraphStyle(
                "section", parent=styles["Heading3"], fontSize=11, textColor=TEXT_COLOR
            ),
            "body": ParagraphStyle(
                "body", parent=styles["BodyText"], fontSize=10, leading=14, textColor=TEXT_COLOR
            ),
        }

    def _para(self, text: str, style: str = "body") -> Paragraph:
        return Paragraph(escape(text), self.styles[style])

    def _table(self, rows: list[list[str]], widths: list[float], total_row: bool = False) -> Table:
        table = Table(rows, colWidths=widths, hAlign="LEFT")
        commands = [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("TEXTCOLOR", (0, 0), (-1, -1), TEXT_COLOR),
            ("LINEBELOW", (0, 0), (-1, -1), 0.25, RULE_COLOR),
            ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ]
        if total_row:
            commands.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))
        table.setStyle(TableStyle(commands))
        return table

    def _header(self, record: PayStatementRecord) -> list:
        period = self.calendar.lookup_by_id(record.pay_period_id)
        story: list = [self._para(record.company.name, "company")]
        for line in _address_lines(record.company.address):
            story.append(self._para(line))
        if record.company.phone:
            story.append(self._para(record.company.phone))
        story.append(Spacer(1, 12))
        story.append(self._para("Pay Statement", "title"))

        payee_lines = [record.payee.name, *_address_lines(record.payee.address)]
        payment_lines = [
            f"Pay period: {period.label if period else 'N/A'}",
            f"Method: {record.payment_method}",
        ]
        block = Table(
            [
                [self._para("Paid To", "section"), self._para("Payment", "section")],
                [
                    [self._para(line) for line in payee_lines],
                    [self._para(line) for line in payment_lines],
                ],
            ],
            colWidths=[3.5 * inch, 3.5 * inch],
            hAlign="LEFT",
        )
        block.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        story.extend([block, Spacer(1, 12)])
        return story

    def _current_tables(self, record: PayStatementRecord) -> list:
        details = [["Description", "Amount"]]
        for entry in record.payment_details:
            if (entry.description or "").strip():
                details.append([entry.description, format_usd(entry.amount or Decimal("0"))])

        summary = [["Description", "Pay Per Visit", "Number of Visits", "Total"]]
        for item in record.summary:
            summary.append(
                [
                    item.description,
                    format_usd(item.rate),
                    format_quantity(item.quantity, item.qty_suffix),
                    format_usd(item.total),
                ]
            )
        summary.append(["Total Payment", "", "", format_usd(record.total)])

        return [
            self._para("Payment Details", "section"),
            self._table(details, [5.0 * inch, 2.0 * inch]),
            Spacer(1, 12),
            self._para("Summary", "section"),
            self._table(summary, [3.1 * inch, 1.3 * inch, 1.3 * inch, 1.3 * inch], total_row=True),
        ]

    def _bpv1_tables(self, record: PayStatementRecord) -> list:
        items = sorted(record.summary, key=lambda item: item.description.casefold())

        by_building = [["Building", "Total"]]
        for item in items:
            by_building.append([item.description, format_usd(item.total)])
        by_building.append(["Total Payment", format_usd(record.total)])

        itemized = [["Description", "Rate", "Qty", "Total"]]
        for item in items:
            unit = " / hr" if item.qty_suffix == SummaryLineBuilder.HOURLY_UNIT else " / unit"
            itemized.append(
                [
                    item.description,
                    f"{format_usd(item.rate)}{unit}",
                    format_quantity(item.quantity, item.qty_suffix),
                    format_usd(item.total),
                ]
            )

        return [
            self._para("Summary by Building", "section"),
            self._table(by_building, [5.0 * inch, 2.0 * inch], total_row=True),
            Spacer(1, 12),
            self._para("Itemized Details", "section"),
            self._table(itemized, [3.1 * inch, 1.3 * inch, 1.3 * inch, 1.3 * inch]),
        ]

    def render(self, record: PayStatementRecord, preset: LayoutPreset = LayoutPreset.CURRENT) -> bytes:
        """Render the record to PDF bytes."""
        preset = LayoutPreset(preset)
        story = self._header(record)
        if preset == LayoutPreset.BPV1:
            story.extend(self._bpv1_tables(record))
        else:
            story.extend(self._current_tables(record))
        if record.notes:
            story.extend([Spacer(1, 12), self._para("Notes", "section"), self._para(record.notes)])

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=LETTER,
            leftMargin=0.9 * inch,
            rightMargin=0.9 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
            title=f"{record.payee.name} pay statement",
        )
        try:
            doc.build(story)
        except (LayoutError, ValueError) as e:
            logger.exception("PDF rendering failed for %s", record.payee.name)
            raise CollaboratorError("pdf renderer", str(e)) from e
        return buffer.getvalue()
