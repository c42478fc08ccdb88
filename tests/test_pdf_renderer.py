"""Tests for ReportLab statement rendering."""

from decimal import Decimal

import pytest

from pay_statements.calculators.types import PaymentDetailEntry
from pay_statements.providers.base import LayoutPreset
from pay_statements.providers.pdf_renderer import (
    ReportLabStatementRenderer,
    _address_lines,
    format_quantity,
    format_usd,
)
from pay_statements.services.types import Address, Payee


@pytest.fixture
def renderer(calendar):
    return ReportLabStatementRenderer(calendar)


@pytest.fixture
def record(assembler, entries):
    return assembler.assemble(
        company=None,
        payee=Payee(name="Maria Lopez", address=Address(city="Seattle", state="WA")),
        period="pp-001",
        method="Direct Deposit",
        entries=entries,
        notes="Thanks for covering the lobby.",
    )


class TestFormatting:
    """Test currency and quantity formatting."""

    def test_format_usd(self):
        assert format_usd(Decimal("1234.5")) == "$1,234.50"
        assert format_usd(Decimal("0")) == "$0.00"
        assert format_usd(Decimal("-12")) == "-$12.00"
        assert format_usd(Decimal("0.005")) == "$0.01"

    def test_format_quantity(self):
        assert format_quantity(Decimal("4")) == "4"
        assert format_quantity(Decimal("2.50"), "hrs") == "2.5 hrs"
        assert format_quantity(Decimal("0")) == "0"
        assert format_quantity(Decimal("10")) == "10"

    def test_address_lines(self):
        address = Address(
            street="1400 112th Ave Se", suite="Suite 100", city="Bellevue", state="WA", zip_code="98004"
        )
        assert _address_lines(address) == ["1400 112th Ave Se, Suite 100", "Bellevue, WA 98004"]
        assert _address_lines(Address()) == []


class TestReportLabStatementRenderer:
    """Test PDF output."""

    @pytest.mark.parametrize("preset", list(LayoutPreset))
    def test_renders_pdf(self, renderer, record, preset):
        content = renderer.render(record, preset)

        assert content.startswith(b"%PDF")
        assert len(content) > 1000

    def test_accepts_preset_value(self, renderer, record):
        assert renderer.render(record, "bpv1").startswith(b"%PDF")

    def test_unknown_period_renders(self, renderer, record):
        """Missing periods print as N/A instead of failing."""
        assert renderer.render(record.evolve(pay_period_id="pp-999")).startswith(b"%PDF")

    def test_markup_in_text_is_escaped(self, renderer, assembler):
        record = assembler.assemble(
            company=None,
            payee=Payee(name="Smith & <Sons>"),
            period="pp-001",
            method="Check",
            entries=[PaymentDetailEntry("R&D <Lab>", Decimal("10"))],
        )
        assert renderer.render(record).startswith(b"%PDF")

    def test_empty_statement(self, renderer, assembler):
        record = assembler.assemble(None, Payee(name="Blank"), "pp-001", "Cash", [])
        assert renderer.render(record, LayoutPreset.BPV1).startswith(b"%PDF")

    def test_media_type(self, renderer):
        assert renderer.media_type == "application/pdf"
