"""Pay statements command line interface.

Provides offline tools for:
- Listing pay periods
- Deriving a summary from payment details
- Exporting a statement to PDF
- Running the API server

Usage:
    pay-statements periods --available --today 2025-09-10
    pay-statements derive statement.json
    pay-statements export statement.json --output statement.pdf --preset bpv1
    pay-statements serve
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable

from pay_statements.calculators.engine import DerivationEngine
from pay_statements.calculators.pay_periods import PayPeriodCalendar
from pay_statements.calculators.types import PaymentDetailEntry
from pay_statements.config import Settings, get_settings
from pay_statements.errors import PayStatementError
from pay_statements.providers.base import LayoutPreset
from pay_statements.providers.pdf_renderer import (
    ReportLabStatementRenderer,
    format_quantity,
    format_usd,
)
from pay_statements.services.statement_service import StatementAssembler
from pay_statements.services.types import CompanyInfo, PayStatementRecord


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO date: {s!r}") from e


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class PayStatementsCli:
    """Pay statements command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self.parser = self._build_parser()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="pay-statements",
            description="Contractor pay statement tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # periods command
        periods = subparsers.add_parser(
            "periods",
            help="List biweekly pay periods",
        )
        periods.add_argument(
            "--available",
            action="store_true",
            help="Only periods still open for statements",
        )
        periods.add_argument(
            "--today",
            type=parse_date,
            help="Reference date (default: today)",
        )
        periods.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Output format",
        )

        # derive command
        derive = subparsers.add_parser(
            "derive",
            help="Derive summary lines and total from payment details",
        )
        derive.add_argument(
            "file",
            help="JSON file with a payment_details list or a full statement",
        )
        derive.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Output format",
        )

        # export command
        export = subparsers.add_parser(
            "export",
            help="Render a saved statement JSON file to PDF",
        )
        export.add_argument("file", help="Statement JSON file")
        export.add_argument(
            "--output",
            required=True,
            help="Output PDF path",
        )
        export.add_argument(
            "--preset",
            choices=[p.value for p in LayoutPreset],
            default=LayoutPreset.CURRENT.value,
            help="Layout preset",
        )

        # serve command
        serve = subparsers.add_parser(
            "serve",
            help="Run the HTTP API",
        )
        serve.add_argument("--host", help="Bind host (default: $HOST)")
        serve.add_argument("--port", type=int, help="Bind port (default: $PORT)")
        serve.add_argument("--reload", action="store_true", help="Reload on code changes")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[..., int]] = {
            "periods": self._cmd_periods,
            "derive": self._cmd_derive,
            "export": self._cmd_export,
            "serve": self._cmd_serve,
        }
        handler = handlers[parsed.command]
        try:
            return handler(parsed)
        except PayStatementError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error: cannot read input: {e}", file=sys.stderr)
            return 1

    def _calendar(self) -> PayPeriodCalendar:
        return PayPeriodCalendar.from_settings(self.settings)

    def _cmd_periods(self, args: argparse.Namespace) -> int:
        """List pay periods."""
        calendar = self._calendar()
        today = args.today or date.today()
        periods = calendar.available_periods(today) if args.available else calendar.periods
        default = calendar.default_period(today)

        if args.format == "json":
            print(json.dumps([p.to_dict() for p in periods], indent=2))
            return 0

        for period in periods:
            marker = "*" if default is not None and period.id == default.id else " "
            print(f"{marker} {period.id}  {period.label}")
        return 0

    def _cmd_derive(self, args: argparse.Namespace) -> int:
        """Derive the summary for a file of payment details."""
        data = load_json(args.file)
        entries = [PaymentDetailEntry.from_dict(d) for d in data.get("payment_details") or []]
        derived = DerivationEngine().derive(entries)

        if args.format == "json":
            print(
                json.dumps(
                    {
                        "summary": [item.to_dict() for item in derived.items],
                        "total": str(derived.total),
                    },
                    indent=2,
                )
            )
            return 0

        for item in derived.items:
            print(
                f"{item.description:<40} {format_usd(item.rate):>12} "
                f"{format_quantity(item.quantity, item.qty_suffix):>10} {format_usd(item.total):>12}"
            )
        print("-" * 77)
        print(f"{'Total Payment':<64} {format_usd(derived.total):>12}")
        return 0

    def _cmd_export(self, args: argparse.Namespace) -> int:
        """Render a statement file to PDF."""
        calendar = self._calendar()
        assembler = StatementAssembler(calendar, CompanyInfo.from_settings(self.settings))
        record = assembler.validate_for_export(
            PayStatementRecord.from_dict(load_json(args.file))
        )

        content = ReportLabStatementRenderer(calendar).render(record, LayoutPreset(args.preset))
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(content)
        print(f"Wrote {output} ({len(content)} bytes)")
        return 0

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the API with uvicorn."""
        import uvicorn

        uvicorn.run(
            "pay_statements.api.app:app",
            host=args.host or self.settings.host,
            port=args.port or self.settings.port,
            reload=args.reload or self.settings.debug,
            log_level=self.settings.log_level.lower(),
        )
        return 0


def main() -> int:
    """CLI entry point."""
    try:
        settings = get_settings()
    except PayStatementError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli = PayStatementsCli(settings)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
