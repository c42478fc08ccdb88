"""Statement derivation engine."""

from __future__ import annotations

from collections.abc import Iterable

from pay_statements.calculators.line_builder import SummaryLineBuilder
from pay_statements.calculators.types import DerivedSummary, PaymentDetailEntry


class DerivationEngine:
    """Turns payment detail entries into the summary table and grand total.

    Pipeline (stable order):
    1) Drop entries with a blank description or a zero amount
    2) Parse pay type / quantity metadata with defaults
    3) Build one summary line per surviving entry, input order preserved
    4) Sum line totals, rounding to cents at the end

    The engine holds no state; summaries are always recomputed from the
    full entry list.
    """

    def __init__(self, builder: type[SummaryLineBuilder] = SummaryLineBuilder):
        self.builder = builder

    def derive(self, entries: Iterable[PaymentDetailEntry] | None) -> DerivedSummary:
        """Derive the summary for a list of entries."""
        items = [
            self.builder.create_summary_line(entry)
            for entry in (entries or [])
            if self.builder.qualifies(entry)
        ]
        return DerivedSummary(items=items, total=self.builder.calculate_total(items))


def derive(entries: Iterable[PaymentDetailEntry] | None) -> DerivedSummary:
    """Module-level shortcut using the default builder."""
    return DerivationEngine().derive(entries)
