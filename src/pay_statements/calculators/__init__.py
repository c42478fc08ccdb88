"""Pay statement calculation core."""

from pay_statements.calculators.engine import DerivationEngine, derive
from pay_statements.calculators.line_builder import SummaryLineBuilder
from pay_statements.calculators.pay_periods import (
    PayPeriod,
    PayPeriodCalendar,
    generate_biweekly_periods,
)
from pay_statements.calculators.types import (
    DerivedSummary,
    LineMeta,
    PaymentDetailEntry,
    PayType,
    SummaryLineItem,
)

__all__ = [
    "DerivationEngine",
    "DerivedSummary",
    "LineMeta",
    "PayPeriod",
    "PayPeriodCalendar",
    "PayType",
    "PaymentDetailEntry",
    "SummaryLineBuilder",
    "SummaryLineItem",
    "derive",
    "generate_biweekly_periods",
]
