"""Summary line builder with defaulted metadata parsing."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from urllib.parse import parse_qs, urlencode

from pay_statements.calculators.types import (
    LineMeta,
    PaymentDetailEntry,
    PayType,
    SummaryLineItem,
)


class SummaryLineBuilder:
    """Builds summary line items from payment detail entries.

    Defaults (applied in one place, never raise):
    - pay type: perVisit when absent or unrecognised
    - quantity: 1 when absent, non-finite or negative; explicit 0 is kept

    Rounding:
    - line totals are exact (rate x quantity)
    - grand total is rounded to cents once, after summing
    """

    DEFAULT_PAY_TYPE = PayType.PER_VISIT
    DEFAULT_QUANTITY = Decimal("1")
    OUTPUT_PRECISION = Decimal("0.01")

    HOURLY_SUFFIX = " (hourly)"
    HOURLY_UNIT = "hrs"

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(SummaryLineBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def normalize_quantity(value: object) -> Decimal:
        """Coerce a raw quantity, falling back to the default."""
        if value is None or isinstance(value, bool):
            return SummaryLineBuilder.DEFAULT_QUANTITY
        try:
            qty = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return SummaryLineBuilder.DEFAULT_QUANTITY
        if not qty.is_finite() or qty < 0:
            return SummaryLineBuilder.DEFAULT_QUANTITY
        return qty

    @staticmethod
    def parse_meta(meta: LineMeta | str | None) -> LineMeta:
        """Resolve entry metadata to a fully defaulted LineMeta.

        Accepts the tagged structure or the legacy query-string form
        (``type=hourly&qty=2.5``).
        """
        if meta is None:
            return LineMeta(SummaryLineBuilder.DEFAULT_PAY_TYPE, SummaryLineBuilder.DEFAULT_QUANTITY)

        if isinstance(meta, LineMeta):
            pay_type = meta.pay_type if isinstance(meta.pay_type, PayType) else None
            raw_qty: object = meta.quantity
        elif isinstance(meta, str):
            params = parse_qs(meta, keep_blank_values=True)
            raw_type = (params.get("type") or [""])[0]
            pay_type = PayType.HOURLY if raw_type == PayType.HOURLY.value else None
            raw_qty = (params.get("qty") or [None])[0]
            if raw_qty == "":
                raw_qty = None
        else:
            return LineMeta(SummaryLineBuilder.DEFAULT_PAY_TYPE, SummaryLineBuilder.DEFAULT_QUANTITY)

        return LineMeta(
            pay_type=pay_type or SummaryLineBuilder.DEFAULT_PAY_TYPE,
            quantity=SummaryLineBuilder.normalize_quantity(raw_qty),
        )

    @staticmethod
    def serialize_meta(meta: LineMeta) -> str:
        """Encode metadata in the legacy query-string form."""
        qty = meta.quantity if meta.quantity is not None else SummaryLineBuilder.DEFAULT_QUANTITY
        return urlencode({"type": meta.pay_type.value, "qty": str(qty)})

    @staticmethod
    def qualifies(entry: PaymentDetailEntry) -> bool:
        """An entry qualifies when it has a description and a non-zero amount.

        Quantity is never a filter criterion.
        """
        description = (entry.description or "").strip()
        if not description:
            return False
        amount = entry.amount
        if amount is None:
            return False
        try:
            amount = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
        except (InvalidOperation, ValueError):
            return False
        return amount.is_finite() and amount != 0

    @staticmethod
    def create_summary_line(entry: PaymentDetailEntry) -> SummaryLineItem:
        """Create the summary line for a qualifying entry."""
        meta = SummaryLineBuilder.parse_meta(entry.meta)
        rate = entry.amount if isinstance(entry.amount, Decimal) else Decimal(str(entry.amount))
        quantity = meta.quantity if meta.quantity is not None else SummaryLineBuilder.DEFAULT_QUANTITY

        description = entry.description or ""
        if meta.is_hourly:
            description = f"{description}{SummaryLineBuilder.HOURLY_SUFFIX}"

        return SummaryLineItem(
            description=description,
            rate=rate,
            quantity=quantity,
            total=rate * quantity,
            qty_suffix=SummaryLineBuilder.HOURLY_UNIT if meta.is_hourly else None,
        )

    @staticmethod
    def calculate_total(lines: list[SummaryLineItem]) -> Decimal:
        """Sum line totals and round the result to cents."""
        total = sum((line.total for line in lines), Decimal("0"))
        return SummaryLineBuilder.round_to_cents(total)
