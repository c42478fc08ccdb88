"""Type definitions for the statement derivation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class PayType(str, Enum):
    """Billing modes for a line."""

    PER_VISIT = "perVisit"
    HOURLY = "hourly"


@dataclass(frozen=True)
class LineMeta:
    """Pay type and quantity attached to a payment detail entry.

    ``quantity`` of None means "not entered"; the derivation engine
    treats that as 1. An explicit zero is kept.
    """

    pay_type: PayType = PayType.PER_VISIT
    quantity: Decimal | None = None

    @property
    def is_hourly(self) -> bool:
        return self.pay_type == PayType.HOURLY

    def to_dict(self) -> dict[str, Any]:
        return {
            "pay_type": self.pay_type.value,
            "quantity": str(self.quantity) if self.quantity is not None else None,
        }


@dataclass(frozen=True)
class PaymentDetailEntry:
    """A raw, user-entered line before computation.

    ``meta`` may be a LineMeta, a legacy ``type=hourly&qty=2`` string,
    or None.
    """

    description: str = ""
    amount: Decimal | None = Decimal("0")
    meta: LineMeta | str | None = None

    def to_dict(self) -> dict[str, Any]:
        meta: Any
        if isinstance(self.meta, LineMeta):
            meta = self.meta.to_dict()
        else:
            meta = self.meta
        return {
            "description": self.description,
            "amount": str(self.amount) if self.amount is not None else None,
            "meta": meta,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaymentDetailEntry:
        raw_meta = data.get("meta", data.get("notes"))
        meta: LineMeta | str | None
        if isinstance(raw_meta, dict):
            # Unknown pay types fall through to the parser's default
            pay_type = raw_meta.get("pay_type")
            quantity = raw_meta.get("quantity")
            meta = LineMeta(
                pay_type=PayType.HOURLY if pay_type == PayType.HOURLY.value else PayType.PER_VISIT,
                quantity=_to_decimal(quantity),
            )
        else:
            meta = raw_meta
        return cls(
            description=data.get("description") or "",
            amount=_to_decimal(data.get("amount")),
            meta=meta,
        )


@dataclass(frozen=True)
class SummaryLineItem:
    """A computed, display-ready line (rate x quantity = total)."""

    description: str
    rate: Decimal
    quantity: Decimal
    total: Decimal
    qty_suffix: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "rate": str(self.rate),
            "quantity": str(self.quantity),
            "qty_suffix": self.qty_suffix,
            "total": str(self.total),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SummaryLineItem:
        return cls(
            description=data["description"],
            rate=Decimal(str(data["rate"])),
            quantity=Decimal(str(data["quantity"])),
            total=Decimal(str(data["total"])),
            qty_suffix=data.get("qty_suffix"),
        )


@dataclass(frozen=True)
class DerivedSummary:
    """Output of a derivation run."""

    items: list[SummaryLineItem] = field(default_factory=list)
    total: Decimal = Decimal("0.00")


def _to_decimal(value: Any) -> Decimal | None:
    """Best-effort conversion used when reading stored data."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None
