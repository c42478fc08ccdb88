"""Records exchanged between statement assembly and its collaborators."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pay_statements.calculators.types import PaymentDetailEntry, PayType, SummaryLineItem


class PaymentMethod(str, Enum):
    """How a contractor is paid."""

    DIRECT_DEPOSIT = "Direct Deposit"
    CHECK = "Check"
    CASH = "Cash"
    WIRE_TRANSFER = "Wire Transfer"


@dataclass(frozen=True)
class Address:
    city: str = ""
    state: str = ""
    zip_code: str = ""
    street: str | None = None
    suite: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Address:
        data = data or {}
        return cls(
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip_code=data.get("zip_code") or data.get("zipCode") or "",
            street=data.get("street"),
            suite=data.get("suite"),
        )


@dataclass(frozen=True)
class CompanyInfo:
    name: str
    address: Address
    phone: str = ""

    @classmethod
    def from_settings(cls, settings: Any) -> CompanyInfo:
        return cls(
            name=settings.company_name,
            address=Address(
                street=settings.company_street,
                suite=settings.company_suite or None,
                city=settings.company_city,
                state=settings.company_state,
                zip_code=settings.company_zip,
            ),
            phone=settings.company_phone,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address.to_dict(), "phone": self.phone}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompanyInfo:
        return cls(
            name=data.get("name") or "",
            address=Address.from_dict(data.get("address")),
            phone=data.get("phone") or "",
        )


@dataclass(frozen=True)
class Payee:
    name: str
    address: Address = field(default_factory=Address)
    contractor_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address.to_dict(),
            "contractor_id": self.contractor_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Payee:
        return cls(
            name=data.get("name") or "",
            address=Address.from_dict(data.get("address")),
            contractor_id=data.get("contractor_id"),
        )


# ===== Contractors =====


@dataclass(frozen=True)
class PaymentInfo:
    method: PaymentMethod = PaymentMethod.DIRECT_DEPOSIT
    account_last_four: str = ""


@dataclass(frozen=True)
class BuildingAssignment:
    """A contractor's recurring relationship with one site."""

    building_name: str
    pay_per_visit: Decimal = Decimal("0")
    pay_type: PayType = PayType.PER_VISIT
    hourly_rate: Decimal | None = None
    is_active: bool = True

    @property
    def rate(self) -> Decimal:
        """Effective rate for the assignment's billing mode."""
        if self.pay_type == PayType.HOURLY:
            return self.hourly_rate or Decimal("0")
        return self.pay_per_visit or Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "building_name": self.building_name,
            "pay_type": self.pay_type.value,
            "pay_per_visit": str(self.pay_per_visit),
            "hourly_rate": str(self.hourly_rate) if self.hourly_rate is not None else None,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BuildingAssignment:
        hourly = data.get("hourly_rate", data.get("hourlyRate"))
        pay_type = data.get("pay_type", data.get("payType"))
        return cls(
            building_name=data.get("building_name") or data.get("buildingName") or "",
            pay_per_visit=Decimal(str(data.get("pay_per_visit", data.get("payPerVisit")) or "0")),
            pay_type=PayType.HOURLY if pay_type == PayType.HOURLY.value else PayType.PER_VISIT,
            hourly_rate=Decimal(str(hourly)) if hourly is not None else None,
            is_active=bool(data.get("is_active", data.get("isActive", True))),
        )


@dataclass(frozen=True)
class Contractor:
    id: str
    name: str
    address: Address = field(default_factory=Address)
    payment_info: PaymentInfo = field(default_factory=PaymentInfo)
    buildings: list[BuildingAssignment] = field(default_factory=list)
    is_active: bool = True
    date_added: date | None = None
    notes: str | None = None
    drive_folder_id: str | None = None

    @property
    def active_buildings(self) -> list[BuildingAssignment]:
        return [b for b in self.buildings if b.is_active]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address.to_dict(),
            "payment_info": {
                "method": self.payment_info.method.value,
                "account_last_four": self.payment_info.account_last_four,
            },
            "buildings": [b.to_dict() for b in self.buildings],
            "is_active": self.is_active,
            "date_added": self.date_added.isoformat() if self.date_added else None,
            "notes": self.notes,
            "drive_folder_id": self.drive_folder_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Contractor:
        payment = data.get("payment_info") or data.get("paymentInfo") or {}
        added = data.get("date_added") or data.get("dateAdded")
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            address=Address.from_dict(data.get("address")),
            payment_info=PaymentInfo(
                method=PaymentMethod(payment.get("method") or PaymentMethod.DIRECT_DEPOSIT.value),
                account_last_four=payment.get("account_last_four")
                or payment.get("accountLastFour")
                or "",
            ),
            buildings=[BuildingAssignment.from_dict(b) for b in data.get("buildings") or []],
            is_active=bool(data.get("is_active", data.get("isActive", True))),
            date_added=date.fromisoformat(added) if added else None,
            notes=data.get("notes"),
            drive_folder_id=data.get("drive_folder_id") or data.get("googleDriveFolderId"),
        )


# ===== Statements =====


@dataclass(frozen=True)
class PayStatementRecord:
    """The unit that gets rendered, exported and persisted.

    Built only through StatementAssembler so ``summary`` and ``total``
    always match ``payment_details``.
    """

    company: CompanyInfo
    payee: Payee
    pay_period_id: str
    payment_method: str
    payment_details: list[PaymentDetailEntry]
    summary: list[SummaryLineItem]
    total: Decimal
    notes: str | None = None

    def evolve(self, **changes: Any) -> PayStatementRecord:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company.to_dict(),
            "payee": self.payee.to_dict(),
            "payment": {"pay_period_id": self.pay_period_id, "method": self.payment_method},
            "payment_details": [d.to_dict() for d in self.payment_details],
            "summary": [s.to_dict() for s in self.summary],
            "total": str(self.total),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PayStatementRecord:
        payment = data.get("payment") or {}
        return cls(
            company=CompanyInfo.from_dict(data.get("company") or {}),
            payee=Payee.from_dict(data.get("payee") or {}),
            pay_period_id=payment.get("pay_period_id") or "",
            payment_method=payment.get("method") or PaymentMethod.DIRECT_DEPOSIT.value,
            payment_details=[
                PaymentDetailEntry.from_dict(d) for d in data.get("payment_details") or []
            ],
            summary=[SummaryLineItem.from_dict(s) for s in data.get("summary") or []],
            total=Decimal(str(data.get("total") or "0")),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class SavedStatementSummary:
    """Listing row for a persisted statement."""

    key: str
    name: str
    saved_at: datetime
    date_iso: str
    contractor_id: str | None = None
    pay_period_id: str | None = None
    total: Decimal | None = None


@dataclass(frozen=True)
class StatementFilter:
    """Listing filter; ISO date bounds are inclusive."""

    contractor_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None

    def matches(self, summary: SavedStatementSummary) -> bool:
        if self.contractor_id and summary.contractor_id != self.contractor_id:
            return False
        day = date.fromisoformat(summary.date_iso)
        if self.date_from and day < self.date_from:
            return False
        if self.date_to and day > self.date_to:
            return False
        return True
