"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pay_statements.calculators.types import PaymentDetailEntry, PayType
from pay_statements.providers.base import LayoutPreset
from pay_statements.services.types import (
    Address,
    CompanyInfo,
    Payee,
    PaymentMethod,
    PayStatementRecord,
)


# ============================================================================
# Shared blocks
# ============================================================================


class AddressSchema(BaseModel):
    """Postal address."""

    model_config = ConfigDict(from_attributes=True)

    street: str | None = None
    suite: str | None = None
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def to_address(self) -> Address:
        return Address.from_dict(self.model_dump())


class CompanyInfoSchema(BaseModel):
    """Company identity block."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    address: AddressSchema = Field(default_factory=AddressSchema)
    phone: str = ""

    def to_company(self) -> CompanyInfo:
        return CompanyInfo(name=self.name, address=self.address.to_address(), phone=self.phone)


class PayeeSchema(BaseModel):
    """Payee identity block."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    address: AddressSchema = Field(default_factory=AddressSchema)
    contractor_id: str | None = None

    def to_payee(self) -> Payee:
        return Payee(
            name=self.name,
            address=self.address.to_address(),
            contractor_id=self.contractor_id,
        )


class ErrorResponse(BaseModel):
    """Error payload."""

    detail: str
    code: str


# ============================================================================
# Pay period schemas
# ============================================================================


class PayPeriodResponse(BaseModel):
    """A biweekly pay period."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    start_date: date
    end_date: date
    label: str


class PayPeriodListResponse(BaseModel):
    items: list[PayPeriodResponse]
    total: int


# ============================================================================
# Line item schemas
# ============================================================================


class LineMetaSchema(BaseModel):
    """Pay type and quantity for a payment detail line."""

    pay_type: PayType = PayType.PER_VISIT
    quantity: Decimal | None = None


class PaymentDetailSchema(BaseModel):
    """A raw payment detail line."""

    description: str = ""
    amount: Decimal | None = Decimal("0")
    meta: LineMetaSchema | str | None = None

    def to_entry(self) -> PaymentDetailEntry:
        return PaymentDetailEntry.from_dict(self.model_dump(mode="json"))


class SummaryItemSchema(BaseModel):
    """A derived summary line."""

    model_config = ConfigDict(from_attributes=True)

    description: str
    rate: Decimal
    quantity: Decimal
    qty_suffix: str | None = None
    total: Decimal


class DeriveRequest(BaseModel):
    payment_details: list[PaymentDetailSchema]


class DeriveResponse(BaseModel):
    summary: list[SummaryItemSchema]
    total: Decimal


# ============================================================================
# Statement schemas
# ============================================================================


class PaymentSchema(BaseModel):
    pay_period_id: str
    method: str = PaymentMethod.DIRECT_DEPOSIT.value


class PayStatementSchema(BaseModel):
    """Full statement record as persisted and exchanged."""

    company: CompanyInfoSchema
    payee: PayeeSchema
    payment: PaymentSchema
    payment_details: list[PaymentDetailSchema] = Field(default_factory=list)
    summary: list[SummaryItemSchema] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    notes: str | None = None

    def to_record(self) -> PayStatementRecord:
        return PayStatementRecord.from_dict(self.model_dump(mode="json"))

    @classmethod
    def from_record(cls, record: PayStatementRecord) -> "PayStatementSchema":
        return cls.model_validate(record.to_dict())


class SeedRequest(BaseModel):
    """Start a statement from a contractor; period defaults to today's."""

    contractor_id: str
    pay_period_id: str | None = None


class AssembleRequest(BaseModel):
    company: CompanyInfoSchema | None = None
    payee: PayeeSchema
    pay_period_id: str
    payment_method: str = PaymentMethod.DIRECT_DEPOSIT.value
    payment_details: list[PaymentDetailSchema]
    notes: str | None = None


class SaveRequest(BaseModel):
    name: str = Field(min_length=1)
    statement: PayStatementSchema


class SaveResponse(BaseModel):
    key: str


class SavedStatementResponse(BaseModel):
    """Listing row for a saved statement."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    saved_at: datetime
    date_iso: str
    contractor_id: str | None = None
    pay_period_id: str | None = None
    total: Decimal | None = None


class SavedStatementListResponse(BaseModel):
    items: list[SavedStatementResponse]
    total: int


class ExportRequest(BaseModel):
    statement: PayStatementSchema
    preset: LayoutPreset = LayoutPreset.CURRENT


class UploadRequest(BaseModel):
    statement: PayStatementSchema
    preset: LayoutPreset = LayoutPreset.CURRENT
    filename: str | None = None
    contractor_name: str | None = None
    allow_create: bool = True


class UploadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    folder_id: str
    web_view_link: str | None = None
    web_content_link: str | None = None


# ============================================================================
# Contractor schemas
# ============================================================================


class BuildingAssignmentSchema(BaseModel):
    building_name: str
    pay_type: PayType = PayType.PER_VISIT
    pay_per_visit: Decimal = Decimal("0")
    hourly_rate: Decimal | None = None
    is_active: bool = True


class PaymentInfoSchema(BaseModel):
    method: PaymentMethod = PaymentMethod.DIRECT_DEPOSIT
    account_last_four: str = Field(default="", max_length=4)


class ContractorCreate(BaseModel):
    """Schema for creating a contractor."""

    name: str = Field(min_length=1)
    address: AddressSchema = Field(default_factory=AddressSchema)
    payment_info: PaymentInfoSchema = Field(default_factory=PaymentInfoSchema)
    buildings: list[BuildingAssignmentSchema] = Field(default_factory=list)
    is_active: bool = True
    notes: str | None = None
    drive_folder_id: str | None = None


class ContractorUpdate(BaseModel):
    """Partial contractor update; only provided fields change."""

    name: str | None = Field(default=None, min_length=1)
    address: AddressSchema | None = None
    payment_info: PaymentInfoSchema | None = None
    buildings: list[BuildingAssignmentSchema] | None = None
    is_active: bool | None = None
    notes: str | None = None
    drive_folder_id: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ContractorResponse(BaseModel):
    id: str
    name: str
    address: AddressSchema
    payment_info: PaymentInfoSchema
    buildings: list[BuildingAssignmentSchema]
    is_active: bool
    date_added: date | None = None
    notes: str | None = None
    drive_folder_id: str | None = None


class ContractorListResponse(BaseModel):
    items: list[ContractorResponse]
    total: int
