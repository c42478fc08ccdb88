"""Saved pay statement and line item models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pay_statements.models.base import Base, TimestampMixin


class PayStatementRow(Base, TimestampMixin):
    """A saved statement; ``payload`` holds the full record JSON."""

    __tablename__ = "pay_statement"

    pay_statement_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    contractor_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("contractor.contractor_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    payee_name: Mapped[str] = mapped_column(String, nullable=False)
    pay_period_id: Mapped[str] = mapped_column(String, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    adjustments_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'final')",
            name="pay_statement_status_check",
        ),
        CheckConstraint("period_end >= period_start", name="pay_statement_dates_check"),
    )

    # Relationships
    items: Mapped[list[PayStatementItemRow]] = relationship(
        back_populates="statement",
        cascade="all, delete-orphan",
        order_by="PayStatementItemRow.position",
    )


class PayStatementItemRow(Base):
    """One summary line of a saved statement."""

    __tablename__ = "pay_statement_item"

    pay_statement_item_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    pay_statement_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("pay_statement.pay_statement_id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    unit_type: Mapped[str] = mapped_column(String, nullable=False)
    rate_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    line_total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("unit_type IN ('visit', 'hour')", name="pay_statement_item_unit_check"),
    )

    statement: Mapped[PayStatementRow] = relationship(back_populates="items")
