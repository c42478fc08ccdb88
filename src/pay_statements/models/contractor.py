"""Contractor directory model."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import JSON, Boolean, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pay_statements.models.base import Base, TimestampMixin


class ContractorRow(Base, TimestampMixin):
    """Contractor with nested address, payment info and buildings as JSON."""

    __tablename__ = "contractor"

    contractor_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    payment_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    buildings: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    date_added: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    drive_folder_id: Mapped[str | None] = mapped_column(String, nullable=True)
