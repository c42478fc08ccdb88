"""Saved statement persistence backends.

The store receives finished records from the assembler and never
touches their derivation.
"""

from __future__ import annotations

import json
import logging
import re
import time
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Protocol
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from pay_statements.calculators.line_builder import SummaryLineBuilder
from pay_statements.calculators.pay_periods import PayPeriodCalendar
from pay_statements.errors import CollaboratorError, NotFoundError, ValidationError
from pay_statements.models import ContractorRow, PayStatementItemRow, PayStatementRow
from pay_statements.services.types import (
    PayStatementRecord,
    SavedStatementSummary,
    StatementFilter,
)

logger = logging.getLogger(__name__)

KEY_PREFIX = "payStatement"
LIST_LIMIT = 200


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer cents (half-up)."""
    return int(SummaryLineBuilder.round_to_cents(amount) * 100)


class StatementStore(Protocol):
    """Statement persistence used by the API and StatementDraft."""

    async def save(self, name: str, record: PayStatementRecord) -> str | None:
        """Persist a record and return its key."""
        ...

    async def load(self, key: str) -> PayStatementRecord | None:
        ...

    async def list(self, filter: StatementFilter | None = None) -> list[SavedStatementSummary]:
        """Saved statements, newest first."""
        ...

    async def delete(self, key: str) -> None:
        ...


class LocalStatementStore:
    """One JSON file per statement under ``root``.

    Keys look like ``payStatement_<name>_<epoch-ms>``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    @staticmethod
    def make_key(name: str, timestamp_ms: int) -> str:
        safe_name = re.sub(r"[\\/:\s]+", "-", name.strip()) or "Untitled"
        return f"{KEY_PREFIX}_{safe_name}_{timestamp_ms}"

    @staticmethod
    def parse_key(key: str) -> tuple[str, int] | None:
        parts = key.split("_")
        if len(parts) < 3 or parts[0] != KEY_PREFIX or not parts[-1].isdigit():
            return None
        return "_".join(parts[1:-1]), int(parts[-1])

    def _path(self, key: str) -> Path | None:
        if self.parse_key(key) is None:
            return None
        return self.root / f"{key}.json"

    async def save(self, name: str, record: PayStatementRecord) -> str | None:
        timestamp_ms = int(time.time() * 1000)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            key = self.make_key(name, timestamp_ms)
            while (self.root / f"{key}.json").exists():
                timestamp_ms += 1
                key = self.make_key(name, timestamp_ms)
            (self.root / f"{key}.json").write_text(
                json.dumps(record.to_dict(), indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.exception("Failed to save statement %s", name)
            raise CollaboratorError("statement store", str(e)) from e
        logger.info("Saved statement %s", key)
        return key

    async def load(self, key: str) -> PayStatementRecord | None:
        path = self._path(key)
        if path is None or not path.exists():
            return None
        try:
            return PayStatementRecord.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, KeyError) as e:
            raise CollaboratorError("statement store", f"cannot read {key}: {e}") from e

    async def list(self, filter: StatementFilter | None = None) -> list[SavedStatementSummary]:
        if not self.root.exists():
            return []

        summaries: list[SavedStatementSummary] = []
        for path in self.root.glob(f"{KEY_PREFIX}_*.json"):
            key = path.stem
            parsed = self.parse_key(key)
            if parsed is None:
                continue
            try:
                record = await self.load(key)
            except CollaboratorError as e:
                logger.warning("Skipping unreadable statement %s: %s", key, e)
                continue
            if record is None:
                continue
            name, timestamp_ms = parsed
            saved_at = datetime.fromtimestamp(timestamp_ms / 1000)
            summaries.append(
                SavedStatementSummary(
                    key=key,
                    name=name or "Untitled",
                    saved_at=saved_at,
                    date_iso=saved_at.date().isoformat(),
                    contractor_id=record.payee.contractor_id,
                    pay_period_id=record.pay_period_id,
                    total=record.total,
                )
            )

        summaries.sort(key=lambda s: s.saved_at, reverse=True)
        if filter is not None:
            summaries = [s for s in summaries if filter.matches(s)]
        return summaries

    async def delete(self, key: str) -> None:
        path = self._path(key)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CollaboratorError("statement store", str(e)) from e


class SqlStatementStore:
    """Statements stored in ``pay_statement`` / ``pay_statement_item``."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        calendar: PayPeriodCalendar,
    ):
        self.session_factory = session_factory
        self.calendar = calendar

    @staticmethod
    def _parse_key(key: str) -> UUID | None:
        try:
            return UUID(key)
        except ValueError:
            return None

    async def _resolve_contractor_id(
        self, session: AsyncSession, record: PayStatementRecord
    ) -> str:
        payee = record.payee
        if payee.contractor_id:
            row = await session.get(ContractorRow, payee.contractor_id)
            if row is not None:
                return row.contractor_id
        result = await session.execute(
            select(ContractorRow.contractor_id).where(ContractorRow.name == payee.name).limit(1)
        )
        contractor_id = result.scalar_one_or_none()
        if contractor_id is None:
            raise NotFoundError("Contractor", payee.name)
        return contractor_id

    async def save(self, name: str, record: PayStatementRecord) -> str | None:
        period = self.calendar.lookup_by_id(record.pay_period_id)
        if period is None:
            raise ValidationError("Invalid pay period selected", field="pay_period_id")

        subtotal = sum((item.total for item in record.summary), Decimal("0"))
        try:
            async with self.session_factory() as session:
                contractor_id = await self._resolve_contractor_id(session, record)
                row = PayStatementRow(
                    contractor_id=contractor_id,
                    name=name,
                    payee_name=record.payee.name,
                    pay_period_id=period.id,
                    period_start=period.start_date,
                    period_end=period.end_date,
                    status="draft",
                    subtotal_cents=to_cents(subtotal),
                    adjustments_cents=0,
                    total_cents=to_cents(record.total),
                    notes=record.notes or name,
                    payload=record.to_dict(),
                )
                row.items = [
                    PayStatementItemRow(
                        position=position,
                        description=item.description,
                        unit_type="hour" if item.qty_suffix == SummaryLineBuilder.HOURLY_UNIT else "visit",
                        rate_cents=to_cents(item.rate),
                        quantity=item.quantity,
                        line_total_cents=to_cents(item.total),
                    )
                    for position, item in enumerate(record.summary)
                ]
                session.add(row)
                await session.commit()
                key = str(row.pay_statement_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to save statement %s", name)
            raise CollaboratorError("statement store", str(e)) from e

        logger.info("Saved statement %s for %s", key, record.payee.name)
        return key

    async def load(self, key: str) -> PayStatementRecord | None:
        statement_id = self._parse_key(key)
        if statement_id is None:
            return None
        try:
            async with self.session_factory() as session:
                row = await session.get(PayStatementRow, statement_id)
                if row is None:
                    return None
                return PayStatementRecord.from_dict(row.payload)
        except SQLAlchemyError as e:
            raise CollaboratorError("statement store", str(e)) from e

    async def list(self, filter: StatementFilter | None = None) -> list[SavedStatementSummary]:
        query = select(PayStatementRow).options(selectinload(PayStatementRow.items))
        if filter is not None and filter.contractor_id:
            query = query.where(PayStatementRow.contractor_id == filter.contractor_id)
        query = query.order_by(PayStatementRow.created_at.desc()).limit(LIST_LIMIT)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise CollaboratorError("statement store", str(e)) from e

        summaries = [
            SavedStatementSummary(
                key=str(row.pay_statement_id),
                name=row.name or row.notes or "Pay Statement",
                saved_at=row.created_at,
                date_iso=_as_utc(row.created_at).date().isoformat(),
                contractor_id=row.contractor_id,
                pay_period_id=row.pay_period_id,
                total=Decimal(row.total_cents) / 100,
            )
            for row in rows
        ]
        if filter is not None:
            summaries = [s for s in summaries if filter.matches(s)]
        return summaries

    async def delete(self, key: str) -> None:
        statement_id = self._parse_key(key)
        if statement_id is None:
            return
        try:
            async with self.session_factory() as session:
                await session.execute(
                    delete(PayStatementItemRow).where(
                        PayStatementItemRow.pay_statement_id == statement_id
                    )
                )
                await session.execute(
                    delete(PayStatementRow).where(PayStatementRow.pay_statement_id == statement_id)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError("statement store", str(e)) from e


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
