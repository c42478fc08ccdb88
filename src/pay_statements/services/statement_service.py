"""Statement assembly: seeding, derivation and the editing lifecycle."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING

from pay_statements.calculators.engine import DerivationEngine
from pay_statements.calculators.pay_periods import PayPeriod, PayPeriodCalendar
from pay_statements.calculators.types import LineMeta, PaymentDetailEntry
from pay_statements.errors import CollaboratorError, ValidationError
from pay_statements.services.state_machine import StatementStateMachine, StatementStatus
from pay_statements.services.types import (
    CompanyInfo,
    Contractor,
    Payee,
    PaymentMethod,
    PayStatementRecord,
)

if TYPE_CHECKING:
    from pay_statements.services.statement_store import StatementStore

logger = logging.getLogger(__name__)

PLACEHOLDER_ENTRY = PaymentDetailEntry(description="", amount=Decimal("0"))


class StatementAssembler:
    """Builds internally consistent PayStatementRecords.

    Every record leaving the assembler has been run through the
    derivation engine; callers never patch ``summary`` or ``total``.
    """

    def __init__(
        self,
        calendar: PayPeriodCalendar,
        company: CompanyInfo,
        engine: DerivationEngine | None = None,
    ):
        self.calendar = calendar
        self.company = company
        self.engine = engine or DerivationEngine()

    def resolve_period(self, period: PayPeriod | str | None) -> PayPeriod:
        """Resolve a period or id against the calendar."""
        period_id = period.id if isinstance(period, PayPeriod) else period
        resolved = self.calendar.lookup_by_id(period_id)
        if resolved is None:
            raise ValidationError(
                f"Unknown pay period: {period_id or '(none)'}", field="pay_period_id"
            )
        return resolved

    def seed_entries(self, contractor: Contractor) -> list[PaymentDetailEntry]:
        """One entry per active building, or a single blank placeholder."""
        entries = [
            PaymentDetailEntry(
                description=building.building_name,
                amount=building.rate,
                meta=LineMeta(pay_type=building.pay_type, quantity=Decimal("0")),
            )
            for building in contractor.active_buildings
        ]
        return entries or [PLACEHOLDER_ENTRY]

    def seed_from_contractor(
        self, contractor: Contractor, period: PayPeriod | str
    ) -> PayStatementRecord:
        """Start a statement from a contractor's building assignments."""
        resolved = self.resolve_period(period)
        entries = self.seed_entries(contractor)
        logger.debug(
            "Seeded %d entries for contractor %s in %s",
            len(entries),
            contractor.id,
            resolved.id,
        )
        return self.assemble(
            company=self.company,
            payee=Payee(
                name=contractor.name,
                address=contractor.address,
                contractor_id=contractor.id,
            ),
            period=resolved,
            method=contractor.payment_info.method.value,
            entries=entries,
        )

    def assemble(
        self,
        company: CompanyInfo | None,
        payee: Payee,
        period: PayPeriod | str,
        method: str | PaymentMethod,
        entries: Sequence[PaymentDetailEntry],
        notes: str | None = None,
    ) -> PayStatementRecord:
        """Derive the summary for ``entries`` and return the full record."""
        resolved = self.resolve_period(period)
        derived = self.engine.derive(entries)
        return PayStatementRecord(
            company=company or self.company,
            payee=payee,
            pay_period_id=resolved.id,
            payment_method=method.value if isinstance(method, PaymentMethod) else method,
            payment_details=list(entries),
            summary=derived.items,
            total=derived.total,
            notes=notes,
        )

    def rederive(self, record: PayStatementRecord) -> PayStatementRecord:
        """Recompute summary and total from the record's own entries."""
        derived = self.engine.derive(record.payment_details)
        return record.evolve(summary=derived.items, total=derived.total)

    def with_entries(
        self, record: PayStatementRecord, entries: Sequence[PaymentDetailEntry]
    ) -> PayStatementRecord:
        return self.rederive(record.evolve(payment_details=list(entries)))

    def with_notes(self, record: PayStatementRecord, notes: str | None) -> PayStatementRecord:
        return self.rederive(record.evolve(notes=notes or None))

    def validate_for_save(self, record: PayStatementRecord) -> PayStatementRecord:
        """Check required fields and return a freshly derived record."""
        if not record.payee.name.strip():
            raise ValidationError("Payee name is required", field="payee.name")
        self.resolve_period(record.pay_period_id)
        return self.rederive(record)

    def validate_for_export(self, record: PayStatementRecord) -> PayStatementRecord:
        """Refuse records whose period does not resolve; return a derived copy."""
        self.resolve_period(record.pay_period_id)
        return self.rederive(record)

    def export_title(self, record: PayStatementRecord) -> str:
        period = self.calendar.lookup_by_id(record.pay_period_id)
        label = period.label if period else "Pay Period"
        return f"{record.payee.name} - {label}"

    def export_filename(self, record: PayStatementRecord) -> str:
        """Filesystem-safe PDF name from payee and period label."""
        safe = re.sub(r"[^A-Za-z0-9]+", "_", self.export_title(record)).strip("_")
        return f"{safe or 'pay_statement'}.pdf"


class StatementDraft:
    """An in-progress statement moving through the lifecycle.

    Each edit re-derives the record. Saving hands the record to a store;
    edits after a save produce a new version on the next save.
    """

    def __init__(self, assembler: StatementAssembler):
        self.assembler = assembler
        self.status: str = StatementStatus.EMPTY
        self.record: PayStatementRecord | None = None
        self.saved_keys: list[str] = []

    def _transition(self, to_status: StatementStatus) -> None:
        StatementStateMachine.validate_transition(self.status, to_status)
        self.status = to_status

    def _require_record(self) -> PayStatementRecord:
        if self.record is None:
            raise ValidationError("No statement to work on")
        return self.record

    def seed(self, contractor: Contractor, period: PayPeriod | str) -> PayStatementRecord:
        record = self.assembler.seed_from_contractor(contractor, period)
        self._transition(StatementStatus.SEEDED)
        self.record = record
        return record

    def start_blank(self, payee: Payee, period: PayPeriod | str, method: str) -> PayStatementRecord:
        record = self.assembler.assemble(None, payee, period, method, [PLACEHOLDER_ENTRY])
        self._transition(StatementStatus.EDITING)
        self.record = record
        return record

    def edit_entries(self, entries: Sequence[PaymentDetailEntry]) -> PayStatementRecord:
        record = self.assembler.with_entries(self._require_record(), entries)
        self._transition(StatementStatus.EDITING)
        self.record = record
        return record

    def edit(self, **changes) -> PayStatementRecord:
        """Change header fields (payee, period, method, notes) and re-derive."""
        current = self._require_record()
        if "pay_period_id" in changes:
            changes["pay_period_id"] = self.assembler.resolve_period(changes["pay_period_id"]).id
        record = self.assembler.rederive(current.evolve(**changes))
        self._transition(StatementStatus.EDITING)
        self.record = record
        return record

    def preview(self) -> PayStatementRecord:
        record = self._require_record()
        self._transition(StatementStatus.PREVIEWING)
        return record

    async def save(self, store: StatementStore, name: str) -> str:
        StatementStateMachine.validate_transition(self.status, StatementStatus.SAVED)
        record = self.assembler.validate_for_save(self._require_record())
        key = await store.save(name, record)
        if not key:
            raise CollaboratorError("statement store", "save did not return a key")
        self.record = record
        self._transition(StatementStatus.SAVED)
        self.saved_keys.append(key)
        return key

    def discard(self) -> None:
        self._transition(StatementStatus.DISCARDED)
        self.record = None
