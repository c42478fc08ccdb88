"""Tests for saved statement stores."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select

from pay_statements.errors import CollaboratorError, NotFoundError, ValidationError
from pay_statements.models import PayStatementItemRow, PayStatementRow
from pay_statements.services.contractor_directory import SqlContractorDirectory
from pay_statements.services.statement_store import (
    LocalStatementStore,
    SqlStatementStore,
    to_cents,
)
from pay_statements.services.types import Payee, StatementFilter


@pytest.fixture
def record(assembler, entries, contractor):
    return assembler.assemble(
        company=None,
        payee=Payee(name=contractor.name, contractor_id=contractor.id),
        period="pp-002",
        method="Check",
        entries=entries,
        notes="September visits",
    )


def test_to_cents():
    assert to_cents(Decimal("340.00")) == 34000
    assert to_cents(Decimal("12.345")) == 1235
    assert to_cents(Decimal("-15.5")) == -1550


class TestLocalStatementStore:
    """Test the JSON file store."""

    def test_make_and_parse_key(self):
        key = LocalStatementStore.make_key("Maria / Sept: wk 1", 1757000000000)

        assert key == "payStatement_Maria-Sept-wk-1_1757000000000"
        assert LocalStatementStore.parse_key(key) == ("Maria-Sept-wk-1", 1757000000000)

    def test_parse_key_keeps_underscores_in_name(self):
        assert LocalStatementStore.parse_key("payStatement_a_b_123") == ("a_b", 123)

    @pytest.mark.parametrize("key", ["", "other_x_1", "payStatement_x", "payStatement_x_abc"])
    def test_parse_key_rejects_foreign_keys(self, key):
        assert LocalStatementStore.parse_key(key) is None

    async def test_save_and_load(self, tmp_path, record):
        store = LocalStatementStore(tmp_path)

        key = await store.save("Maria", record)

        assert key.startswith("payStatement_Maria_")
        assert (tmp_path / f"{key}.json").exists()
        assert await store.load(key) == record

    async def test_load_missing_returns_none(self, tmp_path):
        store = LocalStatementStore(tmp_path)
        assert await store.load("payStatement_nobody_1") is None
        assert await store.load("../../etc/passwd") is None

    async def test_list_newest_first(self, tmp_path, record):
        store = LocalStatementStore(tmp_path)
        first = await store.save("First", record)
        second = await store.save("Second", record)

        summaries = await store.list()

        assert [s.key for s in summaries[:2]] in ([second, first], [first, second])
        assert summaries[0].saved_at >= summaries[1].saved_at
        assert {s.name for s in summaries} == {"First", "Second"}
        assert summaries[0].total == Decimal("390.00")
        assert summaries[0].pay_period_id == "pp-002"
        assert summaries[0].date_iso == date.today().isoformat()

    async def test_list_filters(self, tmp_path, record):
        store = LocalStatementStore(tmp_path)
        await store.save("Maria", record)
        other = record.evolve(payee=Payee(name="Dana", contractor_id="contractor-other"))
        await store.save("Dana", other)

        by_contractor = await store.list(StatementFilter(contractor_id="contractor-abc123"))
        assert [s.name for s in by_contractor] == ["Maria"]

        tomorrow = date.today() + timedelta(days=1)
        assert await store.list(StatementFilter(date_from=tomorrow)) == []
        assert len(await store.list(StatementFilter(date_to=tomorrow))) == 2

    async def test_list_skips_unreadable_files(self, tmp_path, record):
        store = LocalStatementStore(tmp_path)
        key = await store.save("Maria", record)
        (tmp_path / "payStatement_bad_1700000000000.json").write_text("{not json", encoding="utf-8")

        summaries = await store.list()

        assert [s.key for s in summaries] == [key]
        with pytest.raises(CollaboratorError):
            await store.load("payStatement_bad_1700000000000")

    async def test_list_empty_root(self, tmp_path):
        assert await LocalStatementStore(tmp_path / "missing").list() == []

    async def test_delete(self, tmp_path, record):
        store = LocalStatementStore(tmp_path)
        key = await store.save("Maria", record)

        await store.delete(key)
        await store.delete(key)

        assert await store.load(key) is None


class TestSqlStatementStore:
    """Test the table-backed store."""

    @pytest_asyncio.fixture
    async def contractor_id(self, session_factory, contractor):
        directory = SqlContractorDirectory(session_factory)
        added = await directory.add(contractor.to_dict())
        return added.id

    async def test_save_writes_rows(self, session_factory, calendar, record, contractor_id):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez", contractor_id=contractor_id))

        key = await store.save("Maria September", record)

        async with session_factory() as session:
            row = (await session.execute(select(PayStatementRow))).scalar_one()
            items = (
                await session.execute(
                    select(PayStatementItemRow).order_by(PayStatementItemRow.position)
                )
            ).scalars().all()

        assert str(row.pay_statement_id) == key
        assert row.contractor_id == contractor_id
        assert row.pay_period_id == "pp-002"
        assert row.period_start == date(2025, 9, 1)
        assert row.period_end == date(2025, 9, 14)
        assert row.status == "draft"
        assert row.total_cents == 39000
        assert row.subtotal_cents == 39000
        assert [i.unit_type for i in items] == ["visit", "hour"]
        assert [i.rate_cents for i in items] == [8500, 2000]
        assert [i.line_total_cents for i in items] == [34000, 5000]

    async def test_save_resolves_contractor_by_name(
        self, session_factory, calendar, record, contractor_id
    ):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez"))

        key = await store.save("Maria", record)

        summaries = await store.list()
        assert summaries[0].key == key
        assert summaries[0].contractor_id == contractor_id

    async def test_save_unknown_contractor_raises(self, session_factory, calendar, record):
        store = SqlStatementStore(session_factory, calendar)

        with pytest.raises(NotFoundError):
            await store.save("Ghost", record.evolve(payee=Payee(name="Ghost")))

    async def test_save_unknown_period_raises(
        self, session_factory, calendar, record, contractor_id
    ):
        store = SqlStatementStore(session_factory, calendar)

        with pytest.raises(ValidationError):
            await store.save("Maria", record.evolve(pay_period_id="pp-999"))

    async def test_load_round_trips_payload(
        self, session_factory, calendar, record, contractor_id
    ):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez", contractor_id=contractor_id))

        key = await store.save("Maria", record)

        assert await store.load(key) == record
        assert await store.load("not-a-uuid") is None

    async def test_list_and_filter(self, session_factory, calendar, record, contractor_id):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez", contractor_id=contractor_id))
        await store.save("One", record)
        await store.save("Two", record)

        summaries = await store.list()
        assert {s.name for s in summaries} == {"One", "Two"}
        assert all(s.total == Decimal("390") for s in summaries)

        assert len(await store.list(StatementFilter(contractor_id=contractor_id))) == 2
        assert await store.list(StatementFilter(contractor_id="contractor-other")) == []

    async def test_list_newest_first_within_same_second(
        self, session_factory, calendar, record, contractor_id
    ):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez", contractor_id=contractor_id))
        keys = [await store.save(f"Statement {i}", record) for i in range(5)]

        summaries = await store.list()

        assert [s.key for s in summaries] == list(reversed(keys))

    async def test_delete_removes_items(self, session_factory, calendar, record, contractor_id):
        store = SqlStatementStore(session_factory, calendar)
        record = record.evolve(payee=Payee(name="Maria Lopez", contractor_id=contractor_id))
        key = await store.save("Maria", record)

        await store.delete(key)

        assert await store.load(key) is None
        async with session_factory() as session:
            remaining = (await session.execute(select(PayStatementItemRow))).scalars().all()
        assert remaining == []
