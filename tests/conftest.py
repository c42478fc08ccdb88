"""Pytest fixtures for pay statement tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pay_statements.calculators.pay_periods import PayPeriodCalendar
from pay_statements.calculators.types import LineMeta, PaymentDetailEntry, PayType
from pay_statements.config import Settings
from pay_statements.database import make_session_factory
from pay_statements.models import Base
from pay_statements.services.statement_service import StatementAssembler
from pay_statements.services.types import (
    Address,
    BuildingAssignment,
    CompanyInfo,
    Contractor,
    PaymentInfo,
    PaymentMethod,
)

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ANCHOR = date(2025, 8, 18)
HORIZON = date(2025, 12, 31)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing local storage at a temp directory."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        data_backend="local",
        data_dir=str(tmp_path / "data"),
        pay_period_anchor=ANCHOR,
        pay_period_horizon=HORIZON,
        pay_period_grace_days=9,
        company_name="ELEMENT CLEANING SYSTEMS LLC",
        company_street="1400 112th Ave Se",
        company_suite="Suite 100",
        company_city="Bellevue",
        company_state="WA",
        company_zip="98004",
        company_phone="425-591-9427",
        upload_backend="local",
        drive_parent_folder_id=None,
        drive_drive_id=None,
        drive_access_token=None,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
    )


@pytest.fixture
def database_settings(settings) -> Settings:
    return replace(settings, data_backend="database")


@pytest.fixture
def calendar() -> PayPeriodCalendar:
    return PayPeriodCalendar(ANCHOR, HORIZON, grace_days=9)


@pytest.fixture
def company(settings) -> CompanyInfo:
    return CompanyInfo.from_settings(settings)


@pytest.fixture
def assembler(calendar, company) -> StatementAssembler:
    return StatementAssembler(calendar, company)


@pytest.fixture
def contractor() -> Contractor:
    """Contractor with two active buildings and one inactive."""
    return Contractor(
        id="contractor-abc123",
        name="Maria Lopez",
        address=Address(street="55 Pine St", city="Seattle", state="WA", zip_code="98101"),
        payment_info=PaymentInfo(method=PaymentMethod.CHECK, account_last_four="4321"),
        buildings=[
            BuildingAssignment(building_name="Building A", pay_per_visit=Decimal("85.00")),
            BuildingAssignment(
                building_name="Office",
                pay_type=PayType.HOURLY,
                hourly_rate=Decimal("20.00"),
            ),
            BuildingAssignment(
                building_name="Old Site",
                pay_per_visit=Decimal("40.00"),
                is_active=False,
            ),
        ],
        date_added=date(2025, 8, 1),
    )


@pytest.fixture
def entries() -> list[PaymentDetailEntry]:
    return [
        PaymentDetailEntry(
            description="Building A",
            amount=Decimal("85.00"),
            meta=LineMeta(PayType.PER_VISIT, Decimal("4")),
        ),
        PaymentDetailEntry(
            description="Office",
            amount=Decimal("20.00"),
            meta=LineMeta(PayType.HOURLY, Decimal("2.5")),
        ),
    ]


@pytest_asyncio.fixture
async def engine():
    """Create test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()
