"""FastAPI dependencies for dependency injection."""

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pay_statements.calculators.pay_periods import PayPeriodCalendar
from pay_statements.config import Settings, get_settings
from pay_statements.database import init_engine
from pay_statements.providers.base import StatementRenderer, UploadTarget
from pay_statements.providers.drive_upload import GoogleDriveUploader
from pay_statements.providers.local_upload import LocalFolderUploader
from pay_statements.providers.pdf_renderer import ReportLabStatementRenderer
from pay_statements.services.contractor_directory import (
    ContractorDirectory,
    InMemoryContractorDirectory,
    SqlContractorDirectory,
)
from pay_statements.services.statement_service import StatementAssembler
from pay_statements.services.statement_store import (
    LocalStatementStore,
    SqlStatementStore,
    StatementStore,
)
from pay_statements.services.types import CompanyInfo


def get_app_settings() -> Settings:
    return get_settings()


AppSettings = Annotated[Settings, Depends(get_app_settings)]


@lru_cache(maxsize=4)
def _build_calendar(settings: Settings) -> PayPeriodCalendar:
    return PayPeriodCalendar.from_settings(settings)


@lru_cache(maxsize=4)
def _local_directory(data_dir: str) -> InMemoryContractorDirectory:
    return InMemoryContractorDirectory(path=Path(data_dir) / "contractors.json")


def get_calendar(settings: AppSettings) -> PayPeriodCalendar:
    return _build_calendar(settings)


def get_today() -> date:
    """Reference date for period selection."""
    return date.today()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    _, factory = init_engine()
    return factory


Calendar = Annotated[PayPeriodCalendar, Depends(get_calendar)]
Today = Annotated[date, Depends(get_today)]


def get_assembler(settings: AppSettings, calendar: Calendar) -> StatementAssembler:
    return StatementAssembler(calendar, CompanyInfo.from_settings(settings))


def get_contractor_directory(settings: AppSettings) -> ContractorDirectory:
    """Directory backend selected by DATA_BACKEND."""
    if settings.data_backend == "database":
        return SqlContractorDirectory(get_session_factory())
    return _local_directory(settings.data_dir)


def get_statement_store(settings: AppSettings, calendar: Calendar) -> StatementStore:
    """Statement store backend selected by DATA_BACKEND."""
    if settings.data_backend == "database":
        return SqlStatementStore(get_session_factory(), calendar)
    return LocalStatementStore(Path(settings.data_dir) / "statements")


def get_renderer(calendar: Calendar) -> StatementRenderer:
    return ReportLabStatementRenderer(calendar)


async def get_uploader(
    settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
) -> UploadTarget:
    """Upload target selected by UPLOAD_BACKEND.

    For Drive, a bearer token on the request wins over DRIVE_ACCESS_TOKEN.
    """
    if settings.upload_backend == "drive":
        token = settings.drive_access_token
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:].strip() or token
        return GoogleDriveUploader(
            access_token=token,
            parent_folder_id=settings.drive_parent_folder_id,
            drive_id=settings.drive_drive_id,
        )
    return LocalFolderUploader(Path(settings.data_dir) / "uploads")


# Type aliases for cleaner dependency injection
Assembler = Annotated[StatementAssembler, Depends(get_assembler)]
Directory = Annotated[ContractorDirectory, Depends(get_contractor_directory)]
Store = Annotated[StatementStore, Depends(get_statement_store)]
Renderer = Annotated[StatementRenderer, Depends(get_renderer)]
Uploader = Annotated[UploadTarget, Depends(get_uploader)]
