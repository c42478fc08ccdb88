"""Contractor directory backends.

Both backends implement ContractorDirectory; the API picks one from
settings and injects it. Nothing holds a process-wide contractor list.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pay_statements.errors import CollaboratorError
from pay_statements.models import ContractorRow
from pay_statements.services.types import Contractor

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "address",
    "payment_info",
    "buildings",
    "is_active",
    "notes",
    "drive_folder_id",
)


def new_contractor_id() -> str:
    return f"contractor-{uuid4().hex[:12]}"


class ContractorDirectory(Protocol):
    """Contractor CRUD used by statement seeding and the API."""

    async def list_active(self) -> list[Contractor]:
        ...

    async def list_all(self) -> list[Contractor]:
        ...

    async def get_by_id(self, contractor_id: str) -> Contractor | None:
        ...

    async def get_by_name(self, name: str) -> Contractor | None:
        ...

    async def add(self, data: dict[str, Any]) -> Contractor:
        """Create a contractor from everything but ``id`` and ``date_added``."""
        ...

    async def update(self, contractor_id: str, changes: dict[str, Any]) -> bool:
        """Apply a partial update. Returns False for an unknown id."""
        ...

    async def deactivate(self, contractor_id: str) -> bool:
        ...


def _merge(contractor: Contractor, changes: dict[str, Any]) -> Contractor:
    data = contractor.to_dict()
    for key in UPDATABLE_FIELDS:
        if key in changes:
            data[key] = changes[key]
    return Contractor.from_dict(data)


class InMemoryContractorDirectory:
    """Dict-backed directory, optionally mirrored to a JSON file."""

    def __init__(self, contractors: list[Contractor] | None = None, path: Path | None = None):
        self.path = path
        self._contractors: dict[str, Contractor] = {}
        if contractors:
            self._contractors = {c.id: c for c in contractors}
        elif path is not None and path.exists():
            self._contractors = {c.id: c for c in self._read()}

    def _read(self) -> list[Contractor]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CollaboratorError("contractor directory", f"cannot read {self.path}: {e}") from e
        return [Contractor.from_dict(item) for item in raw.get("contractors", [])]

    def _write(self) -> None:
        if self.path is None:
            return
        payload = {
            "contractors": [c.to_dict() for c in self._contractors.values()],
            "last_updated": date.today().isoformat(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise CollaboratorError("contractor directory", f"cannot write {self.path}: {e}") from e

    async def list_active(self) -> list[Contractor]:
        return [c for c in self._contractors.values() if c.is_active]

    async def list_all(self) -> list[Contractor]:
        return list(self._contractors.values())

    async def get_by_id(self, contractor_id: str) -> Contractor | None:
        return self._contractors.get(contractor_id)

    async def get_by_name(self, name: str) -> Contractor | None:
        needle = name.strip().lower()
        if not needle:
            return None
        for contractor in self._contractors.values():
            if contractor.name.lower() == needle:
                return contractor
        return None

    async def add(self, data: dict[str, Any]) -> Contractor:
        contractor = Contractor.from_dict(
            {**data, "id": new_contractor_id(), "date_added": date.today().isoformat()}
        )
        self._contractors[contractor.id] = contractor
        self._write()
        return contractor

    async def update(self, contractor_id: str, changes: dict[str, Any]) -> bool:
        current = self._contractors.get(contractor_id)
        if current is None:
            return False
        self._contractors[contractor_id] = _merge(current, changes)
        self._write()
        return True

    async def deactivate(self, contractor_id: str) -> bool:
        return await self.update(contractor_id, {"is_active": False})


def _from_row(row: ContractorRow) -> Contractor:
    return Contractor.from_dict(
        {
            "id": row.contractor_id,
            "name": row.name,
            "address": row.address,
            "payment_info": row.payment_info,
            "buildings": row.buildings,
            "is_active": row.is_active,
            "date_added": row.date_added.isoformat() if row.date_added else None,
            "notes": row.notes,
            "drive_folder_id": row.drive_folder_id,
        }
    )


def _apply(row: ContractorRow, contractor: Contractor) -> None:
    data = contractor.to_dict()
    row.name = contractor.name
    row.address = data["address"]
    row.payment_info = data["payment_info"]
    row.buildings = data["buildings"]
    row.is_active = contractor.is_active
    row.notes = contractor.notes
    row.drive_folder_id = contractor.drive_folder_id


class SqlContractorDirectory:
    """Directory stored in the ``contractor`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _fetch(self, query) -> list[Contractor]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return [_from_row(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception("Contractor query failed")
            raise CollaboratorError("contractor directory", str(e)) from e

    async def list_active(self) -> list[Contractor]:
        return await self._fetch(
            select(ContractorRow).where(ContractorRow.is_active.is_(True)).order_by(ContractorRow.name)
        )

    async def list_all(self) -> list[Contractor]:
        return await self._fetch(select(ContractorRow).order_by(ContractorRow.name))

    async def get_by_id(self, contractor_id: str) -> Contractor | None:
        found = await self._fetch(
            select(ContractorRow).where(ContractorRow.contractor_id == contractor_id)
        )
        return found[0] if found else None

    async def get_by_name(self, name: str) -> Contractor | None:
        found = await self._fetch(
            select(ContractorRow)
            .where(func.lower(ContractorRow.name) == name.strip().lower())
            .limit(1)
        )
        return found[0] if found else None

    async def add(self, data: dict[str, Any]) -> Contractor:
        contractor = Contractor.from_dict(
            {**data, "id": new_contractor_id(), "date_added": date.today().isoformat()}
        )
        row = ContractorRow(contractor_id=contractor.id, date_added=contractor.date_added)
        _apply(row, contractor)
        try:
            async with self.session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to add contractor %s", contractor.name)
            raise CollaboratorError("contractor directory", str(e)) from e
        return contractor

    async def update(self, contractor_id: str, changes: dict[str, Any]) -> bool:
        try:
            async with self.session_factory() as session:
                row = await session.get(ContractorRow, contractor_id)
                if row is None:
                    return False
                _apply(row, _merge(_from_row(row), changes))
                await session.commit()
                return True
        except SQLAlchemyError as e:
            logger.exception("Failed to update contractor %s", contractor_id)
            raise CollaboratorError("contractor directory", str(e)) from e

    async def deactivate(self, contractor_id: str) -> bool:
        return await self.update(contractor_id, {"is_active": False})
