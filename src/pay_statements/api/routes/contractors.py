"""Contractor directory endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from pay_statements.api.dependencies import Directory
from pay_statements.api.schemas import (
    ContractorCreate,
    ContractorListResponse,
    ContractorResponse,
    ContractorUpdate,
)
from pay_statements.errors import NotFoundError
from pay_statements.services.types import Contractor

router = APIRouter(prefix="/contractors", tags=["contractors"])


def _to_response(contractor: Contractor) -> ContractorResponse:
    return ContractorResponse.model_validate(contractor.to_dict())


@router.get("", response_model=ContractorListResponse)
async def list_contractors(
    directory: Directory,
    active_only: Annotated[bool, Query()] = True,
) -> ContractorListResponse:
    contractors = await (directory.list_active() if active_only else directory.list_all())
    contractors = sorted(contractors, key=lambda c: c.name.casefold())
    return ContractorListResponse(
        items=[_to_response(c) for c in contractors],
        total=len(contractors),
    )


@router.get("/{contractor_id}", response_model=ContractorResponse)
async def get_contractor(
    directory: Directory,
    contractor_id: Annotated[str, Path()],
) -> ContractorResponse:
    contractor = await directory.get_by_id(contractor_id)
    if contractor is None:
        raise NotFoundError("Contractor", contractor_id)
    return _to_response(contractor)


@router.post(
    "",
    response_model=ContractorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_contractor(
    directory: Directory,
    request: ContractorCreate,
) -> ContractorResponse:
    """Add a contractor; id and date added are assigned by the directory."""
    contractor = await directory.add(request.model_dump(mode="json"))
    return _to_response(contractor)


@router.patch("/{contractor_id}", response_model=ContractorResponse)
async def update_contractor(
    directory: Directory,
    request: ContractorUpdate,
    contractor_id: Annotated[str, Path()],
) -> ContractorResponse:
    if not await directory.update(contractor_id, request.changes()):
        raise NotFoundError("Contractor", contractor_id)
    contractor = await directory.get_by_id(contractor_id)
    if contractor is None:
        raise NotFoundError("Contractor", contractor_id)
    return _to_response(contractor)
