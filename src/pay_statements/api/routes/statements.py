"""Pay statement endpoints: derivation, assembly, persistence, export and upload."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from pay_statements.api.dependencies import (
    Assembler,
    Calendar,
    Directory,
    Renderer,
    Store,
    Today,
    Uploader,
)
from pay_statements.api.schemas import (
    AssembleRequest,
    DeriveRequest,
    DeriveResponse,
    ErrorResponse,
    ExportRequest,
    PayStatementSchema,
    SavedStatementListResponse,
    SavedStatementResponse,
    SaveRequest,
    SaveResponse,
    SeedRequest,
    SummaryItemSchema,
    UploadRequest,
    UploadResponse,
)
from pay_statements.errors import CollaboratorError, NotFoundError
from pay_statements.services.types import StatementFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/statements", tags=["statements"])


@router.post("/derive", response_model=DeriveResponse)
async def derive_summary(
    assembler: Assembler,
    request: DeriveRequest,
) -> DeriveResponse:
    """Derive summary lines and the total from raw payment details."""
    derived = assembler.engine.derive([d.to_entry() for d in request.payment_details])
    return DeriveResponse(
        summary=[SummaryItemSchema.model_validate(item) for item in derived.items],
        total=derived.total,
    )


@router.post(
    "/seed",
    response_model=PayStatementSchema,
    responses={404: {"model": ErrorResponse}},
)
async def seed_statement(
    assembler: Assembler,
    directory: Directory,
    calendar: Calendar,
    today: Today,
    request: SeedRequest,
) -> PayStatementSchema:
    """Start a statement from a contractor's active buildings.

    Without a period id the default period for today is used.
    """
    contractor = await directory.get_by_id(request.contractor_id)
    if contractor is None:
        raise NotFoundError("Contractor", request.contractor_id)

    period = request.pay_period_id or calendar.default_period(today)
    record = assembler.seed_from_contractor(contractor, period)
    return PayStatementSchema.from_record(record)


@router.post(
    "/assemble",
    response_model=PayStatementSchema,
    responses={422: {"model": ErrorResponse}},
)
async def assemble_statement(
    assembler: Assembler,
    request: AssembleRequest,
) -> PayStatementSchema:
    record = assembler.assemble(
        company=request.company.to_company() if request.company else None,
        payee=request.payee.to_payee(),
        period=request.pay_period_id,
        method=request.payment_method,
        entries=[d.to_entry() for d in request.payment_details],
        notes=request.notes,
    )
    return PayStatementSchema.from_record(record)


@router.post(
    "",
    response_model=SaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def save_statement(
    assembler: Assembler,
    store: Store,
    request: SaveRequest,
) -> SaveResponse:
    """Validate, re-derive and persist a statement."""
    record = assembler.validate_for_save(request.statement.to_record())
    key = await store.save(request.name, record)
    if not key:
        raise CollaboratorError("statement store", "save did not return a key")
    return SaveResponse(key=key)


@router.get("", response_model=SavedStatementListResponse)
async def list_statements(
    store: Store,
    contractor_id: Annotated[str | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> SavedStatementListResponse:
    """List saved statements, newest first."""
    summaries = await store.list(
        StatementFilter(contractor_id=contractor_id, date_from=date_from, date_to=date_to)
    )
    return SavedStatementListResponse(
        items=[SavedStatementResponse.model_validate(s) for s in summaries],
        total=len(summaries),
    )


@router.get(
    "/{key}",
    response_model=PayStatementSchema,
    responses={404: {"model": ErrorResponse}},
)
async def get_statement(
    store: Store,
    key: Annotated[str, Path()],
) -> PayStatementSchema:
    record = await store.load(key)
    if record is None:
        raise NotFoundError("Statement", key)
    return PayStatementSchema.from_record(record)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_statement(
    store: Store,
    key: Annotated[str, Path()],
) -> Response:
    await store.delete(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/export",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def export_statement(
    assembler: Assembler,
    renderer: Renderer,
    request: ExportRequest,
) -> Response:
    """Render the statement as a PDF download."""
    record = assembler.validate_for_export(request.statement.to_record())
    content = renderer.render(record, request.preset)
    filename = assembler.export_filename(record)
    return Response(
        content=content,
        media_type=renderer.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def upload_statement(
    assembler: Assembler,
    renderer: Renderer,
    uploader: Uploader,
    request: UploadRequest,
) -> UploadResponse:
    """Render the statement and upload it into the contractor's folder."""
    record = assembler.validate_for_export(request.statement.to_record())
    content = renderer.render(record, request.preset)
    filename = request.filename or assembler.export_filename(record)
    contractor_name = request.contractor_name or record.payee.name

    result = await uploader.upload(
        content,
        contractor_name=contractor_name,
        filename=filename,
        allow_create=request.allow_create,
    )
    logger.info("Uploaded %s via %s", filename, uploader.provider_name)
    return UploadResponse.model_validate(result)
