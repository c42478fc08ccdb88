"""Pay period endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from pay_statements.api.dependencies import Calendar, Today
from pay_statements.api.schemas import PayPeriodListResponse, PayPeriodResponse
from pay_statements.errors import NotFoundError

router = APIRouter(prefix="/pay-periods", tags=["pay-periods"])


@router.get("", response_model=PayPeriodListResponse)
async def list_pay_periods(
    calendar: Calendar,
    today: Today,
    available: Annotated[
        bool, Query(description="Only periods still open for statements")
    ] = False,
) -> PayPeriodListResponse:
    """List generated pay periods, oldest first."""
    periods = calendar.available_periods(today) if available else calendar.periods
    return PayPeriodListResponse(
        items=[PayPeriodResponse.model_validate(p) for p in periods],
        total=len(periods),
    )


@router.get("/default", response_model=PayPeriodResponse)
async def get_default_pay_period(calendar: Calendar, today: Today) -> PayPeriodResponse:
    """Period a new statement should start in."""
    period = calendar.default_period(today)
    if period is None:
        raise NotFoundError("Pay period", "default")
    return PayPeriodResponse.model_validate(period)


@router.get("/{period_id}", response_model=PayPeriodResponse)
async def get_pay_period(
    calendar: Calendar,
    period_id: Annotated[str, Path(description="Period id, e.g. pp-001")],
) -> PayPeriodResponse:
    period = calendar.lookup_by_id(period_id)
    if period is None:
        raise NotFoundError("Pay period", period_id)
    return PayPeriodResponse.model_validate(period)
