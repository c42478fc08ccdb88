"""API routes."""

from pay_statements.api.routes.contractors import router as contractors_router
from pay_statements.api.routes.health import router as health_router
from pay_statements.api.routes.pay_periods import router as pay_periods_router
from pay_statements.api.routes.statements import router as statements_router

__all__ = [
    "contractors_router",
    "health_router",
    "pay_periods_router",
    "statements_router",
]
