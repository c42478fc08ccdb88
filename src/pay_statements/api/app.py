"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pay_statements import __version__
from pay_statements.api.routes import (
    contractors_router,
    health_router,
    pay_periods_router,
    statements_router,
)
from pay_statements.config import get_settings
from pay_statements.database import dispose_db, init_db
from pay_statements.errors import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    PayStatementError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PayStatementError], tuple[int, str]] = {
    ConfigurationError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "CONFIGURATION_ERROR"),
    NotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    ValidationError: (status.HTTP_422_UNPROCESSABLE_CONTENT, "VALIDATION_ERROR"),
    CollaboratorError: (status.HTTP_502_BAD_GATEWAY, "COLLABORATOR_ERROR"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    if settings.data_backend == "database":
        await init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Pay Statements API",
        description="Contractor pay statements: periods, derivation, export and upload",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayStatementError)
    async def pay_statement_exception_handler(
        request: Request, exc: PayStatementError
    ) -> JSONResponse:
        """Map the error taxonomy onto HTTP responses."""
        status_code, code = status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"
        for error_type, mapped in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code, code = mapped
                break
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        content = {"detail": str(exc), "code": code}
        field = getattr(exc, "field", None)
        if field:
            content["field"] = field
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(pay_periods_router, prefix="/api/v1")
    app.include_router(contractors_router, prefix="/api/v1")
    app.include_router(statements_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
