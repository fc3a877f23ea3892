"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from care_payroll import __version__
from care_payroll.api.routes import health_router, payroll_router, work_logs_router
from care_payroll.config import configure_logging, get_settings
from care_payroll.database import dispose_db, init_db
from care_payroll.exceptions import (
    CalculationError,
    CarePayrollError,
    InvalidStateError,
    NotFoundError,
    PersistenceFailure,
    ReceiptError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[CarePayrollError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    CalculationError: 422,
    ReceiptError: 422,
    PersistenceFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _error_context(exc: CarePayrollError) -> dict:
    if isinstance(exc, NotFoundError):
        return {"entity": exc.entity, "id": str(exc.entity_id)}
    if isinstance(exc, InvalidStateError):
        return {
            "entity": exc.entity,
            "id": str(exc.entity_id),
            "current_status": exc.current_status,
            "target_status": exc.target_status,
        }
    if isinstance(exc, CalculationError) and exc.work_log_id is not None:
        return {"work_log_id": str(exc.work_log_id)}
    if isinstance(exc, PersistenceFailure):
        return {"operation": exc.operation}
    return {}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging(get_settings().log_level)
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Care Payroll API",
        description="Work log approval, caregiver payroll and receipts",
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

    @app.exception_handler(CarePayrollError)
    async def care_payroll_exception_handler(
        request: Request, exc: CarePayrollError
    ) -> JSONResponse:
        """Map engine errors to HTTP status codes."""
        status_code = next(
            (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
            status.HTTP_400_BAD_REQUEST,
        )
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "code": exc.code, "context": _error_context(exc)},
        )

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

    app.include_router(health_router)
    app.include_router(work_logs_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
