"""
Main FastAPI Application

Entry point for the HR portal API.

Every procedure is a POST under /trpc/<procedureName> taking and
returning camelCase JSON. Failures come back as {"detail", "code"}
where code is one of UNAUTHORIZED, FORBIDDEN, NOT_FOUND, CONFLICT,
BAD_REQUEST or INTERNAL_SERVER_ERROR.
"""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import time
from contextlib import asynccontextmanager

from hrportal.config import get_settings
from hrportal.database import engine, init_db
from hrportal.utils.logging import setup_logging, get_logger
from hrportal.core.exceptions import ProcedureError
from hrportal.api.endpoints import (
    auth,
    profile,
    timesheet,
    leaves,
    dashboard,
    notifications,
    approvals,
    documents,
    common,
    admin,
    admin_projects,
    admin_time_entries,
    admin_reporting,
    admin_leave_config,
    project_management,
    ai,
)

PROCEDURE_PREFIX = "/trpc"

ROUTERS = (
    auth.router,
    profile.router,
    timesheet.router,
    leaves.router,
    dashboard.router,
    notifications.router,
    approvals.router,
    documents.router,
    common.router,
    admin.router,
    admin_projects.router,
    admin_time_entries.router,
    admin_reporting.router,
    admin_leave_config.router,
    project_management.router,
    ai.router,
)

settings = get_settings()

setup_logging(
    log_level=settings.LOG_LEVEL,
    json_format=(settings.ENVIRONMENT == "production")
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"HR portal starting ({settings.ENVIRONMENT})")

    # Other environments are prepared with hrportal-setup
    if settings.ENVIRONMENT == "development":
        logger.warning("Creating missing tables (development)")
        init_db()

    yield

    engine.dispose()
    logger.info("HR portal stopped")


app = FastAPI(
    title="HR Portal",
    description="Timesheets, leave, documents and project tracking for a single company",
    version="1.0.0",
    lifespan=lifespan
)


# ============================================================================
# MIDDLEWARE
# ============================================================================

# SECURITY: outside development only the configured portal origins are allowed
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Seconds spent handling the request, as X-Process-Time."""
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.4f}"
    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(ProcedureError)
async def procedure_error_handler(request: Request, exc: ProcedureError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers or {}
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Input that fails schema validation is a BAD_REQUEST, with field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid input",
            "code": "BAD_REQUEST",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """
    Anything else is INTERNAL_SERVER_ERROR.

    SECURITY: the exception text is only returned when DEBUG is on.
    """
    logger.error(
        f"Unhandled {type(exc).__name__} in {request.url.path}: {exc}",
        exc_info=True,
        extra={"procedure": request.url.path.rsplit("/", 1)[-1]}
    )

    content = {"detail": "Internal server error", "code": "INTERNAL_SERVER_ERROR"}
    if settings.DEBUG:
        content.update(detail=str(exc), type=type(exc).__name__)

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# ============================================================================
# ROUTES
# ============================================================================

@app.get("/health", tags=["health"])
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


for router in ROUTERS:
    app.include_router(router, prefix=PROCEDURE_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hrportal.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
