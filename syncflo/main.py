"""
FastAPI Application

Entry point for the SyncFlo backend: user and billing lookups, Nango
integration connections and the Nango webhook receiver.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from syncflo.config import settings
from syncflo.routes import accounts, connections, health, webhook
from syncflo.services.database import DatabaseService
from syncflo.services.nango_service import NangoService
from syncflo.utils.exceptions import SyncFloException, ValidationException
from syncflo.utils.logging_config import (
    get_logger,
    set_correlation_id,
    setup_logging,
)

setup_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Creates the process-wide database and Nango handles and disposes of them.
    """
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={"environment": settings.environment},
    )

    database = DatabaseService.from_settings(settings)
    nango_service = NangoService.from_settings(settings)
    app.state.database = database
    app.state.nango_service = nango_service

    try:
        await database.connect()
    except Exception as e:
        # Requests touching the database fail until it is reachable.
        logger.error(f"Failed to connect to PostgreSQL: {e}")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")

    try:
        await database.disconnect()
    except Exception as e:
        logger.warning(f"Error closing database pool: {e}")
    await nango_service.close()

    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="SyncFlo backend: accounts, billing and Nango integration connections",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.exception_handler(SyncFloException)
async def syncflo_exception_handler(request: Request, exc: SyncFloException):
    """Render application exceptions with their own status code"""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={"error": exc.to_dict(), "path": request.url.path},
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed request input as a 400 VALIDATION_ERROR"""
    error = ValidationException(
        "Request body or parameters are invalid",
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return await syncflo_exception_handler(request, error)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(
        f"Unexpected exception: {exc}",
        extra={"error": str(exc), "type": type(exc).__name__, "path": request.url.path},
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
        },
    )


app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(connections.router)
app.include_router(webhook.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "syncflo.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
