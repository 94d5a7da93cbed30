"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import os
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linkdeck.api import api_router
from linkdeck.api.errors import status_for
from linkdeck.core.access_logger import setup_access_logging
from linkdeck.core.config import settings
from linkdeck.core.logging import setup_logging
from linkdeck.core.telemetry import instrument_app, setup_telemetry
from linkdeck.db.base import create_tables, engine
from linkdeck.middleware import RequestLoggingMiddleware, TracingMiddleware
from linkdeck.services.exceptions import ServiceError

# Ensure logs directory exists
os.makedirs(settings.LOG_DIR, exist_ok=True)

# Setup logging
logger = setup_logging()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.OTEL_ENABLED:
    app.add_middleware(TracingMiddleware)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)

# Include API router
app.include_router(api_router)


# Add exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed information."""
    logger.error(f"Request validation error: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": exc.errors()}
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """Map service errors that escaped a route to their HTTP status."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    error_id = f"error-{time.time()}"
    error_location = f"{request.method} {request.url.path}"

    logger.opt(exception=exc).error(
        f"Unhandled exception in {error_location}",
        error_id=error_id,
        url=str(request.url),
        method=request.method,
        path_params=request.path_params,
        query_params=dict(request.query_params),
        client_host=request.client.host if request.client else None
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error occurred",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error"
        }
    )


@app.on_event("startup")
async def startup_event():
    """Run startup tasks."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    setup_access_logging()
    logger.info("Page access logging initialized")

    setup_telemetry()
    instrument_app(app=app, db_engine=engine)

    if settings.DB_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables created")


@app.on_event("shutdown")
async def shutdown_event():
    """Run cleanup tasks."""
    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()
