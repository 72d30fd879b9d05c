"""
FastAPI Application Entry Point.

This is the main application file for the Trip Packs Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from trippacks.app.core.config import settings
from trippacks.app.api.v1.router import router as api_v1_router
from trippacks.app.core.observability import ObservabilityMiddleware, configure_logging
from trippacks.app.db.session import engine, AsyncSessionLocal
from trippacks.app.db.schema import SCHEMA_VERSION, initialize_schema
from trippacks.app.domain.targets import PATH_STOPS, PATH_TRIPS
from trippacks.app.services.change_notifier import ChangeNotifier
from trippacks.app.services.record_repository import RecordRepository
from trippacks.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from fastapi import HTTPException

logger = logging.getLogger("trippacks")


def log_change(path: str) -> None:
    logger.info("Content changed at %s", path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Brings the schema to the current version (may wipe old data).
    2. Wires the repository to a change notifier.
    3. Waits for pending notifications on shutdown.
    """
    configure_logging(settings.log_level)

    async with engine.begin() as conn:
        await conn.run_sync(initialize_schema)

    notifier = ChangeNotifier()
    notifier.register(f"/{PATH_TRIPS}", log_change)
    notifier.register(f"/{PATH_STOPS}", log_change)
    app.state.notifier = notifier
    app.state.repository = RecordRepository(AsyncSessionLocal, notifier)
    yield

    await notifier.drain()
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Trips and their ordered stops, kept in a local store",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "schema_version": SCHEMA_VERSION,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Trip Packs Backend API",
        "docs": "/docs",
        "health": "/health",
    }
