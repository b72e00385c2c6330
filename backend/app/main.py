"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.domain.exceptions import (
    CycleDetectedError,
    EntityNotFoundError,
    ForbiddenError,
    HierarchyError,
    InvalidArgumentError,
    InvalidStateError,
    VersionConflictError,
)
from app.infrastructure.database import Base, engine
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[HierarchyError], int] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    CycleDetectedError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    VersionConflictError: status.HTTP_409_CONFLICT,
}


async def _ensure_database_exists() -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Connects to the default ``postgres`` maintenance database, checks for the
    target database name, and issues ``CREATE DATABASE`` when missing.
    """
    from urllib.parse import urlparse

    import asyncpg

    settings = get_settings()
    if not settings.database_url.startswith("postgresql"):
        return
    parsed = urlparse(settings.database_url)
    db_name = parsed.path.lstrip("/")
    if not db_name:
        return

    maintenance_url = settings.database_url.rsplit("/", 1)[0] + "/postgres"

    try:
        conn = await asyncpg.connect(maintenance_url)
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
        finally:
            await conn.close()
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and create tables."""
    setup_logging()
    await _ensure_database_exists()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()


async def hierarchy_error_handler(request: Request, exc: HierarchyError) -> JSONResponse:
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, mapped in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            status_code = mapped
            break
    logger.info("%s %s → %d %s", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"code": exc.code, "message": exc.message, **exc.details}},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query strings are plain invalid arguments."""
    logger.debug("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "code": InvalidArgumentError.code,
                "message": "Request validation failed",
                "errors": _jsonable_errors(exc),
            }
        },
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HierarchyError, hierarchy_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
