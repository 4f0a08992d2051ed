"""API assembly helpers."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import ArenaError, DependencyError
from ..core.log import get_logger
from .routers import ALL_ROUTERS

logger = get_logger("api")


def register_routes(app: FastAPI) -> None:
    """Attach all application routers to the given app."""

    for router in ALL_ROUTERS:
        app.include_router(router)


async def _arena_error(request: Request, exc: ArenaError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=exc.headers)


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = ", ".join(
        ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        for error in exc.errors()
    )
    message = f"Invalid request: {fields}" if fields else "Invalid request"
    return JSONResponse(
        {"error": {"code": "ValidationError", "message": message}}, status_code=400
    )


async def _storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error during %s %s", request.method, request.url.path, exc_info=exc
    )
    error = DependencyError("A storage error occurred, please try again later")
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error during %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        {"error": {"code": "InternalError", "message": "An internal error occurred"}},
        status_code=500,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": {"code", "message"}}``."""

    app.add_exception_handler(ArenaError, _arena_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(SQLAlchemyError, _storage_error)
    app.add_exception_handler(Exception, _unexpected_error)


__all__ = ["register_error_handlers", "register_routes"]
