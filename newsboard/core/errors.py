from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger("newsboard.errors")


class ApiError(Exception):
    """Base for every failure the API reports to clients.

    ``msg`` is the short, stable string placed in the response body.
    """

    status_code = 500
    msg = "Internal server error"

    def __init__(self, msg: str | None = None) -> None:
        if msg is not None:
            self.msg = msg
        super().__init__(self.msg)


class InvalidParameter(ApiError):
    status_code = 400
    msg = "Bad request"


class InvalidIdentifier(ApiError):
    status_code = 400
    msg = "Bad request"


class InvalidPayload(ApiError):
    status_code = 400
    msg = "Bad request"


class NotFound(ApiError):
    status_code = 404

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"{kind.capitalize()} not found")


class StorageError(ApiError):
    status_code = 500
    msg = "Internal server error"


@asynccontextmanager
async def storage_errors(operation: str) -> AsyncIterator[None]:
    """Translate driver failures raised inside the block into StorageError."""
    try:
        yield
    except ApiError:
        raise
    except (
        asyncpg.PostgresError,
        asyncpg.InterfaceError,
        SQLAlchemyError,
        OSError,
        asyncio.TimeoutError,
    ) as exc:
        logger.error(
            "Storage failure during %s: %s",
            operation,
            exc,
            exc_info=True,
            extra={"event": "storage_error", "operation": operation},
        )
        raise StorageError() from exc


async def api_error_handler(request: Request, exc: ApiError):
    logger.warning(
        "%s %s -> %s %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.msg,
        extra={"event": "api_error", "error": type(exc).__name__},
    )
    return JSONResponse({"msg": exc.msg}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Request validation failed for %s %s",
        request.method,
        request.url.path,
        extra={"event": "request_validation_error"},
    )
    return JSONResponse({"msg": InvalidPayload.msg}, status_code=400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse({"msg": "Invalid URL"}, status_code=404)
    if exc.status_code == 405:
        return JSONResponse({"msg": "Method not allowed"}, status_code=405)
    return JSONResponse({"msg": str(exc.detail)}, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "UNHANDLED_EXCEPTION",
        extra={"event": "unhandled_exception", "path": str(request.url.path)},
    )
    return JSONResponse({"msg": StorageError.msg}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
