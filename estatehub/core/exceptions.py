"""
Error taxonomy and global exception handlers.

Every failure leaves the API in the same envelope::

    {"statusCode", "timestamp", "path", "method", "message"}

5xx responses never carry internal detail; the full error is logged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An error occurred while processing your request"


# ── Domain errors ───────────────────────────────────────────────────
class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        # Internal detail for logs; never sent to the client.
        self.reason = reason or message


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class ConflictError(AppError):
    status_code = 409


class NotFoundError(AppError):
    status_code = 404


class StorageError(AppError):
    status_code = 500


# ── Envelope ────────────────────────────────────────────────────────
def error_envelope(request: Request, status_code: int, message: Any) -> dict[str, Any]:
    if status_code >= 500:
        message = GENERIC_SERVER_MESSAGE
    return {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
    }


def _respond(
    request: Request,
    status_code: int,
    message: Any,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    if status_code >= 500:
        logger.error("[%s] %s - %s - %s", request.method, request.url.path, status_code, message)
    else:
        logger.warning("[%s] %s - %s - %s", request.method, request.url.path, status_code, message)
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(request, status_code, message),
        headers=headers,
    )


# ── Handlers ────────────────────────────────────────────────────────
async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.reason != exc.message:
        logger.info("%s: %s", type(exc).__name__, exc.reason)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.reason, exc_info=exc.__cause__ or exc)
    return _respond(request, exc.status_code, exc.message, headers)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _respond(request, exc.status_code, exc.detail, getattr(exc, "headers", None))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return _respond(request, 400, messages)


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _respond(request, 429, "Too many requests, please try again later.")


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return _respond(request, 409, "Database constraint violation")


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return _respond(request, 500, "Internal database error")


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return _respond(request, 500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
