"""Translate exceptions into the ``{"success": false, "message"}`` body."""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cyberhunter.config import get_settings
from cyberhunter.domain.errors import ConflictError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

_DOMAIN_STATUSES: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def error_body(message: str, exc: Exception | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if exc is not None and not get_settings().is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid input data: " + "; ".join(parts)


async def _handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, mapped in _DOMAIN_STATUSES:
        if isinstance(exc, error_type):
            status_code = mapped
            break
    return JSONResponse(status_code=status_code, content=error_body(str(exc)))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_describe_validation(exc)),
    )


async def _handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Duplicate field value entered"),
    )


async def _handle_stale_data(request: Request, exc: StaleDataError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("The resource was modified by another request, please retry"),
    )


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Server Error", exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the centralized handlers to ``app``."""

    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(IntegrityError, _handle_integrity_error)
    app.add_exception_handler(StaleDataError, _handle_stale_data)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    # Raised by our own model building, not by request parsing: a server fault.
    app.add_exception_handler(ValidationError, _handle_unexpected)
    app.add_exception_handler(ValueError, _handle_value_error)
    app.add_exception_handler(Exception, _handle_unexpected)


__all__ = ["error_body", "register_exception_handlers"]
