# ridebook/api/handlers.py
"""
Exception handlers mapping errors to the JSON error envelope.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ridebook.common.constants import GENERIC_SERVER_ERROR_MESSAGE, TypeMsg
from ridebook.common.logger import log_error, log_info
from ridebook.config import settings
from ridebook.shared.errors import AppError, ErrorType
from ridebook.shared.models.common import ErrorResponse


def error_response(kind: ErrorType, message: str, details: Any = None) -> JSONResponse:
    body = ErrorResponse(
        error=kind.value,
        message=message,
        details=details,
        code=kind.status_code,
    )
    return JSONResponse(status_code=kind.status_code, content=body.model_dump())


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({
            "field": ".".join(loc),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        })
    return details


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind == ErrorType.SERVER_ERROR:
        await log_error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            extra={"details": exc.details},
        )
    else:
        await log_info(
            f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}",
            type_msg=TypeMsg.DEBUG,
        )
    return error_response(exc.kind, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        ErrorType.BAD_REQUEST,
        "Request validation failed",
        _format_validation_errors(exc),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    await log_error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    message = GENERIC_SERVER_ERROR_MESSAGE if settings.system.is_production else str(exc)
    return error_response(ErrorType.SERVER_ERROR, message or GENERIC_SERVER_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
