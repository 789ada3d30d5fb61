# ridebook/shared/errors.py
"""
Application error taxonomy.

Every domain failure is raised as ``AppError`` with a kind from ``ErrorType``;
the HTTP layer maps the kind to a fixed status code and a stable type string.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Error kinds and their machine-readable type strings."""
    NOT_FOUND = "notFound"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "badRequest"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validationError"
    SERVER_ERROR = "serverError"

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self]

    @property
    def default_message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.UNAUTHORIZED: 401,
    ErrorType.FORBIDDEN: 403,
    ErrorType.BAD_REQUEST: 400,
    ErrorType.CONFLICT: 409,
    ErrorType.VALIDATION_ERROR: 422,
    ErrorType.SERVER_ERROR: 500,
}

ERROR_MESSAGES: dict[ErrorType, str] = {
    ErrorType.NOT_FOUND: "Resource not found",
    ErrorType.UNAUTHORIZED: "Unauthorized access",
    ErrorType.FORBIDDEN: "Forbidden",
    ErrorType.BAD_REQUEST: "Bad request",
    ErrorType.CONFLICT: "Resource conflict",
    ErrorType.VALIDATION_ERROR: "Validation error",
    ErrorType.SERVER_ERROR: "Internal server error",
}


class AppError(Exception):
    """A failure with a known kind, a human-readable message and optional details."""

    def __init__(
        self,
        kind: ErrorType,
        message: str | None = None,
        details: Any = None,
    ) -> None:
        self.kind = kind
        self.message = message or kind.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.name}, message={self.message!r})"


def not_found(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.NOT_FOUND, message, details)


def unauthorized(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.UNAUTHORIZED, message, details)


def forbidden(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.FORBIDDEN, message, details)


def bad_request(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.BAD_REQUEST, message, details)


def conflict(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.CONFLICT, message, details)


def validation_error(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.VALIDATION_ERROR, message, details)


def server_error(message: str | None = None, details: Any = None) -> AppError:
    return AppError(ErrorType.SERVER_ERROR, message, details)
