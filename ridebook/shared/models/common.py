# ridebook/shared/models/common.py
"""
Response envelopes shared by every route.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field


T = TypeVar("T")


class SuccessType(str, Enum):
    """Kinds of successful responses and their default messages."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RETRIEVED = "retrieved"
    AUTHENTICATED = "authenticated"

    @property
    def default_message(self) -> str:
        return {
            SuccessType.CREATED: "Resource created successfully",
            SuccessType.UPDATED: "Resource updated successfully",
            SuccessType.DELETED: "Resource deleted successfully",
            SuccessType.RETRIEVED: "Resource retrieved successfully",
            SuccessType.AUTHENTICATED: "Authentication successful",
        }[self]


class SuccessResponse(BaseModel, Generic[T]):
    """Envelope for successful responses."""

    success: bool = True
    message: str
    data: T

    @classmethod
    def create(
        cls,
        kind: SuccessType,
        data: T,
        message: str | None = None,
    ) -> "SuccessResponse[T]":
        return cls(message=message or kind.default_message, data=data)


class ErrorResponse(BaseModel):
    """Envelope for failed responses."""

    success: bool = False
    error: str
    message: str
    details: Any = None
    code: int


class DeletedResult(BaseModel):
    id: UUID
    deleted: bool = True


class HealthStatus(BaseModel):
    """Service health."""

    service: str
    status: str = "healthy"  # healthy, degraded
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
