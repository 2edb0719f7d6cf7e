"""Uniform response envelope.

Every endpoint answers with the same shape, success or failure:
``{"success", "message", "data", "error", "code"}``.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Response envelope shared by all endpoints."""

    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Human-readable summary")
    data: DataT | None = Field(None, description="Payload on success")
    error: str | None = Field(None, description="Error detail on failure")
    code: str | None = Field(None, description="Machine-readable error code")


def error_response(message: str, code: str, error: str | None = None) -> dict[str, Any]:
    """Build an error envelope."""
    return {
        "success": False,
        "message": message,
        "data": None,
        "error": error if error is not None else message,
        "code": code,
    }
