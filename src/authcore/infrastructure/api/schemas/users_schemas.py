"""Pydantic schemas for user profile and listing endpoints."""

from pydantic import BaseModel, Field

from authcore.infrastructure.api.schemas.auth_schemas import (
    DISPLAY_NAME_MAX_LENGTH,
    DISPLAY_NAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
    IdentityResponse,
)


class UpdateProfileRequest(BaseModel):
    """Request body for updating the caller's profile."""

    display_name: str = Field(
        ...,
        min_length=DISPLAY_NAME_MIN_LENGTH,
        max_length=DISPLAY_NAME_MAX_LENGTH,
        description="New display name",
    )


class ChangePasswordRequest(BaseModel):
    """Request body for changing the caller's password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, description="New password")


class PaginationResponse(BaseModel):
    """Pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int


class IdentityListResponse(BaseModel):
    """One page of identities."""

    users: list[IdentityResponse]
    pagination: PaginationResponse
