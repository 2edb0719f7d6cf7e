"""API Schemas for request/response validation."""

from authcore.infrastructure.api.schemas.auth_schemas import (
    ForgotPasswordRequest,
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetTokenStatusResponse,
    TokenResponse,
)
from authcore.infrastructure.api.schemas.envelope import (
    ApiResponse,
    error_response,
)
from authcore.infrastructure.api.schemas.users_schemas import (
    ChangePasswordRequest,
    IdentityListResponse,
    PaginationResponse,
    UpdateProfileRequest,
)

__all__ = [
    "ApiResponse",
    "ChangePasswordRequest",
    "ForgotPasswordRequest",
    "IdentityListResponse",
    "IdentityResponse",
    "LoginRequest",
    "LoginResponse",
    "PaginationResponse",
    "RefreshRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "ResetTokenStatusResponse",
    "TokenResponse",
    "UpdateProfileRequest",
    "error_response",
]
