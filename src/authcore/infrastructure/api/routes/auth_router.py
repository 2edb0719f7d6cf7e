"""Authentication API routes.

Provides endpoints for registration, login, token rotation, logout, and the
password reset flow.
"""

from fastapi import APIRouter, status

from authcore.core.logging import get_logger
from authcore.infrastructure.api.dependencies import (
    AuthenticatedIdentity,
    CredentialServiceDep,
)
from authcore.infrastructure.api.errors import TOKEN_ERRORS, ApiError
from authcore.infrastructure.api.schemas import (
    ApiResponse,
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

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[IdentityResponse],
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    service: CredentialServiceDep,
) -> ApiResponse[IdentityResponse]:
    """Register a new identity with role ``user``."""
    identity = await service.register(request.email, request.password, request.display_name)
    return ApiResponse(
        success=True,
        message="User registered successfully",
        data=IdentityResponse.model_validate(identity),
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account not active"},
    },
)
async def login(
    request: LoginRequest,
    service: CredentialServiceDep,
) -> ApiResponse[LoginResponse]:
    """Authenticate with email and password."""
    result = await service.login(request.email, request.password)
    return ApiResponse(
        success=True,
        message="Login successful",
        data=LoginResponse(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            token_type=result.token_type,
            expires_in=result.expires_in,
            user=IdentityResponse.model_validate(result.identity),
        ),
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    responses={401: {"description": "Invalid, revoked or expired refresh token"}},
)
async def refresh(
    request: RefreshRequest,
    service: CredentialServiceDep,
) -> ApiResponse[TokenResponse]:
    """Exchange a refresh token for a new token pair.

    The presented refresh token is revoked; reusing it fails.
    """
    try:
        pair = await service.refresh(request.refresh_token)
    except TOKEN_ERRORS as e:
        raise ApiError.from_credential_error(e, status.HTTP_401_UNAUTHORIZED) from e
    return ApiResponse(
        success=True,
        message="Token refreshed successfully",
        data=TokenResponse.model_validate(pair),
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    request: RefreshRequest,
    current: AuthenticatedIdentity,
    service: CredentialServiceDep,
) -> ApiResponse[None]:
    """Revoke the caller's refresh token."""
    await service.logout(current.identity_id, request.refresh_token)
    return ApiResponse(success=True, message="Logout successful")


@router.post("/forgot-password", response_model=ApiResponse[None])
async def forgot_password(
    request: ForgotPasswordRequest,
    service: CredentialServiceDep,
) -> ApiResponse[None]:
    """Request a password reset link.

    The response is the same whether or not the email is registered.
    """
    await service.forgot_password(request.email)
    return ApiResponse(
        success=True,
        message="If the email exists, a password reset link has been sent",
    )


@router.get(
    "/reset-password/{token}",
    response_model=ApiResponse[ResetTokenStatusResponse],
    responses={400: {"description": "Invalid, expired or used reset token"}},
)
async def check_reset_token(
    token: str,
    service: CredentialServiceDep,
) -> ApiResponse[ResetTokenStatusResponse]:
    """Check a reset token without consuming it."""
    expires_at = await service.check_reset_token(token)
    return ApiResponse(
        success=True,
        message="Reset token is valid",
        data=ResetTokenStatusResponse(valid=True, expires_at=expires_at),
    )


@router.post(
    "/reset-password",
    response_model=ApiResponse[None],
    responses={400: {"description": "Invalid, expired or used reset token"}},
)
async def reset_password(
    request: ResetPasswordRequest,
    service: CredentialServiceDep,
) -> ApiResponse[None]:
    """Set a new password with a reset token and revoke all sessions."""
    await service.reset_password(request.token, request.new_password)
    return ApiResponse(success=True, message="Password reset successfully")
