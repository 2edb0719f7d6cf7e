"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from authcore.domain.entities import IdentityRole, IdentityStatus

PASSWORD_MIN_LENGTH = 6
DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 100


class RegisterRequest(BaseModel):
    """Request body for registration."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, description="Password")
    display_name: str = Field(
        ...,
        min_length=DISPLAY_NAME_MIN_LENGTH,
        max_length=DISPLAY_NAME_MAX_LENGTH,
        description="Name shown to other users",
    )


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class RefreshRequest(BaseModel):
    """Request body for token refresh and logout."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class ForgotPasswordRequest(BaseModel):
    """Request body for starting a password reset."""

    email: EmailStr = Field(..., description="Email address to send the reset link to")


class ResetPasswordRequest(BaseModel):
    """Request body for completing a password reset."""

    token: str = Field(..., min_length=1, description="Reset token from the reset link")
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, description="New password")


class IdentityResponse(BaseModel):
    """Public identity information."""

    id: str = Field(..., description="Identity ID")
    email: str = Field(..., description="Email address")
    display_name: str = Field(..., description="Display name")
    role: IdentityRole = Field(..., description="Role name")
    status: IdentityStatus = Field(..., description="Account status")
    created_at: datetime = Field(..., description="When the identity was registered")
    updated_at: datetime = Field(..., description="When the identity was last changed")

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Access and refresh token pair."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field("Bearer", description="Authorization scheme")
    expires_in: int = Field(..., description="Access token lifetime in seconds")

    model_config = {"from_attributes": True}


class LoginResponse(TokenResponse):
    """Tokens and identity returned by a successful login."""

    user: IdentityResponse = Field(..., description="Authenticated identity")


class ResetTokenStatusResponse(BaseModel):
    """Result of checking a reset token."""

    valid: bool = Field(..., description="Whether the token can be used")
    expires_at: datetime = Field(..., description="When the token expires")
