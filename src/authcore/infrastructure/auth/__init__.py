"""Authentication infrastructure components.

This module provides password hashing and the bearer token codec.
"""

from authcore.infrastructure.auth.password_hasher import (
    PasswordHashingError,
    PasswordHashingService,
)
from authcore.infrastructure.auth.token_codec import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    TokenClaims,
    TokenCodec,
    TokenVerificationError,
)

__all__ = [
    "ACCESS_TOKEN",
    "REFRESH_TOKEN",
    "PasswordHashingError",
    "PasswordHashingService",
    "TokenClaims",
    "TokenCodec",
    "TokenVerificationError",
]
