"""Persistence repositories for database operations."""

from authcore.infrastructure.persistence.repositories.identity_repository import (
    IdentityRepository,
)
from authcore.infrastructure.persistence.repositories.reset_token_repository import (
    ResetTokenRepository,
)
from authcore.infrastructure.persistence.repositories.session_token_repository import (
    SessionTokenRepository,
)

__all__ = [
    "IdentityRepository",
    "ResetTokenRepository",
    "SessionTokenRepository",
]
