"""Domain entities for authcore.

Entities are plain dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from authcore.domain.entities.identity import (
    Identity,
    IdentityRole,
    IdentityStatus,
    PublicIdentity,
    normalize_email,
)
from authcore.domain.entities.reset_token import ResetToken
from authcore.domain.entities.session_token import SessionToken

__all__ = [
    "Identity",
    "IdentityRole",
    "IdentityStatus",
    "PublicIdentity",
    "ResetToken",
    "SessionToken",
    "normalize_email",
]
