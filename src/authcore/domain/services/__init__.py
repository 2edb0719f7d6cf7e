"""Domain services for authcore.

Services hold the credential lifecycle and identity management logic. They
depend on the repository ports, not on a concrete store.
"""

from authcore.domain.services.credential_service import (
    CleanupResult,
    CredentialService,
    LoginResult,
    TokenPair,
)
from authcore.domain.services.identity_service import IdentityPage, IdentityService

__all__ = [
    "CleanupResult",
    "CredentialService",
    "IdentityPage",
    "IdentityService",
    "LoginResult",
    "TokenPair",
]
