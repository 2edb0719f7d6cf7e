"""Identity entity.

An identity is a registered account holder. Emails are unique and compared
case-insensitively, so they are always stored in normalized form.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import uuid


class IdentityRole(str, Enum):
    """Roles carried in access tokens."""

    USER = "user"
    ADMIN = "admin"


class IdentityStatus(str, Enum):
    """Lifecycle status of an identity. Only active identities may log in."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return email.strip().lower()


@dataclass(frozen=True)
class PublicIdentity:
    """Identity as exposed outside the persistence and hashing boundary."""

    id: str
    email: str
    display_name: str
    role: IdentityRole
    status: IdentityStatus
    created_at: datetime
    updated_at: datetime


@dataclass
class Identity:
    """Identity entity.

    Attributes:
        email: Normalized email address (unique).
        password_hash: Argon2 digest of the password.
        display_name: Name shown to other users.
        role: Role carried in access tokens.
        status: Lifecycle status; only ``active`` identities may log in.
        id: Unique identifier (UUID string).
        created_at: When the identity was registered.
        updated_at: When the identity was last changed.
    """

    email: str
    password_hash: str
    display_name: str
    role: IdentityRole = IdentityRole.USER
    status: IdentityStatus = IdentityStatus.ACTIVE
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("Email is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")
        self.email = normalize_email(self.email)
        self.role = IdentityRole(self.role)
        self.status = IdentityStatus(self.status)

    @property
    def is_active(self) -> bool:
        return self.status == IdentityStatus.ACTIVE

    def touch(self) -> None:
        """Bump ``updated_at`` after a mutation."""
        self.updated_at = datetime.now(timezone.utc)

    def to_public(self) -> PublicIdentity:
        """Return the sanitized projection (no password hash)."""
        return PublicIdentity(
            id=self.id,
            email=self.email,
            display_name=self.display_name,
            role=self.role,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
