"""Password reset token entity.

Reset tokens are opaque random strings looked up by exact match, not signed
bearer tokens. Each one is single-use.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import secrets
import uuid


@dataclass
class ResetToken:
    """Password reset token entity.

    Attributes:
        email: Email address the reset was requested for.
        token: The reset token string handed to the user.
        expires_at: When the token expires.
        id: Unique identifier (UUID string).
        used: Whether the token has been consumed.
        created_at: When the token was created.
    """

    email: str
    token: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    used: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def generate(cls, email: str, expires_in_seconds: int = 3600) -> "ResetToken":
        """Generate a new unguessable reset token.

        Args:
            email: The email address for reset.
            expires_in_seconds: Token lifetime in seconds (default 1 hour).

        Returns:
            A new unused ResetToken.
        """
        now = datetime.now(timezone.utc)
        return cls(
            email=email,
            token=secrets.token_urlsafe(32),
            expires_at=now + timedelta(seconds=expires_in_seconds),
            created_at=now,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at < now

    def is_valid(self) -> bool:
        """Check if the token is valid (not expired and not used)."""
        return not self.used and not self.is_expired()
