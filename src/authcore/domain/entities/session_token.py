"""Session token entity.

One record exists per issued refresh token. After creation only the
``revoked`` flag ever changes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid


@dataclass
class SessionToken:
    """Refresh token session record.

    Attributes:
        identity_id: ID of the identity the token was issued to.
        token: The refresh token string (unique, immutable).
        expires_at: When the refresh token stops being accepted.
        id: Unique identifier (UUID string).
        revoked: Whether the token has been revoked.
        created_at: When the record was created.
    """

    identity_id: str
    token: str
    expires_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    revoked: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at < now
