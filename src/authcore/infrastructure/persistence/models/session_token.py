"""SQLAlchemy model for refresh token sessions.

Stores the SHA-256 digest of each issued refresh token, never the token itself.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.infrastructure.persistence.database import Base


class SessionTokenModel(Base):
    """Refresh token session model.

    One row per issued refresh token; only ``revoked`` changes after insert.
    """

    __tablename__ = "session_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    # Token hash (SHA-256) - indexed for fast lookup
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    identity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("identities.id", ondelete="CASCADE"),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    revoked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    identity = relationship("IdentityModel", back_populates="session_tokens")

    __table_args__ = (
        Index("ix_session_tokens_identity_revoked", "identity_id", "revoked"),
        Index("ix_session_tokens_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return (
            f"SessionTokenModel(id={self.id!r}, identity_id={self.identity_id!r}, "
            f"revoked={self.revoked!r})"
        )
