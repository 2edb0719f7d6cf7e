"""SQLAlchemy model for password reset tokens.

Stores SHA-256 digests of the reset tokens sent to users.
"""

from datetime import datetime
import uuid

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from authcore.infrastructure.persistence.database import Base


class ResetTokenModel(Base):
    """SQLAlchemy model for the reset_tokens table.

    Several outstanding tokens per email are allowed; each is independently
    valid until used or expired.

    Attributes:
        id: Primary key (UUID string).
        email: Email address for which the password is being reset.
        token_hash: SHA-256 hash of the reset token.
        expires_at: Timestamp when the token expires.
        used: Whether the token has been consumed.
        created_at: Timestamp when the token was created.
    """

    __tablename__ = "reset_tokens"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Token ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Email address for reset",
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="SHA-256 hash of the reset token",
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="Timestamp when the token expires",
    )
    used: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the token has been consumed",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Timestamp when the token was created",
    )

    def __repr__(self) -> str:
        return f"<ResetToken(id={self.id}, email={self.email}, used={self.used})>"
