"""SQLAlchemy model for the identities table.

Emails are stored normalized to lower case, which makes the unique index
case-insensitive.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.infrastructure.persistence.database import Base


class IdentityModel(Base):
    """SQLAlchemy model for the identities table.

    Attributes:
        id: Primary key (UUID string).
        email: Normalized email address (unique).
        password_hash: Argon2 digest.
        display_name: Name shown to other users.
        role: ``user`` or ``admin``.
        status: ``active``, ``inactive`` or ``suspended``.
        created_at: Timestamp when the identity was created.
        updated_at: Timestamp when the identity was last updated.
    """

    __tablename__ = "identities"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Identity ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Normalized email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2id password digest",
    )
    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="user",
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="active",
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    session_tokens: Mapped[list["SessionTokenModel"]] = relationship(  # noqa: F821
        "SessionTokenModel",
        back_populates="identity",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Identity(id={self.id}, email={self.email}, role={self.role})>"
