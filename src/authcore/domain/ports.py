"""Ports consumed by the domain services.

Services depend on these protocols rather than on a concrete store, so any
implementation with the same async methods can be injected (the SQLAlchemy
repositories in ``authcore.infrastructure.persistence``, or test doubles).

Store implementations raise ``DuplicateRecordError`` on a uniqueness
violation and ``PersistenceUnavailableError`` on any other failure.
"""

from datetime import datetime
from typing import Protocol

from authcore.domain.entities import (
    Identity,
    IdentityRole,
    IdentityStatus,
    ResetToken,
    SessionToken,
)


class IdentityRepository(Protocol):
    """Durable store of identities."""

    async def create(self, identity: Identity) -> Identity:
        """Persist a new identity."""

    async def get_by_email(self, email: str) -> Identity | None:
        """Return the identity with this email (case-insensitive), if any."""

    async def get_by_id(self, identity_id: str) -> Identity | None:
        """Return the identity with this ID, if any."""

    async def update(self, identity: Identity) -> Identity:
        """Persist changes to an existing identity."""

    async def list(
        self,
        *,
        search: str | None = None,
        role: IdentityRole | None = None,
        status: IdentityStatus | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Identity], int]:
        """Return one page of identities matching the filters and the total count."""


class SessionTokenRepository(Protocol):
    """Durable store of issued refresh tokens."""

    async def create(self, record: SessionToken) -> SessionToken:
        """Persist a session record for a newly issued refresh token."""

    async def get(self, token: str) -> SessionToken | None:
        """Look up the session record for a refresh token string."""

    async def revoke(self, token: str) -> bool:
        """Revoke one active refresh token. Returns False when no active record matched."""

    async def revoke_all(self, identity_id: str) -> int:
        """Revoke every active refresh token of an identity."""

    async def cleanup_expired(self) -> int:
        """Delete records that are expired or revoked."""


class ResetTokenRepository(Protocol):
    """Durable store of password reset tokens."""

    async def create(self, record: ResetToken) -> ResetToken:
        """Persist a new reset token."""

    async def get(self, token: str) -> ResetToken | None:
        """Look up a reset token by its exact string."""

    async def mark_used(self, token: str) -> bool:
        """Mark a reset token as consumed. Returns False when no record matched."""

    async def cleanup_expired(self) -> int:
        """Delete records that are expired or used."""


class UnitOfWork(Protocol):
    """Transaction boundary around a sequence of repository calls."""

    async def commit(self) -> None:
        """Make all pending writes durable."""

    async def rollback(self) -> None:
        """Discard all pending writes."""


class ResetNotifier(Protocol):
    """Out-of-band delivery of password reset tokens.

    Implementations raise ``NotificationError`` when delivery fails.
    """

    async def send_reset_token(self, email: str, token: str, expires_at: datetime) -> None:
        """Deliver a reset token to the owner of ``email``."""


__all__ = [
    "IdentityRepository",
    "ResetNotifier",
    "ResetTokenRepository",
    "SessionTokenRepository",
    "UnitOfWork",
]
