"""Repository for refresh token session records.

Tokens are stored and looked up by their SHA-256 digest.
"""

import hashlib
from datetime import datetime, timezone

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.domain.entities import SessionToken
from authcore.infrastructure.persistence.errors import as_utc, translate_errors
from authcore.infrastructure.persistence.models import SessionTokenModel


class SessionTokenRepository:
    """Repository for refresh token session database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @staticmethod
    def hash_token(token: str) -> str:
        """Hash a token using SHA-256.

        Args:
            token: The raw refresh token string.

        Returns:
            SHA-256 hex digest of the token.
        """
        return hashlib.sha256(token.encode()).hexdigest()

    @staticmethod
    def _to_entity(model: SessionTokenModel, token: str) -> SessionToken:
        return SessionToken(
            id=model.id,
            identity_id=model.identity_id,
            token=token,
            expires_at=as_utc(model.expires_at),
            revoked=model.revoked,
            created_at=as_utc(model.created_at),
        )

    async def create(self, record: SessionToken) -> SessionToken:
        """Store a new session record.

        Raises:
            DuplicateRecordError: If the token string already has a record.
        """
        model = SessionTokenModel(
            id=record.id,
            identity_id=record.identity_id,
            token_hash=self.hash_token(record.token),
            expires_at=record.expires_at,
            revoked=record.revoked,
            created_at=record.created_at,
        )
        with translate_errors("create session token"):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model, record.token)

    async def get(self, token: str) -> SessionToken | None:
        """Look up a session record by refresh token string."""
        with translate_errors("get session token"):
            result = await self._session.execute(
                select(SessionTokenModel).where(
                    SessionTokenModel.token_hash == self.hash_token(token)
                )
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model, token) if model else None

    async def revoke(self, token: str) -> bool:
        """Revoke a refresh token.

        Only a record that is still active is updated, so of two concurrent
        revocations of the same token exactly one reports success.

        Returns:
            True if an active record was revoked, False otherwise.
        """
        with translate_errors("revoke session token"):
            result = await self._session.execute(
                update(SessionTokenModel)
                .where(
                    SessionTokenModel.token_hash == self.hash_token(token),
                    SessionTokenModel.revoked == False,  # noqa: E712
                )
                .values(revoked=True)
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount > 0

    async def revoke_all(self, identity_id: str) -> int:
        """Revoke all active refresh tokens of an identity.

        Returns:
            Number of records revoked.
        """
        with translate_errors("revoke all session tokens"):
            result = await self._session.execute(
                update(SessionTokenModel)
                .where(
                    SessionTokenModel.identity_id == identity_id,
                    SessionTokenModel.revoked == False,  # noqa: E712
                )
                .values(revoked=True)
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount

    async def cleanup_expired(self) -> int:
        """Delete records that are expired or revoked.

        Returns:
            Number of records deleted.
        """
        now = datetime.now(timezone.utc)
        with translate_errors("cleanup session tokens"):
            result = await self._session.execute(
                delete(SessionTokenModel).where(
                    or_(
                        SessionTokenModel.expires_at < now,
                        SessionTokenModel.revoked == True,  # noqa: E712
                    )
                )
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount
