"""Repository for password reset token operations.

Tokens are stored and looked up by their SHA-256 digest.
"""

import hashlib
from datetime import datetime, timezone

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.domain.entities import ResetToken
from authcore.infrastructure.persistence.errors import as_utc, translate_errors
from authcore.infrastructure.persistence.models import ResetTokenModel


class ResetTokenRepository:
    """Repository for password reset token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @staticmethod
    def _hash_token(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    @staticmethod
    def _to_entity(model: ResetTokenModel, token: str) -> ResetToken:
        return ResetToken(
            id=model.id,
            email=model.email,
            token=token,
            expires_at=as_utc(model.expires_at),
            used=model.used,
            created_at=as_utc(model.created_at),
        )

    async def create(self, record: ResetToken) -> ResetToken:
        """Store a new password reset token.

        Earlier tokens for the same email are left untouched.
        """
        model = ResetTokenModel(
            id=record.id,
            email=record.email,
            token_hash=self._hash_token(record.token),
            expires_at=record.expires_at,
            used=record.used,
            created_at=record.created_at,
        )
        with translate_errors("create reset token"):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model, record.token)

    async def get(self, token: str) -> ResetToken | None:
        """Look up a reset token by its plain text value."""
        with translate_errors("get reset token"):
            result = await self._session.execute(
                select(ResetTokenModel).where(
                    ResetTokenModel.token_hash == self._hash_token(token)
                )
            )
            model = result.scalar_one_or_none()
        return self._to_entity(model, token) if model else None

    async def mark_used(self, token: str) -> bool:
        """Mark a reset token as used.

        Only an unused record is updated, so the transition happens once.

        Returns:
            True if the token was updated, False otherwise.
        """
        with translate_errors("mark reset token used"):
            result = await self._session.execute(
                update(ResetTokenModel)
                .where(
                    ResetTokenModel.token_hash == self._hash_token(token),
                    ResetTokenModel.used == False,  # noqa: E712
                )
                .values(used=True)
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount > 0

    async def cleanup_expired(self) -> int:
        """Delete reset tokens that are expired or used.

        Returns:
            Number of tokens deleted.
        """
        now = datetime.now(timezone.utc)
        with translate_errors("cleanup reset tokens"):
            result = await self._session.execute(
                delete(ResetTokenModel).where(
                    or_(
                        ResetTokenModel.expires_at < now,
                        ResetTokenModel.used == True,  # noqa: E712
                    )
                )
                .execution_options(synchronize_session="fetch")
            )
        return result.rowcount
