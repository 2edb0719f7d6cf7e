"""Unit of work over an SQLAlchemy async session."""

from sqlalchemy.ext.asyncio import AsyncSession

from authcore.infrastructure.persistence.errors import translate_errors


class SqlAlchemyUnitOfWork:
    """Commit or roll back everything the repositories flushed to one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def commit(self) -> None:
        with translate_errors("commit"):
            await self._session.commit()

    async def rollback(self) -> None:
        with translate_errors("rollback"):
            await self._session.rollback()
