"""Transaction boundary shared by the domain services."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from authcore.core.logging import get_logger
from authcore.domain.exceptions import PersistenceError
from authcore.domain.ports import UnitOfWork

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(unit_of_work: UnitOfWork) -> AsyncIterator[None]:
    """Commit the unit of work when the block succeeds, roll back otherwise.

    The original exception always propagates. A failing rollback is logged
    and does not replace it.
    """
    try:
        yield
        await unit_of_work.commit()
    except Exception:
        try:
            await unit_of_work.rollback()
        except PersistenceError as e:
            logger.error("Rollback failed", error=str(e))
        raise
