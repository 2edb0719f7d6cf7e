"""Translation of driver errors into domain persistence errors."""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from authcore.core.logging import get_logger
from authcore.domain.exceptions import DuplicateRecordError, PersistenceUnavailableError

logger = get_logger(__name__)


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy errors as domain persistence errors.

    Args:
        operation: Short description used in the error message and log entry.

    Raises:
        DuplicateRecordError: On a uniqueness violation.
        PersistenceUnavailableError: On any other database failure.
    """
    try:
        yield
    except IntegrityError as e:
        raise DuplicateRecordError(f"{operation}: unique constraint violated") from e
    except (SQLAlchemyError, OSError) as e:
        logger.error("Persistence operation failed", operation=operation, error=str(e))
        raise PersistenceUnavailableError(f"{operation} failed") from e


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes returned by drivers such as aiosqlite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
