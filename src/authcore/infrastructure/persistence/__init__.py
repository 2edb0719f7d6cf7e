"""SQLAlchemy implementations of the repository ports."""

from authcore.infrastructure.persistence.database import (
    Base,
    DatabaseManager,
    close_database,
    get_db_manager,
    get_db_session,
    init_database,
)
from authcore.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "Base",
    "DatabaseManager",
    "SqlAlchemyUnitOfWork",
    "close_database",
    "get_db_manager",
    "get_db_session",
    "init_database",
]
