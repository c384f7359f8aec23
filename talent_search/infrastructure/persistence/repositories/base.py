"""Session handling shared by the PostgreSQL repositories."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talent_search.database.sqlmodel_engine import SQLModelDatabaseManager, get_sqlmodel_db_manager
from talent_search.domain.exceptions import PersistenceError

logger = structlog.get_logger(__name__)


class PostgresRepository:
    """Base class translating SQLAlchemy and driver failures into PersistenceError."""

    def __init__(self, db_manager: Optional[SQLModelDatabaseManager] = None):
        self._db_manager = db_manager

    @property
    def db_manager(self) -> SQLModelDatabaseManager:
        if self._db_manager is None:
            self._db_manager = get_sqlmodel_db_manager()
        return self._db_manager

    @asynccontextmanager
    async def session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        if not self.db_manager.is_initialized:
            raise PersistenceError("Database is not initialized")
        try:
            async with self.db_manager.get_session() as session:
                yield session
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error("Database operation failed", operation=operation, error=str(e))
            raise PersistenceError(f"Failed to {operation}: {e}") from e
