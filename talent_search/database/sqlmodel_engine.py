"""
SQLModel database engine and session management.

Async SQLAlchemy engine (asyncpg) for the shared PostgreSQL store, with the
pgvector extension required by the player embedding index.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import text

from talent_search.core.config import Settings

logger = structlog.get_logger(__name__)


class SQLModelDatabaseManager:
    """
    Owns the async engine and hands out sessions that commit on success and
    roll back on error.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.async_session_factory: Optional[async_sessionmaker] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized and self.engine is not None

    def _build_database_url(self) -> str:
        """Convert the configured PostgreSQL URL to the asyncpg dialect."""
        url = str(self.settings.get_postgres_url())
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url

    async def initialize(self) -> None:
        if self._initialized:
            logger.warning("SQLModel database manager already initialized")
            return

        database_url = self._build_database_url()
        try:
            self.engine = create_async_engine(
                database_url,
                pool_size=10,
                max_overflow=20,
                pool_timeout=30,
                pool_recycle=3600,
                pool_pre_ping=True,
                echo=False,
                connect_args={
                    "server_settings": {
                        "application_name": "talent-search-engine",
                    }
                },
            )
            self.async_session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=True,
            )

            async with self.engine.begin() as conn:
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))

            self._initialized = True
            logger.info(
                "SQLModel database manager initialized",
                database_url=database_url.split("@")[-1],
            )
        except Exception as e:
            logger.error("Failed to initialize SQLModel database manager", error=str(e))
            raise

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async session with automatic commit, rollback and cleanup.

        Usage:
            async with db_manager.get_session() as session:
                result = await session.execute(select(PlayerEmbeddingTable))
        """
        if not self.async_session_factory:
            raise RuntimeError("Database manager not initialized")

        session = self.async_session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> Dict[str, Any]:
        if not self.engine:
            return {"status": "unhealthy", "error": "Database manager not initialized"}

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            pool = self.engine.pool
            return {
                "status": "healthy",
                "pool_size": pool.size(),
                "checked_out": pool.checkedout(),
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

    async def shutdown(self) -> None:
        if self.engine:
            try:
                await self.engine.dispose()
                logger.info("SQLModel database manager shut down")
            finally:
                self.engine = None
                self.async_session_factory = None
                self._initialized = False


_sqlmodel_db_manager: Optional[SQLModelDatabaseManager] = None


def get_sqlmodel_db_manager(settings: Optional[Settings] = None) -> SQLModelDatabaseManager:
    """Global database manager, created on first call."""
    global _sqlmodel_db_manager

    if _sqlmodel_db_manager is None:
        if settings is None:
            from talent_search.core.config import get_settings
            settings = get_settings()
        _sqlmodel_db_manager = SQLModelDatabaseManager(settings)

    return _sqlmodel_db_manager


async def init_sqlmodel_database(settings: Optional[Settings] = None) -> SQLModelDatabaseManager:
    db_manager = get_sqlmodel_db_manager(settings)
    await db_manager.initialize()
    return db_manager


async def shutdown_sqlmodel_database() -> None:
    global _sqlmodel_db_manager
    if _sqlmodel_db_manager:
        await _sqlmodel_db_manager.shutdown()
        _sqlmodel_db_manager = None
