"""Database engine and session management."""

from talent_search.database.sqlmodel_engine import (
    SQLModelDatabaseManager,
    get_sqlmodel_db_manager,
    init_sqlmodel_database,
    shutdown_sqlmodel_database,
)

__all__ = [
    "SQLModelDatabaseManager",
    "get_sqlmodel_db_manager",
    "init_sqlmodel_database",
    "shutdown_sqlmodel_database",
]
