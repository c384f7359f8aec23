import asyncio
from logging.config import fileConfig

from sqlalchemy import pool, engine_from_config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context

from talent_search.core.config import get_settings
# Engine-owned tables only; players, schools and games belong to the profile service
from talent_search.infrastructure.persistence.models import ENGINE_OWNED_TABLES

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option(
        "sqlalchemy.url",
        get_settings().get_postgres_url().replace("postgresql://", "postgresql+asyncpg://", 1),
    )

target_metadata = SQLModel.metadata
ENGINE_OWNED_TABLE_NAMES = {table.name for table in ENGINE_OWNED_TABLES}


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Restrict autogenerate to the tables this service owns."""
    if type_ == "table":
        return name in ENGINE_OWNED_TABLE_NAMES
    table = getattr(obj, "table", None)
    if table is not None:
        return table.name in ENGINE_OWNED_TABLE_NAMES
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL without a DBAPI."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        include_object=include_object,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=True
    )

    with context.begin_transaction():
        context.run_migrations()


def run_sync_migrations() -> None:
    """Run migrations in synchronous 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


async def run_async_migrations() -> None:
    """Run migrations in async 'online' mode."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode, choosing sync or async by URL."""
    url = config.get_main_option("sqlalchemy.url")

    if url and "asyncpg" in url:
        try:
            asyncio.get_running_loop()
            run_sync_migrations()
        except RuntimeError:
            asyncio.run(run_async_migrations())
    else:
        run_sync_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
