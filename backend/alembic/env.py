# /backend/alembic/env.py
import asyncio
import logging
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from app.core.config import settings
from app.db.base import Base  # registers every board table on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata

# SQLite needs batch mode for ALTER TABLE; harmless on Postgres.
MIGRATION_OPTIONS = {"target_metadata": target_metadata, "compare_type": True, "render_as_batch": True}


def _safe(url: str) -> str:
    return make_url(url).render_as_string(hide_password=True)


def run_migrations_offline() -> None:
    """Emit SQL to stdout against the driver-less URL; no database connection is made."""
    url = settings.SYNC_DATABASE_URL
    logger.info(f"Generating offline migration SQL for {_safe(url)}")
    context.configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    url = settings.ASYNC_DATABASE_URL
    logger.info(f"Migrating board database at {_safe(url)}")
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
