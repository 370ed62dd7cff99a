"""Alembic entry point for the TaskHub schema.

Run from packages/backend with `alembic upgrade head`. The connection URL
is never read from alembic.ini: it always comes from TASKHUB_DATABASE_URL
(settings.database_url), so migrations and the app hit the same database.
Autogenerate diffs against taskhub.db.models, column types included.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from taskhub.config import settings
from taskhub.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_CONFIGURE_OPTS = {"target_metadata": target_metadata, "compare_type": True}


def run_offline() -> None:
    """Emit the SQL script instead of executing it (`alembic upgrade --sql`)."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **_CONFIGURE_OPTS)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    # NullPool: one short-lived connection for the migration run.
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
