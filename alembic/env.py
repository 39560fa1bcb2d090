"""Alembic environment for the group ledger schema.

Revisions are hand-written SQL (users, expense_groups, group_members,
group_expenses, expense_splits), so there is no ORM metadata to autogenerate
from. The target database defaults to settings.DATABASE_URL and can be
overridden per run:

    alembic -x db_url=postgresql+asyncpg://... upgrade head
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from config.settings import settings

VERSION_TABLE = "gl_alembic_version"

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("db_url", settings.DATABASE_URL)


def _configure(**kwargs) -> None:  # type: ignore[no-untyped-def]
    # One transaction per revision.
    context.configure(
        target_metadata=None,
        version_table=VERSION_TABLE,
        transaction_per_migration=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Print the DDL instead of applying it."""
    _configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
