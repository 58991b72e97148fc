"""Alembic environment for the metastore schema.

Migrations are hand-written raw SQL run through the async engine. The ORM
mirrors are registered on Base.metadata only so `alembic check` can flag a
mirror that drifted from the migrated tables. DATABASE_URL comes from
config.settings, not from alembic.ini.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from config.settings import settings
from src.mp_app.infrastructure import db_models as app_tables  # noqa: F401
from src.mp_common.database import Base
from src.mp_listing.infrastructure import db_models as listing_tables  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Custody, payment and purchase tables have no ORM mirror
_UNMIRRORED_TABLES = frozenset({
    "asset_holdings",
    "custody_movements",
    "balances",
    "payment_ledger",
    "royalty_schedules",
    "purchases",
})


def include_object(obj, name, type_, reflected, compare_to):  # type: ignore[no-untyped-def]
    if type_ == "table" and name in _UNMIRRORED_TABLES:
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=settings.DATABASE_URL,
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
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    engine = create_async_engine(settings.DATABASE_URL)
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
