"""Alembic environment: runs revisions over the service's async engine."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from chamapay.db import models  # noqa: F401  registers every table on Base.metadata
from chamapay.infrastructure.database import Base, dispose_engine, get_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

if context.is_offline_mode():
    raise SystemExit("Offline SQL generation is not supported; run against a database")


def _apply(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=Base.metadata,
        compare_type=True,
        # SQLite cannot ALTER most columns in place
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def _upgrade() -> None:
    try:
        async with get_engine().connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await dispose_engine()


asyncio.run(_upgrade())
