"""Engine and session lifecycle for the ledger database.

SQLite (the default) gets foreign keys switched on per connection so wallet,
chama and purchase rows cannot point at missing accounts. Pool sizing only
applies to server databases.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from chamapay.core.config import DatabaseSettings, get_settings
from chamapay.infrastructure.database.base import Base

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database: DatabaseSettings, *, echo: bool = False) -> AsyncEngine:
    is_sqlite = database.url.startswith("sqlite")
    options: dict[str, Any] = {"echo": database.echo or echo}
    if not is_sqlite:
        options["pool_pre_ping"] = True
        if database.pool_size is not None:
            options["pool_size"] = database.pool_size
        if database.max_overflow is not None:
            options["max_overflow"] = database.max_overflow

    engine = create_async_engine(database.url, **options)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_engine() -> AsyncEngine:
    global _engine, _session_factory
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database, echo=settings.debug)
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session; routers commit explicitly, anything left over is rolled back on error."""
    get_engine()
    assert _session_factory is not None
    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables; deployments run ``alembic upgrade head`` instead."""
    from chamapay.db import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
