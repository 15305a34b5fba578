"""Async Session Factory — raw session factory for scripts and test fixtures.

Invariants:
    - Sessions never expire attributes on commit
    - SQLite connections run with foreign keys enforced

Design Decisions:
    - Separate from infrastructure/database.py: alembic and fixtures need a bare factory
      without the StorageError mapping
"""

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine; SQLite URLs get the foreign-key pragma."""
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        sync_engine: Engine = engine.sync_engine
        event.listen(sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
