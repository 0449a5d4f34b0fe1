"""Engine & Session Factory — one place that knows how to open the database.

Invariants:
    - SQLite connections run with PRAGMA foreign_keys=ON, so pages and files
      cannot point at missing rows on either backend
    - Pool sizing applies to server databases only (aiosqlite has its own pool)
    - Sessions never expire attributes on commit

Design Decisions:
    - Shared by DatabaseSessionManager (app runtime), Alembic and test fixtures
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10, echo: bool = False,
) -> AsyncEngine:
    """Async engine for database_url with backend-appropriate pool settings."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def create_session_factory(
    database_url: str | None = None, engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to engine, or to a new engine for database_url."""
    if engine is None:
        if database_url is None:
            raise ValueError("database_url or engine is required")
        engine = create_engine(database_url)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
