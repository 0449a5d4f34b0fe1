"""Database Session Manager — per-request sessions, error mapping, readiness check.

Invariants:
    - A session that leaves the request with an exception is rolled back and closed
    - SQLAlchemy exceptions surface as StoreError naming the failed operation;
      driver text and SQL stay in the log
    - db_manager is None until the FastAPI lifespan calls init_db()

Design Decisions:
    - Engine construction lives in db/session.py so Alembic, tests and the app
      open the database the same way
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from comic_site.core.errors import StoreError
from comic_site.db.session import create_engine, create_session_factory

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_REASONS: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "constraint violated"),
    (OperationalError, "database unavailable or locked"),
    (DBAPIError, "driver error"),
)


def map_sqlalchemy_error(e: SQLAlchemyError, operation: str = "query") -> StoreError:
    """Translate a SQLAlchemy exception into a StoreError for `operation`."""
    for error_type, reason in _REASONS:
        if isinstance(e, error_type):
            return StoreError(reason, operation)
    return StoreError("unexpected database error", operation)


class DatabaseSessionManager:
    """Owns the engine and hands out one AsyncSession per request."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_engine(
            database_url, pool_size=pool_size, max_overflow=max_overflow,
        )
        self._session_factory = create_session_factory(engine=self.engine)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Request-scoped session; rolled back if the request fails."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Request session failed ({type(e).__name__}): {e}")
            raise map_sqlalchemy_error(e, "request") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database readiness check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **pool_options) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **pool_options)
    logger.info(f"Database engine ready ({db_manager.engine.dialect.name})")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
