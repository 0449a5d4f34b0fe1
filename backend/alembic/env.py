"""Alembic environment — async migrations for the comic catalog schema.

Design Decisions:
    - The URL comes from Settings (DATABASE_URL / .env, postgresql:// already
      rewritten for asyncpg); alembic.ini only supplies a local default
    - The engine is built by db/session.create_engine, like the app's
    - SQLite migrations run in batch mode (SQLite cannot ALTER most constraints)
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy.engine import Connection

from alembic import context

import comic_site.models  # noqa: F401
from comic_site.config import get_settings
from comic_site.db.base import Base
from comic_site.db.session import create_engine

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    if os.environ.get("DATABASE_URL"):
        return get_settings().database_url
    return config.get_main_option("sqlalchemy.url")


def _configure(**kwargs) -> None:
    url = kwargs.pop("url", None) or _database_url()
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=url.startswith("sqlite"),
        url=url if "connection" not in kwargs else None,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_on(connection: Connection) -> None:
    _configure(connection=connection, url=str(connection.engine.url))
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_engine(_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(_run_on)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
