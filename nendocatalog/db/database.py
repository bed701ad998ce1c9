"""
Key-value store engine and sessions.

The store is a local SQLite file by default. The API process and the
export job share this module's engine; every write is its own short unit
of work.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from nendocatalog.config import settings
from nendocatalog.models.db import Base

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@asynccontextmanager
async def store_session(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """
    One unit of work against the store.

    Commits when the block exits cleanly, rolls back on database errors.
    """
    async with (factory or async_session_factory)() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a store session."""
    async with store_session() as session:
        yield session


def _ensure_sqlite_dir(bind: AsyncEngine) -> None:
    url = bind.url
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Create the key_value table if it does not exist.

    For file-backed SQLite the parent directory is created first.
    """
    bind = bind or engine
    _ensure_sqlite_dir(bind)
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Key-value store ready: %s", bind.url.render_as_string(hide_password=True))
