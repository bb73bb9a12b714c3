"""
Async SQLAlchemy plumbing for the SQL summary store.

One engine and one session factory per process, created lazily from
``settings.database_url``. Tests swap in an in-memory engine by assigning
``_engine`` and clearing ``_session_factory``, then call ``reset_engine``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for the summary tables."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _prepare_sqlite_path(db_url: str) -> None:
    """Make sure the directory of a file-backed SQLite database exists."""
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def get_engine(url: str | None = None) -> AsyncEngine:
    """Return the process engine, building it from ``url`` or settings once."""
    global _engine
    if _engine is None:
        db_url = url or get_settings().database_url
        _prepare_sqlite_path(db_url)
        _engine = create_async_engine(db_url, echo=False)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to :func:`get_engine`."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Unit of work: commit when the block exits cleanly, roll back otherwise."""
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create the ``call_summaries`` table if it does not exist."""
    from src.services.storage import models_db  # noqa: F401  (registers tables)

    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine (app shutdown / end of a CLI run)."""
    if _engine is not None:
        await _engine.dispose()
    reset_engine()


def reset_engine() -> None:
    """Forget the cached engine and factory without disposing them."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None
