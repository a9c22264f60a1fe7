"""
Async database access using SQLAlchemy.

This module owns the engine and session factory. FastAPI initializes them on
startup and disposes them on shutdown (see `api/main.py`).

Backends:
- PostgreSQL through asyncpg (`postgresql+asyncpg://...`)
- SQLite file through aiosqlite (`sqlite+aiosqlite:///...`)

Without a configured connection string the backend is picked from the host
platform: PostgreSQL on Windows, a local SQLite file elsewhere.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from . import config

logger = logging.getLogger(__name__)

WINDOWS_DEFAULT_URL = "postgresql+asyncpg://localhost:5432/speakers"
SQLITE_DEFAULT_URL = "sqlite+aiosqlite:///./speakers.db"

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    pass


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq-only options such as sslmode.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _with_async_driver(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise config.ConfigError(f"Invalid database URL: {url!r}")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg://{rest}"
    if scheme == "sqlite":
        return f"sqlite+aiosqlite://{rest}"
    return url


def default_database_url(platform: str | None = None) -> str:
    platform = platform if platform is not None else sys.platform
    if platform.startswith("win"):
        return WINDOWS_DEFAULT_URL
    return SQLITE_DEFAULT_URL


def database_url(platform: str | None = None) -> str:
    url = config.connection_string()
    if not url:
        return default_database_url(platform)
    url = _with_async_driver(url)
    if url.startswith("postgresql+asyncpg://"):
        url = _sanitize_database_url(url)
    return url


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def init_engine(url: str | None = None) -> None:
    global _engine, _session_factory
    if _engine is not None:
        return None
    url = url or database_url()
    if is_sqlite(url):
        _engine = create_async_engine(url)
    else:
        _engine = create_async_engine(
            url,
            pool_size=5,
            pool_pre_ping=True,
            connect_args={"command_timeout": 30},
        )
    _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False)
    logger.info("db_engine_initialized backend=%s", _engine.dialect.name)


async def close_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return None
    await _engine.dispose()
    _engine = None
    _session_factory = None


def engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("DB engine is not initialized. Call init_engine() on startup.")
    return _engine


def session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("DB engine is not initialized. Call init_engine() on startup.")
    return _session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency: one session per request.
    """
    async with session_factory()() as session:
        yield session


async def create_schema(*, reset: bool = False) -> None:
    """
    Create missing tables. With `reset=True` every table is dropped first,
    which destroys all stored data.
    """
    async with engine().begin() as conn:
        if reset:
            logger.warning("db_schema_reset backend=%s", engine().dialect.name)
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db_schema_ready tables=%s", ",".join(sorted(Base.metadata.tables)))
