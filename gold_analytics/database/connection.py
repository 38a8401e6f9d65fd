"""
Database Connection Management

Async database engine with SQLAlchemy 2.0 for read-only warehouse access.
Implements schema translation, health checks, and graceful shutdown.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from gold_analytics.config import get_settings
from gold_analytics.database.models import GOLD_SCHEMA

logger = structlog.get_logger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine_for_url(
    url: str,
    schema_name: Optional[str] = GOLD_SCHEMA,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create an async engine whose ``gold`` schema maps onto ``schema_name``.

    SQLite has no schemas, so passing ``schema_name=None`` makes the models
    address plain table names. In-memory SQLite needs a single shared
    connection, everything else gets a NullPool (the driver pools itself).
    """
    engine_config: Dict[str, Any] = {
        "echo": echo,
        "execution_options": {"schema_translate_map": {GOLD_SCHEMA: schema_name}},
    }

    if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
        engine_config["poolclass"] = StaticPool
        engine_config["connect_args"] = {"check_same_thread": False}
    else:
        engine_config["poolclass"] = NullPool
        engine_config["pool_pre_ping"] = True

    return create_async_engine(url, **engine_config)


def _make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database engine.

    Args:
        url: Override for the configured async database URL

    Returns:
        AsyncEngine: The initialized database engine
    """
    global _engine, _async_session_factory

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    settings = get_settings()
    database_url = url or settings.database.async_url
    schema_name = settings.database.schema_name
    if database_url.startswith("sqlite"):
        schema_name = None

    _engine = create_engine_for_url(database_url, schema_name=schema_name, echo=settings.database.echo)
    _async_session_factory = _make_session_factory(_engine)

    # Verify connection
    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info(
            "Database connection established",
            dialect=_engine.dialect.name,
            schema=schema_name,
        )
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        raise

    return _engine


async def close_database() -> None:
    """Dispose of the engine; a no-op when nothing was initialized"""
    global _engine, _async_session_factory

    engine, _engine, _async_session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Database connection closed")


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session on the warehouse.

    Nothing here writes to the Gold Layer, so the session is always rolled
    back on exit instead of committed.

        async with get_db() as db:
            gold = await GoldRepository(db).load()
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _async_session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.error("Query failed", error=str(e), error_type=type(e).__name__)
            raise
        finally:
            await session.rollback()


async def get_db_dependency() -> AsyncGenerator[AsyncSession, None]:
    """Session per request, for ``Depends(get_db_dependency)``"""
    async with get_db() as session:
        yield session


async def check_database_health() -> Dict[str, Any]:
    """Round-trip a trivial query and report whether it worked and how long it took"""
    started = time.perf_counter()
    try:
        async with get_db() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }
