"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and schema
initialization. The session factory is the single store handle that is
constructed once and injected into every engine component.

Dependencies: sqlalchemy, knowledge_base.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from knowledge_base.boundary.db.base import Base
from knowledge_base.configs.database import DatabaseSettings
from knowledge_base.configs import get_settings

logger = logging.getLogger(__name__)

_FTS_INDEX_DDL = """
CREATE INDEX IF NOT EXISTS ix_documents_fts
ON documents USING gin (
    to_tsvector('english', concat_ws(' ', title, description, content))
)
"""


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Pool sizing only applies to PostgreSQL; SQLite URLs get the driver
    defaults. pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Args:
        db_config: Database settings (uses application settings if None)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = db_config or get_settings().database

    if not db_config.is_postgres:
        return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns fresh async_sessionmaker bound to engine with autoflush=False
    for explicit transaction control and expire_on_commit=False so returned
    documents stay readable after the owning session closes.

    Args:
        engine: Engine to bind (created from settings if None)

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    engine = engine or get_async_engine()
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """
    Create tables and, on PostgreSQL, the full-text GIN index.

    Idempotent and safe to run on every startup.

    Args:
        engine: Async engine to initialize
    """
    # Import models after Base is defined
    from knowledge_base.boundary.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if conn.dialect.name == "postgresql":
            await conn.execute(text(_FTS_INDEX_DDL))

    logger.info(
        f"{__name__}:init_models - Schema ready",
        extra={"dialect": engine.dialect.name},
    )
