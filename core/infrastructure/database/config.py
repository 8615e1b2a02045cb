"""
Database configuration.

Manages database connection settings, engine creation and the session
factory shared by every unit of work.
"""
import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Database configuration settings.

    Loaded from environment variables (``DB_`` prefix) or .env file.
    SQLite via aiosqlite by default; Postgres via asyncpg in production.
    """

    url: str = "sqlite+aiosqlite:///./storefront.db"

    # Connection pool settings (ignored for SQLite)
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600  # 1 hour

    # Echo SQL (for debugging)
    echo_sql: bool = False

    # Create tables on startup
    create_tables: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DB_",
        extra="ignore",
    )


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Returns:
        Configured async engine
    """
    settings = settings or DatabaseSettings()
    url = make_url(settings.url)
    logger.info(f"Creating database engine: {url.render_as_string(hide_password=True)}")

    if url.drivername.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each session sees an empty DB.
            kwargs["poolclass"] = StaticPool
        return create_async_engine(url, echo=settings.echo_sql, **kwargs)

    return create_async_engine(
        url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
        pool_pre_ping=True,  # Test connections before using
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for creating sessions."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# DATABASE LIFECYCLE
# =============================================================================

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables if they don't exist."""
    from core.data.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(settings: Optional[DatabaseSettings] = None) -> None:
    """Initialize the global engine and session factory (idempotent)."""
    global _engine, _session_factory

    if _engine is not None:
        return

    settings = settings or DatabaseSettings()
    logger.info("Initializing database...")

    _engine = create_engine(settings)
    _session_factory = create_session_factory(_engine)

    if settings.create_tables:
        await create_tables(_engine)

    logger.info("✅ Database initialized successfully")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get async session factory."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _session_factory


async def close_database() -> None:
    """Close database connections."""
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database connections...")
        await _engine.dispose()
        logger.info("✅ Database connections closed")

    _engine = None
    _session_factory = None
