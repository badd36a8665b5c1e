"""
Database configuration.

Manages the task hub storage engine and session factory.
"""
from typing import Optional
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from core.settings import get_app_settings


logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        database_url: Overrides DFM_DATABASE_URL

    Returns:
        Configured async engine
    """
    settings = get_app_settings().database
    url = make_url(database_url or settings.database_url)

    logger.info(f"Creating database engine: {url.render_as_string(hide_password=True)}")

    if url.drivername.startswith("sqlite"):
        # SQLite doesn't support connection pooling well
        return create_async_engine(
            url,
            echo=settings.echo_sql,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if url.database in (None, "", ":memory:") else None,
        )

    return create_async_engine(
        url,
        echo=settings.echo_sql,
        pool_pre_ping=True,  # Test connections before using
    )


# Global engine instance
engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """
    Get or create global engine instance.

    Returns:
        Global async engine
    """
    global engine

    if engine is None:
        engine = create_engine()

    return engine


# =============================================================================
# SESSION FACTORY
# =============================================================================

def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get session factory.

    Returns:
        Session factory for creating sessions
    """
    global _session_factory

    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())

    return _session_factory


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database() -> None:
    """
    Initialize database.

    Creates all tables if they don't exist.
    """
    from core.infrastructure.database.models import Base

    logger.info("Initializing database...")

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database initialized successfully")


async def close_database() -> None:
    """Close database connections."""
    global engine, _session_factory

    if engine:
        logger.info("Closing database connections...")
        await engine.dispose()
        engine = None
        _session_factory = None
        logger.info("✅ Database connections closed")
