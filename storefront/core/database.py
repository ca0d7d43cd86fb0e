"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator
import logging

from .config import settings

logger = logging.getLogger(__name__)

def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pooling suited to the backend"""
    if url.startswith("sqlite"):
        # SQLite doesn't support connection pooling parameters
        return create_async_engine(url, echo=echo, poolclass=NullPool)

    # PostgreSQL and other databases support pooling
    if settings.ENVIRONMENT == "test":
        return create_async_engine(url, echo=echo, poolclass=NullPool)
    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
    )

def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

engine = create_engine_for(settings.database_url_async, echo=settings.DATABASE_ECHO)

AsyncSessionLocal = create_session_factory(engine)

def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory dependency
    Stores open their own sessions so independent reads can run concurrently
    """
    return AsyncSessionLocal

# Database dependency
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Ensures proper cleanup after use
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def init_db(bind: AsyncEngine = engine) -> None:
    """Initialize database tables"""
    from storefront.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
