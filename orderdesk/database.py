"""
Database Connection Module
Handles the order store connection using the SQLAlchemy async engine.
"""

from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from orderdesk.core.config import get_settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, sizing the pool only for server databases."""
    options = {"echo": echo}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(pool_size=5, max_overflow=10)
    return create_async_engine(url, **options)


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,  # Objects remain accessible after commit
    )


settings = get_settings()

engine = build_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = build_sessionmaker(engine)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Create all tables in database.
    Called once at application startup.
    """
    # Register models on Base.metadata
    import orderdesk.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
