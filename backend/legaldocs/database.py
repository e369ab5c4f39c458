# @TASK S0-T0.2 - Async engine, session factory and request-scoped session

"""Database wiring for the search service.

The engine is built once at import from ``Settings``; every request gets
its own ``AsyncSession`` through ``get_db``.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from legaldocs.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the asyncpg engine described by ``settings``."""
    return create_async_engine(
        settings.async_database_url,
        echo=settings.DATABASE_ECHO,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


engine = build_engine(get_settings())

async_session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base for the folder and document tables."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a read-only session scoped to one request.

    Nothing is committed. An exception raised while the session is in use
    rolls the transaction back and propagates.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back request session after error")
            await session.rollback()
            raise
