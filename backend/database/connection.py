"""
Database connection handle
One Database instance per application, created at startup and passed to
request handlers through a FastAPI dependency.
"""
from typing import AsyncGenerator, Optional
import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from .config import Settings

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


class Database:
    """Engine plus session factory for one database."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        pool_options = {}
        if not settings.use_null_pool:
            pool_options = {
                "pool_size": settings.pool_size,
                "max_overflow": settings.max_overflow,
                "pool_recycle": settings.pool_recycle,
            }
        try:
            engine = create_async_engine(
                settings.database_url,
                poolclass=NullPool if settings.use_null_pool else AsyncAdaptedQueuePool,
                pool_pre_ping=settings.pool_pre_ping,
                echo=False,
                **pool_options,
            )
        except Exception as e:
            logger.error(f"Failed to create database engine: {e}")
            raise
        logger.info("Database engine created successfully")
        return cls(engine)

    async def create_all(self) -> None:
        """Create all tables defined in models. Called during application startup."""
        # Import models so they register on Base.metadata
        from . import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database tables: {e}")
            raise

    async def dispose(self) -> None:
        """Close the connection pool when the application shuts down."""
        await self.engine.dispose()
        logger.info("Database connection pool closed")


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database has not been initialized")
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that provides a database session to routes.
    The session is rolled back on error and closed after the request completes.
    """
    database = get_database(request)
    async with database.session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
