"""
PostgreSQL connection pool for the API service.

Uses a SQLAlchemy async engine on the asyncpg driver. The pool is opened and
pinged at application startup and disposed at shutdown; the product handlers
that will query it are still placeholders, so no schema lives here.
"""

from typing import Optional

import structlog
from sqlalchemy import URL, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from inboxai_api.config import Settings

logger = structlog.get_logger(__name__)


class DatabaseConnectionError(Exception):
    """Raised when the pool cannot be created or the database does not answer."""


class Database:
    """
    Async connection pool wrapper.
    
    Pool sizing comes from settings: DB_POOL_MIN_SIZE connections are kept,
    up to DB_POOL_MAX_SIZE may be open at once, and connections are recycled
    after DB_POOL_RECYCLE seconds.
    """
    
    def __init__(self, settings: Settings):
        self.settings = settings
        self.url = URL.create(
            "postgresql+asyncpg",
            username=settings.DB_USER,
            password=settings.DB_PASSWORD,
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            database=settings.DB_NAME,
        )
        self._engine: Optional[AsyncEngine] = None
    
    @property
    def engine(self) -> AsyncEngine:
        """The live engine; only valid between connect() and close()."""
        if self._engine is None:
            raise DatabaseConnectionError("Database is not connected")
        return self._engine
    
    @property
    def is_connected(self) -> bool:
        return self._engine is not None
    
    async def connect(self) -> None:
        """
        Create the pool and verify the database answers.
        
        Raises:
            DatabaseConnectionError: engine creation or the ping failed
        """
        settings = self.settings
        engine = create_async_engine(
            self.url,
            pool_size=settings.DB_POOL_MIN_SIZE,
            max_overflow=max(0, settings.DB_POOL_MAX_SIZE - settings.DB_POOL_MIN_SIZE),
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
            connect_args={"ssl": settings.DB_SSLMODE},
        )
        
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            await engine.dispose()
            raise DatabaseConnectionError(f"Failed to ping database: {e}") from e
        
        self._engine = engine
        logger.info(
            "Database connected",
            host=settings.DB_HOST,
            port=settings.DB_PORT,
            database=settings.DB_NAME,
        )
    
    async def close(self) -> None:
        """Dispose the pool (no-op when not connected)."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database connection pool closed")
