"""Async database handle.

Provides:
- ``Database``: owns the async SQLAlchemy engine and session factory
- Unit-of-work sessions that commit on success and roll back on error
- Schema creation and connectivity checks used at startup

One ``Database`` is constructed in the application lifespan, stored on
``app.state.db`` and disposed on shutdown.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from category_service.config import Settings
from category_service.infra.logging import get_logger
from category_service.models.base import Base

logger = get_logger(__name__)


class Database:
    """Engine plus session factory with an explicit open/close lifecycle."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "Database":
        """Create the engine described by the settings.

        Pool options are only passed for server databases; SQLite URLs
        (local runs) use SQLAlchemy's defaults.
        """
        options: dict[str, Any] = {"echo": config.debug, "pool_pre_ping": True}
        if not config.database_url.startswith("sqlite"):
            options.update(
                pool_size=config.db_pool_size,
                max_overflow=config.db_pool_max_overflow,
                pool_timeout=config.db_pool_timeout,
                pool_recycle=1800,  # Recycle connections after 30 min
            )

        logger.info(
            "Creating database engine",
            pool_size=config.db_pool_size,
            max_overflow=config.db_pool_max_overflow,
        )
        return cls(create_async_engine(config.database_url, **options))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get an async session scoped to one unit of work.

        Yields:
            AsyncSession; committed when the block exits cleanly,
            rolled back when it raises.

        Example:
            async with db.session() as session:
                service = CategoryService(session)
                await service.create(data)
        """
        session = self.session_factory()

        try:
            yield session
            await session.commit()

        except Exception as e:
            await session.rollback()
            logger.debug("Session rolled back", error=str(e), error_type=type(e).__name__)
            raise

        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready", tables=sorted(Base.metadata.tables))

    async def verify_connection(self) -> bool:
        """Verify database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection failed", error=str(e))
            return False

    async def close(self) -> None:
        """Dispose the engine and all pooled connections.

        Call this during application shutdown.
        """
        logger.info("Closing database engine")
        await self.engine.dispose()
