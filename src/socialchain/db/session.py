"""
Database session management for SQLAlchemy.

Provides async engine creation, the session factory, and the per-request
session dependency. One ``Database`` is built per application and kept on
``app.state``.
"""

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..core.config import BaseConfig
from ..core.exceptions import DatabaseError
from ..core.logging import get_logger
from ..models import Base

logger = get_logger(__name__)


def to_async_url(database_url: str) -> str:
    """Rewrite a plain driver URL to its async driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://") and not database_url.startswith("sqlite+aiosqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, config: BaseConfig):
        self._config = config
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    def _engine_options(self, database_url: str) -> Dict[str, Any]:
        if database_url.startswith("sqlite"):
            # A single shared connection keeps an in-memory database alive
            return {
                "echo": self._config.DATABASE_ECHO,
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return {
            "echo": self._config.DATABASE_ECHO,
            "pool_size": self._config.DATABASE_POOL_SIZE,
            "max_overflow": self._config.DATABASE_MAX_OVERFLOW,
            "pool_pre_ping": True,
            "pool_recycle": 3600,  # Recycle connections after 1 hour
        }

    def init(self) -> None:
        """Initialize database engine and session factory."""
        if self.engine is not None:
            logger.info("Database already initialized, skipping")
            return

        database_url = to_async_url(self._config.DATABASE_URL)
        self.engine = create_async_engine(database_url, **self._engine_options(database_url))
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(f"Created async engine for {self.engine.url.render_as_string(hide_password=True)}")

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError("Database session factory not initialized. Call init() first.")
        return self.session_factory

    async def create_all(self) -> None:
        """Create all tables defined on the model metadata."""
        if self.engine is None:
            raise RuntimeError("Database engine not initialized. Call init() first.")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def close(self) -> None:
        """Close database engine."""
        if self.engine is None:
            return
        try:
            await self.engine.dispose()
        except Exception as e:
            logger.warning(f"Error disposing database engine: {e}")
        finally:
            self.engine = None
            self.session_factory = None
            logger.info("Database engine closed")

    async def check_health(self) -> bool:
        """Check database connection health."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for dependency injection."""
    database: Database = request.app.state.database

    async with database.get_session_factory()() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise DatabaseError("Database operation failed") from e
        except Exception:
            await session.rollback()
            raise
