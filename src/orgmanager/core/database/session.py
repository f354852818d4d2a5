"""Async database lifecycle and session management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from orgmanager.config import Settings
from orgmanager.core.database.base import Base


logger = structlog.get_logger()


class DatabaseNotConnected(RuntimeError):
    """Raised when a session is requested before connect() or after disconnect()."""


class Database:
    """The process-wide connection to the backing store.

    Constructed by the application factory, connected on startup and
    disconnected on shutdown. Every request draws its own session from it.

    Usage:
        db = Database(settings.async_database_url)
        await db.connect()
        async with db.session() as session:
            ...
        await db.disconnect()
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ) -> None:
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.async_database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotConnected("Database is not connected")
        return self._engine

    async def connect(self, create_registry: bool = True) -> None:
        """Create the engine, verify connectivity and ensure registry tables.

        Args:
            create_registry: Create the organizations and admin_users tables
                (with their unique constraints) if they don't exist
        """
        if self._engine is not None:
            logger.info("database_already_connected")
            return

        engine = create_async_engine(
            self.url,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            echo=self.echo,
            pool_pre_ping=True,  # Verify connections before use
        )
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if create_registry:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            logger.exception("database_connect_failed")
            raise

        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("database_connected")

    async def disconnect(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("database_disconnected")

    def session(self) -> AsyncSession:
        """Open a new session bound to the engine."""
        if self._session_factory is None:
            raise DatabaseNotConnected("Database is not connected")
        return self._session_factory()

    async def ping(self) -> None:
        """Round-trip a trivial query; raises on failure."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Provide a session that commits on success and rolls back on error.

        Usage:
            async with db.transaction() as session:
                ...
        """
        async with self.session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
