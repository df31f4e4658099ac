"""
Database configuration with async session handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.config import settings
from feedsync.core.logging import log


def create_engine_from_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, enabling foreign keys on SQLite"""
    if ":memory:" in url:
        # One shared connection, otherwise every checkout sees an empty database
        engine = create_async_engine(url, echo=echo, poolclass=StaticPool)
    else:
        engine = create_async_engine(url, echo=echo, pool_pre_ping=not url.startswith("sqlite"))

    if url.startswith("sqlite"):

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Set connection parameters on connect"""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


class DatabaseSessionManager:
    """Manages database session lifecycle with proper error handling"""

    def __init__(self, url: Optional[str] = None):
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self.init()
        return self._engine

    def init(self, engine: Optional[AsyncEngine] = None):
        """Initialize the engine and session factory"""
        if engine is not None:
            self._engine = engine
        elif self._engine is None:
            self._engine = create_engine_from_url(self._url or settings.async_database_url, echo=settings.db_echo)
        self._sessionmaker = create_sessionmaker(self._engine)

    async def close(self):
        """Close database connection"""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        log.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session; commits are issued by the repositories"""
        if self._sessionmaker is None:
            self.init()

        async with self._sessionmaker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                log.error("Database session error", error=str(e))
                raise


# Global session manager instance
db_manager = DatabaseSessionManager()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Async session dependency"""
    async with db_manager.session() as session:
        yield session


async def init_db(engine: Optional[AsyncEngine] = None):
    """Create tables from metadata (development and tests; use Alembic in production)"""
    # Register table models on the metadata
    import feedsync.models  # noqa: F401

    engine = engine or db_manager.engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    log.info("Database tables created")


async def check_database_health() -> dict:
    """Check database connectivity"""
    try:
        async with db_manager.session() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
        return {"status": "healthy"}
    except Exception as e:
        log.error("Database health check failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}
