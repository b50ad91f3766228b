import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.common.config import settings
from src.models.models import Base

log = logging.getLogger(__name__)


class ClinicDatabase:
    """Async SQLAlchemy client owned by the application.

    Built once by the application factory, opened in the lifespan startup and
    disposed at shutdown. Every request gets its own session from it.
    """

    def __init__(self, url: str, echo: bool = False, **engine_options):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, future=True, **engine_options)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def connect(self) -> None:
        """Connect to the database."""
        try:
            # Test connection by executing a simple query
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            log.info("Database connected successfully")
        except Exception:
            log.exception("Error connecting to the database")
            raise

    async def close(self) -> None:
        """Close the database connection."""
        await self.engine.dispose()
        log.info("Database connection closed")

    async def ping(self) -> bool:
        """Report whether the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            log.error("Database health check failed: %s", e)
            return False

    async def create_all(self) -> None:
        """Create every table from the ORM metadata (tests and local setups; production uses alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        return self.session_factory()


def build_database() -> ClinicDatabase:
    """Build the production client from settings."""
    # Disable prepared statement caching so the Supabase/pgbouncer pooler works
    return ClinicDatabase(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_recycle=1800,
        connect_args={"statement_cache_size": 0} if "asyncpg" in settings.DATABASE_URL else {},
    )


# Dependency for using a session in routes
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session bound to the application's client."""
    database: ClinicDatabase = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
