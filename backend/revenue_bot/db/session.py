import logging
import ssl
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from revenue_bot.core.config import Settings

logger = logging.getLogger(__name__)


def _ssl_context() -> ssl.SSLContext:
    # Managed Postgres providers hand out self-signed certificates.
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide async engine. Called once at startup."""
    connect_args = {"ssl": _ssl_context()} if settings.DATABASE_SSL else {}
    return create_async_engine(
        settings.async_database_url,
        echo=settings.APP_ENV == "development" and settings.LOG_LEVEL.upper() == "DEBUG",
        pool_pre_ping=True,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=0,
        pool_recycle=1800,
        connect_args=connect_args,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(sessionmaker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Create the expense tables and indexes if they do not exist yet."""
    from revenue_bot.db.base import Base
    import revenue_bot.models  # noqa: F401  registers tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Expense tables created/verified")
