"""Async engine, session factory and the declarative base shared by all models."""
import logging
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from clientdesk.common.config import settings

logger = logging.getLogger(__name__)


def _is_sqlite(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _engine_options(database_url: str) -> dict:
    # SQLite has no server to lose connections to and no pool to size
    if _is_sqlite(database_url):
        return {}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """Make SQLite enforce FOREIGN KEY and ON DELETE clauses like Postgres does."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)
if _is_sqlite(settings.database_url):
    enable_sqlite_foreign_keys(engine)

# Objects stay readable after the usecase's transaction block commits
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request.

    Usecases open and commit their own transactions; anything left open
    by an error escaping the handler is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Create any missing tables. Schema changes go through alembic."""
    import clientdesk.models  # noqa: F401  registers the tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (%s)", make_url(settings.database_url).get_backend_name())


async def close_db():
    await engine.dispose()
