from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from skillfest.core.config import settings


def _engine_options() -> dict:
    """Pool sizing only applies to server databases; SQLite uses a static pool."""
    if str(settings.database_url).startswith("sqlite"):
        return {"echo": settings.debug}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "echo": settings.debug,
    }


# =============================================================================
# Async Engine & Session (for FastAPI)
# =============================================================================
engine = create_async_engine(str(settings.database_url), **_engine_options())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def create_worker_session_maker():
    """Create a fresh async engine and session maker for worker tasks.

    This is needed because Celery workers run in a different event loop
    than where the global engine was created.
    """
    worker_engine = create_async_engine(str(settings.database_url), **_engine_options())
    return async_sessionmaker(
        worker_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize database tables."""
    from skillfest.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
