"""Database configuration and connection setup"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agenda.config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _engine_options(url: str) -> dict:
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    # SQLite (local runs and tests) has no QueuePool sizing
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
    return options


# Create database engine with connection pooling
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Objects stay readable after commit; every read path re-selects explicitly
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db():
    """Database dependency for FastAPI"""
    async with AsyncSessionLocal() as db:
        yield db


async def create_tables(drop_existing: bool = False):
    """Create all database tables (optionally dropping them first)"""
    from agenda.models import Base

    async with engine.begin() as conn:
        if drop_existing:
            logger.warning("Dropping existing tables...")
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Creating all tables...")
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database tables created successfully!")


if __name__ == "__main__":
    from agenda.utils.my_logging import setup_logging

    setup_logging()
    asyncio.run(create_tables())
