from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.db.models import Base

settings = get_settings()
engine = create_async_engine(settings.async_database_uri, pool_pre_ping=True)
AsyncSessionFactory = async_sessionmaker(engine, expire_on_commit=False)


async def create_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine) -> None:
    async with bind.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionFactory() as session:
        yield session
