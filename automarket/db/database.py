from automarket.core.config import settings
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)

engine = create_async_engine(settings.automarket_db_url, echo=False, pool_pre_ping=True)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
