from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import UnauthorizedError
from automarket.core.logging import setup_logging
from automarket.db.database import get_db
from automarket.models.store import Store

logger = setup_logging()


async def validate_api_key(db: AsyncSession, api_key: str | None) -> Store:
    """Resolve the store owning an API key"""
    if not api_key or not api_key.strip():
        raise UnauthorizedError("API key is required. Send it in the X-API-Key header.")

    store = await db.scalar(select(Store).where(Store.api_key == api_key.strip()))
    if not store:
        logger.error("Rejected request with unknown API key")
        raise UnauthorizedError("Invalid or expired API key.")
    return store


async def get_store_from_api_key(
        x_api_key: str | None = Header(None, alias='X-API-Key'),
        db: AsyncSession = Depends(get_db)) -> Store:
    return await validate_api_key(db, x_api_key)
