from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.analytics import DayCount, StoreAnalytics, ViewedCar
from automarket.services.analytics import count_per_day, ensure_store_access, most_viewed, store_analytics
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/stores/{store_id}/analytics", tags=["analytics"])


@router.get("", response_model=StoreAnalytics, status_code=status.HTTP_200_OK)
async def get_store_analytics(
        store_id: int,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await ensure_store_access(db, user, store_id)
    return await store_analytics(db, store_id)


@router.get("/most-viewed", response_model=list[ViewedCar], status_code=status.HTTP_200_OK)
async def get_most_viewed(
        store_id: int,
        limit: int = Query(10, ge=1, le=100),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await ensure_store_access(db, user, store_id)
    return await most_viewed(db, store_id, limit)


@router.get("/{entity}/per-day", response_model=list[DayCount], status_code=status.HTTP_200_OK)
async def get_store_counts_per_day(
        store_id: int,
        entity: str,
        days: int = Query(30, ge=1, le=365),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    """Listings or messages of the store created per day"""
    await ensure_store_access(db, user, store_id)
    return await count_per_day(db, entity, "created_at", days, store_id)
