from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.common import Page
from automarket.schemas.store import (
    Store as StoreResponse,
    OwnedStore as OwnedStoreResponse,
    StoreCreate,
    StoreUpdate,
)
from automarket.services.store import (
    create_store,
    get_store,
    get_store_by_slug,
    list_my_stores,
    list_stores,
    update_store,
)
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=Page[StoreResponse], status_code=status.HTTP_200_OK)
async def get_stores(
        limit: int = Query(20, ge=1, le=100),
        offset: int = Query(0, ge=0),
        db: AsyncSession = Depends(get_db)):
    return await list_stores(db, limit, offset)


@router.post("", response_model=OwnedStoreResponse, status_code=status.HTTP_201_CREATED)
async def create_new_store(
        store_data: StoreCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    """Create a store; the response carries its API key"""
    return await create_store(db, user, store_data)


@router.get("/my", response_model=list[OwnedStoreResponse], status_code=status.HTTP_200_OK)
async def get_my_stores(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await list_my_stores(db, user)


@router.get("/slug/{slug}", response_model=StoreResponse, status_code=status.HTTP_200_OK)
async def get_store_with_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return await get_store_by_slug(db, slug)


@router.get("/{store_id}", response_model=StoreResponse, status_code=status.HTTP_200_OK)
async def get_store_by_id(store_id: int, db: AsyncSession = Depends(get_db)):
    return await get_store(db, store_id)


@router.patch("/{store_id}", response_model=OwnedStoreResponse, status_code=status.HTTP_200_OK)
async def update_existing_store(
        store_id: int,
        store_data: StoreUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await update_store(db, store_id, user, store_data)
