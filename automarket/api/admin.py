from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.car import CarStatus
from automarket.models.user import User, UserRole
from automarket.schemas.admin import (
    BanResult,
    BanUser,
    DashboardStats,
    ModerateCar,
    ModerationLog as ModerationLogResponse,
    RoleUpdate,
    StoreVerification,
)
from automarket.schemas.analytics import DayCount, GroupCount
from automarket.schemas.car import Car as CarResponse
from automarket.schemas.common import Page
from automarket.schemas.store import OwnedStore as OwnedStoreResponse, Store as StoreResponse
from automarket.schemas.user import User as UserResponse
from automarket.services import moderation
from automarket.services.analytics import count_per_day, top_by_group
from automarket.services.permissions_checker import ADMIN_ONLY, role_checker
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardStats, status_code=status.HTTP_200_OK)
async def get_dashboard(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.dashboard_stats(db, user)


@router.get("/users", response_model=Page[UserResponse], status_code=status.HTTP_200_OK)
async def get_users(
        role: UserRole | None = None,
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.list_users(db, user, role, limit, offset)


@router.patch("/users/{user_id}/role", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def change_user_role(
        user_id: int,
        request: RoleUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.update_user_role(db, user, user_id, request.role, request.reason)


@router.post("/users/{user_id}/ban", response_model=BanResult, status_code=status.HTTP_200_OK)
async def ban(
        user_id: int,
        request: BanUser,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    """Ban every listing of a user"""
    return await moderation.ban_user(db, user, user_id, request.reason)


@router.get("/stores", response_model=Page[OwnedStoreResponse], status_code=status.HTTP_200_OK)
async def get_stores(
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.list_stores(db, user, limit, offset)


@router.patch("/stores/{store_id}/verify", response_model=StoreResponse, status_code=status.HTTP_200_OK)
async def verify(
        store_id: int,
        request: StoreVerification,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.verify_store(db, user, store_id, request.verified)


@router.get("/cars", response_model=Page[CarResponse], status_code=status.HTTP_200_OK)
async def get_cars(
        car_status: CarStatus | None = Query(None, alias="status"),
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.list_cars(db, user, car_status, limit, offset)


@router.patch("/cars/{car_id}/moderate", response_model=CarResponse, status_code=status.HTTP_200_OK)
async def moderate(
        car_id: int,
        request: ModerateCar,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.moderate_listing(db, user, car_id, request.status, request.reason)


@router.get("/logs", response_model=Page[ModerationLogResponse], status_code=status.HTTP_200_OK)
async def get_logs(
        limit: int = Query(100, ge=1, le=500),
        offset: int = Query(0, ge=0),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await moderation.list_logs(db, user, limit, offset)


@router.get("/analytics/{entity}/per-day", response_model=list[DayCount], status_code=status.HTTP_200_OK)
async def get_counts_per_day(
        entity: str,
        date_field: str = "created_at",
        days: int = Query(30, ge=1, le=365),
        store_id: int | None = None,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await role_checker(user, ADMIN_ONLY)
    return await count_per_day(db, entity, date_field, days, store_id)


@router.get("/analytics/{entity}/top/{group_field}", response_model=list[GroupCount],
            status_code=status.HTTP_200_OK)
async def get_top_groups(
        entity: str,
        group_field: str,
        limit: int = Query(10, ge=1, le=100),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await role_checker(user, ADMIN_ONLY)
    return await top_by_group(db, entity, group_field, limit)
