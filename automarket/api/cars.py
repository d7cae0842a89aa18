from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.car import (
    AdCopy,
    AdCopyRequest,
    Car as CarResponse,
    CarCreate,
    CarFilters,
    CarSearchResponse,
    CarStatusUpdate,
    CarUpdate,
    MarketTrends,
    PriceEstimate,
    PriceEstimateRequest,
)
from automarket.schemas.common import MessageResponse
from automarket.services.car import (
    create_car,
    delete_car,
    get_car,
    list_seller_cars,
    set_status,
    update_car,
)
from automarket.services.market import analyze_market_trends, estimate_car_value, generate_ad_copy
from automarket.services.search import search_cars
from automarket.utils.token_utils import get_optional_user_from_token, get_user_from_token

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("", response_model=CarSearchResponse, status_code=status.HTTP_200_OK)
async def search(
        filters: Annotated[CarFilters, Query()],
        db: AsyncSession = Depends(get_db)):
    """Search listings with optional filters, newest first"""
    return await search_cars(db, filters)


@router.post("", response_model=CarResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
        car_data: CarCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await create_car(db, user, car_data)


@router.get("/my", response_model=list[CarResponse], status_code=status.HTTP_200_OK)
async def get_my_listings(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await list_seller_cars(db, user.id)


@router.post("/estimate", response_model=PriceEstimate, status_code=status.HTTP_200_OK)
async def estimate_value(request: PriceEstimateRequest, db: AsyncSession = Depends(get_db)):
    return await estimate_car_value(db, request.brand, request.model, request.year_model, request.mileage)


@router.get("/market-trends", response_model=MarketTrends, status_code=status.HTTP_200_OK)
async def market_trends(
        brand: str = Query(..., min_length=1, max_length=100),
        model: str | None = Query(None, min_length=1, max_length=100),
        db: AsyncSession = Depends(get_db)):
    """Demand and price summary of ACTIVE listings for a brand and optional model"""
    return await analyze_market_trends(db, brand, model)


@router.get("/{car_id}", response_model=CarResponse, status_code=status.HTTP_200_OK)
async def get_listing(
        car_id: int,
        user: User | None = Depends(get_optional_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await get_car(db, car_id, user)


@router.patch("/{car_id}", response_model=CarResponse, status_code=status.HTTP_200_OK)
async def update_listing(
        car_id: int,
        car_data: CarUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await update_car(db, car_id, user, car_data)


@router.patch("/{car_id}/status", response_model=CarResponse, status_code=status.HTTP_200_OK)
async def change_listing_status(
        car_id: int,
        request: CarStatusUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await set_status(db, car_id, user, request.status)


@router.delete("/{car_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_listing(
        car_id: int,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await delete_car(db, car_id, user)
    return MessageResponse(message=f"Car {car_id} deleted")


@router.post("/{car_id}/ad-copy", response_model=AdCopy, status_code=status.HTTP_200_OK)
async def write_ad_copy(
        car_id: int,
        request: AdCopyRequest,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await generate_ad_copy(db, car_id, user, request.tone, request.max_length)
