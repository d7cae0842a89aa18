from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.user import (
    User as UserResponse,
    Profile as ProfileResponse,
    ProfileCreate,
    ProfileUpdate,
)
from automarket.services.user import create_profile, get_profile, update_profile
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def get_me(user: User = Depends(get_user_from_token)):
    return user


@router.get("/me/profile", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def get_my_profile(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await get_profile(db, user)


@router.post("/me/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
        profile_data: ProfileCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await create_profile(db, user, profile_data)


@router.patch("/me/profile", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
async def update_my_profile(
        profile_data: ProfileUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await update_profile(db, user, profile_data)
