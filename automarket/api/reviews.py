from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.common import MessageResponse
from automarket.schemas.review import Review as ReviewResponse, ReviewCreate, ReviewUpdate, SellerReviews
from automarket.services.review import create_review, delete_review, get_seller_reviews, update_review
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def review_seller(
        review_data: ReviewCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await create_review(db, user, review_data)


@router.get("/seller/{seller_id}", response_model=SellerReviews, status_code=status.HTTP_200_OK)
async def get_reviews_of_seller(seller_id: int, db: AsyncSession = Depends(get_db)):
    return await get_seller_reviews(db, seller_id)


@router.patch("/{review_id}", response_model=ReviewResponse, status_code=status.HTTP_200_OK)
async def edit_review(
        review_id: int,
        review_data: ReviewUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await update_review(db, review_id, user, review_data)


@router.delete("/{review_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def remove_review(
        review_id: int,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await delete_review(db, review_id, user)
    return MessageResponse(message=f"Review {review_id} deleted")
