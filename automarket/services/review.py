from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.car import Car
from automarket.models.review import Review
from automarket.models.user import User
from automarket.schemas.review import RatingStats, ReviewCreate, ReviewUpdate, SellerReviews
from automarket.services.user import get_user_or_404

logger = setup_logging()


async def seller_rating_stats(db: AsyncSession, seller_id: int) -> RatingStats:
    row = (await db.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.seller_id == seller_id)
    )).one()
    average, count = row
    return RatingStats(average=round(float(average), 2) if average is not None else 0.0, count=count or 0)


async def create_review(db: AsyncSession, reviewer: User, review_data: ReviewCreate) -> Review:
    if review_data.seller_id == reviewer.id:
        raise ValidationError("You can't review yourself")
    await get_user_or_404(db, review_data.seller_id)

    if review_data.car_id is not None:
        car = await db.get(Car, review_data.car_id)
        if not car:
            raise NotFoundError("Car not found")
        if car.seller_id != review_data.seller_id:
            raise ValidationError("Car does not belong to this seller")

    # NULL car ids never collide in the unique constraint
    duplicate = await db.scalar(select(Review.id).where(
        Review.seller_id == review_data.seller_id,
        Review.reviewer_id == reviewer.id,
        Review.car_id.is_(None) if review_data.car_id is None else Review.car_id == review_data.car_id
    ))
    if duplicate:
        raise ValidationError("You have already reviewed this seller")

    review = Review(reviewer_id=reviewer.id, **review_data.model_dump())
    db.add(review)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("You have already reviewed this seller")
    await db.refresh(review)
    return review


async def get_seller_reviews(db: AsyncSession, seller_id: int) -> SellerReviews:
    result = await db.execute(
        select(Review).where(Review.seller_id == seller_id).order_by(Review.created_at.desc(), Review.id.desc())
    )
    return SellerReviews(
        reviews=list(result.scalars().all()),
        stats=await seller_rating_stats(db, seller_id)
    )


async def _get_own_review(db: AsyncSession, review_id: int, reviewer: User) -> Review:
    review = await db.get(Review, review_id)
    if not review:
        raise NotFoundError("Review not found")
    if review.reviewer_id != reviewer.id:
        raise ForbiddenError("You can only manage your own reviews")
    return review


async def update_review(db: AsyncSession, review_id: int, reviewer: User, review_data: ReviewUpdate) -> Review:
    review = await _get_own_review(db, review_id, reviewer)
    for field, value in review_data.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    await db.commit()
    await db.refresh(review)
    return review


async def delete_review(db: AsyncSession, review_id: int, reviewer: User) -> None:
    review = await _get_own_review(db, review_id, reviewer)
    await db.delete(review)
    await db.commit()
