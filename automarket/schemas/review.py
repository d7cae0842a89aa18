from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    seller_id: int
    car_id: int | None = None
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class ReviewUpdate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class Review(BaseModel):
    id: int
    seller_id: int
    reviewer_id: int
    car_id: int | None
    rating: int
    comment: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingStats(BaseModel):
    average: float
    count: int


class SellerReviews(BaseModel):
    reviews: list[Review]
    stats: RatingStats
