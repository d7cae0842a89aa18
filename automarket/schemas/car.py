from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from automarket.models.car import CarStatus, Fuel, Transmission

ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
ColorText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Price = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]

MIN_YEAR = 1900


def _check_year(value: int | None) -> int | None:
    if value is None:
        return value
    max_year = date.today().year + 1
    if value < MIN_YEAR or value > max_year:
        raise ValueError(f"Year must be between {MIN_YEAR} and {max_year}")
    return value


class CarBase(BaseModel):
    brand: ShortText
    model: ShortText
    version: ShortText
    year_fab: int
    year_model: int
    price: Price
    mileage: int = Field(ge=0)
    transmission: Transmission
    fuel: Fuel
    color: ColorText
    description: str | None = Field(default=None, max_length=2000)
    features: list[str] = Field(default_factory=list)

    @field_validator("year_fab", "year_model")
    @classmethod
    def validate_year(cls, value: int) -> int:
        return _check_year(value)


class CarCreate(CarBase):
    store_id: int | None = None


class CarUpdate(BaseModel):
    brand: ShortText | None = None
    model: ShortText | None = None
    version: ShortText | None = None
    year_fab: int | None = None
    year_model: int | None = None
    price: Price | None = None
    mileage: int | None = Field(default=None, ge=0)
    transmission: Transmission | None = None
    fuel: Fuel | None = None
    color: ColorText | None = None
    description: str | None = Field(default=None, max_length=2000)
    features: list[str] | None = None

    @field_validator("year_fab", "year_model")
    @classmethod
    def validate_year(cls, value: int | None) -> int | None:
        return _check_year(value)


class Car(CarBase):
    id: int
    seller_id: int
    store_id: int | None
    status: CarStatus
    features: list[str] | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CarStatusUpdate(BaseModel):
    status: CarStatus


class CarFilters(BaseModel):
    brand: str | None = None
    model: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    min_year: int | None = None
    max_year: int | None = None
    transmission: Transmission | None = None
    fuel: Fuel | None = None
    status: CarStatus | None = None
    seller_id: int | None = None
    store_id: int | None = None
    search: str | None = None
    limit: int = Field(default=20, ge=0, le=100)
    offset: int = Field(default=0, ge=0)


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_next: bool


class CarSearchResponse(BaseModel):
    data: list[Car]
    pagination: Pagination


class PriceEstimateRequest(BaseModel):
    brand: ShortText
    model: ShortText
    year_model: int
    mileage: int = Field(ge=0)


class PriceRange(BaseModel):
    min: int | None
    max: int | None


class MarketInsights(BaseModel):
    average_price: int
    average_mileage: int
    price_trend: str


class PriceEstimate(BaseModel):
    estimated_price: int | None
    price_range: PriceRange
    confidence: float
    similar_cars_analyzed: int
    market_insights: MarketInsights | None = None


class AdCopyRequest(BaseModel):
    tone: Literal["professional", "casual", "luxury"] = "professional"
    max_length: int = Field(default=500, ge=50, le=2000)


class AdCopy(BaseModel):
    ad_copy: str
    tone_used: str
    length: int
    seo_keywords: list[str]


class MarketTrends(BaseModel):
    total_listings: int
    demand_level: str
    avg_price: int | None = None
    price_range: PriceRange | None = None
    recommendations: list[str]
