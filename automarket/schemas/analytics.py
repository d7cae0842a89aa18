from decimal import Decimal
from pydantic import BaseModel
from automarket.models.car import CarStatus


class DayCount(BaseModel):
    date: str
    count: int


class GroupCount(BaseModel):
    value: str | int | None
    count: int


class StoreAnalytics(BaseModel):
    total_vehicles: int
    active_vehicles: int
    sold_vehicles: int
    total_messages: int
    average_rating: float
    total_reviews: int


class ViewedCar(BaseModel):
    id: int
    title: str
    views: int
    price: Decimal
    status: CarStatus
