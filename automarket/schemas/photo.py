from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class PhotoUrls(BaseModel):
    thumb: str
    medium: str
    large: str


class CarPhoto(BaseModel):
    id: int
    car_id: int
    urls: PhotoUrls
    order_index: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PhotoOrderUpdate(BaseModel):
    photo_id: int
    order_index: int = Field(ge=0, le=14)


class PhotoReorder(BaseModel):
    updates: list[PhotoOrderUpdate] = Field(min_length=1)
