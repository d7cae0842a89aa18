from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    car_id: int
    receiver_id: int
    content: str = Field(min_length=1, max_length=5000)


class Message(BaseModel):
    id: int
    car_id: int | None
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MarkAsRead(BaseModel):
    message_ids: list[int] = Field(min_length=1)


class MarkAsReadResult(BaseModel):
    updated: int
