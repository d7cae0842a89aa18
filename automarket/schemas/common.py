from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class MessageResponse(BaseModel):
    message: str


class Page(BaseModel, Generic[T]):
    data: list[T]
    total: int
