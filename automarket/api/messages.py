from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.message import (
    Message as MessageResponse,
    MessageCreate,
    MarkAsRead,
    MarkAsReadResult,
)
from automarket.services.message import get_conversation, list_my_messages, mark_as_read, send_message
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send(
        message_data: MessageCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await send_message(db, user, message_data)


@router.get("", response_model=list[MessageResponse], status_code=status.HTTP_200_OK)
async def get_my_messages(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await list_my_messages(db, user)


@router.get("/conversation/{car_id}/{other_user_id}", response_model=list[MessageResponse],
            status_code=status.HTTP_200_OK)
async def get_car_conversation(
        car_id: int,
        other_user_id: int,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    """Messages exchanged with one user about one car, oldest first"""
    return await get_conversation(db, car_id, user, other_user_id)


@router.post("/read", response_model=MarkAsReadResult, status_code=status.HTTP_200_OK)
async def read_messages(
        request: MarkAsRead,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    updated = await mark_as_read(db, user, request.message_ids)
    return MarkAsReadResult(updated=updated)
