from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.transaction import (
    Transaction as TransactionResponse,
    TransactionCreate,
    TransactionStatusUpdate,
)
from automarket.services.transaction import create_transaction, list_my_transactions, update_transaction_status
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def propose(
        transaction_data: TransactionCreate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await create_transaction(db, user, transaction_data)


@router.get("", response_model=list[TransactionResponse], status_code=status.HTTP_200_OK)
async def get_my_transactions(
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await list_my_transactions(db, user)


@router.patch("/{transaction_id}", response_model=TransactionResponse, status_code=status.HTTP_200_OK)
async def change_status(
        transaction_id: int,
        request: TransactionStatusUpdate,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    return await update_transaction_status(db, transaction_id, user, request.status)
