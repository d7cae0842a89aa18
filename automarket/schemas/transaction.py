from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from automarket.models.transaction import TransactionStatus


class TransactionCreate(BaseModel):
    car_id: int
    seller_id: int
    proposed_price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    notes: str | None = None


class TransactionStatusUpdate(BaseModel):
    status: TransactionStatus


class Transaction(BaseModel):
    id: int
    car_id: int | None
    buyer_id: int
    seller_id: int
    proposed_price: Decimal | None
    status: TransactionStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
