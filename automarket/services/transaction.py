from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.transaction import Transaction, TransactionStatus
from automarket.models.user import User
from automarket.schemas.transaction import TransactionCreate
from automarket.services.car import get_car_or_404
from automarket.services.notification_event import (
    EVENT_TRANSACTION_PROPOSED,
    EVENT_TRANSACTION_UPDATED,
    notify,
)

logger = setup_logging()


async def create_transaction(db: AsyncSession, buyer: User, transaction_data: TransactionCreate) -> Transaction:
    car = await get_car_or_404(db, transaction_data.car_id)
    if car.seller_id != transaction_data.seller_id:
        raise ValidationError("Seller does not own this car")
    if buyer.id == transaction_data.seller_id:
        raise ValidationError("You can't buy your own car")

    transaction = Transaction(
        buyer_id=buyer.id,
        status=TransactionStatus.PENDING,
        **transaction_data.model_dump()
    )
    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)
    logger.info(f"Transaction {transaction.id} proposed by {buyer.id} for car {car.id}")

    seller = await db.get(User, car.seller_id)
    if seller and seller.email:
        await notify(EVENT_TRANSACTION_PROPOSED, {
            "to": seller.email,
            "transaction_id": transaction.id,
            "car_id": car.id,
            "proposed_price": transaction.proposed_price,
        })
    return transaction


async def update_transaction_status(
        db: AsyncSession,
        transaction_id: int,
        actor: User,
        new_status: TransactionStatus) -> Transaction:
    transaction = await db.get(Transaction, transaction_id)
    if not transaction:
        raise NotFoundError("Transaction not found")
    if actor.id not in (transaction.buyer_id, transaction.seller_id):
        logger.error(f'User {actor.id} tried to update transaction {transaction.id}')
        raise ForbiddenError("You are not part of this transaction")

    transaction.status = new_status
    await db.commit()
    await db.refresh(transaction)

    other_id = transaction.seller_id if actor.id == transaction.buyer_id else transaction.buyer_id
    other = await db.get(User, other_id)
    if other and other.email:
        await notify(EVENT_TRANSACTION_UPDATED, {
            "to": other.email,
            "transaction_id": transaction.id,
            "status": new_status.value,
        })
    return transaction


async def list_my_transactions(db: AsyncSession, me: User) -> list[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(or_(Transaction.buyer_id == me.id, Transaction.seller_id == me.id))
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
    )
    return list(result.scalars().all())
