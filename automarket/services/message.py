from sqlalchemy import select, update, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ValidationError
from automarket.core.logging import setup_logging
from automarket.models.message import Message
from automarket.models.user import User
from automarket.schemas.message import MessageCreate
from automarket.services.car import get_car_or_404
from automarket.services.notification_event import EVENT_MESSAGE_RECEIVED, notify
from automarket.services.user import get_user_or_404

logger = setup_logging()


async def send_message(db: AsyncSession, sender: User, message_data: MessageCreate) -> Message:
    if message_data.receiver_id == sender.id:
        raise ValidationError("You can't send a message to yourself")
    car = await get_car_or_404(db, message_data.car_id)
    receiver = await get_user_or_404(db, message_data.receiver_id)

    message = Message(sender_id=sender.id, **message_data.model_dump())
    db.add(message)
    await db.commit()
    await db.refresh(message)

    if receiver.email:
        await notify(EVENT_MESSAGE_RECEIVED, {
            "to": receiver.email,
            "sender": sender.name or sender.email,
            "car": f"{car.brand} {car.model}",
            "car_id": car.id,
            "message_id": message.id,
        })
    return message


async def get_conversation(db: AsyncSession, car_id: int, me: User, other_user_id: int) -> list[Message]:
    result = await db.execute(
        select(Message)
        .where(
            Message.car_id == car_id,
            or_(
                and_(Message.sender_id == me.id, Message.receiver_id == other_user_id),
                and_(Message.sender_id == other_user_id, Message.receiver_id == me.id),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(result.scalars().all())


async def list_my_messages(db: AsyncSession, me: User) -> list[Message]:
    result = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == me.id, Message.receiver_id == me.id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return list(result.scalars().all())


async def mark_as_read(db: AsyncSession, me: User, message_ids: list[int]) -> int:
    """Mark messages as read; ids the caller did not receive are ignored"""
    result = await db.execute(
        update(Message)
        .where(Message.id.in_(message_ids), Message.receiver_id == me.id)
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
