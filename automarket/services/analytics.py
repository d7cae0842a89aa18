import enum
from datetime import datetime, timedelta, timezone
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.car import Car, CarStatus
from automarket.models.car_view import CarView
from automarket.models.message import Message
from automarket.models.store import Store
from automarket.models.user import User
from automarket.schemas.analytics import DayCount, GroupCount, StoreAnalytics, ViewedCar
from automarket.services.permissions_checker import is_admin
from automarket.services.review import seller_rating_stats

logger = setup_logging()

# entity -> (model, date fields, groupable fields)
ANALYTICS_ENTITIES = {
    "users": (User, {"created_at", "last_signed_in"}, {"role"}),
    "cars": (Car, {"created_at", "updated_at"}, {"brand", "model", "status", "fuel", "transmission", "year_model"}),
    "messages": (Message, {"created_at"}, {"car_id", "is_read"}),
}


def _entity(entity: str):
    if entity not in ANALYTICS_ENTITIES:
        raise ValidationError(f"Unknown analytics entity: {entity}")
    return ANALYTICS_ENTITIES[entity]


async def ensure_store_access(db: AsyncSession, user: User, store_id: int) -> Store:
    store = await db.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")
    if store.owner_id != user.id and not is_admin(user):
        logger.error(f'User {user.id} tried to read analytics of store {store.id}')
        raise ForbiddenError("Access denied")
    return store


async def count_per_day(
        db: AsyncSession,
        entity: str,
        date_field: str = "created_at",
        window_days: int = 30,
        store_id: int | None = None) -> list[DayCount]:
    """Rows of the trailing window grouped by calendar date, days without rows omitted"""
    model, date_fields, _ = _entity(entity)
    if date_field not in date_fields:
        raise ValidationError(f"Field {date_field} can't be used as a date for {entity}")
    if window_days < 1:
        raise ValidationError("Window must be at least one day")

    column = getattr(model, date_field)
    since = datetime.now(timezone.utc) - timedelta(days=window_days)
    day = func.date(column).label("day")
    stmt = select(day, func.count().label("count")).select_from(model).where(column >= since)

    if store_id is not None:
        if entity == "cars":
            stmt = stmt.where(Car.store_id == store_id)
        elif entity == "messages":
            stmt = stmt.join(Car, Car.id == Message.car_id).where(Car.store_id == store_id)
        else:
            raise ValidationError(f"{entity} can't be scoped to a store")

    result = await db.execute(stmt.group_by(day).order_by(day.asc()))
    return [DayCount(date=str(row.day), count=row.count) for row in result.all()]


async def top_by_group(db: AsyncSession, entity: str, group_field: str, limit: int = 10) -> list[GroupCount]:
    model, _, group_fields = _entity(entity)
    if group_field not in group_fields:
        raise ValidationError(f"Field {group_field} can't be grouped for {entity}")

    column = getattr(model, group_field)
    total = func.count().label("count")
    result = await db.execute(
        select(column, total)
        .group_by(column)
        .order_by(total.desc(), column.asc())
        .limit(limit)
    )

    groups = []
    for value, count in result.all():
        if isinstance(value, enum.Enum):
            value = value.value
        groups.append(GroupCount(value=value, count=count))
    return groups


async def store_analytics(db: AsyncSession, store_id: int) -> StoreAnalytics:
    store = await db.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")

    async def count_cars(*conditions) -> int:
        return await db.scalar(
            select(func.count()).select_from(Car).where(Car.store_id == store.id, *conditions)
        ) or 0

    total_messages = await db.scalar(
        select(func.count())
        .select_from(Message)
        .join(Car, Car.id == Message.car_id)
        .where(Car.store_id == store.id)
    ) or 0

    rating = await seller_rating_stats(db, store.owner_id)

    return StoreAnalytics(
        total_vehicles=await count_cars(),
        active_vehicles=await count_cars(Car.status == CarStatus.ACTIVE),
        sold_vehicles=await count_cars(Car.status == CarStatus.SOLD),
        total_messages=total_messages,
        average_rating=rating.average,
        total_reviews=rating.count,
    )


async def most_viewed(db: AsyncSession, store_id: int, limit: int = 10) -> list[ViewedCar]:
    views = func.count(CarView.id).label("views")
    result = await db.execute(
        select(Car, views)
        .outerjoin(CarView, CarView.car_id == Car.id)
        .where(Car.store_id == store_id)
        .group_by(Car.id)
        .order_by(views.desc(), Car.id.asc())
        .limit(limit)
    )
    return [
        ViewedCar(
            id=car.id,
            title=f"{car.brand} {car.model} {car.version}",
            views=count,
            price=car.price,
            status=car.status
        )
        for car, count in result.all()
    ]
