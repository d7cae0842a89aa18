from datetime import date
from sqlalchemy import select, func, delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.config import settings
from automarket.core.errors import (
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from automarket.core.logging import setup_logging
from automarket.models.car import Car, CarStatus
from automarket.models.car_view import CarView
from automarket.models.message import Message
from automarket.models.photo import CarPhoto
from automarket.models.store import Store
from automarket.models.transaction import Transaction
from automarket.models.user import User
from automarket.schemas.car import CarCreate, CarUpdate
from automarket.services.permissions_checker import QUOTA_LIMITED_ROLES, is_admin
from automarket.utils.storage import storage

logger = setup_logging()

YEAR_CONSTRAINT_MESSAGE = "Model year cannot be earlier than fabrication year"
QUOTA_MESSAGE = "Active listing limit for the USER plan reached"


def check_years(year_fab: int, year_model: int) -> None:
    if year_model < year_fab:
        raise ValidationError(f"{YEAR_CONSTRAINT_MESSAGE} ({year_model} < {year_fab})")


async def get_car_or_404(db: AsyncSession, car_id: int) -> Car:
    car = await db.get(Car, car_id)
    if not car:
        raise NotFoundError("Car not found")
    return car


async def count_active_cars(db: AsyncSession, seller_id: int) -> int:
    """Count ACTIVE listings owned by one seller, store listings included"""
    result = await db.scalar(
        select(func.count()).select_from(Car).where(
            Car.seller_id == seller_id,
            Car.status == CarStatus.ACTIVE
        )
    )
    return result or 0


async def create_car(db: AsyncSession, seller: User, car_data: CarCreate) -> Car:
    check_years(car_data.year_fab, car_data.year_model)

    if car_data.store_id is not None:
        store = await db.get(Store, car_data.store_id)
        if not store:
            raise NotFoundError("Store not found")
        if store.owner_id != seller.id and not is_admin(seller):
            logger.error(f'User {seller.id} tried to list a car in store {store.id}')
            raise ForbiddenError("You can't add listings to this store")

    car = Car(
        seller_id=seller.id,
        status=CarStatus.DRAFT,
        **car_data.model_dump()
    )
    db.add(car)
    await db.commit()
    await db.refresh(car)
    logger.info(f"Car {car.id} created by seller {seller.id}")
    return car


async def get_car(db: AsyncSession, car_id: int, viewer: User | None) -> Car:
    """Get a car and record a view unless the seller is looking at it"""
    car = await get_car_or_404(db, car_id)
    if not viewer or viewer.id != car.seller_id:
        db.add(CarView(
            car_id=car.id,
            user_id=viewer.id if viewer else None,
            viewed_at=date.today()
        ))
        await db.commit()
    return car


async def list_seller_cars(db: AsyncSession, seller_id: int) -> list[Car]:
    result = await db.execute(
        select(Car).where(Car.seller_id == seller_id).order_by(Car.created_at.desc(), Car.id.asc())
    )
    return list(result.scalars().all())


async def update_car(db: AsyncSession, car_id: int, actor: User, car_data: CarUpdate) -> Car:
    car = await get_car_or_404(db, car_id)
    if car.seller_id != actor.id:
        raise ForbiddenError("You can't update this listing")

    changes = car_data.model_dump(exclude_unset=True)
    for field in ("brand", "model", "version", "year_fab", "year_model", "price",
                  "mileage", "transmission", "fuel", "color"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be empty")

    check_years(changes.get("year_fab", car.year_fab), changes.get("year_model", car.year_model))

    for field, value in changes.items():
        setattr(car, field, value)
    await db.commit()
    await db.refresh(car)
    return car


async def set_status(db: AsyncSession, car_id: int, actor: User, new_status: CarStatus) -> Car:
    car = await get_car_or_404(db, car_id)
    admin = is_admin(actor)
    if car.seller_id != actor.id and not admin:
        logger.error(f'User {actor.id} tried to change status of car {car.id}')
        raise ForbiddenError("You can't change this listing")
    if new_status == CarStatus.BANNED and not admin:
        raise ForbiddenError("Only administrators can ban listings")

    if new_status == CarStatus.ACTIVE:
        if car.status != CarStatus.ACTIVE and actor.role in QUOTA_LIMITED_ROLES:
            if await count_active_cars(db, actor.id) >= settings.user_active_listing_limit:
                raise QuotaExceededError(QUOTA_MESSAGE)
            # the unique slot can only back a single-listing quota
            if settings.user_active_listing_limit == 1:
                car.active_slot = actor.id
    else:
        car.active_slot = None

    car.status = new_status
    actor_id = actor.id
    try:
        await db.commit()
    except IntegrityError:
        # another activation by the same seller committed first
        await db.rollback()
        logger.warning(f"Concurrent activation rejected for seller {actor_id}, car {car_id}")
        raise QuotaExceededError(QUOTA_MESSAGE)
    await db.refresh(car)
    logger.info(f"Car {car.id} status set to {new_status.value} by user {actor.id}")
    return car


async def delete_car(db: AsyncSession, car_id: int, actor: User) -> None:
    car = await get_car_or_404(db, car_id)
    if car.seller_id != actor.id:
        raise ForbiddenError("You can't delete this listing")

    photos = await db.execute(select(CarPhoto).where(CarPhoto.car_id == car.id))
    for photo in photos.scalars().all():
        storage.delete(list(photo.urls.values()))

    await db.execute(delete(CarPhoto).where(CarPhoto.car_id == car.id))
    await db.execute(delete(CarView).where(CarView.car_id == car.id))
    # conversations and sale history outlive the listing
    await db.execute(update(Message).where(Message.car_id == car.id).values(car_id=None))
    await db.execute(update(Transaction).where(Transaction.car_id == car.id).values(car_id=None))
    await db.delete(car)
    await db.commit()
    logger.info(f"Car {car_id} deleted by seller {actor.id}")
