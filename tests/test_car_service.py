from decimal import Decimal
import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import select, func
from automarket.core.errors import ForbiddenError, NotFoundError, QuotaExceededError, ValidationError
from automarket.models import Car, CarStatus, UserRole, CarView, CarPhoto, Message, Transaction
from automarket.schemas.car import CarCreate, CarUpdate
from automarket.services.car import (
    create_car,
    delete_car,
    get_car,
    set_status,
    update_car,
    YEAR_CONSTRAINT_MESSAGE,
)


@pytest.mark.asyncio
async def test_create_car_starts_as_draft(db, make_user, car_payload):
    seller = await make_user()

    car = await create_car(db, seller, CarCreate(**car_payload))

    assert car.id is not None
    assert car.status == CarStatus.DRAFT
    assert car.seller_id == seller.id
    assert car.active_slot is None


@pytest.mark.asyncio
async def test_create_car_rejects_model_year_before_fabrication(db, make_user, car_payload):
    seller = await make_user()
    car_payload.update(year_fab=2021, year_model=2020)

    with pytest.raises(ValidationError) as exc_info:
        await create_car(db, seller, CarCreate(**car_payload))

    assert YEAR_CONSTRAINT_MESSAGE in exc_info.value.detail
    assert await db.scalar(select(func.count()).select_from(Car)) == 0


@pytest.mark.asyncio
async def test_create_car_in_foreign_store_forbidden(db, make_user, make_store, car_payload):
    owner = await make_user(UserRole.STORE_OWNER)
    other = await make_user(UserRole.STORE_OWNER)
    store = await make_store(owner)

    with pytest.raises(ForbiddenError):
        await create_car(db, other, CarCreate(**car_payload, store_id=store.id))


@pytest.mark.asyncio
async def test_create_car_in_missing_store(db, make_user, car_payload):
    seller = await make_user(UserRole.STORE_OWNER)

    with pytest.raises(NotFoundError):
        await create_car(db, seller, CarCreate(**car_payload, store_id=999))


@pytest.mark.asyncio
async def test_update_car_checks_merged_years(db, make_user, make_car):
    seller = await make_user()
    car = await make_car(seller, year_fab=2020, year_model=2021)

    with pytest.raises(ValidationError):
        await update_car(db, car.id, seller, CarUpdate(year_fab=2022))

    updated = await update_car(db, car.id, seller, CarUpdate(year_fab=2021, mileage=1000))
    assert updated.year_fab == 2021
    assert updated.mileage == 1000


@pytest.mark.asyncio
async def test_update_car_by_other_user_forbidden(db, make_user, make_car):
    seller = await make_user()
    other = await make_user()
    car = await make_car(seller)

    with pytest.raises(ForbiddenError):
        await update_car(db, car.id, other, CarUpdate(mileage=1))


@pytest.mark.asyncio
async def test_user_quota_allows_single_active_listing(db, make_user, make_car):
    seller = await make_user(UserRole.USER)
    first = await make_car(seller)
    second = await make_car(seller)

    activated = await set_status(db, first.id, seller, CarStatus.ACTIVE)
    assert activated.status == CarStatus.ACTIVE

    with pytest.raises(QuotaExceededError):
        await set_status(db, second.id, seller, CarStatus.ACTIVE)

    assert (await db.get(Car, second.id)).status == CarStatus.DRAFT


@pytest.mark.asyncio
async def test_store_owner_has_no_listing_quota(db, make_user, make_car):
    seller = await make_user(UserRole.STORE_OWNER)
    first = await make_car(seller)
    second = await make_car(seller)

    await set_status(db, first.id, seller, CarStatus.ACTIVE)
    second = await set_status(db, second.id, seller, CarStatus.ACTIVE)

    assert second.status == CarStatus.ACTIVE
    assert second.active_slot is None


@pytest.mark.asyncio
async def test_quota_frees_up_after_selling(db, make_user, make_car):
    seller = await make_user()
    first = await make_car(seller)
    second = await make_car(seller)

    await set_status(db, first.id, seller, CarStatus.ACTIVE)
    sold = await set_status(db, first.id, seller, CarStatus.SOLD)
    assert sold.active_slot is None

    second = await set_status(db, second.id, seller, CarStatus.ACTIVE)
    assert second.status == CarStatus.ACTIVE


@pytest.mark.asyncio
async def test_concurrent_activation_loses_on_slot_constraint(db, make_user, make_car):
    seller = await make_user()
    first = await make_car(seller)
    second = await make_car(seller)
    await set_status(db, first.id, seller, CarStatus.ACTIVE)

    # both requests passed the count check before either committed
    with patch("automarket.services.car.count_active_cars", AsyncMock(return_value=0)):
        with pytest.raises(QuotaExceededError):
            await set_status(db, second.id, seller, CarStatus.ACTIVE)

    active = await db.scalar(
        select(func.count()).select_from(Car).where(Car.status == CarStatus.ACTIVE)
    )
    assert active == 1


@pytest.mark.asyncio
async def test_only_admin_can_ban(db, make_user, make_car):
    seller = await make_user()
    admin = await make_user(UserRole.ADMIN)
    car = await make_car(seller)

    with pytest.raises(ForbiddenError):
        await set_status(db, car.id, seller, CarStatus.BANNED)

    banned = await set_status(db, car.id, admin, CarStatus.BANNED)
    assert banned.status == CarStatus.BANNED


@pytest.mark.asyncio
async def test_set_status_by_stranger_forbidden(db, make_user, make_car):
    seller = await make_user()
    stranger = await make_user()
    car = await make_car(seller)

    with pytest.raises(ForbiddenError):
        await set_status(db, car.id, stranger, CarStatus.ACTIVE)


@pytest.mark.asyncio
async def test_get_car_records_view_for_visitors_only(db, make_user, make_car):
    seller = await make_user()
    visitor = await make_user()
    car = await make_car(seller)

    await get_car(db, car.id, seller)
    await get_car(db, car.id, visitor)
    await get_car(db, car.id, None)

    views = await db.scalar(select(func.count()).select_from(CarView).where(CarView.car_id == car.id))
    assert views == 2


@pytest.mark.asyncio
async def test_get_missing_car(db):
    with pytest.raises(NotFoundError):
        await get_car(db, 404, None)


@pytest.mark.asyncio
async def test_delete_car_removes_photos_and_views(db, make_user, make_car):
    seller = await make_user()
    car = await make_car(seller)
    db.add(CarPhoto(car_id=car.id, urls={"thumb": "/media/t", "medium": "/media/m", "large": "/media/l"},
                    order_index=0))
    db.add(CarView(car_id=car.id, user_id=None, viewed_at=car.created_at.date()))
    await db.commit()

    with patch("automarket.services.car.storage") as mock_storage:
        await delete_car(db, car.id, seller)

    mock_storage.delete.assert_called_once_with(["/media/t", "/media/m", "/media/l"])
    assert await db.scalar(select(func.count()).select_from(CarPhoto)) == 0
    assert await db.scalar(select(func.count()).select_from(CarView)) == 0
    with pytest.raises(NotFoundError):
        await get_car(db, car.id, None)


@pytest.mark.asyncio
async def test_delete_car_keeps_messages_and_transactions(db, make_user, make_car):
    seller = await make_user()
    buyer = await make_user()
    car = await make_car(seller)
    db.add(Message(car_id=car.id, sender_id=buyer.id, receiver_id=seller.id, content="Still available?"))
    db.add(Transaction(car_id=car.id, buyer_id=buyer.id, seller_id=seller.id, proposed_price=Decimal("90000")))
    await db.commit()

    with patch("automarket.services.car.storage"):
        await delete_car(db, car.id, seller)

    messages = (await db.execute(select(Message))).scalars().all()
    transactions = (await db.execute(select(Transaction))).scalars().all()
    assert [m.content for m in messages] == ["Still available?"]
    assert [t.proposed_price for t in transactions] == [Decimal("90000")]
    assert messages[0].car_id is None
    assert transactions[0].car_id is None


@pytest.mark.asyncio
async def test_delete_car_by_admin_forbidden(db, make_user, make_car):
    seller = await make_user()
    admin = await make_user(UserRole.ADMIN)
    car = await make_car(seller)

    with pytest.raises(ForbiddenError):
        await delete_car(db, car.id, admin)
