from datetime import date, datetime, timedelta, timezone
import pytest
from automarket.core.errors import ForbiddenError, ValidationError
from automarket.models import CarStatus, CarView, Message, Review, UserRole
from automarket.services.analytics import (
    count_per_day,
    ensure_store_access,
    most_viewed,
    store_analytics,
    top_by_group,
)


@pytest.mark.asyncio
async def test_count_per_day_is_sparse_and_ascending(db, make_user, make_car):
    seller = await make_user()
    now = datetime.now(timezone.utc)
    three_days_ago = now - timedelta(days=3)
    yesterday = now - timedelta(days=1)
    await make_car(seller, created_at=three_days_ago)
    await make_car(seller, created_at=yesterday)
    await make_car(seller, created_at=yesterday)
    await make_car(seller, created_at=now - timedelta(days=60))

    days = await count_per_day(db, "cars", "created_at", 30)

    assert [(d.date, d.count) for d in days] == [
        (three_days_ago.date().isoformat(), 1),
        (yesterday.date().isoformat(), 2),
    ]


@pytest.mark.asyncio
async def test_count_per_day_scoped_to_store(db, make_user, make_store, make_car):
    owner = await make_user(UserRole.STORE_OWNER)
    buyer = await make_user()
    store = await make_store(owner)
    store_car = await make_car(owner, store_id=store.id)
    other_car = await make_car(owner)
    db.add_all([
        Message(car_id=store_car.id, sender_id=buyer.id, receiver_id=owner.id, content="hi"),
        Message(car_id=store_car.id, sender_id=buyer.id, receiver_id=owner.id, content="still there?"),
        Message(car_id=other_car.id, sender_id=buyer.id, receiver_id=owner.id, content="hello"),
    ])
    await db.commit()

    cars = await count_per_day(db, "cars", "created_at", 7, store_id=store.id)
    messages = await count_per_day(db, "messages", "created_at", 7, store_id=store.id)

    assert sum(d.count for d in cars) == 1
    assert sum(d.count for d in messages) == 2


@pytest.mark.asyncio
async def test_count_per_day_rejects_unknown_fields(db):
    with pytest.raises(ValidationError):
        await count_per_day(db, "invoices", "created_at", 7)
    with pytest.raises(ValidationError):
        await count_per_day(db, "cars", "price", 7)
    with pytest.raises(ValidationError):
        await count_per_day(db, "users", "created_at", 7, store_id=1)


@pytest.mark.asyncio
async def test_top_by_group_orders_by_count(db, make_user, make_car):
    seller = await make_user()
    for brand, copies in (("Toyota", 3), ("Honda", 2), ("Fiat", 2), ("Ford", 1)):
        for _ in range(copies):
            await make_car(seller, brand=brand)

    groups = await top_by_group(db, "cars", "brand", limit=3)

    assert [(g.value, g.count) for g in groups] == [("Toyota", 3), ("Fiat", 2), ("Honda", 2)]


@pytest.mark.asyncio
async def test_top_by_group_converts_enums(db, make_user, make_car):
    seller = await make_user()
    await make_car(seller, status=CarStatus.ACTIVE)

    groups = await top_by_group(db, "cars", "status")

    assert groups[0].value == "ACTIVE"


@pytest.mark.asyncio
async def test_top_by_group_rejects_unlisted_field(db):
    with pytest.raises(ValidationError):
        await top_by_group(db, "users", "email")


@pytest.mark.asyncio
async def test_store_analytics(db, make_user, make_store, make_car):
    owner = await make_user(UserRole.STORE_OWNER)
    buyer = await make_user()
    store = await make_store(owner)
    active = await make_car(owner, store_id=store.id, status=CarStatus.ACTIVE)
    await make_car(owner, store_id=store.id, status=CarStatus.SOLD)
    await make_car(owner, store_id=store.id)
    private = await make_car(owner)
    db.add_all([
        Message(car_id=active.id, sender_id=buyer.id, receiver_id=owner.id, content="price?"),
        Message(car_id=private.id, sender_id=buyer.id, receiver_id=owner.id, content="price?"),
        Review(seller_id=owner.id, reviewer_id=buyer.id, car_id=active.id, rating=5),
        Review(seller_id=owner.id, reviewer_id=buyer.id, car_id=private.id, rating=4),
    ])
    await db.commit()

    stats = await store_analytics(db, store.id)

    assert (stats.total_vehicles, stats.active_vehicles, stats.sold_vehicles) == (3, 1, 1)
    assert stats.total_messages == 1
    assert stats.average_rating == 4.5
    assert stats.total_reviews == 2


@pytest.mark.asyncio
async def test_most_viewed_counts_real_views(db, make_user, make_store, make_car):
    owner = await make_user(UserRole.STORE_OWNER)
    store = await make_store(owner)
    popular = await make_car(owner, store_id=store.id)
    unseen = await make_car(owner, store_id=store.id)
    some = await make_car(owner, store_id=store.id)
    today = date.today()
    db.add_all([CarView(car_id=popular.id, viewed_at=today) for _ in range(3)])
    db.add(CarView(car_id=some.id, viewed_at=today))
    await db.commit()

    ranking = await most_viewed(db, store.id)

    assert [(car.id, car.views) for car in ranking] == [(popular.id, 3), (some.id, 1), (unseen.id, 0)]
    assert ranking[0].title == "Toyota Corolla XEi 2.0"


@pytest.mark.asyncio
async def test_store_access(db, make_user, make_store):
    owner = await make_user(UserRole.STORE_OWNER)
    stranger = await make_user(UserRole.STORE_OWNER)
    admin = await make_user(UserRole.ADMIN)
    store = await make_store(owner)

    assert (await ensure_store_access(db, owner, store.id)).id == store.id
    assert (await ensure_store_access(db, admin, store.id)).id == store.id
    with pytest.raises(ForbiddenError):
        await ensure_store_access(db, stranger, store.id)
