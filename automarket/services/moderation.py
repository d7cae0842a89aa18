from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.car import Car, CarStatus
from automarket.models.moderation_log import ModerationLog
from automarket.models.store import Store
from automarket.models.transaction import Transaction
from automarket.models.user import User, UserRole
from automarket.schemas.admin import BanResult, DashboardStats
from automarket.services.car import get_car_or_404
from automarket.services.notification_event import EVENT_LISTING_MODERATED, notify
from automarket.services.permissions_checker import ADMIN_ONLY, role_checker
from automarket.services.user import get_user_or_404

logger = setup_logging()

MODERATION_STATUSES = frozenset({CarStatus.ACTIVE, CarStatus.BANNED, CarStatus.DRAFT})


def _log(db: AsyncSession, admin: User, target_type: str, target_id: int, action: str, reason: str | None):
    db.add(ModerationLog(
        admin_id=admin.id,
        target_type=target_type,
        target_id=target_id,
        action=action,
        reason=reason
    ))


async def moderate_listing(
        db: AsyncSession,
        admin: User,
        car_id: int,
        new_status: CarStatus,
        reason: str | None = None) -> Car:
    await role_checker(admin, ADMIN_ONLY)
    if new_status not in MODERATION_STATUSES:
        raise ValidationError(f"Listings can't be moderated to {new_status.value}")

    car = await get_car_or_404(db, car_id)
    car.status = new_status
    # admin overrides are outside the seller's quota
    car.active_slot = None
    _log(db, admin, "car", car.id, f"status_{new_status.value.lower()}", reason)
    await db.commit()
    await db.refresh(car)
    logger.info(f"Admin {admin.id} set car {car.id} to {new_status.value}")

    seller = await db.get(User, car.seller_id)
    if seller and seller.email:
        await notify(EVENT_LISTING_MODERATED, {
            "to": seller.email,
            "car_id": car.id,
            "status": new_status.value,
            "reason": reason,
        })
    return car


async def update_user_role(
        db: AsyncSession,
        admin: User,
        user_id: int,
        new_role: UserRole,
        reason: str | None = None) -> User:
    await role_checker(admin, ADMIN_ONLY)
    if user_id == admin.id:
        raise ForbiddenError("You can't change your own role")

    user = await get_user_or_404(db, user_id)
    old_role = user.role
    user.role = new_role
    _log(db, admin, "user", user.id, f"role_{old_role.value}_to_{new_role.value}", reason)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Admin {admin.id} changed role of user {user.id} from {old_role.value} to {new_role.value}")
    return user


async def ban_user(db: AsyncSession, admin: User, user_id: int, reason: str) -> BanResult:
    await role_checker(admin, ADMIN_ONLY)
    user = await get_user_or_404(db, user_id)

    result = await db.execute(
        update(Car)
        .where(Car.seller_id == user.id)
        .values(status=CarStatus.BANNED, active_slot=None)
        .execution_options(synchronize_session="fetch")
    )
    _log(db, admin, "user", user.id, "ban", reason)
    await db.commit()
    logger.info(f"Admin {admin.id} banned user {user.id}, {result.rowcount} listings banned")
    return BanResult(user_id=user.id, banned_cars=result.rowcount)


async def verify_store(db: AsyncSession, admin: User, store_id: int, verified: bool) -> Store:
    await role_checker(admin, ADMIN_ONLY)
    store = await db.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")

    store.is_verified = verified
    _log(db, admin, "store", store.id, "verify" if verified else "unverify", None)
    await db.commit()
    await db.refresh(store)
    return store


async def dashboard_stats(db: AsyncSession, admin: User) -> DashboardStats:
    await role_checker(admin, ADMIN_ONLY)

    async def count(model, *conditions) -> int:
        return await db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0

    return DashboardStats(
        total_users=await count(User),
        total_cars=await count(Car),
        active_cars=await count(Car, Car.status == CarStatus.ACTIVE),
        total_stores=await count(Store),
        total_transactions=await count(Transaction),
    )


async def _page(db: AsyncSession, model, conditions: list, order_by, limit: int, offset: int) -> dict:
    total = await db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0
    result = await db.execute(
        select(model).where(*conditions).order_by(*order_by).limit(limit).offset(offset)
    )
    return {"data": list(result.scalars().all()), "total": total}


async def list_users(
        db: AsyncSession,
        admin: User,
        role: UserRole | None = None,
        limit: int = 50,
        offset: int = 0) -> dict:
    await role_checker(admin, ADMIN_ONLY)
    conditions = [User.role == role] if role is not None else []
    return await _page(db, User, conditions, (User.created_at.desc(), User.id.asc()), limit, offset)


async def list_stores(db: AsyncSession, admin: User, limit: int = 50, offset: int = 0) -> dict:
    await role_checker(admin, ADMIN_ONLY)
    return await _page(db, Store, [], (Store.created_at.desc(), Store.id.asc()), limit, offset)


async def list_cars(
        db: AsyncSession,
        admin: User,
        status: CarStatus | None = None,
        limit: int = 50,
        offset: int = 0) -> dict:
    await role_checker(admin, ADMIN_ONLY)
    conditions = [Car.status == status] if status is not None else []
    return await _page(db, Car, conditions, (Car.created_at.desc(), Car.id.asc()), limit, offset)


async def list_logs(db: AsyncSession, admin: User, limit: int = 100, offset: int = 0) -> dict:
    await role_checker(admin, ADMIN_ONLY)
    return await _page(
        db, ModerationLog, [], (ModerationLog.created_at.desc(), ModerationLog.id.desc()), limit, offset
    )
