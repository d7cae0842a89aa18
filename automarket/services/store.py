import secrets
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.store import Store
from automarket.models.user import User
from automarket.schemas.store import StoreCreate, StoreUpdate
from automarket.services.permissions_checker import STORE_MANAGERS, is_admin, role_checker

logger = setup_logging()


def generate_api_key() -> str:
    # 24 random bytes -> 32 url-safe characters
    return secrets.token_urlsafe(24)


async def _slug_taken(db: AsyncSession, slug: str, exclude_id: int | None = None) -> bool:
    stmt = select(Store.id).where(Store.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Store.id != exclude_id)
    return await db.scalar(stmt) is not None


async def create_store(db: AsyncSession, owner: User, store_data: StoreCreate) -> Store:
    await role_checker(owner, STORE_MANAGERS)
    if await _slug_taken(db, store_data.slug):
        raise ValidationError("Slug already in use")

    store = Store(
        owner_id=owner.id,
        api_key=generate_api_key(),
        **store_data.model_dump()
    )
    db.add(store)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Slug already in use")
    await db.refresh(store)
    logger.info(f"Store {store.id} ({store.slug}) created by user {owner.id}")
    return store


async def get_store(db: AsyncSession, store_id: int) -> Store:
    store = await db.get(Store, store_id)
    if not store:
        raise NotFoundError("Store not found")
    return store


async def get_store_by_slug(db: AsyncSession, slug: str) -> Store:
    store = await db.scalar(select(Store).where(Store.slug == slug))
    if not store:
        raise NotFoundError("Store not found")
    return store


async def list_my_stores(db: AsyncSession, owner: User) -> list[Store]:
    result = await db.execute(
        select(Store).where(Store.owner_id == owner.id).order_by(Store.created_at.desc(), Store.id.asc())
    )
    return list(result.scalars().all())


async def update_store(db: AsyncSession, store_id: int, actor: User, store_data: StoreUpdate) -> Store:
    store = await get_store(db, store_id)
    if store.owner_id != actor.id and not is_admin(actor):
        logger.error(f'User {actor.id} tried to update store {store.id}')
        raise ForbiddenError("You can't update this store")

    changes = store_data.model_dump(exclude_unset=True)
    if changes.get("slug") and await _slug_taken(db, changes["slug"], exclude_id=store.id):
        raise ValidationError("Slug already in use")
    for field in ("name", "slug", "document"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be empty")

    for field, value in changes.items():
        setattr(store, field, value)
    await db.commit()
    await db.refresh(store)
    return store


async def list_stores(db: AsyncSession, limit: int = 20, offset: int = 0) -> dict:
    total = await db.scalar(select(func.count()).select_from(Store)) or 0
    result = await db.execute(
        select(Store).order_by(Store.created_at.desc(), Store.id.asc()).limit(limit).offset(offset)
    )
    return {"data": list(result.scalars().all()), "total": total}
