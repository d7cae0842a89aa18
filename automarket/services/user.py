from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.config import settings
from automarket.core.errors import NotFoundError, UnauthorizedError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.user import User, UserRole, Profile
from automarket.schemas.user import ProfileCreate, ProfileUpdate

logger = setup_logging()


def role_for_identity(auth_user_id: str) -> UserRole:
    if settings.owner_auth_id and auth_user_id == settings.owner_auth_id:
        return UserRole.ADMIN
    return UserRole.USER


async def provision_user(db: AsyncSession, identity: dict) -> User:
    """Map an auth-provider identity to a local user, creating it on first sight"""
    auth_user_id = identity["id"]
    now = datetime.now(timezone.utc)
    user = await db.scalar(select(User).where(User.auth_user_id == auth_user_id))

    if user:
        user.last_signed_in = now
        # the owner identity is always admin, whatever was set since
        if role_for_identity(auth_user_id) == UserRole.ADMIN:
            user.role = UserRole.ADMIN
        await db.commit()
        await db.refresh(user)
        return user

    if not identity.get("email"):
        logger.error(f"Identity {auth_user_id} has no email")
        raise UnauthorizedError("User email is required")

    user = User(
        auth_user_id=auth_user_id,
        email=identity["email"],
        name=identity.get("name"),
        role=role_for_identity(auth_user_id),
        last_signed_in=now,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # provisioned by a concurrent request
        await db.rollback()
        user = await db.scalar(select(User).where(User.auth_user_id == auth_user_id))
        if not user:
            raise
        return user

    await db.refresh(user)
    logger.info(f"Provisioned user {user.id} ({user.role.value}) for identity {auth_user_id}")
    return user


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def get_profile(db: AsyncSession, user: User) -> Profile:
    profile = await db.get(Profile, user.id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def create_profile(db: AsyncSession, user: User, profile_data: ProfileCreate) -> Profile:
    if await db.get(Profile, user.id):
        raise ValidationError("Profile already exists")
    profile = Profile(id=user.id, **profile_data.model_dump())
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(db: AsyncSession, user: User, profile_data: ProfileUpdate) -> Profile:
    profile = await get_profile(db, user)
    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    await db.commit()
    await db.refresh(profile)
    return profile
