from fastapi import Header, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import UnauthorizedError
from automarket.core.logging import setup_logging
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.services.auth_provider import auth_provider
from automarket.services.user import provision_user

logger = setup_logging()


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        logger.error("Bearer token not found")
        raise UnauthorizedError("You need to login.")
    token = authorization[7:].strip()
    if not token or token in ("null", "undefined"):
        logger.error("Empty bearer token")
        raise UnauthorizedError("You need to login.")
    return token


async def get_user_from_token(
        authorization: str | None = Header(None, alias='Authorization'),
        db: AsyncSession = Depends(get_db)) -> User:
    """Resolve the bearer token through the auth provider and return the local user"""
    token = extract_bearer_token(authorization)

    identity = await auth_provider.get_current_user(token)
    if not identity:
        logger.error("Auth provider rejected token")
        raise UnauthorizedError("You need to be logged in")

    return await provision_user(db, identity)


async def get_optional_user_from_token(
        authorization: str | None = Header(None, alias='Authorization'),
        db: AsyncSession = Depends(get_db)
) -> User | None:
    if not authorization:
        return None
    return await get_user_from_token(authorization, db)
