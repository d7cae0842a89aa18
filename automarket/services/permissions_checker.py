from automarket.core.errors import ForbiddenError
from automarket.core.logging import setup_logging
from automarket.models.user import User, UserRole

logger = setup_logging()

ADMIN_ONLY = frozenset({UserRole.ADMIN})
STORE_MANAGERS = frozenset({UserRole.STORE_OWNER, UserRole.ADMIN})
# roles limited to a single ACTIVE listing at a time
QUOTA_LIMITED_ROLES = frozenset({UserRole.USER})


async def role_checker(user: User, allowed_roles: frozenset[UserRole]) -> None:
    if user.role not in allowed_roles:
        logger.error(f'User {user.id} with role {user.role.value} is not allowed, needs one of '
                     f'{sorted(r.value for r in allowed_roles)}')
        raise ForbiddenError('Access denied')


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN
