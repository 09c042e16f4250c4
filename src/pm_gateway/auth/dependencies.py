"""FastAPI dependencies: get_current_user, require_admin.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

import logging
import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.errors import UnauthenticatedError, UnauthorizedError
from src.pm_gateway.auth.admin_gate import is_admin
from src.pm_gateway.auth.jwt_handler import decode_token
from src.pm_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

# auto_error=False so a missing header maps to our own Unauthenticated error
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Resolve the Bearer access token to the caller's user row.

    Raises UnauthenticatedError (401) if the token is missing, invalid,
    expired, or names a user that no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    payload = decode_token(credentials.credentials, expected_type="access")
    try:
        user_id = uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise UnauthenticatedError() from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthenticatedError()
    return user


async def require_admin(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Verify the caller is an administrator (role or allowlist), per request."""
    if not is_admin(current_user):
        logger.warning("Admin access denied for user %s", current_user.id)
        raise UnauthorizedError()
    return current_user
