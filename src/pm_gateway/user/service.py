"""User domain service: passwordless sign-in, token refresh, profile.

Sign-in creates the profile row and its play-cash balance on first use, in
one transaction. Link tokens live in Redis; sessions are JWTs.
"""

import logging
import uuid

import redis.asyncio as aioredis
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.errors import (
    InternalError,
    InvalidArgumentError,
    InvalidSignInLinkError,
    ProfileNotFoundError,
)
from src.pm_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.pm_gateway.auth.magic_link import (
    build_sign_in_link,
    consume_link_token,
    issue_link_token,
)
from src.pm_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    def __init__(self, account_repo: AccountRepositoryProtocol | None = None) -> None:
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()

    async def get_or_create_user(self, email: str, db: AsyncSession) -> UserModel:
        """Fetch the user by email, creating profile + balance rows if absent.

        The caller owns commit/rollback.
        """
        email = normalize_email(email)
        inserted = await db.execute(
            insert(UserModel)
            .values(email=email)
            .on_conflict_do_nothing(index_elements=["email"])
            .returning(UserModel.id)
        )
        new_id = inserted.scalar_one_or_none()

        result = await db.execute(select(UserModel).where(UserModel.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            raise InternalError(f"User row missing after upsert: {email}")

        if new_id is not None:
            await self._accounts.open_balance(
                db, str(user.id), settings.STARTING_BALANCE_CENTS
            )
            logger.info("New user %s signed up with %d cents", user.id, settings.STARTING_BALANCE_CENTS)
        return user

    async def request_sign_in_link(
        self, email: str, db: AsyncSession, redis: aioredis.Redis
    ) -> str:
        """Ensure the user exists and mint a one-time sign-in link for them."""
        try:
            user = await self.get_or_create_user(email, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        token = await issue_link_token(redis, str(user.id))
        link = build_sign_in_link(token)
        logger.info("Sign-in link issued for %s: %s", user.email, link)
        return link

    async def verify_sign_in_link(
        self, token: str, db: AsyncSession, redis: aioredis.Redis
    ) -> tuple[UserModel, str, str]:
        """Consume the link token; return (user, access_token, refresh_token)."""
        user_id = await consume_link_token(redis, token)
        if user_id is None:
            raise InvalidSignInLinkError()

        user = await self._get_user(user_id, db)
        if user is None:
            raise InvalidSignInLinkError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))

    async def update_username(
        self, user: UserModel, username: str | None, db: AsyncSession
    ) -> UserModel:
        """Set or clear the caller's own username. Email is never touched."""
        try:
            result = await db.execute(
                update(UserModel)
                .where(UserModel.id == user.id)
                .values(username=username)
                .returning(UserModel)
            )
            updated = result.scalar_one_or_none()
            if updated is None:
                raise ProfileNotFoundError(str(user.id))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise InvalidArgumentError(f"username '{username}' is already taken") from None
        except Exception:
            await db.rollback()
            raise
        return updated

    async def _get_user(self, user_id: str, db: AsyncSession) -> UserModel | None:
        try:
            uid = uuid.UUID(user_id)
        except ValueError:
            return None
        result = await db.execute(select(UserModel).where(UserModel.id == uid))
        return result.scalar_one_or_none()
