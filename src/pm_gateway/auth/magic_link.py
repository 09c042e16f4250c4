"""One-time sign-in link tokens, stored in Redis with a TTL.

Key layout: magiclink:{token} -> user_id
A token is consumed with GETDEL, so each link signs in at most once.
"""

import secrets

import redis.asyncio as aioredis

from config.settings import settings

_KEY_PREFIX = "magiclink:"


def _key(token: str) -> str:
    return f"{_KEY_PREFIX}{token}"


async def issue_link_token(redis: aioredis.Redis, user_id: str) -> str:
    token = secrets.token_urlsafe(32)
    await redis.set(_key(token), user_id, ex=settings.MAGIC_LINK_TTL_SECONDS)
    return token


async def consume_link_token(redis: aioredis.Redis, token: str) -> str | None:
    """Return the user_id bound to token and invalidate it, or None."""
    if not token:
        return None
    user_id = await redis.getdel(_key(token))
    return str(user_id) if user_id else None


def build_sign_in_link(token: str) -> str:
    return f"{settings.MAGIC_LINK_BASE_URL.rstrip('/')}/auth/callback?token={token}"
