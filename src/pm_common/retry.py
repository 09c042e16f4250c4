"""Bounded retry with exponential backoff for transient store failures.

Only connection drops, serialization failures and deadlocks are retried.
Business-rule failures (AppError) propagate on the first attempt.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from config.settings import settings
from src.pm_common.errors import AppError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL SQLSTATE codes that are safe to retry as a whole transaction
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_transient(exc: BaseException) -> bool:
    """True if exc is a store failure that a fresh transaction may not hit."""
    if isinstance(exc, AppError):
        return False
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, DBAPIError):
        if exc.connection_invalidated:
            return True
        sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
        return sqlstate in _RETRYABLE_SQLSTATES
    return isinstance(exc, (ConnectionError, TimeoutError))


async def with_store_retry(
    operation: Callable[[], Awaitable[T]],
    name: str,
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> T:
    """Run `operation` (one whole transaction) up to max_attempts times.

    The operation must roll back its own session before raising, so that a
    retry starts from a clean transaction.
    """
    attempts = max_attempts or settings.STORE_RETRY_ATTEMPTS
    base = settings.STORE_RETRY_BASE_DELAY if base_delay is None else base_delay
    cap = settings.STORE_RETRY_MAX_DELAY if max_delay is None else max_delay

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if not is_transient(exc):
                raise
            if attempt == attempts:
                logger.error("%s failed after %d attempts: %s", name, attempts, exc)
                raise StoreUnavailableError() from exc
            delay = min(base * (2 ** (attempt - 1)), cap)
            logger.warning(
                "%s attempt %d/%d hit transient store error (%s), retrying in %.2fs",
                name,
                attempt,
                attempts,
                exc,
                delay,
            )
            await asyncio.sleep(delay)
    raise StoreUnavailableError()
