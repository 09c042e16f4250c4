"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Identity
  2xxx: Balance and positions
  3xxx: Market
  4xxx: Argument validation
  5xxx: Profile
  9xxx: System

Every AppError message is safe to show to the end user verbatim.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Identity ---

class UnauthenticatedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Please sign in to continue", 401)


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Administrator access required", 403)


class InvalidSignInLinkError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Sign-in link is invalid or expired", 401)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Refresh token is invalid or expired", 401)


# --- 2xxx: Balance ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required} cents, available {available} cents",
            422,
        )


class BalanceNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Balance not found for user {user_id}", 404)


class PositionNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(2003, f"No position held in market {market_id}", 404)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketClosedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3002, f"Market is closed for trading: {market_id}", 422)


class AlreadyResolvedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3003, f"Market is already resolved: {market_id}", 409)


class InvalidStatusTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            3004, f"Cannot change market status from {current} to {target}", 422
        )


# --- 4xxx: Argument validation ---

class InvalidArgumentError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid argument: {detail}", 400)


# --- 5xxx: Profile ---

class ProfileNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(5001, f"Profile not found: {user_id}", 404)


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Store temporarily unavailable, please retry") -> None:
        super().__init__(9001, detail, 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
