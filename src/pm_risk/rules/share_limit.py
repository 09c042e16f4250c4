from config.settings import settings
from src.pm_common.errors import InvalidArgumentError


def check_share_quantity(shares: int, max_shares: int | None = None) -> None:
    """Raise InvalidArgumentError if shares is not an integer in [1, max_shares]."""
    limit = max_shares or settings.MAX_SHARES_PER_TRADE
    if isinstance(shares, bool) or not isinstance(shares, int):
        raise InvalidArgumentError(f"shares must be an integer, got {shares!r}")
    if shares <= 0:
        raise InvalidArgumentError(f"shares must be positive, got {shares}")
    if shares > limit:
        raise InvalidArgumentError(f"shares {shares} exceeds the per-trade limit of {limit}")
