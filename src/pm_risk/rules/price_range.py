from src.pm_common.errors import InvalidArgumentError


def check_price_range(price: int, label: str = "price") -> None:
    """Raise InvalidArgumentError if price is not an integer in [1, 99]."""
    if isinstance(price, bool) or not isinstance(price, int) or not (1 <= price <= 99):
        raise InvalidArgumentError(f"{label} {price!r} out of range [1, 99]")
