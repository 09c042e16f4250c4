"""Integer arithmetic utilities for cents-based prediction market.

All prices, amounts, and balances use int (cents). No float, no Decimal.
"""


def validate_price(price: int) -> None:
    """Validate that price is in the range [1, 99] cents."""
    if not (1 <= price <= 99):
        raise ValueError(f"Price must be between 1 and 99 cents, got {price}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def price_to_display(price: int) -> str:
    """Per-share price label: 55 -> '55¢'."""
    return f"{price}¢"


def trade_cost(price_per_share: int, shares: int) -> int:
    """Total debit for buying `shares` at `price_per_share` cents."""
    return price_per_share * shares
