from src.pm_common.errors import MarketClosedError, MarketNotFoundError
from src.pm_market.domain.models import Market


def check_market_open(market: Market | None, market_id: str) -> Market:
    """Raise MarketNotFoundError / MarketClosedError unless the market is tradable."""
    if market is None:
        raise MarketNotFoundError(market_id)
    if not market.is_open:
        raise MarketClosedError(market_id)
    return market
