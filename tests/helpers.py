"""Test doubles shared across rebalancer tests."""

from typing import Dict

from exchange_connector_base import MarketCapSource, DataSourceError
from marketcap_strategy import PaperExchangeClient


class StaticMarketCapSource(MarketCapSource):
    """Market cap source answering from a fixed table."""

    def __init__(self, market_caps: Dict[str, float]):
        self.market_caps = market_caps
        self.queried = []

    async def query_market_cap_usd(self, currency: str) -> float:
        self.queried.append(currency)
        if currency not in self.market_caps:
            raise DataSourceError(f"No market cap for {currency}")
        return self.market_caps[currency]


def make_paper_exchange(auto_fill: bool = True) -> PaperExchangeClient:
    """Paper exchange holding A=5 @10, B=1 @20, USD=50."""
    exchange = PaperExchangeClient(
        prices={"AUSD": 10.0, "BUSD": 20.0},
        balances={"A": 5.0, "B": 1.0, "USD": 50.0},
        auto_fill=auto_fill,
    )
    exchange.add_market("AUSD", "A", "USD")
    exchange.add_market("BUSD", "B", "USD")
    return exchange
