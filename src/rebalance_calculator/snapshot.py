"""Current portfolio state as parallel price, quantity and market value vectors"""

from typing import Dict, List, Optional, Sequence
import logging
import math
from exchange_connector_base import ExchangeClient, Balance, DataSourceError
from .models import PortfolioSnapshot
from .vectors import elementwise_multiply

class SnapshotBuilder:
    """Assemble the portfolio snapshot for the tracked currencies"""

    def __init__(self, exchange: ExchangeClient, logger: Optional[logging.Logger] = None):
        self.exchange = exchange
        self.logger = logger or logging.getLogger(__name__)

    async def get_prices(self, target_currencies: Sequence[str], base_currency: str) -> List[float]:
        """Last trade prices against the base currency, with the base currency priced at 1.0"""
        prices = []

        for currency in target_currencies:
            symbol = currency + base_currency
            try:
                ticker = await self.exchange.query_ticker(symbol)
            except DataSourceError:
                raise
            except Exception as e:
                raise DataSourceError(f"Failed to query ticker {symbol}: {e}") from e

            # Validate price data
            if not ticker.last or not math.isfinite(ticker.last) or ticker.last <= 0:
                raise DataSourceError(f"Invalid last price for {symbol}: {ticker.last}")

            prices.append(ticker.last)

        # append base currency price
        prices.append(1.0)

        return prices

    @staticmethod
    def get_quantities(balances: Dict[str, Balance], target_currencies: Sequence[str],
                       base_currency: str, ignore_locked: bool) -> List[float]:
        """Held amount per currency, total when locked funds are ignored, else available"""
        quantities = []

        for currency in list(target_currencies) + [base_currency]:
            balance = balances.get(currency)
            if balance is None:
                quantities.append(0.0)
            elif ignore_locked:
                quantities.append(balance.total)
            else:
                quantities.append(balance.available)

        return quantities

    async def build(self, target_currencies: Sequence[str], base_currency: str,
                    balances: Dict[str, Balance], ignore_locked: bool) -> PortfolioSnapshot:
        """
        Build the snapshot; any price query failure aborts before a partial result exists.

        Raises:
            DataSourceError: If a price query fails or returns an invalid price
        """
        prices = await self.get_prices(target_currencies, base_currency)
        quantities = self.get_quantities(balances, target_currencies, base_currency, ignore_locked)

        return PortfolioSnapshot(
            currencies=list(target_currencies) + [base_currency],
            prices=prices,
            quantities=quantities,
            market_values=elementwise_multiply(prices, quantities),
        )
