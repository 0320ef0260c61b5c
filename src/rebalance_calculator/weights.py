"""Target weights derived from market capitalization"""

from typing import List, Optional, Sequence
import logging
import math
from exchange_connector_base import MarketCapSource, DataSourceError
from .vectors import normalize, scale

class WeightCalculator:
    """Convert market caps into target weights with a reserved base currency slot"""

    def __init__(self, market_cap_source: MarketCapSource, logger: Optional[logging.Logger] = None):
        self.market_cap_source = market_cap_source
        self.logger = logger or logging.getLogger(__name__)

    async def query_market_caps(self, target_currencies: Sequence[str]) -> List[float]:
        """Query market caps in target order, failing on the first error"""
        market_caps = []
        for currency in target_currencies:
            try:
                market_cap = await self.market_cap_source.query_market_cap_usd(currency)
            except DataSourceError:
                raise
            except Exception as e:
                raise DataSourceError(f"Failed to query market cap of {currency}: {e}") from e

            if market_cap is None or not math.isfinite(market_cap) or market_cap < 0:
                raise DataSourceError(f"Invalid market cap for {currency}: {market_cap}")

            self.logger.debug(f"{currency} market cap: ${market_cap:,.2f}")
            market_caps.append(market_cap)

        return market_caps

    async def get_target_weights(self, target_currencies: Sequence[str], base_weight: float) -> List[float]:
        """
        Compute the target weight vector.

        The market caps are normalized, rescaled by (1 - base_weight) and the
        base weight is appended as the last element, so the result has
        len(target_currencies) + 1 entries summing to one.

        Raises:
            DataSourceError: If any market cap query fails or all market caps are zero
        """
        market_caps = await self.query_market_caps(target_currencies)

        try:
            weights = normalize(market_caps)
        except ValueError as e:
            raise DataSourceError(
                f"Market caps of {', '.join(target_currencies)} sum to zero, cannot derive weights"
            ) from e

        weights = scale(weights, 1.0 - base_weight)
        weights.append(base_weight)

        return weights
