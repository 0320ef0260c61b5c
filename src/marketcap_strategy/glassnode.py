"""Glassnode client for market capitalization data"""

import asyncio
import os
import logging
import math
import time
from typing import Any, Dict, Optional

import aiohttp

from exchange_connector_base import MarketCapSource, DataSourceError
from strategy_config import GlassnodeConfig

MARKET_CAP_PATH = "/v1/metrics/market/marketcap_usd"


class GlassnodeClient(MarketCapSource):
    """Market cap source backed by the Glassnode metrics API"""

    def __init__(self, config: Optional[GlassnodeConfig] = None, api_key: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or GlassnodeConfig()
        self.api_key = api_key or os.getenv('GLASSNODE_API_KEY')
        self.logger = logger or logging.getLogger(__name__)

        if not self.api_key:
            self.logger.warning("GLASSNODE_API_KEY is not set, market cap requests will be rejected")

    async def query_market_cap_usd(self, currency: str) -> float:
        """Get the latest market cap point of a currency in USD"""
        since = int(time.time()) - self.config.lookback_days * 86400
        params = {
            'a': currency,
            'i': self.config.metric_interval,
            's': str(since),
        }
        if self.api_key:
            params['api_key'] = self.api_key

        data = await self._get_json(MARKET_CAP_PATH, params)

        if not isinstance(data, list) or not data:
            raise DataSourceError(f"Glassnode returned no market cap data for {currency}")

        point = data[-1]
        if not isinstance(point, dict) or point.get('v') is None:
            raise DataSourceError(f"Malformed market cap point for {currency}: {point}")

        try:
            value = float(point['v'])
        except (TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed market cap value for {currency}: {point['v']}") from e

        if not math.isfinite(value) or value < 0:
            raise DataSourceError(f"Invalid market cap for {currency}: {value}")

        self.logger.debug(f"Glassnode market cap for {currency}: ${value:,.2f} (t={point.get('t')})")
        return value

    async def _get_json(self, path: str, params: Dict[str, str]) -> Any:
        """GET a Glassnode endpoint and decode the JSON body"""
        url = f"{self.config.base_url.rstrip('/')}{path}"
        self.logger.debug(f"Requesting {url} for asset {params.get('a')}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.config.request_timeout_seconds)
                ) as response:

                    if response.status != 200:
                        response_text = await response.text()
                        raise DataSourceError(f"Glassnode returned status {response.status}: {response_text}")

                    return await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"Glassnode request failed: {e}")
            raise DataSourceError(f"Glassnode request failed: {e}") from e
