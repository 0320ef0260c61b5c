"""Factory for creating exchange clients"""

import logging
from typing import Optional

from exchange_connector_base import ExchangeClient, ConfigurationError
from strategy_config import AppConfig
from marketcap_strategy import PaperExchangeClient


def create_exchange_client(
    app_config: AppConfig,
    logger: Optional[logging.Logger] = None
) -> ExchangeClient:
    """
    Factory to create the configured exchange client.

    Args:
        app_config: Application configuration
        logger: Optional logger instance

    Returns:
        ExchangeClient instance
    """
    name = app_config.exchange.name.lower()

    if logger:
        logger.debug(f"Creating {name} exchange client")

    if name == 'paper':
        paper = app_config.exchange.paper
        client = PaperExchangeClient(prices=paper.prices, balances=paper.balances, logger=logger)
        for entry in app_config.strategies:
            base_currency = entry.config.base_currency
            for currency in entry.config.target_currencies:
                client.add_market(currency + base_currency, currency, base_currency)
        return client
    else:
        raise ConfigurationError(f"Unsupported exchange: {name}")
