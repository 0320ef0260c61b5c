"""Setup-time invariants of the marketcap strategy configuration."""

from typing import Sequence

from exchange_connector_base import ConfigurationError


def validate_strategy_config(
    target_currencies: Sequence[str],
    base_currency: str,
    threshold: float,
    max_amount: float,
) -> None:
    """
    Check the strategy configuration once before any rebalance cycle runs.

    Raises:
        ConfigurationError: If any invariant is violated
    """
    if len(target_currencies) == 0:
        raise ConfigurationError("targetCurrencies should not be empty")

    for currency in target_currencies:
        if currency == base_currency:
            raise ConfigurationError(f"targetCurrencies contain baseCurrency {base_currency}")

    if not threshold >= 0:
        raise ConfigurationError(f"threshold should not be less than 0, got {threshold}")

    if not max_amount >= 0:
        raise ConfigurationError(f"maxAmount should not be less than 0, got {max_amount}")
