"""Configuration management for the marketcap rebalancer."""

from .models import (
    AppConfig,
    Interval,
    MarketCapConfig,
    StrategyEntry,
    GlassnodeConfig,
    ExchangeConfig,
    PaperExchangeConfig,
    LoggingConfig,
)
from .validation import validate_strategy_config
from .loader import load_config, get_config, parse_strategy_config

__all__ = [
    "AppConfig",
    "Interval",
    "MarketCapConfig",
    "StrategyEntry",
    "GlassnodeConfig",
    "ExchangeConfig",
    "PaperExchangeConfig",
    "LoggingConfig",
    "validate_strategy_config",
    "load_config",
    "get_config",
    "parse_strategy_config",
]
