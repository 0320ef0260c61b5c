"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from exchange_connector_base import ConfigurationError
from .models import AppConfig, MarketCapConfig

logger = logging.getLogger(__name__)

# Current config, set by load_config
_config: Optional[AppConfig] = None


def parse_strategy_config(data: Dict[str, Any]) -> MarketCapConfig:
    """
    Build a validated strategy configuration from a raw mapping.

    Raises:
        ConfigurationError: If validation fails
    """
    try:
        return MarketCapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid strategy configuration: {e}") from e


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    try:
        _config = AppConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Exchange: {_config.exchange.name}")
    logger.info(f"  Glassnode metric interval: {_config.glassnode.metric_interval}")
    logger.info(f"  Log level: {_config.logging.level} ({_config.logging.format})")
    for entry in _config.strategies:
        strategy = entry.config
        logger.info(
            f"  Strategy {entry.id}: {', '.join(strategy.target_currencies)} / {strategy.base_currency} "
            f"every {strategy.interval.value}, base weight {strategy.base_weight}, "
            f"threshold {strategy.threshold}, max amount {strategy.max_amount}, dry run {strategy.dry_run}"
        )

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Raises:
        RuntimeError: If config hasn't been loaded yet
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() first."
        )
    return _config
