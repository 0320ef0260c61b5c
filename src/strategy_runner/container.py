"""
Service container using dependency-injector for the strategy runner
"""
from dependency_injector import containers, providers

from strategy_config import AppConfig
from marketcap_strategy import GlassnodeClient
from .exchange_factory import create_exchange_client
from .registry import build_default_registry
from .runner import StrategyRunner, build_strategies
from .scheduler import IntervalScheduler


class ServiceContainer(containers.DeclarativeContainer):
    """DI Container for the strategy runner"""

    # Validated application configuration, supplied at construction
    config = providers.Dependency(instance_of=AppConfig)

    market_cap_source = providers.Singleton(
        GlassnodeClient,
        config=config.provided.glassnode
    )

    exchange = providers.Singleton(
        create_exchange_client,
        app_config=config
    )

    registry = providers.Singleton(
        build_default_registry
    )

    strategies = providers.Singleton(
        build_strategies,
        registry=registry,
        app_config=config,
        exchange=exchange,
        market_cap_source=market_cap_source
    )

    runner = providers.Singleton(
        StrategyRunner,
        strategies=strategies,
        exchange=exchange
    )

    scheduler = providers.Singleton(
        IntervalScheduler,
        runner=runner
    )
