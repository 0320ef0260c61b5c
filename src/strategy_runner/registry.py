"""Explicit registry mapping strategy identifiers to factories"""

from typing import Callable, Dict, List

from exchange_connector_base import BaseStrategy, ConfigurationError

StrategyFactory = Callable[..., BaseStrategy]


class StrategyRegistry:
    """Strategy factories available to the host, keyed by strategy id"""

    def __init__(self):
        self._factories: Dict[str, StrategyFactory] = {}

    def register(self, strategy_id: str, factory: StrategyFactory):
        if strategy_id in self._factories:
            raise ValueError(f"Strategy {strategy_id} is already registered")
        self._factories[strategy_id] = factory

    def create(self, strategy_id: str, **kwargs) -> BaseStrategy:
        """
        Instantiate a registered strategy.

        Raises:
            ConfigurationError: If no strategy is registered under strategy_id
        """
        factory = self._factories.get(strategy_id)
        if factory is None:
            raise ConfigurationError(
                f"Unknown strategy {strategy_id}, registered: {', '.join(self.ids()) or 'none'}"
            )
        return factory(**kwargs)

    def ids(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, strategy_id: str) -> bool:
        return strategy_id in self._factories


def build_default_registry() -> StrategyRegistry:
    """Registry with every strategy shipped in this distribution"""
    from marketcap_strategy import MarketCapStrategy, ID as MARKETCAP_ID

    registry = StrategyRegistry()
    registry.register(MARKETCAP_ID, MarketCapStrategy)
    return registry
