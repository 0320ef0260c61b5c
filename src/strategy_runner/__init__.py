from .registry import StrategyRegistry, build_default_registry
from .runner import StrategyRunner, build_strategies
from .scheduler import IntervalScheduler, interval_bounds
from .exchange_factory import create_exchange_client
from .logger import configure_logging, StructuredFormatter

__version__ = "1.0.0"

__all__ = [
    "StrategyRegistry",
    "build_default_registry",
    "StrategyRunner",
    "build_strategies",
    "IntervalScheduler",
    "interval_bounds",
    "create_exchange_client",
    "configure_logging",
    "StructuredFormatter",
    "__version__",
]
